"""
Pydantic schemas for the URL-encoded HTML forms.

Form fields are never required: an absent (or blank) field becomes "" and
its name is kept in ``missing_fields`` so the handler can report it.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from models.records import BloodPressureRecord, PatientRecord


class PatientForm(BaseModel):
    """Registration form posted to /submit."""

    full_name: str = Field("", description="Patient full name", examples=["Ana Silva"])
    email: str = Field("", description="Contact e-mail", examples=["ana@example.com"])
    cpf: str = Field("", description="CPF (national ID), not validated", examples=["12345678900"])
    missing_fields: Tuple[str, ...] = Field(default=(), description="Form fields that were not submitted")

    @classmethod
    def from_form(
        cls,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        cpf: Optional[str] = None,
    ) -> "PatientForm":
        submitted = {"full_name": full_name, "email": email, "cpf": cpf}
        return cls(
            **{name: value or "" for name, value in submitted.items()},
            missing_fields=tuple(name for name, value in submitted.items() if not value),
        )

    def to_record(self) -> PatientRecord:
        return PatientRecord(full_name=self.full_name, email=self.email, cpf=self.cpf)


class BloodPressureForm(BaseModel):
    """Reading form posted to /dashboard/submit (camelCase field names on the wire)."""

    model_config = ConfigDict(populate_by_name=True)

    systolic_pressure: str = Field("", alias="systolicPressure", examples=["120"])
    diastolic_pressure: str = Field("", alias="diastolicPressure", examples=["80"])
    missing_fields: Tuple[str, ...] = Field(default=())

    @classmethod
    def from_form(
        cls,
        systolic_pressure: Optional[str] = None,
        diastolic_pressure: Optional[str] = None,
    ) -> "BloodPressureForm":
        submitted = {"systolicPressure": systolic_pressure, "diastolicPressure": diastolic_pressure}
        return cls(
            systolic_pressure=systolic_pressure or "",
            diastolic_pressure=diastolic_pressure or "",
            missing_fields=tuple(name for name, value in submitted.items() if not value),
        )

    def to_record(self) -> BloodPressureRecord:
        # No date is collected by the form, so none is stored.
        return BloodPressureRecord(
            systolic_pressure=self.systolic_pressure,
            diastolic_pressure=self.diastolic_pressure,
        )

"""
Domain models for documents stored in the records collection.

The collection is schema-less and holds two informal shapes that are told
apart only by which fields are present; nothing in the stored documents says
which kind they are. These dataclasses make the two shapes explicit:

    PatientRecord        {full_name, email, cpf}
    BloodPressureRecord  {date, systolic_pressure, diastolic_pressure}

Serialization rules:
    - A missing value becomes "" (on write from a form and on read from a document).
    - BloodPressureRecord.date is written only when it is set. Readings
      submitted from the dashboard form carry no date, so they are stored
      without one and read back with date == "".
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple, Union

PATIENT_FIELDS: Tuple[str, ...] = ("full_name", "email", "cpf")
BLOOD_PRESSURE_FIELDS: Tuple[str, ...] = ("date", "systolic_pressure", "diastolic_pressure")


def coerce_text(value: Any) -> str:
    """Render a stored value as text; absent or null values become ""."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class PatientRecord:
    """A patient registration submitted from the registration form."""

    full_name: str = ""
    email: str = ""
    cpf: str = ""

    kind = "patient"

    def to_document(self) -> Dict[str, Any]:
        """Convert to the document inserted into MongoDB."""
        return {
            "full_name": self.full_name,
            "email": self.email,
            "cpf": self.cpf,
        }

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "PatientRecord":
        """Project a stored document onto the patient fields."""
        return cls(**{name: coerce_text(document.get(name)) for name in PATIENT_FIELDS})


@dataclass(frozen=True)
class BloodPressureRecord:
    """A blood pressure reading; ``date`` is None when it was never recorded."""

    systolic_pressure: str = ""
    diastolic_pressure: str = ""
    date: Optional[str] = field(default=None)

    kind = "blood_pressure"

    def to_document(self) -> Dict[str, Any]:
        """Convert to the document inserted into MongoDB, omitting an unset date."""
        document: Dict[str, Any] = {}
        if self.date is not None:
            document["date"] = self.date
        document["systolic_pressure"] = self.systolic_pressure
        document["diastolic_pressure"] = self.diastolic_pressure
        return document

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "BloodPressureRecord":
        """
        Project any stored document onto the blood pressure fields.

        Every field is filled: a document without a date (or a patient
        document with none of these fields) projects to empty strings.
        """
        return cls(
            systolic_pressure=coerce_text(document.get("systolic_pressure")),
            diastolic_pressure=coerce_text(document.get("diastolic_pressure")),
            date=coerce_text(document.get("date")),
        )

    def as_row(self) -> Dict[str, str]:
        """Dashboard row with exactly the three projected fields."""
        return {
            "date": self.date or "",
            "systolic_pressure": self.systolic_pressure,
            "diastolic_pressure": self.diastolic_pressure,
        }


Record = Union[PatientRecord, BloodPressureRecord]


def classify_document(document: Mapping[str, Any]) -> Optional[Record]:
    """
    Decide which record shape a stored document belongs to.

    Patient fields win over blood pressure fields. Returns None for a
    document carrying neither.
    """
    if any(name in document for name in PATIENT_FIELDS):
        return PatientRecord.from_document(document)
    if any(name in document for name in BLOOD_PRESSURE_FIELDS):
        return BloodPressureRecord.from_document(document)
    return None


def document_kind(document: Mapping[str, Any]) -> str:
    """Short label for a stored document: "patient", "blood_pressure" or "unknown"."""
    record = classify_document(document)
    return record.kind if record is not None else "unknown"

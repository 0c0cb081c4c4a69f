"""
Pydantic schemas for request parsing.
"""
from schemas.forms import BloodPressureForm, PatientForm

__all__ = [
    "BloodPressureForm",
    "PatientForm",
]

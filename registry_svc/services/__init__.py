"""
Service layer for business logic.

Services orchestrate repository calls and turn persistence results into
outcomes the routers can render.
"""
from services.patient_service import PatientService
from services.blood_pressure_service import BloodPressureService

__all__ = [
    "PatientService",
    "BloodPressureService",
]

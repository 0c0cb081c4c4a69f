"""
Domain models for the registry service.

Record shapes stored in the collection and the result types returned by
persistence operations.
"""
from models.records import (
    BloodPressureRecord,
    PatientRecord,
    Record,
    classify_document,
    document_kind,
)
from models.results import FindResult, InsertResult, SubmissionOutcome

__all__ = [
    "BloodPressureRecord",
    "PatientRecord",
    "Record",
    "classify_document",
    "document_kind",
    "FindResult",
    "InsertResult",
    "SubmissionOutcome",
]

"""
Service layer for blood pressure readings and the dashboard.

Architecture:
    API Layer (routers) → BloodPressureService → RecordRepository → MongoDB
"""
import logging

from models.records import BloodPressureRecord
from models.results import FindResult, SubmissionOutcome
from repositories import RecordRepository
from schemas import BloodPressureForm

logger = logging.getLogger(__name__)


class BloodPressureService:
    """Stores readings and projects the collection for the dashboard."""

    def __init__(self, record_repository: RecordRepository):
        self._repo = record_repository

    def submit_reading(self, form: BloodPressureForm) -> SubmissionOutcome:
        """
        Store a reading as {systolic_pressure, diastolic_pressure}.

        The form does not collect a date, so the stored document has no
        date field and the dashboard shows it blank.
        """
        if form.missing_fields:
            logger.warning(
                "Blood pressure form submitted with missing fields",
                extra={"missing_fields": list(form.missing_fields)}
            )

        record = form.to_record()
        insert = self._repo.insert(record.to_document())
        outcome = SubmissionOutcome(record=record, missing_fields=form.missing_fields, insert=insert)

        if not outcome.stored:
            logger.warning("Blood pressure reading was not stored", extra={"error": insert.error.detail})
        return outcome

    def dashboard_rows(self) -> FindResult:
        """
        Project every stored document onto {date, systolic_pressure, diastolic_pressure}.

        Patient documents are included too and project to empty strings;
        their own fields never appear in a row.
        """
        result = self._repo.find_all()
        rows = [BloodPressureRecord.from_document(document).as_row() for document in result.documents]
        return FindResult(documents=rows, error=result.error)

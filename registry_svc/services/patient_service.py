"""
Service layer for patient registrations.

Architecture:
    API Layer (routers) → PatientService → RecordRepository → MongoDB

Dependency Injection:
    PatientService receives its repository via constructor injection.
    Use core.dependencies.get_patient_service() in routers with Depends().
"""
import logging

from models.results import FindResult, SubmissionOutcome
from repositories import RecordRepository
from schemas import PatientForm

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Cadastro feito com sucesso!"


class PatientService:
    """
    Stores registration forms and lists the collection's raw documents.

    Persistence failures are reported in the returned objects and never raised.
    """

    def __init__(self, record_repository: RecordRepository):
        """
        Args:
            record_repository: Repository for the records collection.
                               Injected via core.dependencies.get_patient_service().
        """
        self._repo = record_repository

    def register(self, form: PatientForm) -> SubmissionOutcome:
        """
        Store a patient registration.

        Missing form fields have already been coerced to "" by the form
        schema; they are stored as empty strings and reported back.
        """
        if form.missing_fields:
            logger.warning(
                "Patient form submitted with missing fields",
                extra={"missing_fields": list(form.missing_fields)}
            )

        record = form.to_record()
        insert = self._repo.insert(record.to_document())
        outcome = SubmissionOutcome(record=record, missing_fields=form.missing_fields, insert=insert)

        if outcome.stored:
            logger.info("Patient registered", extra={"inserted_id": insert.inserted_id})
        else:
            logger.warning("Patient registration was not stored", extra={"error": insert.error.detail})
        return outcome

    def list_documents(self) -> FindResult:
        """Every stored document, unprojected, in store order."""
        result = self._repo.find_all()
        logger.info(
            "Listed stored documents",
            extra={"count": len(result), "degraded": not result.ok}
        )
        return result

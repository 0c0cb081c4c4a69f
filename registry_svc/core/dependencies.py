"""
FastAPI Dependency Injection configuration for the Patient Registry service.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (PatientService, BloodPressureService)
         ↓ Depends()
    Repository Layer (RecordRepository)
         ↓ Depends()
    DocumentStore (one MongoClient, created once at startup)

Usage in Routers:
    from core.dependencies import get_patient_service

    @router.post("/submit")
    def submit_form(patient_service: PatientService = Depends(get_patient_service)):
        ...

Testing:
    # Swapping the store is enough; repositories and services are built on top of it
    app.dependency_overrides[get_document_store] = lambda: test_store
"""
import logging
from typing import Optional

from fastapi import Depends

from core.config import settings
from repositories import DocumentStore, RecordRepository
from services import BloodPressureService, PatientService

logger = logging.getLogger(__name__)


# =============================================================================
# DOCUMENT STORE DEPENDENCY
# =============================================================================

_store_instance: Optional[DocumentStore] = None


def get_document_store() -> DocumentStore:
    """
    Get the shared document store, connecting on first use.

    main.py calls this during startup so a connection failure aborts the
    process before any request is served.

    Raises:
        DatabaseConnectionError: If MongoDB cannot be reached.
    """
    global _store_instance

    if _store_instance is None:
        logger.info(
            "Connecting to MongoDB",
            extra={"database": settings.mongodb_database, "collection": settings.mongodb_collection}
        )
        _store_instance = DocumentStore.connect(
            uri=settings.mongodb_uri,
            username=settings.mongodb_username,
            password=settings.mongodb_password,
            database=settings.mongodb_database,
            collection=settings.mongodb_collection,
            server_selection_timeout_ms=settings.mongodb_server_selection_timeout_ms,
        )

    return _store_instance


def close_document_store() -> None:
    """Close and forget the shared store (application shutdown)."""
    global _store_instance

    if _store_instance is not None:
        _store_instance.close()
        _store_instance = None


def reset_document_store() -> None:
    """Forget the store instance without closing it (for testing only)."""
    global _store_instance
    _store_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_record_repository(
    store: DocumentStore = Depends(get_document_store),
) -> RecordRepository:
    """RecordRepository over the shared document store."""
    return RecordRepository(store=store)


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_patient_service(
    record_repository: RecordRepository = Depends(get_record_repository),
) -> PatientService:
    """
    Get a PatientService with its repository injected.

    Returns:
        PatientService: Service for registrations and the raw data listing.
    """
    return PatientService(record_repository=record_repository)


def get_blood_pressure_service(
    record_repository: RecordRepository = Depends(get_record_repository),
) -> BloodPressureService:
    """
    Get a BloodPressureService with its repository injected.

    Returns:
        BloodPressureService: Service for readings and the dashboard.
    """
    return BloodPressureService(record_repository=record_repository)

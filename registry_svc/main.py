"""
FastAPI application entry point for the Patient Registry service.

Collects patient registrations and blood pressure readings through HTML
forms, stores them in one MongoDB collection and renders them back.

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware                                                 │
    │    └── LoggingMiddleware  - Request logging & metrics       │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── registration.py - /, /submit, /data                  │
    │    ├── dashboard.py    - /dashboard, /dashboard/submit      │
    │    └── health.py       - /health, /ready, /metrics          │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)          ← Injected via Depends()     │
    │    ├── PatientService                                       │
    │    └── BloodPressureService                                 │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)  ← Injected via Depends()     │
    │    └── RecordRepository                                     │
    ├─────────────────────────────────────────────────────────────┤
    │  DocumentStore (one MongoClient) ← created at startup       │
    └─────────────────────────────────────────────────────────────┘

Handlers are plain functions, so FastAPI runs each request in its worker
thread pool; the MongoClient is the only state shared between them.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, settings
from core.dependencies import close_document_store, get_document_store
from core.exceptions import DatabaseConnectionError, setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import dashboard_router, health_router, registration_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        - Configures logging from LOG_LEVEL / LOG_FORMAT
        - Connects to MongoDB; a failure here is fatal and aborts startup

    Shutdown:
        - Closes the MongoDB client
    """
    setup_logging(settings)

    logger = logging.getLogger(__name__)
    logger.info("Starting Patient Registry service...")

    try:
        store = get_document_store()
    except DatabaseConnectionError as e:
        logger.critical(
            "Cannot connect to MongoDB, aborting startup",
            extra=e.context
        )
        raise

    logger.info("Document store ready", extra={"collection": store.collection_name})

    yield

    logger.info("Patient Registry service shutting down...")
    close_document_store()


app = FastAPI(
    title="Patient Registry",
    description="Patient registration and blood pressure tracking with HTML forms backed by MongoDB.",
    version="1.0.0",
    lifespan=lifespan
)

setup_exception_handlers(app)

app.add_middleware(LoggingMiddleware)

app.include_router(registration_router)
app.include_router(dashboard_router)
app.include_router(health_router)


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )


if __name__ == "__main__":
    run()

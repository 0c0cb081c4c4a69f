"""
Health, readiness, and metrics endpoints for operational visibility.

- /health: Liveness probe (is the app running?)
- /ready: Readiness probe (does MongoDB answer a ping?)
- /metrics: Prometheus text format
- /metrics/json: Same metrics as JSON
"""
import logging
import time
from datetime import datetime, timezone
from typing import List

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from core.dependencies import get_document_store
from core.middleware import get_metrics_collector
from repositories import DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health & Observability"])

SERVICE_VERSION = "1.0.0"


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Response model for /health endpoint."""
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    """Status of a single dependency."""
    name: str
    status: str  # "ok", "unavailable"
    latency_ms: float | None = None
    message: str | None = None


class ReadyResponse(BaseModel):
    """Response model for /ready endpoint."""
    status: str  # "ready", "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


class MetricsResponse(BaseModel):
    """Response model for JSON metrics endpoint."""
    http_requests_total: int
    http_requests_2xx_total: int
    http_requests_3xx_total: int
    http_requests_4xx_total: int
    http_requests_5xx_total: int
    http_request_duration_ms_p50: float
    http_request_duration_ms_p95: float
    http_request_duration_ms_p99: float
    form_submissions_stored_total: int
    form_submissions_incomplete_total: int
    form_submissions_not_stored_total: int


def _utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Check if the application is running. Returns immediately without checking dependencies."
)
def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=_utc_timestamp()
    )


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

def _check_database(store: DocumentStore) -> DependencyStatus:
    """Ping MongoDB and report latency."""
    start = time.perf_counter()
    try:
        store.ping()
    except PyMongoError as e:
        latency_ms = (time.perf_counter() - start) * 1000
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="mongodb",
            status="unavailable",
            latency_ms=round(latency_ms, 2),
            message=f"Ping failed: {type(e).__name__}"
        )

    latency_ms = (time.perf_counter() - start) * 1000
    return DependencyStatus(
        name="mongodb",
        status="ok",
        latency_ms=round(latency_ms, 2),
        message=f"Collection {store.collection_name} reachable"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="Check that MongoDB answers a ping. Returns 503 if it does not."
)
def readiness_check(
    response: Response,
    store: DocumentStore = Depends(get_document_store),
) -> ReadyResponse:
    db_status = _check_database(store)

    if db_status.status == "ok":
        status = "ready"
    else:
        status = "not_ready"
        response.status_code = 503

    return ReadyResponse(
        status=status,
        dependencies=[db_status],
        timestamp=_utc_timestamp()
    )


# =============================================================================
# METRICS ENDPOINTS
# =============================================================================

@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Request counts, latency percentiles and form submission outcomes in Prometheus text format."
)
def get_metrics() -> Response:
    collector = get_metrics_collector()
    return Response(
        content=collector.get_prometheus_format(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@router.get(
    "/metrics/json",
    response_model=MetricsResponse,
    summary="JSON metrics",
)
def get_metrics_json() -> MetricsResponse:
    collector = get_metrics_collector()
    return MetricsResponse(**collector.get_summary())

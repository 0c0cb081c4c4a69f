"""
FastAPI middleware for request logging and in-memory metrics.

Middleware Stack Order (in main.py):
    1. LoggingMiddleware (outermost - captures everything)
    2. Application routes
"""

import logging
import time
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Deque, Dict

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.logging_config import bind_request_id, unbind_request_id
from models.results import (
    SUBMISSION_STATUS_HEADER,
    STATUS_INCOMPLETE,
    STATUS_NOT_STORED,
    STATUS_STORED,
)

logger = logging.getLogger(__name__)


# =============================================================================
# IN-MEMORY METRICS COLLECTOR
# =============================================================================

@dataclass
class RequestMetrics:
    """Container for a single request's metrics."""
    timestamp: datetime
    method: str
    path: str
    status_code: int
    duration_ms: float
    request_id: str


@dataclass
class MetricsCollector:
    """
    In-memory metrics collector with a fixed-size buffer.

    Keeps the last ``max_history`` requests for latency percentiles and
    running counters per status class. Submissions that were degraded
    (missing fields, or not stored) are counted separately.
    """
    max_history: int = 1000

    _requests: Deque[RequestMetrics] = field(default_factory=deque, repr=False)

    total_requests: int = 0
    total_2xx: int = 0
    total_3xx: int = 0
    total_4xx: int = 0
    total_5xx: int = 0

    submissions_stored: int = 0
    submissions_incomplete: int = 0
    submissions_not_stored: int = 0

    def __post_init__(self) -> None:
        self._requests = deque(self._requests, maxlen=self.max_history)

    def record_request(self, metrics: RequestMetrics) -> None:
        """Record a completed request's metrics."""
        self._requests.append(metrics)
        self.total_requests += 1

        if 200 <= metrics.status_code < 300:
            self.total_2xx += 1
        elif 300 <= metrics.status_code < 400:
            self.total_3xx += 1
        elif 400 <= metrics.status_code < 500:
            self.total_4xx += 1
        elif 500 <= metrics.status_code < 600:
            self.total_5xx += 1

    def record_submission(self, status: str) -> None:
        """Record the outcome of a form submission (see X-Submission-Status)."""
        if status == STATUS_STORED:
            self.submissions_stored += 1
        elif status == STATUS_INCOMPLETE:
            self.submissions_incomplete += 1
        elif status == STATUS_NOT_STORED:
            self.submissions_not_stored += 1

    def get_latency_percentiles(self) -> Dict[str, float]:
        """
        Calculate p50, p95 and p99 latency in milliseconds.

        Returns 0 for each when no data is available.
        """
        if not self._requests:
            return {"p50": 0, "p95": 0, "p99": 0}

        durations = sorted(r.duration_ms for r in self._requests)
        n = len(durations)

        def percentile(p: float) -> float:
            idx = int(n * p / 100)
            return durations[min(idx, n - 1)]

        return {
            "p50": round(percentile(50), 2),
            "p95": round(percentile(95), 2),
            "p99": round(percentile(99), 2),
        }

    def get_summary(self) -> Dict:
        """Metrics summary for the /metrics endpoints."""
        latencies = self.get_latency_percentiles()

        return {
            "http_requests_total": self.total_requests,
            "http_requests_2xx_total": self.total_2xx,
            "http_requests_3xx_total": self.total_3xx,
            "http_requests_4xx_total": self.total_4xx,
            "http_requests_5xx_total": self.total_5xx,
            "http_request_duration_ms_p50": latencies["p50"],
            "http_request_duration_ms_p95": latencies["p95"],
            "http_request_duration_ms_p99": latencies["p99"],
            "form_submissions_stored_total": self.submissions_stored,
            "form_submissions_incomplete_total": self.submissions_incomplete,
            "form_submissions_not_stored_total": self.submissions_not_stored,
        }

    def get_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format."""
        summary = self.get_summary()
        lines = [
            "# HELP http_requests_total Total HTTP requests",
            "# TYPE http_requests_total counter",
            f'http_requests_total {summary["http_requests_total"]}',
            "",
            "# HELP http_requests_by_status HTTP requests by status category",
            "# TYPE http_requests_by_status counter",
            f'http_requests_by_status{{status="2xx"}} {summary["http_requests_2xx_total"]}',
            f'http_requests_by_status{{status="3xx"}} {summary["http_requests_3xx_total"]}',
            f'http_requests_by_status{{status="4xx"}} {summary["http_requests_4xx_total"]}',
            f'http_requests_by_status{{status="5xx"}} {summary["http_requests_5xx_total"]}',
            "",
            "# HELP http_request_duration_ms Request duration in milliseconds",
            "# TYPE http_request_duration_ms gauge",
            f'http_request_duration_ms{{quantile="0.5"}} {summary["http_request_duration_ms_p50"]}',
            f'http_request_duration_ms{{quantile="0.95"}} {summary["http_request_duration_ms_p95"]}',
            f'http_request_duration_ms{{quantile="0.99"}} {summary["http_request_duration_ms_p99"]}',
            "",
            "# HELP form_submissions_total Form submissions by outcome",
            "# TYPE form_submissions_total counter",
            f'form_submissions_total{{outcome="stored"}} {summary["form_submissions_stored_total"]}',
            f'form_submissions_total{{outcome="incomplete"}} {summary["form_submissions_incomplete_total"]}',
            f'form_submissions_total{{outcome="not-stored"}} {summary["form_submissions_not_stored_total"]}',
        ]
        return "\n".join(lines) + "\n"


# Global metrics collector instance, shared across all requests
metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    return metrics_collector


# =============================================================================
# LOGGING MIDDLEWARE
# =============================================================================

class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request/Response logging middleware with request_id propagation.

    - Generates a short request_id for each request
    - Logs request start and completion
    - Records latency and submission outcome metrics
    - Adds the X-Request-ID header to responses
    """

    EXCLUDED_PATHS = {"/health", "/ready", "/metrics", "/metrics/json", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = uuid.uuid4().hex[:8]
        token = bind_request_id(request_id)
        try:
            response = await self._handle(request, call_next, request_id)
        finally:
            unbind_request_id(token)

        response.headers["X-Request-ID"] = request_id
        return response

    async def _handle(self, request: Request, call_next: Callable, request_id: str) -> Response:
        method = request.method
        path = request.url.path
        quiet = path in self.EXCLUDED_PATHS
        start_time = time.perf_counter()

        if not quiet:
            logger.info("Request started", extra={"method": method, "path": path})

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Request failed with exception",
                extra={"method": method, "path": path, "error": str(e)}
            )
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000
        metrics_collector.record_request(RequestMetrics(
            timestamp=datetime.now(timezone.utc),
            method=method,
            path=path,
            status_code=response.status_code,
            duration_ms=duration_ms,
            request_id=request_id,
        ))

        # Set by the form routes; absent on every other response
        submission_status = response.headers.get(SUBMISSION_STATUS_HEADER)
        if submission_status:
            metrics_collector.record_submission(submission_status)

        if not quiet:
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                "Request completed",
                extra={
                    "method": method,
                    "path": path,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                    "submission_status": submission_status,
                }
            )

        return response

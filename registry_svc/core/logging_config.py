"""
Logging for the Patient Registry service.

Level and format come from Settings (LOG_LEVEL, LOG_FORMAT), so they can be
set in the environment or in .env like the MongoDB options. Inside a request
every line carries the id that LoggingMiddleware bound for it.

A JSON line looks like:
{
    "timestamp": "2024-01-15T10:30:00.000Z",
    "level": "ERROR",
    "service": "patient-registry",
    "logger": "repositories.record_repository",
    "message": "Insert failed",
    "request_id": "abc12345",
    "extra": {"collection": "petri_dish.patients", "error": "..."}
}
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from core.config import Settings

SERVICE_NAME = "patient-registry"

# Route handlers run in the thread pool; starlette copies the request's
# context into the worker thread, so the bound id is visible there too.
request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Top-level packages under registry_svc/
APP_LOGGERS = ("main", "core", "api", "models", "repositories", "services")
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")

# Attributes present on every LogRecord; anything else came in through extra=
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message", "asctime", "taskName", "color_message",
}


def bind_request_id(request_id: str) -> Token:
    """Attach a request id to the current context. Returns the reset token."""
    return request_id_var.set(request_id)


def unbind_request_id(token: Token) -> None:
    request_id_var.reset(token)


def record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the service name."""

    def __init__(self, service: str = SERVICE_NAME):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, timezone.utc)
        entry: Dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            entry["request_id"] = request_id

        extras = record_extras(record)
        if extras:
            entry["extra"] = extras

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(logging.Formatter):
    """
    Readable single lines for local runs.

    The request id and any extra fields are appended as key=value pairs
    after the message, before a traceback if there is one.
    """

    def __init__(self):
        super().__init__(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        pairs = dict(record_extras(record))
        request_id = request_id_var.get()
        if request_id:
            pairs = {"request_id": request_id, **pairs}
        if pairs:
            line += " | " + " ".join(f"{key}={value}" for key, value in pairs.items())
        return line


def setup_logging(config: "Settings") -> None:
    """
    Install one stdout handler on the root logger.

    The service loggers and uvicorn's loggers propagate to it. pymongo is
    held at INFO or above, since its DEBUG output is heartbeats and pool
    events.
    """
    level = config.log_level

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter() if config.json_logs else TextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    for logger_name in APP_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.handlers = []
        logger.propagate = True

    for logger_name in SERVER_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.handlers = []
        logger.propagate = True

    logging.getLogger("pymongo").setLevel(max(logging.getLevelName(level), logging.INFO))

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={
            "level": level,
            "format": config.log_format,
            "collection": f"{config.mongodb_database}.{config.mongodb_collection}",
        }
    )

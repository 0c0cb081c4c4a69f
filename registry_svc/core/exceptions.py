"""
Shared exception classes and error handling utilities for the Patient Registry service.

This module provides:
- Custom exception hierarchy for domain-specific errors
- Exception handlers for FastAPI integration (rendered as an HTML error page)

Usage:
    from core.exceptions import DatabaseConnectionError, InsertError

    # In the repository layer - wrap driver errors
    InsertError(collection="patients", reason=str(exc))

    # In FastAPI - register handlers via setup_exception_handlers(app)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import HTMLResponse

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class RegistryServiceError(Exception):
    """
    Base exception for all Patient Registry domain errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with status code and detail message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "An unexpected error occurred"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        """
        Initialize the exception.

        Args:
            detail: Human-readable error message. Uses class default if not provided.
            status_code: HTTP status code. Uses class default if not provided.
            **kwargs: Additional context to include in logs and the error page.
        """
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for templates and logs."""
        result = {"detail": self.detail}
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# DATABASE EXCEPTIONS
# =============================================================================

class DatabaseError(RegistryServiceError):
    """Raised (or returned in a result) when a database operation fails."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "Database operation failed"

    def __init__(self, operation: Optional[str] = None, **kwargs: Any):
        detail = f"Database error during {operation}" if operation else self.detail
        super().__init__(detail=detail, operation=operation, **kwargs)


class DatabaseConnectionError(DatabaseError):
    """Raised when the document store cannot be reached."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    detail = "Failed to connect to database"

    def __init__(self, **kwargs: Any):
        super().__init__(operation="connect", **kwargs)


class InsertError(DatabaseError):
    """A document could not be written to the collection."""

    def __init__(self, **kwargs: Any):
        super().__init__(operation="insert", **kwargs)


class QueryError(DatabaseError):
    """Documents could not be read from the collection."""

    def __init__(self, **kwargs: Any):
        super().__init__(operation="find", **kwargs)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def registry_service_exception_handler(
    request: Request,
    exc: RegistryServiceError
) -> HTMLResponse:
    """
    Handle RegistryServiceError exceptions that escape a route.

    Routes never raise for persistence failures during a request; this
    covers errors raised while resolving dependencies, such as the document
    store being unavailable.
    """
    from api.rendering import templates

    logger.warning(
        f"RegistryServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
            "context": exc.context
        }
    )
    return templates.TemplateResponse(
        request,
        "error.html",
        {"error": exc.to_dict()},
        status_code=exc.status_code,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RegistryServiceError, registry_service_exception_handler)

"""
Core module for application configuration, logging, errors and dependency wiring.

Submodules:
- config: Settings via pydantic-settings
- dependencies: FastAPI Depends() functions for the store, repository and services
- exceptions: Domain exception classes with HTTP status codes
- logging_config: JSON logging and request id propagation
- middleware: Request logging and in-memory metrics

Import from the submodules directly; this package does not re-export them so
that importing core.exceptions does not pull in the settings or the database layer.
"""

"""
Shared pytest fixtures for the registry service tests.

The real routers are mounted on a test app and get_document_store is
overridden, so every request goes through the real services and repository
down to an in-memory stand-in for the MongoDB collection.

Fixture Hierarchy:
    memory_collection → store → repository → test_app → client
    failing_collection → failing_store → failing_app → failing_client
"""
import logging
import os

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Settings are read on import and MONGODB_URI is required
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

from api.routers import dashboard_router, health_router, registration_router
from core import dependencies as deps
from core.exceptions import setup_exception_handlers
from repositories import DocumentStore, RecordRepository

from fakes import FailingCollection, FakeClient, InMemoryCollection


def build_app(store):
    """Test app with the production routers and exception handlers."""
    app = FastAPI(title="Patient Registry Test")
    setup_exception_handlers(app)
    app.dependency_overrides[deps.get_document_store] = lambda: store
    app.include_router(registration_router)
    app.include_router(dashboard_router)
    app.include_router(health_router)
    return app


@pytest.fixture
def memory_collection():
    return InMemoryCollection()


@pytest.fixture
def store(memory_collection):
    return DocumentStore(client=FakeClient(), collection=memory_collection)


@pytest.fixture
def repository(store):
    return RecordRepository(store=store)


@pytest.fixture
def test_app(store):
    app = build_app(store)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def failing_collection():
    return FailingCollection()


@pytest.fixture
def failing_store(failing_collection):
    return DocumentStore(client=FakeClient(healthy=False), collection=failing_collection)


@pytest.fixture
def failing_app(failing_store):
    app = build_app(failing_store)
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client(failing_app):
    return TestClient(failing_app)


@pytest.fixture
def restore_logging():
    """Undo setup_logging() so one test's handler and level do not leak."""
    from core.logging_config import APP_LOGGERS

    root = logging.getLogger()
    saved_root = (root.level, root.handlers[:])
    saved_app = {name: logging.getLogger(name).level for name in APP_LOGGERS + ("pymongo",)}
    yield
    root.setLevel(saved_root[0])
    root.handlers = saved_root[1]
    for name, level in saved_app.items():
        logging.getLogger(name).setLevel(level)


@pytest.fixture
def env_file(tmp_path, monkeypatch):
    """Write a .env file; LOG_* variables are cleared so the file decides."""
    for name in ("LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    def write(**values):
        path = tmp_path / ".env"
        path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
        return path

    return write

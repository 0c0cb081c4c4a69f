"""
Tests for settings loading.
"""
import pytest
from pydantic import ValidationError

from core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://db.example:27017")
    for name in ("MONGODB_USERNAME", "MONGODB_PASSWORD", "MONGODB_DATABASE", "MONGODB_COLLECTION",
                 "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)
    assert settings.mongodb_uri == "mongodb://db.example:27017"
    assert settings.mongodb_database == "petri_dish"
    assert settings.mongodb_collection == "patients"
    assert settings.registry_svc_port == 8080
    assert not settings.has_credentials
    assert settings.log_level == "INFO"
    assert settings.json_logs


def test_credentials_from_environment(monkeypatch):
    monkeypatch.setenv("MONGODB_URI", "mongodb://db.example:27017")
    monkeypatch.setenv("MONGODB_USERNAME", "clinic")
    monkeypatch.setenv("MONGODB_PASSWORD", "secret")

    settings = Settings(_env_file=None)
    assert settings.has_credentials
    assert settings.mongodb_password == "secret"


def test_missing_uri_fails_fast(monkeypatch):
    monkeypatch.delenv("MONGODB_URI", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_logging_options_from_env_file(env_file):
    path = env_file(MONGODB_URI="mongodb://db.example:27017", LOG_LEVEL="debug", LOG_FORMAT="Text")

    settings = Settings(_env_file=path)
    assert settings.log_level == "DEBUG"
    assert settings.log_format == "text"
    assert not settings.json_logs


def test_unknown_log_format_rejected(env_file):
    path = env_file(MONGODB_URI="mongodb://db.example:27017", LOG_FORMAT="xml")
    with pytest.raises(ValidationError):
        Settings(_env_file=path)

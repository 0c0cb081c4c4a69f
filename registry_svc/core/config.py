"""
Configuration module for the Patient Registry service.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Values come from the environment or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MongoDB Configuration
    mongodb_uri: str = Field(
        ...,  # Required - no default means fail fast if missing
        min_length=1,
        description="MongoDB connection URI",
    )
    mongodb_username: str = Field(default="", description="MongoDB username")
    mongodb_password: str = Field(default="", description="MongoDB password")
    mongodb_database: str = Field(default="petri_dish", description="Database holding the records collection")
    mongodb_collection: str = Field(default="patients", description="Collection for patient and blood pressure records")
    mongodb_server_selection_timeout_ms: int = Field(
        default=5000,
        ge=1,
        description="How long the driver waits for a reachable server",
    )

    # API Configuration
    registry_svc_host: str = Field(default="0.0.0.0", description="API host")
    registry_svc_port: int = Field(default=8080, description="API port")
    registry_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Logging Configuration
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Level for the root logger and the service loggers",
    )
    log_format: Literal["json", "text"] = Field(
        default="json",
        description="json for one object per line, text for local runs",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        return value.strip().upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @model_validator(mode="after")
    def validate_credentials(self) -> "Settings":
        """Warn about half-configured credentials instead of failing on first request."""
        if self.mongodb_password and not self.mongodb_username:
            logger.warning(
                "MONGODB_PASSWORD is set but MONGODB_USERNAME is empty - "
                "connecting without authentication"
            )
        return self

    @property
    def has_credentials(self) -> bool:
        """True when a username is configured for the connection."""
        return bool(self.mongodb_username)

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"


# Create global settings instance - fails fast if required config is missing
settings = Settings()

API_HOST = settings.registry_svc_host
API_PORT = settings.registry_svc_port
API_RELOAD = settings.registry_svc_reload

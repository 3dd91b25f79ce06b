"""Application and logging configuration models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from photoscout.shared.constants import Application, Environment, Logging


class AppSettings(BaseSettings):
    """Application configuration.

    ``environment`` is the runtime mode flag; only ``production`` changes
    behavior (shorter response cache TTL).
    """

    model_config = {
        "env_prefix": "PHOTOSCOUT_APP__",
        "env_nested_delimiter": "__",
        "env_ignore_empty": True,
        "extra": "ignore",
    }

    name: str = Field(default=Application.NAME, description="Application name")
    version: str = Field(default=Application.VERSION, description="Application version")
    environment: str = Field(
        default=Environment.DEVELOPMENT,
        description="Runtime environment (development, production, test)",
    )
    debug: bool = Field(default=False, description="Enable debug mode")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        value = v.strip().lower()
        if value not in Environment.ALL:
            msg = f"environment must be one of {', '.join(Environment.ALL)}, got {v!r}"
            raise ValueError(msg)
        return value

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=Logging.DEFAULT_LEVEL, description="Logging level")
    file: str | None = Field(default=None, description="JSON log file path")
    console_output: bool = Field(default=True, description="Enable console logging")
    rich_console: bool = Field(
        default=True,
        description="Render console logs with Rich instead of JSON lines",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        value = v.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            msg = f"Invalid log level: {v!r}"
            raise ValueError(msg)
        return value


__all__ = [
    "AppSettings",
    "LoggingSettings",
]

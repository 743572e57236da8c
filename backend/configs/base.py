"""
Base configuration settings for the resume analyzer.

Shared fields every settings class inherits: deployment environment, the
FastAPI debug flag and the root log level. Values load from the process
environment and an optional .env file.

Dependencies: pydantic_settings
System role: Foundation for all configuration classes
"""

import logging

from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class BaseSettings(PydanticBaseSettings):
    """Shared environment, debug and logging settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment environment reported by GET / (development, production)",
    )
    debug: bool = Field(
        default=False,
        description="Run FastAPI in debug mode (tracebacks on unhandled errors)",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Normalize to an upper-case stdlib logging level name."""
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {value}")
        return level

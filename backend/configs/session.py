"""
Session lifecycle configuration settings.

Controls in-memory session expiry, the periodic sweep cadence and the
retry ceiling for failed analyses.

Dependencies: pydantic, pydantic_settings
System role: Session store configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SessionSettings(BaseSettings):
    """In-memory session store configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SESSION_",
        case_sensitive=False,
        extra="ignore",
    )

    ttl_seconds: int = Field(default=30 * 60, description="Session lifetime after creation or extension")
    sweep_interval_seconds: int = Field(default=5 * 60, description="Expired session sweep cadence")
    max_retries: int = Field(default=3, description="Maximum retry attempts from error state")

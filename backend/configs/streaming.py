"""
Server-Sent Events configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Event stream transport configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StreamingSettings(BaseSettings):
    """SSE transport configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SSE_",
        case_sensitive=False,
        extra="ignore",
    )

    heartbeat_interval_seconds: float = Field(
        default=30.0,
        description="Idle interval before a keep-alive comment is written",
    )
    allowed_origins: list[str] = Field(
        default=["http://localhost:5173"],
        description="Browser origins allowed to open event streams",
    )

"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from backend.configs.base import BaseSettings
from backend.configs.llm import LLMSettings
from backend.configs.session import SessionSettings
from backend.configs.streaming import StreamingSettings
from backend.configs.uploads import UploadSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    session: SessionSettings = SessionSettings()
    streaming: StreamingSettings = StreamingSettings()
    uploads: UploadSettings = UploadSettings()
    llm: LLMSettings = LLMSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from backend.configs import get_settings
        settings = get_settings()
    """
    return Settings()

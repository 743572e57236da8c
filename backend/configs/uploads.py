"""
Upload storage configuration settings.

Settings for the temporary upload directory, size limits and the retention
window after which uploaded resumes are deleted.

Dependencies: pydantic_settings
System role: Upload directory and retention configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class UploadSettings(BaseSettings):
    """Settings for uploaded resume files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UPLOAD_",
        case_sensitive=False,
        extra="ignore",
    )

    directory: str = Field(default="uploads", description="Directory for uploaded PDFs")
    max_file_size_bytes: int = Field(default=10 * 1024 * 1024, description="Maximum upload size")
    retention_seconds: int = Field(default=10 * 60, description="Age after which files are swept")
    cleanup_interval_seconds: int = Field(default=5 * 60, description="File sweep cadence")
    processed_file_delay_seconds: int = Field(
        default=5 * 60,
        description="Delay before a processed upload is deleted",
    )
    min_text_length: int = Field(default=50, description="Minimum extracted characters for a usable resume")

"""
Session domain models and schemas.

Lifecycle status vocabulary plus request/response schemas for session
operations.

Dependencies: pydantic
System role: Session API contracts
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SessionStatus(str, Enum):
    """Lifecycle status of a resume-analysis session."""

    CREATED = "created"
    UPLOADING = "uploading"
    UPLOADED = "uploaded"
    EXTRACTING = "extracting"
    EXTRACTED = "extracted"
    ANALYZING = "analyzing"
    STREAMING = "streaming"
    COMPLETED = "completed"
    ERROR = "error"
    RETRYING = "retrying"


class CreateSessionRequest(BaseModel):
    """Request schema for creating a new session."""

    metadata: dict = Field(default_factory=dict, description="Optional seed data merged into the session")


class UpdateSessionRequest(BaseModel):
    """Request schema for merging metadata into an existing session."""

    metadata: dict[str, Any] = Field(..., description="Fields merged into the session; lifecycle fields are ignored")
    message: str | None = Field(default=None, description="Optional message broadcast with the update")


class SessionResponse(BaseModel):
    """Point-in-time snapshot of a session."""

    session_id: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    expires_at: datetime
    retry_count: int = 0
    file_info: dict[str, Any] | None = None
    extraction_info: dict[str, Any] | None = None
    feedback: dict[str, Any] | None = None
    last_error: str | None = None
    error_code: str | None = None
    completed_at: datetime | None = None


class SessionStatusResponse(BaseModel):
    """Response schema for the non-streaming status endpoint."""

    success: bool = True
    session_id: str
    status: SessionStatus
    created_at: datetime
    updated_at: datetime
    has_active_connections: bool
    retry_count: int = 0


class RetryResponse(BaseModel):
    """Response schema for a successful retry request."""

    success: bool = True
    message: str = "Retry initiated"
    session_id: str
    retry_count: int

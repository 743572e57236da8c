"""
Common response models and utilities.

Generic response wrappers and error schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    error: str = Field(description="Error message")
    code: str = Field(description="Stable machine-readable error code")
    details: dict | None = Field(default=None, description="Additional error context")


class StatsResponse(BaseModel):
    """Aggregate statistics response."""

    success: bool = True
    stats: dict[str, Any]
    timestamp: str

"""
Health check API endpoints.

Routes: GET /health

Dependencies: fastapi, pydantic
System role: Health check HTTP API
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str
    timestamp: datetime


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(
        status="healthy",
        message="Resume Analyzer API is running",
        timestamp=datetime.now(timezone.utc),
    )

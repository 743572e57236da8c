"""
Core business logic module.

Contains domain business logic, exception hierarchy, and core components.
All business rules and domain-specific logic reside here.
"""

from backend.core.exceptions import (
    ResumeAnalyzerException,
    ValidationError,
    InvalidSessionIdError,
    SessionNotFoundError,
    InvalidSessionStateError,
    MaxRetriesExceededError,
    OriginNotAllowedError,
    ConnectionFailedError,
    ExtractionError,
    AnalysisError,
)

# Business logic modules
from backend.core.session import SessionStore
from backend.core.streaming import ConnectionRegistry, EventBroadcaster, SseChannel

__all__ = [
    # Exceptions
    "ResumeAnalyzerException",
    "ValidationError",
    "InvalidSessionIdError",
    "SessionNotFoundError",
    "InvalidSessionStateError",
    "MaxRetriesExceededError",
    "OriginNotAllowedError",
    "ConnectionFailedError",
    "ExtractionError",
    "AnalysisError",
    # Business logic
    "SessionStore",
    "ConnectionRegistry",
    "EventBroadcaster",
    "SseChannel",
]

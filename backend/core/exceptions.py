"""
Exception hierarchy for the Resume Analyzer application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging, plus a
stable error code and HTTP status used when rendering API responses.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class ResumeAnalyzerException(Exception):
    """Base exception for all Resume Analyzer application errors."""

    code: str = "INTERNAL_ERROR"
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging

        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(ResumeAnalyzerException):
    """Raised when input validation fails."""

    code = "VALIDATION_ERROR"
    status_code = 400

    def __init__(
        self,
        message: str,
        field: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            code: Optional specific error code overriding VALIDATION_ERROR
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        if code:
            self.code = code
        super().__init__(message, details)


class InvalidSessionIdError(ResumeAnalyzerException):
    """Raised when a session identifier is missing or malformed."""

    code = "INVALID_SESSION_ID"
    status_code = 400

    def __init__(self, session_id: Any = None) -> None:
        super().__init__("Invalid session ID", {"session_id": repr(session_id)})


class SessionNotFoundError(ResumeAnalyzerException):
    """Raised when a session cannot be found or has expired."""

    code = "SESSION_NOT_FOUND"
    status_code = 404

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        self.session_id = session_id
        super().__init__("Session not found", details)


class InvalidSessionStateError(ResumeAnalyzerException):
    """Raised when a session is not in the status an operation requires."""

    code = "INVALID_SESSION_STATE"
    status_code = 400

    def __init__(self, session_id: str, current_status: str, required_status: str) -> None:
        super().__init__(
            f"Session is not in {required_status} state",
            {
                "session_id": session_id,
                "current_status": current_status,
                "required_status": required_status,
            },
        )


class MaxRetriesExceededError(ResumeAnalyzerException):
    """Raised when a retry would exceed the retry ceiling."""

    code = "MAX_RETRIES_EXCEEDED"
    status_code = 400

    def __init__(self, session_id: str, retry_count: int, max_retries: int) -> None:
        self.retry_count = retry_count
        self.max_retries = max_retries
        super().__init__(
            "Maximum retry attempts exceeded",
            {"session_id": session_id, "retry_count": retry_count, "max_retries": max_retries},
        )


class OriginNotAllowedError(ResumeAnalyzerException):
    """Raised when an event stream is requested from a non allow-listed origin."""

    code = "CORS_NOT_ALLOWED"
    status_code = 403

    def __init__(self, origin: str) -> None:
        super().__init__("CORS Error: Origin not allowed", {"origin": origin})


class ConnectionFailedError(ResumeAnalyzerException):
    """Raised when an event stream channel cannot be registered."""

    code = "SSE_CONNECTION_FAILED"
    status_code = 500

    def __init__(self, session_id: str) -> None:
        super().__init__("Failed to create SSE connection", {"session_id": session_id})


class ExtractionError(ResumeAnalyzerException):
    """Raised when text extraction from an uploaded PDF fails."""

    status_code = 422

    def __init__(
        self,
        error_type: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize extraction error.

        Args:
            error_type: Failure classification (INVALID_PDF, EMPTY_FILE, ...)
            message: User-facing error message
            details: Additional context
        """
        self.code = error_type
        super().__init__(message, details)


class AnalysisError(ResumeAnalyzerException):
    """Raised when the AI analysis call fails upstream."""

    code = "ANALYSIS_FAILED"
    status_code = 502

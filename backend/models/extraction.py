"""
PDF extraction result schemas.

Dependencies: pydantic
System role: Extraction collaborator contract
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ExtractionErrorType(str, Enum):
    """Failure classifications for PDF text extraction."""

    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    EMPTY_FILE = "EMPTY_FILE"
    INVALID_PDF = "INVALID_PDF"
    PASSWORD_PROTECTED = "PASSWORD_PROTECTED"
    INSUFFICIENT_TEXT = "INSUFFICIENT_TEXT"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_ACCESS_ERROR = "FILE_ACCESS_ERROR"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"


class ExtractionMetadata(BaseModel):
    """Metadata describing successfully extracted text."""

    pages: int
    text_length: int
    word_count: int
    extracted_at: datetime
    info: dict[str, Any] = Field(default_factory=dict)


class ExtractionFailure(BaseModel):
    """Typed extraction failure."""

    type: ExtractionErrorType
    message: str
    details: str | None = None
    timestamp: datetime


class ExtractionResult(BaseModel):
    """Outcome of extracting text from a PDF."""

    success: bool
    text: str | None = None
    metadata: ExtractionMetadata | None = None
    error: ExtractionFailure | None = None

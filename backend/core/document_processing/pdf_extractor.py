"""
PDF text extraction using LangChain PyPDFLoader.

Extracts text from an uploaded resume and classifies every failure into a
typed error instead of raising.

Dependencies: langchain_community.document_loaders, pypdf
System role: First stage of the resume analysis pipeline
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

from fastapi.concurrency import run_in_threadpool
from langchain_community.document_loaders import PyPDFLoader
from pypdf.errors import FileNotDecryptedError, PdfReadError

from backend.core.exceptions import ExtractionError
from backend.models.extraction import (
    ExtractionErrorType,
    ExtractionFailure,
    ExtractionMetadata,
    ExtractionResult,
)

logger = logging.getLogger(__name__)

_NON_PRINTABLE = re.compile(r"[^\x20-\x7E\s]")
MIN_PRINTABLE_RATIO = 0.7


class PDFExtractor:
    """Extract and validate resume text from PDF files."""

    def __init__(
        self,
        max_file_size: int = 10 * 1024 * 1024,
        min_text_length: int = 50,
    ) -> None:
        """
        Initialize extractor.

        Args:
            max_file_size: Largest accepted file in bytes
            min_text_length: Minimum characters for meaningful content
        """
        self.max_file_size = max_file_size
        self.min_text_length = min_text_length

    async def extract(self, file_path: str) -> ExtractionResult:
        """Extract text in a worker thread so the event loop is not blocked."""
        return await run_in_threadpool(self.extract_text, file_path)

    def extract_text(self, file_path: str) -> ExtractionResult:
        """
        Extract text from a PDF file.

        Args:
            file_path: Path to the PDF

        Returns:
            ExtractionResult: Text and metadata, or a typed failure
        """
        try:
            size = Path(file_path).stat().st_size
            if size > self.max_file_size:
                raise ExtractionError(
                    ExtractionErrorType.FILE_TOO_LARGE.value,
                    f"PDF file too large. Maximum size is {self.max_file_size // (1024 * 1024)}MB.",
                )
            if size == 0:
                raise ExtractionError(ExtractionErrorType.EMPTY_FILE.value, "PDF file is empty.")

            documents = PyPDFLoader(file_path).load()
            text = "\n".join(doc.page_content for doc in documents).strip()
            self.validate_text(text)

            info = documents[0].metadata if documents else {}
            return ExtractionResult(
                success=True,
                text=text,
                metadata=ExtractionMetadata(
                    pages=len(documents),
                    text_length=len(text),
                    word_count=len(text.split()),
                    extracted_at=datetime.now(timezone.utc),
                    info={key: str(value) for key, value in info.items()},
                ),
            )
        except Exception as e:
            return self._failure(e, file_path)

    def validate_text(self, text: str) -> None:
        """
        Check that extracted text is meaningful.

        Raises:
            ExtractionError: INSUFFICIENT_TEXT when empty, too short or garbled
        """
        if not text:
            raise ExtractionError(
                ExtractionErrorType.INSUFFICIENT_TEXT.value,
                "No text could be extracted from the PDF. The file may contain only images or be corrupted.",
            )

        if len(text) < self.min_text_length:
            raise ExtractionError(
                ExtractionErrorType.INSUFFICIENT_TEXT.value,
                f"Extracted text is too short ({len(text)} characters). "
                "The PDF may contain mostly images or have very little text content.",
            )

        printable_ratio = len(_NON_PRINTABLE.sub("", text)) / len(text)
        if printable_ratio < MIN_PRINTABLE_RATIO:
            raise ExtractionError(
                ExtractionErrorType.INSUFFICIENT_TEXT.value,
                "Extracted text appears to be corrupted or contains mostly non-readable characters.",
            )

    @staticmethod
    def _classify(error: Exception) -> tuple[ExtractionErrorType, str]:
        if isinstance(error, ExtractionError):
            return ExtractionErrorType(error.code), error.message
        if isinstance(error, FileNotDecryptedError):
            return (
                ExtractionErrorType.PASSWORD_PROTECTED,
                "This PDF is password-protected. Please upload an unprotected version.",
            )
        if isinstance(error, PdfReadError):
            return (
                ExtractionErrorType.INVALID_PDF,
                "The uploaded file is not a valid PDF or is corrupted.",
            )
        if isinstance(error, FileNotFoundError):
            return (
                ExtractionErrorType.FILE_NOT_FOUND,
                "PDF file not found. Please try uploading again.",
            )
        if isinstance(error, PermissionError):
            return (
                ExtractionErrorType.FILE_ACCESS_ERROR,
                "Unable to access the PDF file. Please try again.",
            )
        return ExtractionErrorType.EXTRACTION_ERROR, "Failed to extract text from PDF."

    def _failure(self, error: Exception, file_path: str) -> ExtractionResult:
        error_type, message = self._classify(error)
        logger.error(
            "PDF extraction failed",
            extra={
                "file_path": file_path,
                "extraction_error": error_type.value,
                "error_type": type(error).__name__,
                "error_msg": str(error),
            },
        )
        return ExtractionResult(
            success=False,
            error=ExtractionFailure(
                type=error_type,
                message=message,
                details=str(error),
                timestamp=datetime.now(timezone.utc),
            ),
        )

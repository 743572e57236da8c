"""
Upload router utility functions.

Validation and storage helpers for resume uploads.

Dependencies: fastapi, backend.core.exceptions
System role: Upload validation and persistence utilities
"""

import logging
import random
import re
import time
from pathlib import Path

from fastapi.concurrency import run_in_threadpool

from backend.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".pdf"}
ALLOWED_CONTENT_TYPES = {"application/pdf"}
PDF_SIGNATURE = b"%PDF-"


def validate_resume_upload(
    filename: str | None,
    content_type: str | None,
    content: bytes,
    max_file_size: int,
) -> None:
    """
    Validate an uploaded resume.

    Args:
        filename: Client-supplied file name
        content_type: Client-supplied MIME type
        content: File bytes
        max_file_size: Maximum accepted size in bytes

    Raises:
        ValidationError: With code INVALID_FILE_TYPE, EMPTY_FILE,
            FILE_TOO_LARGE or INVALID_PDF
    """
    extension = Path(filename or "").suffix.lower()
    if extension not in ALLOWED_EXTENSIONS or content_type not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(
            "Only PDF files are allowed",
            field="resume",
            code="INVALID_FILE_TYPE",
            details={"file_name": filename, "content_type": content_type},
        )

    if not content:
        raise ValidationError("Uploaded file is empty", field="resume", code="EMPTY_FILE")

    if len(content) > max_file_size:
        raise ValidationError(
            f"File too large. Maximum size is {max_file_size // (1024 * 1024)}MB",
            field="resume",
            code="FILE_TOO_LARGE",
            details={"file_size": len(content), "max_file_size": max_file_size},
        )

    if not content.startswith(PDF_SIGNATURE):
        raise ValidationError(
            "File is not a valid PDF",
            field="resume",
            code="INVALID_PDF",
        )


def build_stored_filename(original_name: str) -> str:
    """
    Build a unique on-disk name for an upload.

    Format: resume-<millis>-<random>-<sanitised original name>
    """
    sanitized = re.sub(r"[^a-zA-Z0-9.\-_]", "_", Path(original_name).name)
    millis = int(time.time() * 1000)
    return f"resume-{millis}-{random.randint(0, 10**9)}-{sanitized}"


async def save_upload(directory: Path, original_name: str, content: bytes) -> Path:
    """
    Write upload bytes into the upload directory.

    Returns:
        Path: Stored file path
    """
    path = Path(directory) / build_stored_filename(original_name)
    await run_in_threadpool(path.write_bytes, content)
    logger.debug("Upload stored", extra={"file_path": str(path), "file_size": len(content)})
    return path

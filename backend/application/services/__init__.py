"""Service orchestrators."""

from .analysis_service import AnalysisService
from .file_cleanup_service import FileCleanupService

__all__ = [
    "AnalysisService",
    "FileCleanupService",
]

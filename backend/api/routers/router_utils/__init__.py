"""Router utility functions."""

from .upload_utils import build_stored_filename, save_upload, validate_resume_upload

__all__ = ["build_stored_filename", "save_upload", "validate_resume_upload"]

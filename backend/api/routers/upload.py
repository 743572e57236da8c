"""
Resume upload API endpoint.

Routes: POST /upload

Stores the PDF, creates a session and starts the analysis pipeline in the
background. The client follows progress on GET /events/{session_id}.

Dependencies: backend.api.deps, backend.application.services, backend.core.streaming
System role: Resume ingestion HTTP API
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from backend.api.deps import ServiceContainer, get_services
from backend.core.exceptions import ValidationError
from backend.core.session.session_store import utc_now
from backend.models.analysis import UploadResponse
from backend.models.session import SessionStatus

from .router_utils import save_upload, validate_resume_upload

logger = logging.getLogger(__name__)

router = APIRouter(tags=["upload"])


@router.post("/upload", response_model=UploadResponse)
async def upload_resume(
    background_tasks: BackgroundTasks,
    resume: UploadFile | None = File(default=None),
    services: ServiceContainer = Depends(get_services),
) -> UploadResponse:
    """
    Upload a resume PDF and start analysis.

    Args:
        background_tasks: FastAPI background task queue
        resume: Multipart file field named "resume"
        services: Injected service container

    Returns:
        UploadResponse: New session id and status

    Raises:
        ValidationError: Missing, oversized, empty or non-PDF upload
    """
    if resume is None or not resume.filename:
        raise ValidationError("No file uploaded", field="resume", code="NO_FILE")

    uploads = services.settings.uploads
    content = await resume.read()
    validate_resume_upload(resume.filename, resume.content_type, content, uploads.max_file_size_bytes)

    file_path = await save_upload(services.file_cleanup.directory, resume.filename, content)

    session_id = services.store.create({
        "file_name": resume.filename,
        "file_size": len(content),
        "file_path": str(file_path),
    })
    file_info = {
        "original_name": resume.filename,
        "size": len(content),
        "mimetype": resume.content_type,
        "path": str(file_path),
    }
    services.broadcaster.upload_started(session_id, file_info)
    services.broadcaster.upload_completed(session_id, {**file_info, "uploaded_at": utc_now()})

    services.file_cleanup.schedule_cleanup(
        session_id,
        file_path,
        uploads.processed_file_delay_seconds,
    )
    background_tasks.add_task(
        services.analysis_service.process_resume,
        session_id,
        str(file_path),
    )

    logger.info(
        "Resume uploaded",
        extra={"session_id": session_id, "file_name": resume.filename, "file_size": len(content)},
    )
    return UploadResponse(
        session_id=session_id,
        status=SessionStatus.UPLOADED.value,
        message="File uploaded successfully. Analysis started.",
    )

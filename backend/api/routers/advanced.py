"""
Advanced analysis API endpoint.

Routes: POST /advanced/analyze

Dependencies: backend.application.services.analysis_service
System role: Targeted resume analysis HTTP API
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends

from backend.api.deps import get_analysis_service
from backend.application.services import AnalysisService
from backend.core.exceptions import SessionNotFoundError
from backend.models.analysis import AdvancedAnalyzeRequest, AnalysisAcceptedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/advanced", tags=["analysis"])


@router.post("/analyze", response_model=AnalysisAcceptedResponse)
async def analyze_advanced(
    request: AdvancedAnalyzeRequest,
    background_tasks: BackgroundTasks,
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisAcceptedResponse:
    """
    Queue the advanced analysis variant for an existing session.

    Progress is delivered on the session's event stream.

    Raises:
        SessionNotFoundError: Session absent or expired
    """
    if not analysis_service.store.exists(request.session_id):
        raise SessionNotFoundError(request.session_id)

    options = request.options.model_dump(exclude_none=True)
    background_tasks.add_task(
        analysis_service.run_analysis,
        request.session_id,
        request.resume_text,
        "advanced",
        options,
    )
    logger.info(
        "Advanced analysis queued",
        extra={"session_id": request.session_id, "option_keys": sorted(options)},
    )
    return AnalysisAcceptedResponse(
        session_id=request.session_id,
        message="Advanced analysis started",
    )

"""
Server-Sent Events endpoints.

Routes:
- GET /events/{id} - Subscribe to a session's event stream
- GET /events/{id}/status - Non-streaming status check
- POST /events/{id}/retry - Retry a failed analysis
- DELETE /events/{id} - Close a session's event streams
- GET /sse/stats - Connection, session and analysis statistics

Dependencies: backend.api.deps, backend.core.streaming, backend.application.services
System role: Real-time progress delivery HTTP API
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends
from fastapi.responses import StreamingResponse

from backend.api.deps import (
    ServiceContainer,
    get_analysis_service,
    get_broadcaster,
    get_services,
    verify_origin,
)
from backend.application.services import AnalysisService
from backend.core.exceptions import ResumeAnalyzerException, SessionNotFoundError
from backend.core.streaming import EventBroadcaster, SseChannel
from backend.models.common import StatsResponse
from backend.models.session import RetryResponse, SessionStatus, SessionStatusResponse
from backend.models.streaming import SSE_HEADERS, StreamEventType, format_sse_message

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


@router.get("/events/{session_id}", dependencies=[Depends(verify_origin)])
async def stream_events(
    session_id: str,
    services: ServiceContainer = Depends(get_services),
) -> StreamingResponse:
    """
    Open a text/event-stream for a session.

    The first message describes the session's current state; subsequent
    messages are lifecycle events as they happen. Idle streams receive a
    keep-alive comment every heartbeat interval.

    The channel is registered only once the response body starts, so a
    client that disconnects before that never leaves a registration behind.

    Raises:
        OriginNotAllowedError: Origin not allow-listed
        SessionNotFoundError: Session absent or expired
    """
    if not services.store.exists(session_id):
        raise SessionNotFoundError(session_id)

    channel = SseChannel(
        heartbeat_interval=services.settings.streaming.heartbeat_interval_seconds,
    )

    async def event_generator():
        try:
            services.broadcaster.subscribe(session_id, channel)
        except ResumeAnalyzerException as e:
            logger.warning(
                "Event stream subscription failed",
                extra={"session_id": session_id, "error_code": e.code},
            )
            yield format_sse_message(
                StreamEventType.ERROR_OCCURRED,
                {
                    "status": SessionStatus.ERROR.value,
                    "message": e.message,
                    "error": {"code": e.code, "message": e.message, "retryable": False, "stage": "connection"},
                },
            )
            return

        try:
            async for message in channel.stream():
                yield message
        finally:
            services.broadcaster.unsubscribe(session_id, channel)
            channel.close()

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers=dict(SSE_HEADERS),
    )


@router.get("/events/{session_id}/status", response_model=SessionStatusResponse)
async def get_event_status(
    session_id: str,
    services: ServiceContainer = Depends(get_services),
) -> SessionStatusResponse:
    """
    Get session status without opening a stream.

    Raises:
        SessionNotFoundError: Session absent or expired
    """
    session = services.store.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)

    return SessionStatusResponse(
        session_id=session_id,
        status=session["status"],
        created_at=session["created_at"],
        updated_at=session["updated_at"],
        has_active_connections=services.broadcaster.has_active_connections(session_id),
        retry_count=session.get("retry_count", 0),
    )


@router.post("/events/{session_id}/retry", response_model=RetryResponse)
async def retry_analysis(
    session_id: str,
    background_tasks: BackgroundTasks,
    analysis_service: AnalysisService = Depends(get_analysis_service),
) -> RetryResponse:
    """
    Retry a failed session and re-run the pipeline in the background.

    Raises:
        SessionNotFoundError: Session absent or expired
        InvalidSessionStateError: Session is not in error state
        MaxRetriesExceededError: Retry ceiling reached
    """
    retry_count = analysis_service.request_retry(session_id)
    background_tasks.add_task(analysis_service.resume_after_retry, session_id)
    return RetryResponse(session_id=session_id, retry_count=retry_count)


@router.delete("/events/{session_id}")
async def close_event_streams(
    session_id: str,
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> dict:
    """Close every event stream of a session."""
    closed = broadcaster.close_session(session_id)
    return {
        "success": True,
        "message": "SSE connections closed",
        "session_id": session_id,
        "closed_connections": closed,
    }


@router.get("/sse/stats", response_model=StatsResponse)
async def get_stats(
    services: ServiceContainer = Depends(get_services),
) -> StatsResponse:
    """Aggregate streaming, session, analysis and upload statistics."""
    return StatsResponse(
        stats={
            "sse": services.registry.stats(),
            "sessions": services.store.stats(),
            "broadcaster": services.broadcaster.stats(),
            "analysis": services.analysis_service.agent.metrics(),
            "uploads": services.file_cleanup.stats(),
        },
        timestamp=datetime.now(timezone.utc).isoformat(),
    )

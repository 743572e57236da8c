"""
Session API endpoints.

Routes:
- POST /sessions - Create new session
- GET /sessions - List active sessions
- GET /sessions/{id} - Get session snapshot
- PATCH /sessions/{id} - Merge metadata and broadcast session.updated
- DELETE /sessions/{id} - Close connections and delete session

Dependencies: backend.core.session, backend.core.streaming, backend.models
System role: Session management HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from backend.api.deps import get_broadcaster, get_session_store
from backend.core.exceptions import SessionNotFoundError
from backend.core.session import SessionStore
from backend.core.streaming import EventBroadcaster
from backend.models.session import CreateSessionRequest, SessionResponse, UpdateSessionRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _client_metadata(metadata: dict[str, Any]) -> dict[str, Any]:
    """Drop client keys that would shadow fields the session snapshot exposes."""
    ignored = sorted(key for key in metadata if key in SessionResponse.model_fields)
    if ignored:
        logger.warning("Session metadata keys ignored", extra={"fields": ignored})
    return {key: value for key, value in metadata.items() if key not in SessionResponse.model_fields}


@router.post("", response_model=SessionResponse)
async def create_session(
    request: CreateSessionRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Create new session with optional metadata.

    Args:
        request: CreateSessionRequest with metadata field
        store: Injected SessionStore

    Returns:
        SessionResponse: Created session
    """
    session_id = store.create(_client_metadata(request.metadata))
    return SessionResponse(**store.get(session_id))


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    store: SessionStore = Depends(get_session_store),
) -> list[SessionResponse]:
    """List all unexpired sessions."""
    return [SessionResponse(**session) for session in store.list_active()]


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """
    Get a point-in-time session snapshot.

    Raises:
        SessionNotFoundError: Session absent or expired
    """
    session = store.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return SessionResponse(**session)


@router.patch("/{session_id}", response_model=SessionResponse)
async def update_session(
    session_id: str,
    request: UpdateSessionRequest,
    store: SessionStore = Depends(get_session_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> SessionResponse:
    """
    Merge metadata into a session and notify its subscribers.

    Raises:
        SessionNotFoundError: Session absent or expired
    """
    if not store.exists(session_id):
        raise SessionNotFoundError(session_id)

    broadcaster.session_updated(
        session_id,
        _client_metadata(request.metadata),
        message=request.message or "Session updated",
    )
    return SessionResponse(**store.get(session_id))


@router.delete("/{session_id}")
async def delete_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
    broadcaster: EventBroadcaster = Depends(get_broadcaster),
) -> dict:
    """
    Close the session's event streams and delete it.

    Raises:
        SessionNotFoundError: Session does not exist
    """
    closed = broadcaster.close_session(session_id)
    if not store.delete(session_id):
        raise SessionNotFoundError(session_id)

    logger.info(
        "Session deleted via API",
        extra={"session_id": session_id, "closed_connections": closed},
    )
    return {
        "success": True,
        "session_id": session_id,
        "message": "Session deleted",
        "closed_connections": closed,
    }

"""
Event broadcaster.

The one place that knows what each lifecycle transition means. Every event
method commits the session store mutation first and then fans the event
out through the connection registry, so a subscriber never sees an event
whose state is not yet stored.

Event methods are fire-and-forget side effects of pipeline steps: a missing
session or an internal failure is logged and reported as False, never
raised.

Dependencies: backend.core.session, backend.core.streaming.connection_registry
System role: Lifecycle event translation and fan-out
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from backend.core.exceptions import ConnectionFailedError, SessionNotFoundError
from backend.core.session.session_store import RESERVED_FIELDS, SessionStore, utc_now
from backend.core.streaming.channel import Channel
from backend.core.streaming.connection_registry import ConnectionRegistry
from backend.models.session import SessionStatus
from backend.models.streaming import StreamEventType

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., bool])


def _broadcast_safely(func: F) -> F:
    """Swallow and log any failure of a broadcast method, returning False."""

    @functools.wraps(func)
    def wrapper(self: "EventBroadcaster", session_id: Any, *args: Any, **kwargs: Any) -> bool:
        if not self._store.exists(session_id):
            logger.warning(
                "Broadcast skipped: session not found",
                extra={"session_id": str(session_id), "event_method": func.__name__},
            )
            return False
        try:
            return func(self, session_id, *args, **kwargs)
        except Exception as e:
            logger.exception(
                "Broadcast failed",
                extra={
                    "session_id": str(session_id),
                    "event_method": func.__name__,
                    "error_type": type(e).__name__,
                    "error_msg": str(e),
                },
            )
            return False

    return wrapper  # type: ignore


def _describe_file(file_info: dict[str, Any]) -> dict[str, Any]:
    return {
        "name": file_info.get("original_name") or file_info.get("name"),
        "size": file_info.get("size"),
        "type": file_info.get("mimetype") or file_info.get("type"),
    }


class EventBroadcaster:
    """Translates lifecycle events into session updates plus broadcasts."""

    def __init__(
        self,
        store: SessionStore,
        registry: ConnectionRegistry,
        max_retries: int = 3,
    ) -> None:
        """
        Initialize broadcaster.

        Args:
            store: Session store mutated by each event
            registry: Connection registry used for delivery
            max_retries: Retry ceiling advertised in retry events
        """
        self._store = store
        self._registry = registry
        self._max_retries = max_retries

    def _emit(self, session_id: str, event: StreamEventType, data: dict[str, Any]) -> bool:
        self._registry.broadcast_to_session(session_id, event.value, data)
        logger.info(
            f"Broadcast: {event.value}",
            extra={"session_id": session_id, "event_type": event.value},
        )
        return True

    @_broadcast_safely
    def upload_started(self, session_id: str, file_info: dict[str, Any] | None = None) -> bool:
        file_info = file_info or {}
        self._store.update(
            session_id,
            {"status": SessionStatus.UPLOADING.value, "file_info": file_info},
        )
        return self._emit(
            session_id,
            StreamEventType.UPLOAD_STARTED,
            {
                "status": SessionStatus.UPLOADING.value,
                "message": "File upload started",
                "file_info": _describe_file(file_info),
            },
        )

    @_broadcast_safely
    def upload_completed(self, session_id: str, file_info: dict[str, Any] | None = None) -> bool:
        file_info = file_info or {}
        uploaded_at = file_info.get("uploaded_at") or utc_now()
        self._store.update(
            session_id,
            {
                "status": SessionStatus.UPLOADED.value,
                "file_info": file_info,
                "uploaded_at": uploaded_at,
            },
        )
        return self._emit(
            session_id,
            StreamEventType.UPLOAD_COMPLETED,
            {
                "status": SessionStatus.UPLOADED.value,
                "message": "File uploaded successfully",
                "file_info": {**_describe_file(file_info), "uploaded_at": uploaded_at},
            },
        )

    @_broadcast_safely
    def extraction_started(self, session_id: str) -> bool:
        self._store.update_status(session_id, SessionStatus.EXTRACTING)
        return self._emit(
            session_id,
            StreamEventType.EXTRACTION_STARTED,
            {
                "status": SessionStatus.EXTRACTING.value,
                "message": "Extracting text from PDF...",
                "stage": "extraction",
            },
        )

    @_broadcast_safely
    def extraction_completed(self, session_id: str, result: dict[str, Any] | None = None) -> bool:
        """
        Store extracted text and metadata.

        Args:
            session_id: Session ID
            result: Dict with text, text_length, page_count, has_text
        """
        result = result or {}
        extraction_info = {
            "text_length": result.get("text_length", 0),
            "page_count": result.get("page_count", 0),
            "has_text": result.get("has_text", False),
        }
        self._store.update(
            session_id,
            {
                "status": SessionStatus.EXTRACTED.value,
                "extracted_text": result.get("text"),
                "extraction_info": extraction_info,
            },
        )
        return self._emit(
            session_id,
            StreamEventType.EXTRACTION_COMPLETED,
            {
                "status": SessionStatus.EXTRACTED.value,
                "message": "Text extraction completed",
                "stage": "extraction",
                "extraction_info": extraction_info,
            },
        )

    @_broadcast_safely
    def analysis_started(
        self,
        session_id: str,
        variant: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> bool:
        fields: dict[str, Any] = {"status": SessionStatus.ANALYZING.value, "streaming_content": ""}
        if variant:
            fields["analysis_type"] = variant
        if options:
            fields["analysis_options"] = options
        self._store.update(session_id, fields)

        data: dict[str, Any] = {
            "status": SessionStatus.ANALYZING.value,
            "message": "AI analysis started...",
            "stage": "analysis",
        }
        if variant:
            data["variant"] = variant
        return self._emit(session_id, StreamEventType.ANALYSIS_STARTED, data)

    @_broadcast_safely
    def analysis_streaming(
        self,
        session_id: str,
        content: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        """
        Append a chunk to the accumulated buffer and broadcast the chunk alone.

        Status is left unchanged.
        """
        session = self._store.get(session_id)
        now = utc_now()
        accumulated = (session.get("streaming_content") or "") + content
        self._store.update(
            session_id,
            {"streaming_content": accumulated, "last_stream_update": now},
        )
        return self._emit(
            session_id,
            StreamEventType.ANALYSIS_STREAMING,
            {
                **(metadata or {}),
                "status": session["status"],
                "stage": "analysis",
                "content": content,
                "chunk_size": len(content),
                "timestamp": now,
            },
        )

    @_broadcast_safely
    def analysis_completed(
        self,
        session_id: str,
        feedback: dict[str, Any] | None = None,
        variant: str | None = None,
    ) -> bool:
        feedback = feedback or {}
        completed_at = utc_now()
        fields: dict[str, Any] = {
            "status": SessionStatus.COMPLETED.value,
            "feedback": feedback,
            "completed_at": completed_at,
            "streaming_content": None,
        }
        if variant:
            fields["analysis_type"] = variant
        self._store.update(session_id, fields)

        data: dict[str, Any] = {
            "status": SessionStatus.COMPLETED.value,
            "message": "AI analysis completed successfully",
            "stage": "analysis",
            "feedback": feedback,
            "completed_at": completed_at,
        }
        if variant:
            data["variant"] = variant
        return self._emit(session_id, StreamEventType.ANALYSIS_COMPLETED, data)

    @_broadcast_safely
    def error(
        self,
        session_id: str,
        error: BaseException | str,
        retryable: bool = True,
        stage: str = "unknown",
        retry_count: int | None = None,
        code: str | None = None,
    ) -> bool:
        """
        Record a failure on the session and broadcast it.

        Args:
            session_id: Session ID
            error: Exception or message
            retryable: Whether the client may request a retry
            stage: Pipeline stage that failed
            retry_count: Retry count to store (defaults to the session's current count)
            code: Error code used when the exception carries none
        """
        message = error.message if hasattr(error, "message") else str(error)
        error_code = getattr(error, "code", None) or code or "UNKNOWN_ERROR"
        if retry_count is None:
            retry_count = self._store.get(session_id).get("retry_count", 0)

        self._store.update(
            session_id,
            {
                "status": SessionStatus.ERROR.value,
                "last_error": message,
                "error_code": error_code,
                "retry_count": retry_count,
            },
        )
        return self._emit(
            session_id,
            StreamEventType.ERROR_OCCURRED,
            {
                "status": SessionStatus.ERROR.value,
                "message": message,
                "error": {
                    "code": error_code,
                    "message": message,
                    "retryable": retryable,
                    "stage": stage,
                },
                "retry_count": retry_count,
            },
        )

    @_broadcast_safely
    def retry_started(self, session_id: str, retry_count: int, stage: str = "analysis") -> bool:
        self._store.update(
            session_id,
            {
                "status": SessionStatus.RETRYING.value,
                "retry_count": retry_count,
                "last_error": None,
            },
        )
        return self._emit(
            session_id,
            StreamEventType.RETRY_STARTED,
            {
                "status": SessionStatus.RETRYING.value,
                "message": f"Retrying {stage}... (Attempt {retry_count})",
                "retry_info": {
                    "attempt": retry_count,
                    "stage": stage,
                    "max_attempts": self._max_retries,
                },
            },
        )

    @_broadcast_safely
    def session_updated(
        self,
        session_id: str,
        metadata: dict[str, Any],
        message: str = "Session updated",
    ) -> bool:
        """
        Merge caller metadata into a session and broadcast it without changing status.

        Keys in RESERVED_FIELDS are dropped; lifecycle fields only move through
        the dedicated event methods.
        """
        changes = {key: value for key, value in metadata.items() if key not in RESERVED_FIELDS}
        self._store.update(session_id, changes)
        session = self._store.get(session_id)
        return self._emit(
            session_id,
            StreamEventType.SESSION_UPDATED,
            {
                "status": session["status"],
                "message": message,
                "session_data": {
                    "session_id": session_id,
                    "status": session["status"],
                    "updated_at": session["updated_at"],
                    "metadata": changes,
                },
            },
        )

    def snapshot_event(self, session: dict[str, Any]) -> tuple[StreamEventType, dict[str, Any]]:
        """Build the replay event describing a session's current state."""
        if session["status"] == SessionStatus.COMPLETED.value and session.get("feedback"):
            return StreamEventType.ANALYSIS_COMPLETED, {
                "status": SessionStatus.COMPLETED.value,
                "message": "Analysis completed successfully",
                "stage": "analysis",
                "feedback": session["feedback"],
                "completed_at": session.get("completed_at") or utc_now(),
            }

        session_data = {
            "session_id": session["session_id"],
            "status": session["status"],
            "created_at": session["created_at"],
            "updated_at": session["updated_at"],
            "retry_count": session.get("retry_count", 0),
        }
        if session["status"] == SessionStatus.ERROR.value:
            session_data["last_error"] = session.get("last_error")
            session_data["error_code"] = session.get("error_code")
        return StreamEventType.SESSION_STATUS, {
            "status": session["status"],
            "message": f"Current status: {session['status']}",
            "session_data": session_data,
        }

    def subscribe(self, session_id: str, channel: Channel) -> None:
        """
        Register a channel, replay the current snapshot to it and extend the session.

        Raises:
            SessionNotFoundError: Session is absent or expired
            ConnectionFailedError: Channel handshake failed
        """
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        if not self._registry.create_connection(session_id, channel):
            raise ConnectionFailedError(session_id)

        event, data = self.snapshot_event(session)
        self._registry.send_to_channel(session_id, channel, event.value, data)
        self._store.extend(session_id)

        logger.info(
            "SSE connection established",
            extra={"session_id": session_id, "snapshot_event": event.value},
        )

    def unsubscribe(self, session_id: str, channel: Channel) -> None:
        self._registry.remove_connection(session_id, channel)
        logger.info("SSE connection closed", extra={"session_id": session_id})

    def close_session(self, session_id: str) -> int:
        """Close every subscriber of a session with a final connection.closed event."""
        return self._registry.close_session_connections(
            session_id,
            StreamEventType.CONNECTION_CLOSED.value,
            {"message": "Connection closed by server", "session_id": session_id},
        )

    def has_active_connections(self, session_id: str) -> bool:
        return self._registry.get_connection_count(session_id) > 0

    @staticmethod
    def event_types() -> dict[str, str]:
        return {event.name: event.value for event in StreamEventType}

    def stats(self) -> dict[str, Any]:
        return {
            "sse_stats": self._registry.stats(),
            "session_stats": self._store.stats(),
            "event_types": len(StreamEventType),
        }

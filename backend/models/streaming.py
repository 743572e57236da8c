"""
Streaming event schemas for Server-Sent Events.

Defines lifecycle event names and the SSE wire encoding used for every
message delivered to subscribers.

Dependencies: fastapi.encoders
System role: Streaming protocol schemas
"""

import json
from enum import Enum
from typing import Any

from fastapi.encoders import jsonable_encoder

KEEP_ALIVE_COMMENT = ": keep-alive\n\n"

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Disable nginx buffering
}


class StreamEventType(str, Enum):
    """Server-to-client event types for session streams."""

    UPLOAD_STARTED = "upload.started"
    UPLOAD_COMPLETED = "upload.completed"
    EXTRACTION_STARTED = "extraction.started"
    EXTRACTION_COMPLETED = "extraction.completed"
    ANALYSIS_STARTED = "analysis.started"
    ANALYSIS_STREAMING = "analysis.streaming"
    ANALYSIS_COMPLETED = "analysis.completed"
    ERROR_OCCURRED = "error.occurred"
    RETRY_STARTED = "retry.started"
    SESSION_UPDATED = "session.updated"
    SESSION_STATUS = "session.status"
    CONNECTION_CLOSED = "connection.closed"


def format_sse_message(event: str | StreamEventType, data: dict[str, Any]) -> str:
    """
    Encode an event as an SSE frame.

    Format: "event: {type}\\ndata: {json}\\n\\n"

    Args:
        event: Event name
        data: JSON-serializable payload (datetimes are ISO encoded)

    Returns:
        str: SSE frame
    """
    event_name = event.value if isinstance(event, StreamEventType) else event
    return f"event: {event_name}\ndata: {json.dumps(jsonable_encoder(data))}\n\n"

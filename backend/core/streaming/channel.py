"""
Subscriber channels.

A channel is the transport-agnostic "writable, closeable" endpoint the
connection registry delivers to. SseChannel backs a text/event-stream
response: writes are queued without suspending and drained by the
response body iterator.

Dependencies: asyncio, backend.models.streaming
System role: Outbound event stream transport
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from backend.models.streaming import KEEP_ALIVE_COMMENT, SSE_HEADERS

logger = logging.getLogger(__name__)


class ChannelClosedError(Exception):
    """Raised when writing to or opening a channel that is already closed."""


@runtime_checkable
class Channel(Protocol):
    """A writable, closeable outbound message channel."""

    @property
    def closed(self) -> bool: ...

    def open(self) -> None:
        """Perform the transport handshake. Raises if the channel cannot be used."""
        ...

    def write(self, message: str) -> None:
        """Deliver one already-encoded message. Raises on failure."""
        ...

    def close(self) -> None: ...


class SseChannel:
    """
    Queue-backed Server-Sent Events channel.

    No flow control: a slow reader lets the queue grow without bound.
    """

    def __init__(self, heartbeat_interval: float | None = 30.0) -> None:
        """
        Initialize channel.

        Args:
            heartbeat_interval: Idle seconds before a keep-alive comment is
                emitted by stream(); None disables heartbeats
        """
        self._queue: asyncio.Queue[str | None] = asyncio.Queue()
        self._heartbeat_interval = heartbeat_interval
        self._closed = False
        self.status_code: int | None = None
        self.headers: dict[str, str] = {}

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Number of queued messages not yet read by the response."""
        return self._queue.qsize()

    def open(self) -> None:
        if self._closed:
            raise ChannelClosedError("Cannot open a closed channel")
        self.status_code = 200
        self.headers = dict(SSE_HEADERS)

    def write(self, message: str) -> None:
        if self._closed:
            raise ChannelClosedError("Cannot write to a closed channel")
        self._queue.put_nowait(message)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # Sentinel ends stream() after already-queued messages are drained
        self._queue.put_nowait(None)

    async def stream(self) -> AsyncIterator[str]:
        """
        Yield queued messages until the channel is closed.

        Emits a keep-alive comment whenever no message arrives within the
        heartbeat interval.
        """
        while True:
            try:
                if self._heartbeat_interval:
                    message = await asyncio.wait_for(self._queue.get(), self._heartbeat_interval)
                else:
                    message = await self._queue.get()
            except asyncio.TimeoutError:
                yield KEEP_ALIVE_COMMENT
                continue

            if message is None:
                return
            yield message

"""
Connection registry.

Tracks, per session id, the set of open subscriber channels and delivers
encoded event messages to them with best-effort semantics. Knows nothing
about what sessions mean; a session key without channels is simply dropped.

Dependencies: backend.core.streaming.channel, backend.models.streaming
System role: Live subscriber bookkeeping and fan-out delivery
"""

import logging
from collections.abc import Callable
from typing import Any

from backend.core.streaming.channel import Channel
from backend.models.streaming import format_sse_message

logger = logging.getLogger(__name__)

MessageFormatter = Callable[[str, dict[str, Any]], str]


class ConnectionRegistry:
    """Per-session registry of live subscriber channels."""

    def __init__(self, formatter: MessageFormatter = format_sse_message) -> None:
        """
        Initialize an empty registry.

        Args:
            formatter: Encodes (event name, payload) into the wire message
        """
        self._connections: dict[str, set[Channel]] = {}
        self._format = formatter

    def create_connection(self, session_id: str, channel: Channel) -> bool:
        """
        Register a channel for a session after a successful handshake.

        Returns:
            bool: False if the id is invalid or the handshake fails
        """
        if not isinstance(session_id, str) or not session_id:
            return False

        try:
            channel.open()
        except Exception as e:
            logger.warning(
                "Channel handshake failed",
                extra={"session_id": session_id, "error_type": type(e).__name__, "error_msg": str(e)},
            )
            return False

        self._connections.setdefault(session_id, set()).add(channel)
        logger.info(
            "Connection created",
            extra={"session_id": session_id, "connection_count": len(self._connections[session_id])},
        )
        return True

    def remove_connection(self, session_id: str, channel: Channel) -> bool:
        """
        Unregister one channel; drops the session key when its set empties.

        Returns:
            bool: True if the channel was registered
        """
        channels = self._connections.get(session_id)
        if not channels or channel not in channels:
            return False

        channels.discard(channel)
        if not channels:
            del self._connections[session_id]

        logger.info("Connection removed", extra={"session_id": session_id})
        return True

    def _deliver(self, session_id: str, channel: Channel, message: str) -> bool:
        """Write to one channel, removing it on failure."""
        if channel.closed:
            self.remove_connection(session_id, channel)
            return False
        try:
            channel.write(message)
        except Exception as e:
            logger.warning(
                "Write failed, dropping connection",
                extra={"session_id": session_id, "error_type": type(e).__name__, "error_msg": str(e)},
            )
            self.remove_connection(session_id, channel)
            return False
        return True

    def broadcast_to_session(self, session_id: str, event: str, data: dict[str, Any]) -> int:
        """
        Deliver one event to every channel registered for a session.

        A failing channel is removed and does not stop delivery to the rest.

        Returns:
            int: Number of channels the message was written to
        """
        channels = self._connections.get(session_id)
        if not channels:
            return 0

        message = self._format(event, data)
        delivered = sum(
            1 for channel in list(channels) if self._deliver(session_id, channel, message)
        )
        logger.debug(
            "Event broadcast",
            extra={"session_id": session_id, "event_type": str(event), "delivered": delivered},
        )
        return delivered

    def send_to_channel(
        self,
        session_id: str,
        channel: Channel,
        event: str,
        data: dict[str, Any],
    ) -> bool:
        """Deliver one event to a single registered channel."""
        if channel not in self._connections.get(session_id, ()):
            return False
        return self._deliver(session_id, channel, self._format(event, data))

    def close_session_connections(
        self,
        session_id: str,
        final_event: str | None = None,
        final_data: dict[str, Any] | None = None,
    ) -> int:
        """
        Close every channel of a session, optionally sending a final event first.

        Safe to call for sessions with no connections.

        Returns:
            int: Number of channels closed
        """
        channels = self._connections.pop(session_id, set())
        message = self._format(final_event, final_data or {}) if final_event else None

        for channel in channels:
            if message is not None and not channel.closed:
                try:
                    channel.write(message)
                except Exception as e:
                    logger.debug(
                        "Final message not delivered",
                        extra={"session_id": session_id, "error_type": type(e).__name__},
                    )
            self._close_channel(session_id, channel)

        if channels:
            logger.info(
                "Session connections closed",
                extra={"session_id": session_id, "closed_count": len(channels)},
            )
        return len(channels)

    @staticmethod
    def _close_channel(session_id: str, channel: Channel) -> None:
        try:
            channel.close()
        except Exception as e:
            logger.warning(
                "Channel close failed",
                extra={"session_id": session_id, "error_type": type(e).__name__, "error_msg": str(e)},
            )

    def get_connection_count(self, session_id: str) -> int:
        return len(self._connections.get(session_id, ()))

    def shutdown(self) -> int:
        """
        Close every channel of every session.

        Returns:
            int: Number of channels closed
        """
        closed = 0
        for session_id in list(self._connections):
            for channel in self._connections.pop(session_id):
                self._close_channel(session_id, channel)
                closed += 1

        logger.info("Connection registry shut down", extra={"closed_count": closed})
        return closed

    def stats(self) -> dict[str, Any]:
        return {
            "total_connections": sum(len(channels) for channels in self._connections.values()),
            "sessions_with_connections": len(self._connections),
            "connections_by_session": {
                session_id: len(channels) for session_id, channels in self._connections.items()
            },
        }

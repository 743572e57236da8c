"""Real-time event delivery: subscriber channels, registry and broadcaster."""

from .channel import Channel, ChannelClosedError, SseChannel
from .connection_registry import ConnectionRegistry
from .event_broadcaster import EventBroadcaster

__all__ = [
    "Channel",
    "ChannelClosedError",
    "ConnectionRegistry",
    "EventBroadcaster",
    "SseChannel",
]

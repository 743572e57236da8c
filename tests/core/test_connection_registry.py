"""
Test suite for ConnectionRegistry.

Tests registration, best-effort fan-out, failure pruning, session close and
shutdown.

System role: Verification of subscriber bookkeeping and delivery
"""

from backend.core.streaming import ConnectionRegistry
from tests.fakes import RecordingChannel, decode_frame


class TestConnectionRegistryRegistration:
    """Test suite for create/remove connection."""

    def test_create_connection_should_open_and_register(self, registry: ConnectionRegistry) -> None:
        """Test a successful handshake registers the channel."""
        # Arrange
        channel = RecordingChannel()

        # Act
        result = registry.create_connection("s1", channel)

        # Assert
        assert result is True
        assert channel.open_calls == 1
        assert registry.get_connection_count("s1") == 1

    def test_create_connection_should_reject_failed_handshake(self, registry: ConnectionRegistry) -> None:
        """Test a channel whose handshake raises is not registered."""
        # Arrange
        channel = RecordingChannel(fail_on_open=True)

        # Act
        result = registry.create_connection("s1", channel)

        # Assert
        assert result is False
        assert registry.get_connection_count("s1") == 0

    def test_create_connection_should_reject_invalid_id(self, registry: ConnectionRegistry) -> None:
        """Test empty or non-string ids are rejected without opening."""
        # Arrange
        channel = RecordingChannel()

        # Act & Assert
        assert registry.create_connection("", channel) is False
        assert registry.create_connection(None, channel) is False
        assert channel.open_calls == 0

    def test_remove_connection_should_drop_empty_session_key(self, registry: ConnectionRegistry) -> None:
        """Test removing the last channel removes the session entry."""
        # Arrange
        channel = RecordingChannel()
        registry.create_connection("s1", channel)

        # Act
        assert registry.remove_connection("s1", channel) is True
        assert registry.remove_connection("s1", channel) is False

        # Assert
        assert registry.stats()["sessions_with_connections"] == 0


class TestConnectionRegistryBroadcast:
    """Test suite for broadcast_to_session and send_to_channel."""

    def test_broadcast_should_reach_every_healthy_channel(self, registry: ConnectionRegistry) -> None:
        """Test one failing channel is pruned and the rest still receive."""
        # Arrange
        healthy_a = RecordingChannel()
        healthy_b = RecordingChannel()
        broken = RecordingChannel(fail_on_write=True)
        for channel in (healthy_a, broken, healthy_b):
            registry.create_connection("s1", channel)

        # Act
        delivered = registry.broadcast_to_session("s1", "analysis.started", {"status": "analyzing"})

        # Assert
        assert delivered == 2
        assert registry.get_connection_count("s1") == 2
        for channel in (healthy_a, healthy_b):
            assert channel.messages == ['event: analysis.started\ndata: {"status": "analyzing"}\n\n']

    def test_broadcast_should_skip_closed_channels(self, registry: ConnectionRegistry) -> None:
        """Test a channel closed out-of-band is removed on next delivery."""
        # Arrange
        channel = RecordingChannel()
        registry.create_connection("s1", channel)
        channel.close()

        # Act
        delivered = registry.broadcast_to_session("s1", "session.updated", {})

        # Assert
        assert delivered == 0
        assert registry.get_connection_count("s1") == 0

    def test_broadcast_should_be_noop_without_connections(self, registry: ConnectionRegistry) -> None:
        """Test broadcasting to an unknown session delivers nothing."""
        assert registry.broadcast_to_session("nobody", "session.updated", {}) == 0

    def test_broadcast_should_not_cross_sessions(self, registry: ConnectionRegistry) -> None:
        """Test events stay within their own session."""
        # Arrange
        mine = RecordingChannel()
        theirs = RecordingChannel()
        registry.create_connection("s1", mine)
        registry.create_connection("s2", theirs)

        # Act
        registry.broadcast_to_session("s1", "session.updated", {"n": 1})

        # Assert
        assert len(mine.messages) == 1
        assert theirs.messages == []

    def test_send_to_channel_should_target_one_channel(self, registry: ConnectionRegistry) -> None:
        """Test single-channel delivery leaves siblings untouched."""
        # Arrange
        target = RecordingChannel()
        sibling = RecordingChannel()
        registry.create_connection("s1", target)
        registry.create_connection("s1", sibling)

        # Act
        sent = registry.send_to_channel("s1", target, "session.status", {"status": "created"})

        # Assert
        assert sent is True
        assert decode_frame(target.messages[0]) == ("session.status", {"status": "created"})
        assert sibling.messages == []

    def test_send_to_channel_should_refuse_unregistered_channel(self, registry: ConnectionRegistry) -> None:
        """Test delivery to a channel not in the session set fails."""
        assert registry.send_to_channel("s1", RecordingChannel(), "session.status", {}) is False


class TestConnectionRegistryClose:
    """Test suite for close_session_connections and shutdown."""

    def test_close_should_send_final_event_then_close(self, registry: ConnectionRegistry) -> None:
        """Test every channel gets the final event and is closed."""
        # Arrange
        channels = [RecordingChannel(), RecordingChannel()]
        for channel in channels:
            registry.create_connection("s1", channel)

        # Act
        closed = registry.close_session_connections("s1", "connection.closed", {"message": "bye"})

        # Assert
        assert closed == 2
        assert registry.get_connection_count("s1") == 0
        for channel in channels:
            assert channel.closed is True
            assert channel.event_names() == ["connection.closed"]

    def test_close_should_be_idempotent(self, registry: ConnectionRegistry) -> None:
        """Test closing twice or closing an unknown session is safe."""
        # Arrange
        registry.create_connection("s1", RecordingChannel())

        # Act & Assert
        assert registry.close_session_connections("s1") == 1
        assert registry.close_session_connections("s1") == 0
        assert registry.close_session_connections("unknown") == 0

    def test_close_should_tolerate_failing_final_write(self, registry: ConnectionRegistry) -> None:
        """Test a broken channel is still closed when the final write fails."""
        # Arrange
        broken = RecordingChannel(fail_on_write=True)
        registry.create_connection("s1", broken)

        # Act
        closed = registry.close_session_connections("s1", "connection.closed", {})

        # Assert
        assert closed == 1
        assert broken.close_calls == 1

    def test_shutdown_should_close_everything(self, registry: ConnectionRegistry) -> None:
        """Test shutdown closes all channels across sessions."""
        # Arrange
        channels = [RecordingChannel() for _ in range(3)]
        registry.create_connection("s1", channels[0])
        registry.create_connection("s1", channels[1])
        registry.create_connection("s2", channels[2])

        # Act
        closed = registry.shutdown()

        # Assert
        assert closed == 3
        assert all(channel.closed for channel in channels)
        assert registry.stats() == {
            "total_connections": 0,
            "sessions_with_connections": 0,
            "connections_by_session": {},
        }

    def test_stats_should_report_per_session_counts(self, registry: ConnectionRegistry) -> None:
        """Test stats aggregates connection counts."""
        # Arrange
        registry.create_connection("s1", RecordingChannel())
        registry.create_connection("s1", RecordingChannel())
        registry.create_connection("s2", RecordingChannel())

        # Act
        stats = registry.stats()

        # Assert
        assert stats["total_connections"] == 3
        assert stats["sessions_with_connections"] == 2
        assert stats["connections_by_session"] == {"s1": 2, "s2": 1}

"""
Test suite for the session endpoints.

System role: Session management HTTP API verification
"""

from fastapi.testclient import TestClient

from backend.api.deps import ServiceContainer
from backend.models.session import SessionStatus
from tests.fakes import RecordingChannel


class TestSessionsRouter:
    """Test suite for /api/sessions routes."""

    def test_create_session_should_return_snapshot(self, client: TestClient) -> None:
        """Test creating a session with metadata returns it in created status."""
        # Act
        response = client.post("/api/sessions", json={"metadata": {"file_name": "cv.pdf"}})

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == SessionStatus.CREATED.value
        assert body["retry_count"] == 0
        assert body["session_id"]

    def test_create_session_should_accept_empty_body(self, client: TestClient) -> None:
        """Test metadata is optional."""
        response = client.post("/api/sessions", json={})

        assert response.status_code == 200

    def test_create_session_should_ignore_reserved_metadata(self, client: TestClient) -> None:
        """Test metadata colliding with lifecycle fields cannot corrupt the store."""
        # Act
        created = client.post(
            "/api/sessions",
            json={"metadata": {"expires_at": "soon", "status": "bogus", "retry_count": 7}},
        )
        listed = client.get("/api/sessions")
        stats = client.get("/api/sse/stats")

        # Assert
        assert created.status_code == 200
        assert created.json()["status"] == SessionStatus.CREATED.value
        assert created.json()["retry_count"] == 0
        assert listed.status_code == 200
        assert [item["session_id"] for item in listed.json()] == [created.json()["session_id"]]
        assert stats.status_code == 200
        assert stats.json()["stats"]["sessions"]["active"] == 1

    def test_list_sessions_should_return_active(self, client: TestClient, services: ServiceContainer) -> None:
        """Test listing returns every live session."""
        # Arrange
        ids = {services.store.create() for _ in range(2)}

        # Act
        response = client.get("/api/sessions")

        # Assert
        assert response.status_code == 200
        assert {item["session_id"] for item in response.json()} == ids

    def test_get_session_should_return_feedback(self, client: TestClient, services: ServiceContainer) -> None:
        """Test the snapshot exposes feedback once completed."""
        # Arrange
        session_id = services.store.create()
        services.broadcaster.analysis_completed(session_id, {"clarity": {"score": 7}})

        # Act
        response = client.get(f"/api/sessions/{session_id}")

        # Assert
        assert response.status_code == 200
        assert response.json()["feedback"] == {"clarity": {"score": 7}}
        assert response.json()["completed_at"] is not None

    def test_get_session_should_404_for_unknown(self, client: TestClient) -> None:
        """Test unknown ids return the standard error body."""
        response = client.get("/api/sessions/unknown")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": "Session not found",
            "code": "SESSION_NOT_FOUND",
            "details": {"session_id": "unknown"},
        }

    def test_delete_session_should_close_connections(
        self, client: TestClient, services: ServiceContainer
    ) -> None:
        """Test deleting a session closes its subscribers and removes it."""
        # Arrange
        session_id = services.store.create()
        channel = RecordingChannel()
        services.broadcaster.subscribe(session_id, channel)

        # Act
        response = client.delete(f"/api/sessions/{session_id}")

        # Assert
        assert response.status_code == 200
        assert response.json()["closed_connections"] == 1
        assert channel.closed is True
        assert channel.event_names()[-1] == "connection.closed"
        assert services.store.exists(session_id) is False

    def test_delete_session_should_404_for_unknown(self, client: TestClient) -> None:
        """Test deleting a missing session."""
        assert client.delete("/api/sessions/unknown").status_code == 404

    def test_update_session_should_merge_and_broadcast(
        self, client: TestClient, services: ServiceContainer
    ) -> None:
        """Test PATCH stores metadata and notifies subscribers without changing status."""
        # Arrange
        session_id = services.store.create()
        channel = RecordingChannel()
        services.broadcaster.subscribe(session_id, channel)

        # Act
        response = client.patch(
            f"/api/sessions/{session_id}",
            json={"metadata": {"target_role": "SRE", "status": "completed"}, "message": "Role set"},
        )

        # Assert
        assert response.status_code == 200
        assert response.json()["status"] == SessionStatus.CREATED.value
        assert services.store.get(session_id)["target_role"] == "SRE"
        name, data = channel.events()[-1]
        assert name == "session.updated"
        assert data["message"] == "Role set"
        assert data["session_data"]["metadata"] == {"target_role": "SRE"}

    def test_update_session_should_404_for_unknown(self, client: TestClient) -> None:
        """Test updating a missing session."""
        response = client.patch("/api/sessions/unknown", json={"metadata": {"a": 1}})

        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"

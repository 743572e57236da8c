"""
Test suite for the advanced analysis endpoint.

System role: Targeted analysis HTTP API verification
"""

from fastapi.testclient import TestClient

from backend.api.deps import ServiceContainer
from backend.models.session import SessionStatus
from tests.fakes import SAMPLE_RESUME_TEXT


class TestAdvancedAnalyze:
    """Test suite for POST /api/advanced/analyze."""

    def test_analyze_should_run_advanced_variant(self, client: TestClient, services: ServiceContainer) -> None:
        """Test the request is accepted and the session completes with the advanced variant."""
        # Arrange
        session_id = services.store.create()

        # Act
        response = client.post(
            "/api/advanced/analyze",
            json={
                "session_id": session_id,
                "resume_text": SAMPLE_RESUME_TEXT,
                "options": {"job_title": "Backend Engineer", "industry": "SaaS"},
            },
        )

        # Assert
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "session_id": session_id,
            "message": "Advanced analysis started",
            "status": "processing",
        }
        session = services.store.get(session_id)
        assert session["status"] == SessionStatus.COMPLETED.value
        assert session["analysis_type"] == "advanced"
        assert session["analysis_options"] == {"job_title": "Backend Engineer", "industry": "SaaS"}

    def test_analyze_should_404_for_unknown_session(self, client: TestClient) -> None:
        """Test an absent session is rejected before any work starts."""
        response = client.post(
            "/api/advanced/analyze",
            json={"session_id": "missing", "resume_text": SAMPLE_RESUME_TEXT},
        )

        assert response.status_code == 404
        assert response.json()["code"] == "SESSION_NOT_FOUND"

    def test_analyze_should_reject_missing_text(self, client: TestClient, services: ServiceContainer) -> None:
        """Test request validation failures use the standard error body."""
        # Arrange
        session_id = services.store.create()

        # Act
        response = client.post("/api/advanced/analyze", json={"session_id": session_id})

        # Assert
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"
        assert response.json()["success"] is False

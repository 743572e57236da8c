"""
Test suite for application wiring.

Tests health routes, exception rendering, correlation headers and the
lifespan start/stop of background services.

System role: Application bootstrap verification
"""

from fastapi import APIRouter
from fastapi.testclient import TestClient

from backend.api.deps import ServiceContainer
from backend.configs import Settings
from backend.core.exceptions import AnalysisError
from backend.main import create_app
from tests.fakes import RecordingChannel


def _app_with_failing_routes(settings: Settings, services: ServiceContainer):
    app = create_app(settings=settings, services=services)
    router = APIRouter()

    @router.get("/boom/app")
    async def app_failure() -> dict:
        raise AnalysisError("AI analysis failed: quota", {"variant": "basic"})

    @router.get("/boom/unexpected")
    async def unexpected_failure() -> dict:
        raise RuntimeError("secret internals")

    app.include_router(router)
    return app


class TestHealth:
    """Test suite for health routes."""

    def test_root_should_report_running(self, client: TestClient) -> None:
        """Test the root banner."""
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["status"] == "OK"

    def test_health_should_report_healthy(self, client: TestClient) -> None:
        """Test the API health check."""
        response = client.get("/api/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestErrorHandlers:
    """Test suite for exception rendering."""

    def test_application_error_should_render_code_and_status(
        self, settings: Settings, services: ServiceContainer
    ) -> None:
        """Test application exceptions become ErrorResponse bodies with their status."""
        # Arrange
        app = _app_with_failing_routes(settings, services)

        # Act
        with TestClient(app) as client:
            response = client.get("/boom/app")

        # Assert
        assert response.status_code == 502
        assert response.json() == {
            "success": False,
            "error": "AI analysis failed: quota",
            "code": "ANALYSIS_FAILED",
            "details": {"variant": "basic"},
        }

    def test_unexpected_error_should_not_leak_internals(
        self, settings: Settings, services: ServiceContainer
    ) -> None:
        """Test unknown faults render a generic INTERNAL_ERROR body."""
        # Arrange
        app = _app_with_failing_routes(settings, services)

        # Act
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/boom/unexpected")

        # Assert
        assert response.status_code == 500
        assert response.json()["code"] == "INTERNAL_ERROR"
        assert "secret" not in response.text


class TestMiddlewareAndLifespan:
    """Test suite for middleware and lifecycle wiring."""

    def test_correlation_id_should_be_echoed(self, client: TestClient) -> None:
        """Test a supplied correlation id is returned on the response."""
        response = client.get("/api/health", headers={"X-Correlation-ID": "req-123"})

        assert response.headers["X-Correlation-ID"] == "req-123"

    def test_correlation_id_should_be_generated(self, client: TestClient) -> None:
        """Test a correlation id is generated when absent."""
        response = client.get("/api/health")

        assert response.headers["X-Correlation-ID"]

    def test_shutdown_should_close_open_streams(self, settings: Settings, services: ServiceContainer) -> None:
        """Test leaving the lifespan closes every registered channel."""
        # Arrange
        app = create_app(settings=settings, services=services)
        channel = RecordingChannel()

        # Act
        with TestClient(app):
            session_id = services.store.create()
            services.broadcaster.subscribe(session_id, channel)

        # Assert
        assert channel.closed is True
        assert services.registry.stats()["total_connections"] == 0

    def test_create_app_should_apply_debug_and_environment(
        self, settings: Settings, services: ServiceContainer
    ) -> None:
        """Test base settings flow into the FastAPI instance and root banner."""
        # Arrange
        settings = settings.model_copy(update={"debug": True, "environment": "staging"})

        # Act
        app = create_app(settings=settings, services=services)
        with TestClient(app) as test_client:
            response = test_client.get("/")

        # Assert
        assert app.debug is True
        assert response.json()["environment"] == "staging"

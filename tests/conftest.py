"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory session store on a controllable clock, connection
registry, recording channels, fake agent and extractor, app/client
fixtures, temp file cleanup
Dependencies: pytest, fastapi
System role: Test infrastructure and fixture management
"""

import shutil
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.api.deps import ServiceContainer
from backend.application.services import AnalysisService
from backend.configs import Settings
from backend.configs.streaming import StreamingSettings
from backend.configs.uploads import UploadSettings
from backend.core.agentic_system.agent import ResumeAnalysisAgent
from backend.core.session import SessionStore
from backend.core.streaming import ConnectionRegistry, EventBroadcaster
from tests.fakes import (
    ALLOWED_ORIGIN,
    FakeClock,
    RecordingChannel,
    StaticExtractor,
    make_extraction_result,
    make_fake_agent,
)


@pytest.fixture
def clock() -> FakeClock:
    """Provide controllable clock."""
    return FakeClock()


@pytest.fixture
def store(clock: FakeClock) -> SessionStore:
    """Provide session store with 30 minute TTL on a fake clock."""
    return SessionStore(ttl_seconds=1800, clock=clock)


@pytest.fixture
def registry() -> ConnectionRegistry:
    """Provide empty connection registry."""
    return ConnectionRegistry()


@pytest.fixture
def broadcaster(store: SessionStore, registry: ConnectionRegistry) -> EventBroadcaster:
    """Provide broadcaster wired to the store and registry fixtures."""
    return EventBroadcaster(store, registry, max_retries=3)


@pytest.fixture
def channel() -> RecordingChannel:
    """Provide recording channel."""
    return RecordingChannel()


@pytest.fixture
def extractor() -> StaticExtractor:
    """Provide extractor that always succeeds with sample resume text."""
    return StaticExtractor(make_extraction_result())


@pytest.fixture
def agent() -> ResumeAnalysisAgent:
    """Provide agent streaming valid feedback JSON."""
    return make_fake_agent()


@pytest.fixture
def analysis_service(
    store: SessionStore,
    broadcaster: EventBroadcaster,
    extractor: StaticExtractor,
    agent: ResumeAnalysisAgent,
) -> AnalysisService:
    """Provide analysis service with fake collaborators."""
    return AnalysisService(
        store=store,
        broadcaster=broadcaster,
        extractor=extractor,
        agent=agent,
        max_retries=3,
    )


@pytest.fixture
def temp_dir():
    """
    Create a temporary directory for test files.

    Yields:
        Path: Path to temporary directory
    """
    temp_path = Path(tempfile.mkdtemp(prefix="resume_analyzer_test_"))
    yield temp_path

    # Cleanup
    if temp_path.exists():
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def temp_pdf_file(temp_dir: Path) -> Path:
    """
    Create a temporary PDF-like file for testing.

    Returns:
        Path: Path to temporary PDF file
    """
    temp_path = temp_dir / "resume.pdf"
    # Write minimal PDF header for testing
    temp_path.write_bytes(b"%PDF-1.4\n1 0 obj\n<< >>\nendobj\n")
    return temp_path


@pytest.fixture
def settings(temp_dir: Path) -> Settings:
    """Provide settings pointing uploads at the temp directory."""
    return Settings(
        uploads=UploadSettings(directory=str(temp_dir / "uploads")),
        streaming=StreamingSettings(allowed_origins=[ALLOWED_ORIGIN]),
    )


@pytest.fixture
def services(settings: Settings) -> ServiceContainer:
    """Provide a fully wired container with fake AI and extraction."""
    return ServiceContainer.from_settings(
        settings,
        agent=make_fake_agent(),
        extractor=StaticExtractor(make_extraction_result()),
    )


@pytest.fixture
def client(settings: Settings, services: ServiceContainer):
    """
    Provide TestClient over the full application.

    Yields:
        TestClient: Client with lifespan started
    """
    from backend.main import create_app

    app = create_app(settings=settings, services=services)
    with TestClient(app) as test_client:
        yield test_client

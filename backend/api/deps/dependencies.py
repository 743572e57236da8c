"""
Dependency injection container.

Builds the process-wide service graph once per application and exposes
FastAPI dependency functions that read it from app state.

Dependencies: backend.configs, backend.application, backend.core
System role: DI container for service injection
"""

import logging

from fastapi import Depends, Request

from backend.application.services import AnalysisService, FileCleanupService
from backend.configs import Settings
from backend.core.agentic_system.agent import ResumeAnalysisAgent
from backend.core.document_processing import PDFExtractor
from backend.core.exceptions import OriginNotAllowedError
from backend.core.session import SessionStore
from backend.core.streaming import ConnectionRegistry, EventBroadcaster

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Container for the shared service instances of one application."""

    def __init__(
        self,
        settings: Settings,
        store: SessionStore,
        registry: ConnectionRegistry,
        broadcaster: EventBroadcaster,
        analysis_service: AnalysisService,
        file_cleanup: FileCleanupService,
    ) -> None:
        self.settings = settings
        self.store = store
        self.registry = registry
        self.broadcaster = broadcaster
        self.analysis_service = analysis_service
        self.file_cleanup = file_cleanup

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        agent: ResumeAnalysisAgent | None = None,
        extractor: PDFExtractor | None = None,
    ) -> "ServiceContainer":
        """
        Wire the full service graph from settings.

        Args:
            settings: Application settings
            agent: Optional pre-built analysis agent (tests inject fakes here)
            extractor: Optional pre-built PDF extractor

        Returns:
            ServiceContainer: Wired container
        """
        store = SessionStore(ttl_seconds=settings.session.ttl_seconds)
        registry = ConnectionRegistry()
        broadcaster = EventBroadcaster(
            store,
            registry,
            max_retries=settings.session.max_retries,
        )

        if extractor is None:
            extractor = PDFExtractor(
                max_file_size=settings.uploads.max_file_size_bytes,
                min_text_length=settings.uploads.min_text_length,
            )
        if agent is None:
            agent = ResumeAnalysisAgent(
                model_id=settings.llm.model,
                api_key=settings.llm.api_key,
                temperature=settings.llm.temperature,
                top_p=settings.llm.top_p,
                top_k=settings.llm.top_k,
                max_output_tokens=settings.llm.max_output_tokens,
            )

        analysis_service = AnalysisService(
            store=store,
            broadcaster=broadcaster,
            extractor=extractor,
            agent=agent,
            max_retries=settings.session.max_retries,
        )
        file_cleanup = FileCleanupService(
            directory=settings.uploads.directory,
            retention_seconds=settings.uploads.retention_seconds,
            interval_seconds=settings.uploads.cleanup_interval_seconds,
        )
        return cls(settings, store, registry, broadcaster, analysis_service, file_cleanup)

    def start(self) -> None:
        """Start the periodic background tasks on the running loop."""
        self.store.start_cleanup(self.settings.session.sweep_interval_seconds)
        self.file_cleanup.start()
        logger.info("Background services started")

    async def stop(self) -> None:
        """Stop background tasks and close every open event stream."""
        await self.store.stop_cleanup()
        await self.file_cleanup.stop()
        closed = self.registry.shutdown()
        logger.info("Background services stopped", extra={"closed_connections": closed})


def get_services(request: Request) -> ServiceContainer:
    """
    Get the service container attached to the running application.

    Args:
        request: Current request

    Returns:
        ServiceContainer: Shared services
    """
    return request.app.state.services


def get_session_store(services: ServiceContainer = Depends(get_services)) -> SessionStore:
    return services.store


def get_broadcaster(services: ServiceContainer = Depends(get_services)) -> EventBroadcaster:
    return services.broadcaster


def get_analysis_service(services: ServiceContainer = Depends(get_services)) -> AnalysisService:
    return services.analysis_service


def verify_origin(
    request: Request,
    services: ServiceContainer = Depends(get_services),
) -> None:
    """
    Reject event stream requests from origins outside the allow-list.

    Requests without an Origin header (same-origin, curl) are allowed.

    Raises:
        OriginNotAllowedError: Origin header present and not allow-listed
    """
    origin = request.headers.get("origin")
    if origin and origin not in services.settings.streaming.allowed_origins:
        logger.warning("Rejected event stream origin", extra={"origin": origin})
        raise OriginNotAllowedError(origin)

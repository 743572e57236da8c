"""
Resume analysis orchestrator.

Drives one session through extraction and AI analysis, routing every
outcome through the event broadcaster. Pipeline entry points are meant to
run as detached background tasks: they never raise.

Also owns the retry state machine: error -> retrying -> analyzing.

Dependencies: backend.core.streaming, backend.core.document_processing,
    backend.core.agentic_system
System role: Resume analysis use case orchestration
"""

import logging
from typing import Any

from backend.core.agentic_system.agent.resume_agent import ResumeAnalysisAgent
from backend.core.document_processing.pdf_extractor import PDFExtractor
from backend.core.exceptions import (
    InvalidSessionStateError,
    MaxRetriesExceededError,
    SessionNotFoundError,
)
from backend.core.session.session_store import SessionStore
from backend.core.streaming.event_broadcaster import EventBroadcaster
from backend.models.session import SessionStatus

logger = logging.getLogger(__name__)


class AnalysisService:
    """Resume analysis pipeline and retry orchestration."""

    def __init__(
        self,
        store: SessionStore,
        broadcaster: EventBroadcaster,
        extractor: PDFExtractor,
        agent: ResumeAnalysisAgent,
        max_retries: int = 3,
    ) -> None:
        """
        Initialize analysis service.

        Args:
            store: Session store (read-only here; mutations go through the broadcaster)
            broadcaster: Lifecycle event broadcaster
            extractor: PDF text extractor
            agent: Streaming resume analysis agent
            max_retries: Retry ceiling
        """
        self.store = store
        self.broadcaster = broadcaster
        self.extractor = extractor
        self.agent = agent
        self.max_retries = max_retries

    async def process_resume(self, session_id: str, file_path: str) -> None:
        """
        Extract text from an uploaded resume, then analyze it.

        Args:
            session_id: Session ID
            file_path: Path to the uploaded PDF
        """
        logger.info(f"{__name__}:process_resume - START session_id={session_id}")
        self.broadcaster.extraction_started(session_id)

        result = await self.extractor.extract(file_path)
        if not result.success:
            self.broadcaster.error(
                session_id,
                result.error.message,
                retryable=False,
                stage="extraction",
                code=result.error.type.value,
            )
            logger.warning(
                f"{__name__}:process_resume - extraction failed",
                extra={"session_id": session_id, "extraction_error": result.error.type.value},
            )
            return

        self.broadcaster.extraction_completed(
            session_id,
            {
                "text": result.text,
                "text_length": result.metadata.text_length,
                "page_count": result.metadata.pages,
                "has_text": bool(result.text),
            },
        )
        await self.run_analysis(session_id, result.text)

    async def run_analysis(
        self,
        session_id: str,
        resume_text: str,
        variant: str = "basic",
        options: dict[str, Any] | None = None,
    ) -> None:
        """
        Stream an AI analysis, broadcasting each fragment, then the parsed feedback.

        Failures are recorded as a retryable analysis error.
        """
        self.broadcaster.analysis_started(
            session_id,
            variant if variant != "basic" else None,
            options,
        )

        full_response = ""
        fragment_count = 0
        try:
            async for fragment in self.agent.astream(resume_text, variant=variant, options=options):
                full_response += fragment
                fragment_count += 1
                self.broadcaster.analysis_streaming(
                    session_id,
                    fragment,
                    {"chunk_index": fragment_count - 1},
                )

            feedback = self.agent.parse_feedback(full_response, variant=variant)
        except Exception as e:
            logger.exception(
                f"{__name__}:run_analysis - analysis failed",
                extra={"session_id": session_id, "error_type": type(e).__name__, "error_msg": str(e)},
            )
            self.broadcaster.error(
                session_id,
                e,
                retryable=True,
                stage="analysis" if variant == "basic" else f"{variant}_analysis",
                code="ANALYSIS_FAILED",
            )
            return

        self.broadcaster.analysis_completed(
            session_id,
            feedback,
            variant if variant != "basic" else None,
        )
        logger.info(
            f"{__name__}:run_analysis - END session_id={session_id}, fragments={fragment_count}",
        )

    def request_retry(self, session_id: str, stage: str = "analysis") -> int:
        """
        Move a failed session into retrying.

        Args:
            session_id: Session ID
            stage: Stage being retried

        Returns:
            int: New retry count

        Raises:
            SessionNotFoundError: Session absent or expired
            InvalidSessionStateError: Session status is not error
            MaxRetriesExceededError: Retry would exceed the ceiling
        """
        session = self.store.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)

        if session["status"] != SessionStatus.ERROR.value:
            raise InvalidSessionStateError(session_id, session["status"], SessionStatus.ERROR.value)

        current = session.get("retry_count") or 0
        if current + 1 > self.max_retries:
            raise MaxRetriesExceededError(session_id, current, self.max_retries)

        self.broadcaster.retry_started(session_id, current + 1, stage)
        logger.info(
            "Retry initiated",
            extra={"session_id": session_id, "retry_count": current + 1},
        )
        return current + 1

    async def resume_after_retry(self, session_id: str) -> None:
        """
        Re-enter the pipeline for a session that was moved into retrying.

        Re-analyzes stored extracted text; re-runs extraction when only the
        uploaded file is available.
        """
        session = self.store.get(session_id)
        if session is None:
            logger.warning(f"{__name__}:resume_after_retry - session gone", extra={"session_id": session_id})
            return

        if session.get("extracted_text"):
            await self.run_analysis(
                session_id,
                session["extracted_text"],
                variant=session.get("analysis_type") or "basic",
                options=session.get("analysis_options"),
            )
        elif session.get("file_path"):
            await self.process_resume(session_id, session["file_path"])
        else:
            self.broadcaster.error(
                session_id,
                "No resume content available to retry",
                retryable=False,
                stage="retry",
                code="NOTHING_TO_RETRY",
            )

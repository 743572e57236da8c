"""
Resume analysis agent.

Streams resume feedback from a Gemini chat model as a lazy sequence of text
fragments and parses the accumulated output into structured feedback.
Keeps simple performance metrics across analyses.

Dependencies: langchain_google_genai, langchain_core, pydantic
System role: AI client for resume analysis
"""

import json
import logging
import time
from collections.abc import AsyncGenerator
from typing import Any

from langchain_google_genai import ChatGoogleGenerativeAI
from pydantic import ValidationError

from backend.core.agentic_system.agent.resume_agent_prompt import build_messages
from backend.core.agentic_system.agent.resume_agent_schema import (
    FALLBACK_FEEDBACK,
    AdvancedResumeFeedback,
    ResumeFeedback,
)
from backend.core.exceptions import AnalysisError

logger = logging.getLogger(__name__)

VARIANTS = ("basic", "advanced")


class ResumeAnalysisAgent:
    """Gemini-backed streaming resume reviewer."""

    def __init__(
        self,
        model=None,
        model_id: str = "gemini-1.5-flash",
        api_key: str | None = None,
        temperature: float = 0.7,
        top_p: float = 0.8,
        top_k: int = 40,
        max_output_tokens: int = 8192,
    ) -> None:
        """
        Initialize agent.

        Args:
            model: Optional pre-built chat model exposing astream(); built lazily otherwise
            model_id: Gemini model identifier
            api_key: Google API key (falls back to GOOGLE_API_KEY when None)
            temperature: Sampling temperature
            top_p: Nucleus sampling threshold
            top_k: Top-k sampling
            max_output_tokens: Response token limit
        """
        self._model = model
        self._model_id = model_id
        self._model_kwargs = {
            "temperature": temperature,
            "top_p": top_p,
            "top_k": top_k,
            "max_output_tokens": max_output_tokens,
        }
        if api_key:
            self._model_kwargs["google_api_key"] = api_key

        self._total_analyses = 0
        self._successful_analyses = 0
        self._average_response_ms = 0.0

    @property
    def model(self):
        """Chat model, created on first use."""
        if self._model is None:
            self._model = ChatGoogleGenerativeAI(model=self._model_id, **self._model_kwargs)
        return self._model

    async def astream(
        self,
        resume_text: str,
        variant: str = "basic",
        options: dict[str, Any] | None = None,
    ) -> AsyncGenerator[str, None]:
        """
        Stream analysis output fragments.

        Args:
            resume_text: Extracted resume text
            variant: "basic" or "advanced"
            options: Targeting options for the advanced variant

        Yields:
            str: Raw text fragments in generation order

        Raises:
            AnalysisError: When the upstream model call fails
        """
        messages = build_messages(resume_text, variant=variant, options=options)
        start = time.perf_counter()
        fragment_count = 0

        logger.info(
            f"{__name__}:astream - START variant={variant}, resume_len={len(resume_text)}",
        )
        try:
            async for chunk in self.model.astream(messages):
                text = self._chunk_text(chunk.content)
                if text:
                    fragment_count += 1
                    yield text
        except Exception as e:
            self._record(time.perf_counter() - start, success=False)
            logger.error(f"{__name__}:astream - FAILED: {type(e).__name__}: {e}")
            raise AnalysisError(f"AI analysis failed: {e}", {"variant": variant}) from e

        self._record(time.perf_counter() - start, success=True)
        logger.info(f"{__name__}:astream - END fragments={fragment_count}")

    @staticmethod
    def _chunk_text(content: Any) -> str:
        # Gemini may return a list of content parts instead of a string
        if isinstance(content, list):
            return "".join(
                item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else str(item))
                for item in content
            )
        return str(content) if content else ""

    def parse_feedback(self, response: str, variant: str = "basic") -> dict[str, Any]:
        """
        Parse accumulated model output into feedback.

        Takes the outermost JSON object in the response and validates it
        against the variant schema. Returns the fallback feedback on failure.
        """
        schema = AdvancedResumeFeedback if variant == "advanced" else ResumeFeedback
        start = response.find("{")
        end = response.rfind("}")
        try:
            if start == -1 or end == -1:
                raise ValueError("No valid JSON found in response")
            parsed = json.loads(response[start:end + 1])
            return schema.model_validate(parsed).model_dump(exclude_none=True)
        except (ValueError, ValidationError) as e:
            logger.warning(
                "Model output could not be parsed, using fallback feedback",
                extra={"variant": variant, "error_type": type(e).__name__, "error_msg": str(e)[:200]},
            )
            return FALLBACK_FEEDBACK.model_dump(exclude_none=True)

    def _record(self, elapsed_seconds: float, success: bool) -> None:
        self._total_analyses += 1
        if success:
            self._successful_analyses += 1
        elapsed_ms = elapsed_seconds * 1000
        self._average_response_ms += (elapsed_ms - self._average_response_ms) / self._total_analyses

    def metrics(self) -> dict[str, Any]:
        """Return performance metrics across all analyses."""
        success_rate = (
            round(self._successful_analyses / self._total_analyses * 100, 2)
            if self._total_analyses
            else 0.0
        )
        return {
            "total_analyses": self._total_analyses,
            "successful_analyses": self._successful_analyses,
            "average_response_time_ms": round(self._average_response_ms, 2),
            "success_rate": success_rate,
        }

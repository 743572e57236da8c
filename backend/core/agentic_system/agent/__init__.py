"""
Resume analysis agent module.

Provides the streaming Gemini agent that reviews resumes.

Dependencies: langchain_google_genai, langchain_core
System role: Agent module exports
"""

from backend.core.agentic_system.agent.resume_agent import ResumeAnalysisAgent
from backend.core.agentic_system.agent.resume_agent_schema import (
    AdvancedResumeFeedback,
    ResumeFeedback,
)

__all__ = ["ResumeAnalysisAgent", "ResumeFeedback", "AdvancedResumeFeedback"]

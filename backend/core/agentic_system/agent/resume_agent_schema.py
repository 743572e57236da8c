"""
Resume analysis response schemas.

Defines the structured feedback the model is asked to return, used to
validate parsed model output, plus the fallback returned when parsing fails.

Dependencies: pydantic
System role: Agent response schema definitions
"""

from typing import Any

from pydantic import BaseModel, Field


class ClarityFeedback(BaseModel):
    """Clarity and formatting assessment."""

    score: float = Field(ge=1, le=10, description="Clarity score (1-10)")
    suggestions: list[str]
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)


class GrammarFeedback(BaseModel):
    """Grammar and writing quality assessment."""

    score: float = Field(ge=1, le=10, description="Grammar score (1-10)")
    corrections: list[str]
    improvements: list[str] = Field(default_factory=list)


class SkillsFeedback(BaseModel):
    """Skills relevance assessment."""

    relevant_skills: list[str]
    missing_skills: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class Improvement(BaseModel):
    """One actionable improvement."""

    category: str = Field(description="formatting|content|skills|experience|ats")
    priority: str = Field(description="high|medium|low")
    suggestion: str
    example: str = ""
    impact: str | None = None


class ResumeFeedback(BaseModel):
    """Structured feedback for the basic analysis."""

    clarity: ClarityFeedback
    grammar: GrammarFeedback
    skills: SkillsFeedback
    improvements: list[Improvement]


class AdvancedResumeFeedback(ResumeFeedback):
    """Structured feedback for the job-targeted advanced analysis."""

    overall_score: float | None = Field(default=None, ge=1, le=10)
    ats_optimization: dict[str, Any] | None = None
    job_fit: dict[str, Any] | None = None
    experience: dict[str, Any] | None = None
    salary_estimate: dict[str, Any] | None = None
    industry_insights: dict[str, Any] | None = None


FALLBACK_FEEDBACK = ResumeFeedback(
    clarity=ClarityFeedback(
        score=5,
        suggestions=["Unable to analyze clarity - please try again"],
    ),
    grammar=GrammarFeedback(
        score=5,
        corrections=["Unable to analyze grammar - please try again"],
    ),
    skills=SkillsFeedback(
        relevant_skills=[],
        recommendations=["Unable to analyze skills - please try again"],
    ),
    improvements=[
        Improvement(
            category="content",
            priority="medium",
            suggestion="Analysis failed - please try uploading your resume again",
            example="Ensure your PDF is not password protected and contains readable text",
        )
    ],
)

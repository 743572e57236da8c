"""
Analysis request/response schemas.

Dependencies: pydantic
System role: Upload and advanced analysis API contracts
"""

from pydantic import BaseModel, Field


class AnalysisOptions(BaseModel):
    """Optional targeting context for the advanced analysis variant."""

    job_title: str | None = None
    industry: str | None = None
    experience_level: str | None = None
    job_description: str | None = None


class AdvancedAnalyzeRequest(BaseModel):
    """Request schema for an advanced analysis run."""

    session_id: str = Field(..., min_length=1)
    resume_text: str = Field(..., min_length=1, description="Plain resume text to analyze")
    options: AnalysisOptions = Field(default_factory=AnalysisOptions)


class AnalysisAcceptedResponse(BaseModel):
    """Response returned when an analysis has been queued."""

    success: bool = True
    session_id: str
    message: str
    status: str = "processing"


class UploadResponse(BaseModel):
    """Response schema for a resume upload."""

    success: bool = True
    session_id: str
    status: str
    message: str

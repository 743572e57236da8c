"""
Resume analysis prompts.

Defines the prompt templates for the basic and job-targeted advanced
resume analyses. Both ask the model for JSON only.

Dependencies: langchain_core.prompts
System role: Prompt templates for resume analysis
"""

from typing import Any

from langchain_core.messages import BaseMessage
from langchain_core.prompts import ChatPromptTemplate

SYSTEM_PROMPT = """You are an expert resume reviewer and career advisor.

## Instructions
1. Analyze only the resume text you are given
2. Be specific: every suggestion should point at concrete resume content
3. Give scores as numbers from 1 to 10
4. Respond with a single JSON object and nothing else"""

BASIC_FORMAT = """{{
  "clarity": {{
    "score": <number 1-10>,
    "suggestions": ["..."],
    "strengths": ["..."],
    "weaknesses": ["..."]
  }},
  "grammar": {{
    "score": <number 1-10>,
    "corrections": ["..."],
    "improvements": ["..."]
  }},
  "skills": {{
    "relevant_skills": ["..."],
    "missing_skills": ["..."],
    "recommendations": ["..."]
  }},
  "improvements": [
    {{
      "category": "formatting|content|skills|experience",
      "priority": "high|medium|low",
      "suggestion": "specific actionable suggestion",
      "example": "concrete example of how to implement it"
    }}
  ]
}}"""

ADVANCED_EXTRA_FORMAT = """Also include these top-level keys:
  "overall_score": <number 1-10>,
  "ats_optimization": {{"score": <1-10>, "keyword_match": <percent>, "missing_keywords": [], "suggested_keywords": [], "formatting_issues": []}},
  "job_fit": {{"score": <1-10>, "alignment": [], "gaps": [], "recommendations": []}},
  "experience": {{"relevance": <1-10>, "gaps": [], "suggestions": [], "quantified_achievements": []}},
  "salary_estimate": {{"range": "low-high", "confidence": <percent>, "factors": []}},
  "industry_insights": {{"trends": [], "recommendations": [], "competitor_analysis": []}}
Improvement items may carry an "impact" of high|medium|low."""

BASIC_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT),
    ("human", """Resume Text:
{resume_text}

Provide your analysis in this JSON structure:
""" + BASIC_FORMAT + """

Focus on:
1. Clarity and formatting - Is the resume well-structured and easy to read?
2. Grammar and writing quality - Are there grammatical errors or awkward phrasing?
3. Skills relevance - What skills are highlighted and what might be missing?
4. Specific improvements - Actionable suggestions with examples"""),
])

ADVANCED_PROMPT = ChatPromptTemplate.from_messages([
    ("system", SYSTEM_PROMPT + "\nYou also specialize in ATS optimization and job-specific targeting."),
    ("human", """Resume Text:
{resume_text}

{targeting}

Provide your analysis in this JSON structure:
""" + BASIC_FORMAT + "\n\n" + ADVANCED_EXTRA_FORMAT + """

Focus on ATS optimization, job-specific alignment, and industry relevance."""),
])

TARGETING_FIELDS = {
    "job_title": "Target Job Title",
    "industry": "Target Industry",
    "experience_level": "Experience Level",
    "job_description": "Job Description",
}


def format_targeting(options: dict[str, Any] | None) -> str:
    """Render the optional job-targeting lines of the advanced prompt."""
    options = options or {}
    lines = [
        f"{label}: {options[key]}"
        for key, label in TARGETING_FIELDS.items()
        if options.get(key)
    ]
    return "\n".join(lines) if lines else "No specific job target was provided."


def build_messages(
    resume_text: str,
    variant: str = "basic",
    options: dict[str, Any] | None = None,
) -> list[BaseMessage]:
    """
    Build chat messages for an analysis variant.

    Args:
        resume_text: Extracted resume text
        variant: "basic" or "advanced"
        options: Advanced targeting options (job_title, industry, ...)

    Returns:
        list[BaseMessage]: Messages ready for the chat model
    """
    if variant == "advanced":
        return ADVANCED_PROMPT.invoke({
            "resume_text": resume_text,
            "targeting": format_targeting(options),
        }).to_messages()
    return BASIC_PROMPT.invoke({"resume_text": resume_text}).to_messages()

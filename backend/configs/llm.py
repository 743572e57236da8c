"""
LLM configuration settings.

Settings for the Gemini chat model used to analyze resumes.

Dependencies: pydantic_settings
System role: AI client configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Gemini model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Google Generative AI API key")
    model: str = Field(default="gemini-1.5-flash", description="Gemini model identifier")
    temperature: float = Field(default=0.7, description="Sampling temperature")
    top_p: float = Field(default=0.8, description="Nucleus sampling threshold")
    top_k: int = Field(default=40, description="Top-k sampling")
    max_output_tokens: int = Field(default=8192, description="Maximum tokens per response")

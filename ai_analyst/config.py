"""Configuration management for the AI Analyst."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

try:
    load_dotenv()
except (PermissionError, OSError):  # pragma: no cover - unreadable .env
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    OPENAI_API_KEY: Optional[str] = Field(default=None, description="OpenAI API key")

    ANALYST_ENV: str = Field(default="dev", description="Environment: dev, staging, prod")
    ANALYST_MODEL: str = Field(default="gpt-4o-mini", description="Model used for insights")
    ANALYST_REQUEST_TIMEOUT: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for a single model call"
    )
    ANALYST_MAX_RESULTS: int = Field(
        default=3, ge=1, description="Documents placed in the retrieval context"
    )

    ANALYST_CORPUS_PATH: Optional[str] = Field(
        default=None, description="JSON or JSON Lines corpus file; mock corpus when unset"
    )
    ANALYST_MOCK_DOCS: int = Field(
        default=500, ge=0, description="Generated documents in the mock corpus"
    )
    ANALYST_MOCK_SEED: int = Field(default=2024, description="Seed for the mock corpus")


@lru_cache()
def get_settings() -> Settings:
    """Return the process-wide settings instance."""

    return Settings()

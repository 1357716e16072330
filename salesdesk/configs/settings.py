"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI and the workers.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from pydantic import Field

from salesdesk.configs.base import DotEnvSettings
from salesdesk.configs.celery_config import CelerySettings
from salesdesk.configs.database import DatabaseSettings
from salesdesk.configs.genai import GenAISettings
from salesdesk.configs.observability import ObservabilitySettings
from salesdesk.configs.pipeline import DocumentPipelineSettings
from salesdesk.configs.retrieval import RetrievalSettings
from salesdesk.configs.s3_documents import S3DocumentsSettings


class Settings(DotEnvSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    s3_documents: S3DocumentsSettings = Field(default_factory=S3DocumentsSettings)
    genai: GenAISettings = Field(default_factory=GenAISettings)
    pipeline: DocumentPipelineSettings = Field(default_factory=DocumentPipelineSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)
    observability: ObservabilitySettings = Field(default_factory=ObservabilitySettings)

    cors_origins: list[str] = Field(
        default=["http://localhost:3000"],
        description="Origins allowed by the CORS middleware",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from salesdesk.configs import get_settings
        settings = get_settings()
    """
    return Settings()

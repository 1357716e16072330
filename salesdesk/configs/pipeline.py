"""
Document pipeline configuration.

Chunking, truncation and concurrency limits for the ingestion stages.

Dependencies: pydantic, pydantic_settings
System role: Ingestion pipeline tuning
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DocumentPipelineSettings(BaseSettings):
    """Settings for the document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_prefix="DOC_PIPELINE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    chunk_size: int = Field(default=1500, gt=0, description="Maximum characters per chunk")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters shared by adjacent chunks")
    identification_max_chars: int = Field(
        default=15000,
        gt=0,
        description="Document prefix length sent to product identification",
    )
    analysis_max_chars: int = Field(
        default=15000,
        gt=0,
        description="Document prefix length sent to per-product analysis",
    )
    embedding_max_chars: int = Field(
        default=8000,
        gt=0,
        description="Embedding input truncation length",
    )
    entity_concurrency: int = Field(
        default=3,
        ge=1,
        description="Products analyzed concurrently within one document",
    )
    dispatcher: Literal["inprocess", "celery"] = Field(
        default="inprocess",
        description="Stage hand-off backend",
    )
    inprocess_workers: int = Field(
        default=2,
        ge=1,
        description="Consumer tasks for the in-process dispatcher",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "DocumentPipelineSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


@lru_cache
def get_pipeline_settings() -> DocumentPipelineSettings:
    """Get cached pipeline settings instance."""
    return DocumentPipelineSettings()

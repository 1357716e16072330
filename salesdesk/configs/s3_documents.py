"""
Uploaded document storage settings.

Dependencies: pydantic_settings
System role: Blob store configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class S3DocumentsSettings(BaseSettings):
    """Where raw uploads are written (S3_DOCUMENTS_* variables)."""

    model_config = SettingsConfigDict(env_prefix="S3_DOCUMENTS_", case_sensitive=False, extra="ignore")

    bucket: str = Field(default="salesdesk-dev-documents", description="Bucket new uploads are written to")
    region: str = Field(default="ap-south-1")
    endpoint_url: str | None = Field(default=None, description="S3-compatible endpoint (MinIO, localstack)")

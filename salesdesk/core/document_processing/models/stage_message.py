"""
Stage hand-off message.

A unit of work passed from one pipeline stage to the next through a
dispatcher. It carries only identifiers; each stage reloads everything
else from the database.

Dependencies: pydantic
System role: Pipeline message schema (in-process queue and Celery payload)
"""

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, Field


class PipelineStage(str, Enum):
    EXTRACTION = "extraction"
    ANALYSIS = "analysis"


class StageMessage(BaseModel):
    """Request to run one pipeline stage for one document."""

    document_id: UUID = Field(description="Uploaded document to process")
    stage: PipelineStage = Field(description="Stage to run")
    bucket: str | None = Field(default=None, description="Blob store bucket of the upload")
    storage_path: str | None = Field(default=None, description="Blob store key of the upload")
    media_type: str | None = Field(default=None, description="Declared MIME type of the upload")
    force: bool = Field(
        default=False,
        description="Run even if the document looks in flight (operator recovery)",
    )

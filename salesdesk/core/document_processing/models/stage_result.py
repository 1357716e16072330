"""
Stage result model.

Dependencies: pydantic
System role: Summary returned by each orchestrator stage
"""

from uuid import UUID

from pydantic import BaseModel, Field

from salesdesk.boundary.db.models.document_model import DocumentStatus
from salesdesk.core.document_processing.models.stage_message import PipelineStage


class StageResult(BaseModel):
    """Outcome of one orchestrator stage run."""

    document_id: UUID = Field(description="Processed document")
    stage: PipelineStage = Field(description="Stage that ran")
    status: DocumentStatus = Field(description="Document status when the stage finished")
    error_message: str | None = Field(default=None, description="Error recorded on the document")
    items_total: int = Field(default=0, description="Entities or chunks attempted")
    items_failed: int = Field(default=0, description="Entities or chunks that failed")
    next_stage_dispatched: bool = Field(default=False, description="Whether a follow-up stage was enqueued")
    processing_time_ms: float = Field(default=0.0, description="Wall-clock time of the stage")

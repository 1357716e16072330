"""
Document domain models and schemas.

Request/response schemas for upload, listing, detail and deletion.

Dependencies: pydantic
System role: Document API contracts
"""

import base64
import binascii
import re
import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from salesdesk.boundary.db.models.document_model import DocumentContext, DocumentStatus
from salesdesk.boundary.db.models.entity_model import EntityStatus
from salesdesk.core.document_processing.models.stage_message import PipelineStage
from salesdesk.core.exceptions import ValidationError

_DATA_URL = re.compile(r"^data:(?P<media>[^;,]*)(?P<b64>;base64)?,(?P<payload>.*)$", re.DOTALL)


class UploadFileItem(BaseModel):
    """One file in an upload request."""

    name: str = Field(min_length=1, description="Original filename")
    media_type: str = Field(min_length=1, description="Declared MIME type")
    content: str = Field(description="Plain text, or a data URL with base64 content")
    size_bytes: int | None = Field(default=None, ge=0, description="Declared size; computed when omitted")

    def decoded_content(self) -> bytes:
        """
        File bytes carried by the request.

        Raises:
            ValidationError: When a base64 data URL cannot be decoded
        """
        match = _DATA_URL.match(self.content)
        if match is None:
            return self.content.encode("utf-8")
        payload = match.group("payload")
        if not match.group("b64"):
            return payload.encode("utf-8")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValidationError(f"Invalid base64 content for {self.name}", field="content") from e


class UploadDocumentsRequest(BaseModel):
    """Request schema for uploading documents."""

    uploaded_by: str = Field(min_length=1, description="Uploader identifier (email)")
    files: list[UploadFileItem] = Field(min_length=1, description="Files to upload")


class DocumentResponse(BaseModel):
    """Response schema for document operations."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    owner: str
    media_type: str
    size_bytes: int
    status: DocumentStatus
    context: DocumentContext
    error_message: str | None = None
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """Document list response."""

    documents: list[DocumentResponse]
    total: int


class EntityResponse(BaseModel):
    """Analyzed product as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    position: int
    name: str
    entity_type: str | None = None
    price: str | None = None
    discounted_price: str | None = None
    features: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    rationale: str | None = None
    summary: str | None = None
    source_snippet: str | None = None
    status: EntityStatus
    error_message: str | None = None
    has_embedding: bool = False


class DocumentDetailResponse(DocumentResponse):
    """Document with its analyzed products."""

    entities: list[EntityResponse] = Field(default_factory=list)


class ReprocessRequest(BaseModel):
    """Request schema for re-running a pipeline stage."""

    stage: PipelineStage = Field(default=PipelineStage.ANALYSIS, description="Stage to run again")
    force: bool = Field(default=False, description="Run even if the document looks in flight")


class ReprocessResponse(BaseModel):
    """Acknowledgment of a re-run request."""

    document_id: uuid.UUID
    stage: PipelineStage
    dispatched: bool = True

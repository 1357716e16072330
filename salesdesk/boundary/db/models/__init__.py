"""
ORM models for uploaded documents and their derived rows.
"""

from salesdesk.boundary.db.models.chunk_model import DocumentChunkModel
from salesdesk.boundary.db.models.document_model import (
    DocumentContext,
    DocumentStatus,
    UploadedDocumentModel,
)
from salesdesk.boundary.db.models.entity_model import EntityStatus, ExtractedEntityModel

__all__ = [
    "DocumentChunkModel",
    "DocumentContext",
    "DocumentStatus",
    "EntityStatus",
    "ExtractedEntityModel",
    "UploadedDocumentModel",
]

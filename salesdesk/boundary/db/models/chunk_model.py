"""
Document chunk ORM model.

Dependencies: sqlalchemy, salesdesk.boundary.db.base
System role: Support document chunk persistence
"""

import uuid

from sqlalchemy import JSON, ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentChunkModel(UUIDMixin, TimestampMixin, Base):
    """Embedded window of a support document's text."""

    __tablename__ = "document_chunks"

    document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("uploaded_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float]] = mapped_column(JSON, nullable=False)

    document = relationship("UploadedDocumentModel", back_populates="chunks")

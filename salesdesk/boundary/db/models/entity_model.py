"""
Extracted entity ORM model.

One row per product identified in a catalog document. Each row carries
its own analysis status so a partially failed document still exposes the
products that were analyzed.

Dependencies: sqlalchemy, salesdesk.boundary.db.base
System role: Analyzed product persistence
"""

import uuid
from enum import Enum

from sqlalchemy import JSON, Enum as SAEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.boundary.db.base import Base, TimestampMixin, UUIDMixin


class EntityStatus(str, Enum):
    """Per-entity analysis lifecycle."""

    PENDING = "pending"
    ANALYZED = "analysis_complete"
    FAILED = "analysis_failed"


class ExtractedEntityModel(UUIDMixin, TimestampMixin, Base):
    """
    Structured analysis of one product mentioned in a document.

    Attributes:
        document_id: Owning uploaded document
        position: Order in which the product was identified
        name: Product name (as normalized by analysis)
        entity_type: Product category, free text
        price: Price as written in the source
        discounted_price: Sale price as written in the source
        features, pros, cons: Ordered string lists
        rationale: Why a customer should buy it
        summary: Short analysis summary
        source_snippet: Evidence quoted from the document
        embedding: Dense vector of the labeled analysis text
        status: Per-entity analysis status
        error_message: Analysis, embedding or storage error
    """

    __tablename__ = "extracted_entities"

    document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("uploaded_documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    entity_type: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price: Mapped[str | None] = mapped_column(String(255), nullable=True)
    discounted_price: Mapped[str | None] = mapped_column(String(255), nullable=True)
    features: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    pros: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    cons: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    rationale: Mapped[str | None] = mapped_column(Text, nullable=True)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_snippet: Mapped[str | None] = mapped_column(Text, nullable=True)
    embedding: Mapped[list[float] | None] = mapped_column(JSON(none_as_null=True), nullable=True)
    status: Mapped[EntityStatus] = mapped_column(
        SAEnum(EntityStatus, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EntityStatus.PENDING,
    )
    error_message: Mapped[str | None] = mapped_column(String(2048), nullable=True)

    document = relationship("UploadedDocumentModel", back_populates="entities")

    @property
    def has_embedding(self) -> bool:
        return bool(self.embedding)

    def __repr__(self) -> str:
        return f"<ExtractedEntity(id={self.id}, name={self.name!r}, status={self.status})>"

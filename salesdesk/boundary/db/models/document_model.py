"""
Uploaded document ORM model.

One row per uploaded file. The status column carries the ingestion
pipeline state; extracted_text is filled by the extraction stage and read
by the analysis stage, so each stage starts from persisted state only.

Dependencies: sqlalchemy, salesdesk.boundary.db.base
System role: Document persistence and pipeline state
"""

from enum import Enum

from sqlalchemy import BigInteger, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from salesdesk.boundary.db.base import Base, TimestampMixin, UUIDMixin


class DocumentContext(str, Enum):
    """Which assistant a document belongs to."""

    SALES_AI = "sales_ai"
    SUPPORT_AI = "support_ai"


class DocumentStatus(str, Enum):
    """Document ingestion lifecycle states."""

    UPLOADED = "uploaded"
    UPLOAD_TO_STORAGE_FAILED = "upload_to_storage_failed"

    EXTRACTION_IN_PROGRESS = "extraction_in_progress"
    TEXT_EXTRACTED = "text_extracted"
    PDF_EXTRACTION_SKIPPED = "pdf_extraction_skipped"
    UNSUPPORTED_TYPE = "unsupported_type"
    EXTRACTION_FAILED = "extraction_failed"

    PENDING_FULL_ANALYSIS = "pending_full_analysis"
    IDENTIFICATION_IN_PROGRESS = "multi_product_identification_in_progress"
    ENTITY_ANALYSIS_IN_PROGRESS = "individual_product_analysis_in_progress"
    ANALYSIS_COMPLETE_ALL = "analysis_complete_all_products"
    ANALYSIS_COMPLETE_WITH_ERRORS = "analysis_complete_with_errors"
    ANALYSIS_NO_ENTITIES_FOUND = "analysis_no_products_found"
    ANALYSIS_FAILED = "analysis_failed"
    ANALYSIS_INVOCATION_FAILED = "analysis_invocation_failed"
    ANALYSIS_SKIPPED_EMPTY_TEXT = "analysis_skipped_empty_text"

    EMBEDDING_IN_PROGRESS = "embedding_in_progress"
    EMBEDDING_COMPLETED = "embedding_completed"
    EMBEDDING_PARTIAL_SUCCESS = "embedding_partial_success"
    EMBEDDING_FAILED = "embedding_failed"
    EMBEDDING_SKIPPED_NO_CHUNKS = "embedding_skipped_no_chunks"


# A stage may not start while the document sits in one of these.
IN_FLIGHT_STATUSES = frozenset(
    {
        DocumentStatus.EXTRACTION_IN_PROGRESS,
        DocumentStatus.IDENTIFICATION_IN_PROGRESS,
        DocumentStatus.ENTITY_ANALYSIS_IN_PROGRESS,
        DocumentStatus.EMBEDDING_IN_PROGRESS,
    }
)

TERMINAL_STATUSES = frozenset(
    {
        DocumentStatus.UPLOAD_TO_STORAGE_FAILED,
        DocumentStatus.PDF_EXTRACTION_SKIPPED,
        DocumentStatus.UNSUPPORTED_TYPE,
        DocumentStatus.EXTRACTION_FAILED,
        DocumentStatus.ANALYSIS_COMPLETE_ALL,
        DocumentStatus.ANALYSIS_COMPLETE_WITH_ERRORS,
        DocumentStatus.ANALYSIS_NO_ENTITIES_FOUND,
        DocumentStatus.ANALYSIS_FAILED,
        DocumentStatus.ANALYSIS_INVOCATION_FAILED,
        DocumentStatus.ANALYSIS_SKIPPED_EMPTY_TEXT,
        DocumentStatus.EMBEDDING_COMPLETED,
        DocumentStatus.EMBEDDING_PARTIAL_SUCCESS,
        DocumentStatus.EMBEDDING_FAILED,
        DocumentStatus.EMBEDDING_SKIPPED_NO_CHUNKS,
    }
)

SEARCHABLE_STATUSES = (
    DocumentStatus.ANALYSIS_COMPLETE_ALL,
    DocumentStatus.ANALYSIS_COMPLETE_WITH_ERRORS,
    DocumentStatus.ANALYSIS_NO_ENTITIES_FOUND,
    DocumentStatus.PDF_EXTRACTION_SKIPPED,
)


class UploadedDocumentModel(UUIDMixin, TimestampMixin, Base):
    """
    Uploaded document with storage reference and processing state.

    Attributes:
        owner: Uploader identifier (email)
        name: Original filename
        media_type: Declared MIME type
        size_bytes: Declared size in bytes
        storage_bucket: Blob store bucket
        storage_path: Blob store key, None when the upload never reached storage
        status: Current pipeline state
        extracted_text: Text produced by extraction; "" is a valid value
        error_message: Last terminal or non-fatal error
        context: sales_ai (catalog) or support_ai (chat)
    """

    __tablename__ = "uploaded_documents"

    owner: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    media_type: Mapped[str] = mapped_column(String(255), nullable=False)
    size_bytes: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    storage_bucket: Mapped[str] = mapped_column(String(255), nullable=False)
    storage_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    status: Mapped[DocumentStatus] = mapped_column(
        SAEnum(DocumentStatus, native_enum=False, length=64, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentStatus.UPLOADED,
        index=True,
    )
    extracted_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    error_message: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    context: Mapped[DocumentContext] = mapped_column(
        SAEnum(DocumentContext, native_enum=False, length=32, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=DocumentContext.SALES_AI,
        index=True,
    )

    entities = relationship(
        "ExtractedEntityModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="ExtractedEntityModel.position",
    )
    chunks = relationship(
        "DocumentChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="DocumentChunkModel.chunk_index",
    )

    def __repr__(self) -> str:
        return f"<UploadedDocument(id={self.id}, name={self.name!r}, status={self.status})>"

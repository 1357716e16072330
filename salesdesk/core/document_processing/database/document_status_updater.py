"""
Document status updater.

Every pipeline transition goes through here: status and error_message
are written in the same UPDATE statement, so a document row never shows
a new status with a stale error or the reverse.

Dependencies: sqlalchemy
System role: Pipeline state persistence
"""

import logging
from typing import Collection
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.models.document_model import DocumentStatus, UploadedDocumentModel
from salesdesk.core.exceptions import DocumentNotFoundError, StageConflictError

logger = logging.getLogger(__name__)

MAX_ERROR_LENGTH = 2000

_UNSET = object()


class DocumentStatusUpdater:
    """Update document status during processing."""

    def __init__(self, db_session: AsyncSession) -> None:
        """
        Initialize with database session.

        Args:
            db_session: AsyncSession owned by the calling stage
        """
        self.db = db_session

    async def transition(
        self,
        document_id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        *,
        extracted_text=_UNSET,
        refuse_from: Collection[DocumentStatus] | None = None,
    ) -> None:
        """
        Move a document to a new status and commit.

        Args:
            document_id: Document UUID
            status: New status
            error_message: Error to record; None clears the previous one
            extracted_text: New extracted text; left untouched when not given
            refuse_from: Current statuses from which this transition is not allowed

        Raises:
            DocumentNotFoundError: No such document
            StageConflictError: Current status is in refuse_from
        """
        values = {
            "status": status,
            "error_message": error_message[:MAX_ERROR_LENGTH] if error_message else None,
        }
        if extracted_text is not _UNSET:
            values["extracted_text"] = extracted_text

        stmt = update(UploadedDocumentModel).where(UploadedDocumentModel.id == document_id)
        if refuse_from:
            stmt = stmt.where(UploadedDocumentModel.status.not_in(list(refuse_from)))
        stmt = stmt.values(**values).returning(UploadedDocumentModel.id)

        try:
            result = await self.db.execute(stmt)
            updated = result.scalar_one_or_none()
            if updated is None:
                current = await self.db.scalar(
                    select(UploadedDocumentModel.status).where(UploadedDocumentModel.id == document_id)
                )
                if current is None:
                    raise DocumentNotFoundError(document_id)
                raise StageConflictError(document_id, DocumentStatus(current).value, status.value)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:transition - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:transition - Document status updated",
            extra={
                "document_id": str(document_id),
                "status": status.value,
                "has_error": error_message is not None,
            },
        )

    async def record_error(self, document_id: UUID, error_message: str) -> None:
        """Record a non-fatal error without changing the status."""
        try:
            await self.db.execute(
                update(UploadedDocumentModel)
                .where(UploadedDocumentModel.id == document_id)
                .values(error_message=error_message[:MAX_ERROR_LENGTH])
            )
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:record_error - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

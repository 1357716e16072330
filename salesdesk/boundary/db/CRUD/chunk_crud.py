"""
CRUD operations for DocumentChunkModel.

Dependencies: sqlalchemy, salesdesk.boundary.db
System role: Support document chunk persistence queries
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.CRUD.base_crud import BaseCRUD, escape_like
from salesdesk.boundary.db.models.chunk_model import DocumentChunkModel
from salesdesk.boundary.db.models.document_model import DocumentContext, UploadedDocumentModel


class ChunkCRUD(BaseCRUD[DocumentChunkModel]):
    """CRUD operations for document chunks."""

    def __init__(self) -> None:
        super().__init__(DocumentChunkModel)

    def _scoped(self, document_id: UUID | None):
        stmt = select(DocumentChunkModel)
        if document_id is not None:
            return stmt.where(DocumentChunkModel.document_id == document_id)
        # Unscoped chunk search covers support documents only
        return stmt.join(
            UploadedDocumentModel,
            UploadedDocumentModel.id == DocumentChunkModel.document_id,
        ).where(UploadedDocumentModel.context == DocumentContext.SUPPORT_AI)

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[DocumentChunkModel]:
        """Chunks of one document in text order."""
        stmt = (
            select(DocumentChunkModel)
            .where(DocumentChunkModel.document_id == document_id)
            .order_by(DocumentChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_candidates(
        self,
        session: AsyncSession,
        document_id: UUID | None = None,
    ) -> Sequence[DocumentChunkModel]:
        """
        Chunks eligible for similarity search, oldest first.

        Args:
            session: Async database session
            document_id: Restrict to one document; None searches all support documents

        Returns:
            Sequence of DocumentChunkModel instances
        """
        stmt = self._scoped(document_id).order_by(
            DocumentChunkModel.created_at,
            DocumentChunkModel.chunk_index,
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def lexical_search(
        self,
        session: AsyncSession,
        keywords: Sequence[str],
        document_id: UUID | None = None,
        limit: int = 50,
    ) -> Sequence[DocumentChunkModel]:
        """Chunks whose content contains any keyword, case-insensitively."""
        stmt = self._scoped(document_id)
        if keywords:
            patterns = [f"%{escape_like(keyword)}%" for keyword in keywords]
            stmt = stmt.where(or_(*[DocumentChunkModel.content.ilike(pattern, escape="\\") for pattern in patterns]))
        stmt = stmt.order_by(DocumentChunkModel.created_at, DocumentChunkModel.chunk_index).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Delete every chunk of a document. Returns the number removed."""
        stmt = delete(DocumentChunkModel).where(DocumentChunkModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


chunk_crud = ChunkCRUD()

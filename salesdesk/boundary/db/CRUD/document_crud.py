"""
CRUD operations for UploadedDocumentModel.

Dependencies: sqlalchemy, salesdesk.boundary.db
System role: Uploaded document persistence queries
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.CRUD.base_crud import BaseCRUD
from salesdesk.boundary.db.models.document_model import (
    DocumentContext,
    DocumentStatus,
    UploadedDocumentModel,
)


class DocumentCRUD(BaseCRUD[UploadedDocumentModel]):
    """CRUD operations for uploaded documents."""

    def __init__(self) -> None:
        super().__init__(UploadedDocumentModel)

    async def get_by_owner(
        self,
        session: AsyncSession,
        owner: str,
        context: DocumentContext | None = None,
        limit: int = 100,
    ) -> Sequence[UploadedDocumentModel]:
        """
        List documents uploaded by one user, newest first.

        Args:
            session: Async database session
            owner: Uploader identifier
            context: Restrict to one assistant's documents
            limit: Maximum rows returned

        Returns:
            Sequence of UploadedDocumentModel instances
        """
        stmt = select(UploadedDocumentModel).where(UploadedDocumentModel.owner == owner)
        if context is not None:
            stmt = stmt.where(UploadedDocumentModel.context == context)
        stmt = stmt.order_by(UploadedDocumentModel.created_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_by_statuses(
        self,
        session: AsyncSession,
        statuses: Sequence[DocumentStatus],
        context: DocumentContext | None = None,
        limit: int = 100,
    ) -> Sequence[UploadedDocumentModel]:
        """
        List documents in any of the given statuses, newest first.

        Args:
            session: Async database session
            statuses: Accepted statuses
            context: Restrict to one assistant's documents
            limit: Maximum rows returned

        Returns:
            Sequence of UploadedDocumentModel instances
        """
        stmt = select(UploadedDocumentModel).where(UploadedDocumentModel.status.in_(statuses))
        if context is not None:
            stmt = stmt.where(UploadedDocumentModel.context == context)
        stmt = stmt.order_by(UploadedDocumentModel.created_at.desc()).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()


document_crud = DocumentCRUD()

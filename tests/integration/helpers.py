"""
Row builders for integration tests.

Dependencies: sqlalchemy, salesdesk.boundary.db
System role: Test data setup
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salesdesk.boundary.db.CRUD.document_crud import document_crud
from salesdesk.boundary.db.models.document_model import (
    DocumentContext,
    DocumentStatus,
    UploadedDocumentModel,
)

BUCKET = "test-bucket"


async def create_document(
    session_factory: async_sessionmaker[AsyncSession],
    *,
    status: DocumentStatus = DocumentStatus.UPLOADED,
    context: DocumentContext = DocumentContext.SALES_AI,
    media_type: str = "text/plain",
    storage_path: str | None = "owner/1_catalog.txt",
    extracted_text: str | None = None,
    owner: str = "owner@example.com",
) -> UploadedDocumentModel:
    """Insert and commit a document row."""
    async with session_factory() as session:
        document = await document_crud.create(
            session,
            owner=owner,
            name="catalog.txt",
            media_type=media_type,
            size_bytes=0,
            storage_bucket=BUCKET,
            storage_path=storage_path,
            status=status,
            extracted_text=extracted_text,
            context=context,
        )
        await session.commit()
    return document


async def reload_document(
    session_factory: async_sessionmaker[AsyncSession],
    document_id: UUID,
) -> UploadedDocumentModel:
    async with session_factory() as session:
        return await document_crud.get_by_id(session, document_id)

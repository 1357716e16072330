"""
CRUD operations for ExtractedEntityModel.

Includes the candidate query for similarity search and the lexical
fallback query used when the search query cannot be embedded.

Dependencies: sqlalchemy, salesdesk.boundary.db
System role: Analyzed product persistence queries
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.CRUD.base_crud import BaseCRUD, escape_like
from salesdesk.boundary.db.models.entity_model import ExtractedEntityModel


class EntityCRUD(BaseCRUD[ExtractedEntityModel]):
    """CRUD operations for extracted entities."""

    def __init__(self) -> None:
        super().__init__(ExtractedEntityModel)

    async def get_by_document(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> Sequence[ExtractedEntityModel]:
        """Entities of one document in identification order."""
        stmt = (
            select(ExtractedEntityModel)
            .where(ExtractedEntityModel.document_id == document_id)
            .order_by(ExtractedEntityModel.position, ExtractedEntityModel.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def get_embedded_candidates(
        self,
        session: AsyncSession,
        document_id: UUID | None = None,
        type_pattern: str | None = None,
    ) -> Sequence[ExtractedEntityModel]:
        """
        Entities that carry an embedding, oldest first.

        The ordering is the tie-break for equal similarity scores, so
        callers must rank with a stable sort.

        Args:
            session: Async database session
            document_id: Restrict to one document
            type_pattern: Case-insensitive substring the entity type must contain

        Returns:
            Sequence of ExtractedEntityModel instances
        """
        stmt = select(ExtractedEntityModel).where(ExtractedEntityModel.embedding.is_not(None))
        if document_id is not None:
            stmt = stmt.where(ExtractedEntityModel.document_id == document_id)
        if type_pattern:
            stmt = stmt.where(
                ExtractedEntityModel.entity_type.ilike(f"%{escape_like(type_pattern)}%", escape="\\")
            )
        stmt = stmt.order_by(
            ExtractedEntityModel.created_at,
            ExtractedEntityModel.position,
        )
        result = await session.execute(stmt)
        # JSON null and SQL NULL both mean "no embedding"
        return [entity for entity in result.scalars().all() if entity.embedding]

    async def lexical_search(
        self,
        session: AsyncSession,
        keywords: Sequence[str],
        document_id: UUID | None = None,
        type_pattern: str | None = None,
        limit: int = 50,
    ) -> Sequence[ExtractedEntityModel]:
        """
        Case-insensitive substring match on name, summary and type.

        A row matches when any keyword occurs in any of the three fields.
        The type pattern, when given, must also match.

        Args:
            session: Async database session
            keywords: Terms to look for; empty means no keyword condition
            document_id: Restrict to one document
            type_pattern: Case-insensitive substring the entity type must contain
            limit: Maximum rows returned

        Returns:
            Matching entities, oldest first
        """
        conditions = []
        if document_id is not None:
            conditions.append(ExtractedEntityModel.document_id == document_id)
        if type_pattern:
            conditions.append(
                ExtractedEntityModel.entity_type.ilike(f"%{escape_like(type_pattern)}%", escape="\\")
            )
        if keywords:
            keyword_matches = []
            for keyword in keywords:
                pattern = f"%{escape_like(keyword)}%"
                keyword_matches.extend(
                    [
                        ExtractedEntityModel.name.ilike(pattern, escape="\\"),
                        ExtractedEntityModel.summary.ilike(pattern, escape="\\"),
                        ExtractedEntityModel.entity_type.ilike(pattern, escape="\\"),
                    ]
                )
            conditions.append(or_(*keyword_matches))

        stmt = select(ExtractedEntityModel)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(ExtractedEntityModel.created_at, ExtractedEntityModel.position).limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Delete every entity of a document. Returns the number removed."""
        stmt = delete(ExtractedEntityModel).where(ExtractedEntityModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


entity_crud = EntityCRUD()

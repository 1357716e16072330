"""
Generic CRUD operations shared by the document, entity and chunk
repositories.

None of these methods commit; the calling service or pipeline stage owns
the transaction.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards; use with `escape="\\\\"`."""
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class BaseCRUD(Generic[ModelT]):
    """Primary-key operations for one model class."""

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert a row and flush it so generated ids and timestamps are loaded.

        Args:
            session: Async database session
            **values: Column values

        Returns:
            The persisted instance
        """
        instance = self.model(**values)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_id(self, session: AsyncSession, id: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def update_by_id(self, session: AsyncSession, id: UUID, **values) -> ModelT | None:
        """
        Update columns of one row.

        Returns:
            The updated instance, or None when no row has this id
        """
        stmt = update(self.model).where(self.model.id == id).values(**values).returning(self.model)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, id: UUID) -> bool:
        """Delete one row. Returns False when it did not exist."""
        result = await session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0

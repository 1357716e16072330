"""
Tests for model-specific CRUD queries.

System role: Verification of listing, filtering and lexical queries
"""

import pytest

from salesdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from salesdesk.boundary.db.CRUD.document_crud import document_crud
from salesdesk.boundary.db.CRUD.entity_crud import entity_crud
from salesdesk.boundary.db.models.document_model import (
    SEARCHABLE_STATUSES,
    DocumentContext,
    DocumentStatus,
)
from tests.integration.helpers import create_document


class TestDocumentCRUD:
    """Test suite for DocumentCRUD listing queries."""

    @pytest.mark.asyncio
    async def test_get_by_owner_filters_owner_and_context(self, session_factory) -> None:
        # Arrange
        mine = await create_document(session_factory, owner="a@example.com")
        await create_document(session_factory, owner="a@example.com", context=DocumentContext.SUPPORT_AI)
        await create_document(session_factory, owner="b@example.com")

        # Act
        async with session_factory() as session:
            documents = await document_crud.get_by_owner(
                session, "a@example.com", context=DocumentContext.SALES_AI
            )

        # Assert
        assert [document.id for document in documents] == [mine.id]

    @pytest.mark.asyncio
    async def test_get_by_owner_newest_first(self, session_factory) -> None:
        first = await create_document(session_factory)
        second = await create_document(session_factory)

        async with session_factory() as session:
            documents = await document_crud.get_by_owner(session, "owner@example.com")

        assert [document.id for document in documents] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_get_by_statuses_returns_searchable_only(self, session_factory) -> None:
        complete = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        await create_document(session_factory, status=DocumentStatus.EXTRACTION_IN_PROGRESS)
        await create_document(session_factory, status=DocumentStatus.ANALYSIS_FAILED)

        async with session_factory() as session:
            documents = await document_crud.get_by_statuses(
                session, SEARCHABLE_STATUSES, context=DocumentContext.SALES_AI
            )

        assert [document.id for document in documents] == [complete.id]


class TestEntityCRUD:
    """Test suite for EntityCRUD search queries."""

    @pytest.mark.asyncio
    async def test_embedded_candidates_skip_missing_vectors(self, session_factory) -> None:
        # Arrange
        document = await create_document(session_factory)
        async with session_factory() as session:
            await entity_crud.create(session, document_id=document.id, name="With", embedding=[1.0, 0.0])
            await entity_crud.create(session, document_id=document.id, name="Without", embedding=None)
            await entity_crud.create(session, document_id=document.id, name="Empty", embedding=[])
            await session.commit()

        # Act
        async with session_factory() as session:
            candidates = await entity_crud.get_embedded_candidates(session, document_id=document.id)

        # Assert
        assert [entity.name for entity in candidates] == ["With"]

    @pytest.mark.asyncio
    async def test_lexical_search_treats_wildcards_literally(self, session_factory) -> None:
        document = await create_document(session_factory)
        async with session_factory() as session:
            await entity_crud.create(session, document_id=document.id, name="100% Cotton Shirt")
            await entity_crud.create(session, document_id=document.id, name="1000 Thread Sheets")
            await session.commit()

        async with session_factory() as session:
            matches = await entity_crud.lexical_search(session, ["100%"], document_id=document.id)

        assert [entity.name for entity in matches] == ["100% Cotton Shirt"]

    @pytest.mark.asyncio
    async def test_lexical_search_requires_type_pattern(self, session_factory) -> None:
        document = await create_document(session_factory)
        async with session_factory() as session:
            await entity_crud.create(
                session, document_id=document.id, name="Pro Phone", entity_type="Smartphone"
            )
            await entity_crud.create(session, document_id=document.id, name="Pro Book", entity_type="Laptop")
            await session.commit()

        async with session_factory() as session:
            matches = await entity_crud.lexical_search(
                session, ["pro"], document_id=document.id, type_pattern="laptop"
            )

        assert [entity.name for entity in matches] == ["Pro Book"]


class TestChunkCRUD:
    """Test suite for ChunkCRUD lexical queries."""

    @pytest.mark.asyncio
    async def test_lexical_search_treats_wildcards_literally(self, session_factory) -> None:
        # Arrange
        document = await create_document(session_factory, context=DocumentContext.SUPPORT_AI)
        async with session_factory() as session:
            await chunk_crud.create(
                session, document_id=document.id, chunk_index=0, content="Use code SAVE_10 at checkout", embedding=[0.1]
            )
            await chunk_crud.create(
                session, document_id=document.id, chunk_index=1, content="Use code SAVEX10 at checkout", embedding=[0.1]
            )
            await chunk_crud.create(
                session, document_id=document.id, chunk_index=2, content="Refunds cover 100% of the price", embedding=[0.1]
            )
            await session.commit()

        # Act
        async with session_factory() as session:
            underscore = await chunk_crud.lexical_search(session, ["save_10"])
            percent = await chunk_crud.lexical_search(session, ["100%"], document_id=document.id)

        # Assert
        assert [chunk.chunk_index for chunk in underscore] == [0]
        assert [chunk.chunk_index for chunk in percent] == [2]

"""
Tests for RetrievalEngine over stored products and chunks.

System role: Verification of vector ranking, filters and lexical fallback
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from salesdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from salesdesk.boundary.db.CRUD.entity_crud import entity_crud
from salesdesk.boundary.db.models.document_model import DocumentContext, DocumentStatus
from salesdesk.boundary.db.models.entity_model import EntityStatus
from salesdesk.configs.retrieval import RetrievalSettings
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.exceptions import ValidationError
from salesdesk.core.retrieval.retrieval_engine import RetrievalEngine, SearchStrategy
from tests.fakes import FakeEmbeddings
from tests.integration.helpers import create_document

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


async def add_entity(session_factory, document_id, position, name, entity_type, summary, embedding, created_at=T0):
    async with session_factory() as session:
        entity = await entity_crud.create(
            session,
            document_id=document_id,
            position=position,
            name=name,
            entity_type=entity_type,
            summary=summary,
            embedding=embedding,
            status=EntityStatus.ANALYZED,
            created_at=created_at,
        )
        await session.commit()
    return entity


async def add_chunk(session_factory, document_id, index, content):
    async with session_factory() as session:
        await chunk_crud.create(
            session,
            document_id=document_id,
            chunk_index=index,
            content=content,
            embedding=FakeEmbeddings().embed_query(content),
        )
        await session.commit()


@pytest.fixture
def engine(fake_embeddings) -> RetrievalEngine:
    return RetrievalEngine(EmbeddingTask(fake_embeddings), RetrievalSettings(max_match_count=5))


@pytest.fixture
def failing_engine() -> RetrievalEngine:
    return RetrievalEngine(EmbeddingTask(FakeEmbeddings(fail_on=lambda text: True)))


@pytest_asyncio.fixture
async def catalog(session_factory):
    """One catalog with a phone, a laptop and an unembedded product."""
    document = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
    embed = FakeEmbeddings().embed_query
    await add_entity(session_factory, document.id, 0, "Phone X1", "Smartphone", "Camera phone", embed("camera battery"))
    await add_entity(session_factory, document.id, 1, "Laptop Pro", "Laptop", "Light laptop", embed("keyboard battery"))
    await add_entity(session_factory, document.id, 2, "Mystery Box", "Gadget", "Unknown phone", None)
    return document


class TestSearchEntities:
    """Test suite for RetrievalEngine.search_entities()."""

    @pytest.mark.asyncio
    async def test_best_match_first(self, session_factory, engine, catalog) -> None:
        # Act
        async with session_factory() as session:
            response = await engine.search_entities(session, "camera battery", document_id=catalog.id, threshold=0.0)

        # Assert
        assert response.strategy is SearchStrategy.VECTOR
        assert [match.name for match in response.results] == ["Phone X1", "Laptop Pro"]
        assert response.results[0].similarity > response.results[1].similarity

    @pytest.mark.asyncio
    async def test_threshold_excludes_weak_matches(self, session_factory, engine, catalog) -> None:
        async with session_factory() as session:
            response = await engine.search_entities(session, "camera battery", document_id=catalog.id, threshold=0.6)

        assert [match.name for match in response.results] == ["Phone X1"]

    @pytest.mark.asyncio
    async def test_products_without_embedding_are_not_ranked(self, session_factory, engine, catalog) -> None:
        async with session_factory() as session:
            response = await engine.search_entities(session, "camera", threshold=-1.0)

        assert "Mystery Box" not in [match.name for match in response.results]

    @pytest.mark.asyncio
    async def test_category_filters_product_type(self, session_factory, engine, catalog) -> None:
        async with session_factory() as session:
            response = await engine.search_entities(session, "laptops with camera", threshold=0.0)

        assert response.parsed_query.category == "laptops"
        assert [match.name for match in response.results] == ["Laptop Pro"]

    @pytest.mark.asyncio
    async def test_scope_excludes_other_documents(self, session_factory, engine, catalog) -> None:
        other = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        await add_entity(
            session_factory, other.id, 0, "Phone Y2", "Smartphone", "Other phone",
            FakeEmbeddings().embed_query("camera"),
        )

        async with session_factory() as session:
            response = await engine.search_entities(session, "camera", document_id=other.id, threshold=0.0)

        assert [match.name for match in response.results] == ["Phone Y2"]

    @pytest.mark.asyncio
    async def test_equal_scores_ordered_oldest_first(self, session_factory, engine) -> None:
        # Arrange
        document = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        vector = FakeEmbeddings().embed_query("camera")
        for offset, name in [(2, "Newest"), (0, "Oldest"), (1, "Middle")]:
            await add_entity(
                session_factory, document.id, 0, name, "Smartphone", "", vector, T0 + timedelta(minutes=offset)
            )

        # Act
        async with session_factory() as session:
            response = await engine.search_entities(session, "camera", document_id=document.id, threshold=0.0)

        # Assert
        assert [match.name for match in response.results] == ["Oldest", "Middle", "Newest"]

    @pytest.mark.asyncio
    async def test_match_count_is_clamped(self, session_factory, engine) -> None:
        document = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        vector = FakeEmbeddings().embed_query("camera")
        for position in range(8):
            await add_entity(session_factory, document.id, position, f"Phone {position}", "Smartphone", "", vector)

        async with session_factory() as session:
            response = await engine.search_entities(
                session, "camera", document_id=document.id, match_count=100, threshold=0.0
            )

        assert len(response.results) == 5

    @pytest.mark.asyncio
    async def test_lexical_fallback_when_query_cannot_be_embedded(
        self, session_factory, failing_engine, catalog
    ) -> None:
        # Act
        async with session_factory() as session:
            response = await failing_engine.search_entities(session, "light laptop", document_id=catalog.id)

        # Assert
        assert response.strategy is SearchStrategy.LEXICAL
        assert response.error is None
        assert [match.name for match in response.results] == ["Laptop Pro"]
        assert response.results[0].similarity is None

    @pytest.mark.asyncio
    async def test_lexical_fallback_ignores_case(self, session_factory, failing_engine, catalog) -> None:
        async with session_factory() as session:
            response = await failing_engine.search_entities(session, "MYSTERY", document_id=catalog.id)

        assert [match.name for match in response.results] == ["Mystery Box"]

    @pytest.mark.asyncio
    async def test_dimension_mismatch_is_reported_not_raised(self, session_factory, catalog) -> None:
        engine = RetrievalEngine(EmbeddingTask(FakeEmbeddings(dimension=4)))

        async with session_factory() as session:
            response = await engine.search_entities(session, "camera", document_id=catalog.id)

        assert response.results == []
        assert response.error.startswith("Search failed:")

    @pytest.mark.asyncio
    async def test_blank_query_is_rejected(self, session_factory, engine) -> None:
        async with session_factory() as session:
            with pytest.raises(ValidationError):
                await engine.search_entities(session, "   ")


class TestSearchChunks:
    """Test suite for RetrievalEngine.search_chunks()."""

    @pytest_asyncio.fixture
    async def support_documents(self, session_factory):
        support = await create_document(
            session_factory, status=DocumentStatus.EMBEDDING_COMPLETED, context=DocumentContext.SUPPORT_AI
        )
        catalog = await create_document(session_factory, status=DocumentStatus.ANALYSIS_COMPLETE_ALL)
        await add_chunk(session_factory, support.id, 0, "Reset your password from the security page.")
        await add_chunk(session_factory, support.id, 1, "Refund requests are handled within 14 days.")
        await add_chunk(session_factory, catalog.id, 0, "Password protected phone catalog.")
        return support, catalog

    @pytest.mark.asyncio
    async def test_unscoped_search_covers_support_documents_only(
        self, session_factory, engine, support_documents
    ) -> None:
        # Arrange
        support, _ = support_documents

        # Act
        async with session_factory() as session:
            response = await engine.search_chunks(session, "How do I reset my password?", threshold=0.5)

        # Assert
        assert [(match.document_id, match.chunk_index) for match in response.results] == [(support.id, 0)]

    @pytest.mark.asyncio
    async def test_scoped_search(self, session_factory, engine, support_documents) -> None:
        _, catalog = support_documents

        async with session_factory() as session:
            response = await engine.search_chunks(session, "password", document_id=catalog.id, threshold=0.5)

        assert [match.content for match in response.results] == ["Password protected phone catalog."]

    @pytest.mark.asyncio
    async def test_lexical_fallback(self, session_factory, failing_engine, support_documents) -> None:
        async with session_factory() as session:
            response = await failing_engine.search_chunks(session, "refund timeline")

        assert response.strategy is SearchStrategy.LEXICAL
        assert [match.chunk_index for match in response.results] == [1]


class TestClampCount:
    @pytest.mark.parametrize("requested, expected", [(None, 3), (0, 3), (2, 2), (99, 5)])
    def test_bounds(self, engine, requested, expected) -> None:
        assert engine.clamp_count(requested, default=3) == expected

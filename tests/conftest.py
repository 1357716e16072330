"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, scripted generative model, keyword
embeddings, in-memory blob store, recording dispatchers and an
orchestrator wired to all of them.

Dependencies: pytest, pytest_asyncio, sqlalchemy, aiosqlite, langchain_core
System role: Test infrastructure and fixture management
"""

import uuid

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from salesdesk.boundary.db.base import Base
from salesdesk.boundary.db.models import (  # noqa: F401 - registers tables
    DocumentChunkModel,
    ExtractedEntityModel,
    UploadedDocumentModel,
)
from salesdesk.core.document_processing.orchestrator import IngestionOrchestrator
from salesdesk.core.document_processing.tasks.chunking_task import ChunkingTask
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.document_processing.tasks.entity_analysis_task import EntityAnalysisTask
from salesdesk.core.document_processing.tasks.entity_identification_task import (
    EntityIdentificationTask,
)
from salesdesk.core.document_processing.tasks.text_extraction_task import TextExtractionTask
from salesdesk.core.exceptions import GenerationError
from tests.fakes import (
    FakeEmbeddings,
    FakeGenerator,
    InMemoryBlobStore,
    RecordingDispatcher,
)


@pytest_asyncio.fixture
async def test_engine():
    """
    In-memory SQLite async engine with all tables created.

    StaticPool keeps a single connection so every session sees the same
    database. Sessions share that connection's transaction: commit before
    handing control to code that opens its own sessions.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_async_db(session_factory):
    """
    Test database session.

    Yields:
        AsyncSession: Session on the in-memory database
    """
    async with session_factory() as session:
        yield session


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def identification_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def analysis_generator() -> FakeGenerator:
    return FakeGenerator(default="{}")


@pytest.fixture
def build_orchestrator(
    session_factory,
    blob_store,
    dispatcher,
    fake_embeddings,
    identification_generator,
    analysis_generator,
):
    """
    Factory for an orchestrator wired to the test fakes.

    Keyword arguments replace individual collaborators.
    """

    def _build(**overrides) -> IngestionOrchestrator:
        collaborators = dict(
            session_factory=session_factory,
            blob_store=blob_store,
            dispatcher=dispatcher,
            extractor=TextExtractionTask(),
            chunker=ChunkingTask(chunk_size=200, chunk_overlap=40),
            identifier=EntityIdentificationTask(identification_generator),
            analyzer=EntityAnalysisTask(analysis_generator),
            embedder=EmbeddingTask(fake_embeddings),
            entity_concurrency=2,
        )
        collaborators.update(overrides)
        return IngestionOrchestrator(**collaborators)

    return _build


@pytest.fixture
def generation_error() -> GenerationError:
    return GenerationError("Generative model call failed: 503 Service Unavailable")


@pytest.fixture
def document_id() -> uuid.UUID:
    """Generate a test document ID."""
    return uuid.uuid4()

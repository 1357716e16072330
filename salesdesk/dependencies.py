"""
Dependency injection container.

Builds the long-lived clients (blob store, Gemini models, dispatcher,
orchestrator, retrieval engine) once per process from Settings. Both the
API and the Celery workers get their collaborators from here; nothing
else constructs clients.

Dependencies: salesdesk.configs, salesdesk.boundary, salesdesk.core
System role: Process-level wiring of pipeline and retrieval components
"""

import logging
from functools import cached_property

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salesdesk.boundary.db.connection import get_async_session_factory
from salesdesk.boundary.llm.gemini import ChatModelGenerator, build_chat_model, build_embeddings
from salesdesk.boundary.storage.blob_store import BlobStore
from salesdesk.boundary.storage.s3_blob_store import S3BlobStore
from salesdesk.configs.settings import Settings
from salesdesk.core.document_processing.dispatch import (
    CeleryDispatcher,
    InProcessDispatcher,
    StageDispatcher,
)
from salesdesk.core.document_processing.orchestrator import IngestionOrchestrator
from salesdesk.core.document_processing.tasks.chunking_task import ChunkingTask
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.document_processing.tasks.entity_analysis_task import EntityAnalysisTask
from salesdesk.core.document_processing.tasks.entity_identification_task import (
    EntityIdentificationTask,
)
from salesdesk.core.document_processing.tasks.text_extraction_task import TextExtractionTask
from salesdesk.core.retrieval.retrieval_engine import RetrievalEngine

logger = logging.getLogger(__name__)


class ServiceContainer:
    """Lazily constructed, process-wide collaborators."""

    def __init__(
        self,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        dispatcher: StageDispatcher | None = None,
    ) -> None:
        """
        Args:
            settings: Application settings
            session_factory: Session factory for pipeline stages (default engine when None)
            dispatcher: Stage dispatcher override (chosen from settings when None)
        """
        self.settings = settings
        self._session_factory = session_factory
        self._dispatcher = dispatcher

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_async_session_factory()
        return self._session_factory

    @cached_property
    def blob_store(self) -> BlobStore:
        s3 = self.settings.s3_documents
        return S3BlobStore(region=s3.region, endpoint_url=s3.endpoint_url)

    @cached_property
    def embedder(self) -> EmbeddingTask:
        return EmbeddingTask(
            build_embeddings(self.settings.genai),
            max_input_chars=self.settings.pipeline.embedding_max_chars,
            expected_dimension=self.settings.genai.embedding_dimension,
        )

    @cached_property
    def identification_generator(self) -> ChatModelGenerator:
        genai = self.settings.genai
        return ChatModelGenerator(build_chat_model(genai, genai.identification_temperature), name="identification")

    @cached_property
    def analysis_generator(self) -> ChatModelGenerator:
        genai = self.settings.genai
        return ChatModelGenerator(build_chat_model(genai, genai.analysis_temperature), name="analysis")

    @cached_property
    def chat_generator(self) -> ChatModelGenerator:
        genai = self.settings.genai
        return ChatModelGenerator(build_chat_model(genai, genai.chat_temperature), name="chat")

    @property
    def dispatcher(self) -> StageDispatcher:
        if self._dispatcher is None:
            pipeline = self.settings.pipeline
            if pipeline.dispatcher == "celery":
                from salesdesk.workers import celery_app

                self._dispatcher = CeleryDispatcher(celery_app, self.settings.celery)
            else:
                self._dispatcher = InProcessDispatcher(workers=pipeline.inprocess_workers)
            logger.info(f"{__name__}:dispatcher - Using {pipeline.dispatcher} stage dispatcher")
        return self._dispatcher

    @cached_property
    def orchestrator(self) -> IngestionOrchestrator:
        pipeline = self.settings.pipeline
        orchestrator = IngestionOrchestrator(
            session_factory=self.session_factory,
            blob_store=self.blob_store,
            dispatcher=self.dispatcher,
            extractor=TextExtractionTask(),
            chunker=ChunkingTask(pipeline.chunk_size, pipeline.chunk_overlap),
            identifier=EntityIdentificationTask(
                self.identification_generator, max_input_chars=pipeline.identification_max_chars
            ),
            analyzer=EntityAnalysisTask(self.analysis_generator, max_input_chars=pipeline.analysis_max_chars),
            embedder=self.embedder,
            entity_concurrency=pipeline.entity_concurrency,
        )
        if isinstance(self.dispatcher, InProcessDispatcher):
            self.dispatcher.bind(orchestrator.handle)
        return orchestrator

    @cached_property
    def retrieval_engine(self) -> RetrievalEngine:
        return RetrievalEngine(self.embedder, self.settings.retrieval)

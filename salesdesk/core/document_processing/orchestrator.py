"""
Ingestion orchestrator.

Drives one document through the pipeline, one stage per call:

    extraction:  uploaded -> extraction_in_progress -> text_extracted
                 -> pending_full_analysis (analysis stage dispatched)
    analysis:    catalog documents  -> identification -> per-product analysis
                 support documents  -> chunking -> per-chunk embedding

Each stage starts from persisted state only, writes every transition
through DocumentStatusUpdater, and always leaves the document in a
terminal status or hands it to the next stage. Unexpected errors are
caught at the stage entry point and recorded as a failed status.

Dependencies: sqlalchemy, salesdesk.core.document_processing.tasks
System role: Pipeline state machine for uploaded documents
"""

import asyncio
import logging
import time
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from salesdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from salesdesk.boundary.db.CRUD.document_crud import document_crud
from salesdesk.boundary.db.CRUD.entity_crud import entity_crud
from salesdesk.boundary.db.models.document_model import (
    IN_FLIGHT_STATUSES,
    DocumentContext,
    DocumentStatus,
    UploadedDocumentModel,
)
from salesdesk.boundary.db.models.entity_model import EntityStatus
from salesdesk.boundary.storage.blob_store import BlobStore
from salesdesk.core.document_processing.database.document_status_updater import (
    MAX_ERROR_LENGTH,
    DocumentStatusUpdater,
)
from salesdesk.core.document_processing.dispatch import StageDispatcher
from salesdesk.core.document_processing.models.entity_analysis import EntityAnalysis
from salesdesk.core.document_processing.models.extraction import ExtractionKind
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.document_processing.models.stage_result import StageResult
from salesdesk.core.document_processing.tasks.chunking_task import ChunkingTask
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.document_processing.tasks.entity_analysis_task import EntityAnalysisTask
from salesdesk.core.document_processing.tasks.entity_identification_task import (
    EntityIdentificationTask,
)
from salesdesk.core.document_processing.tasks.text_extraction_task import TextExtractionTask
from salesdesk.core.exceptions import (
    BlobStoreError,
    DispatchError,
    DocumentNotFoundError,
    SalesDeskException,
    StageConflictError,
)
from salesdesk.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

EXTRACTION_REFUSED_FROM = IN_FLIGHT_STATUSES | {DocumentStatus.PENDING_FULL_ANALYSIS}
EMPTY_TEXT_MESSAGE = "Extracted text was empty."
NO_TEXT_MESSAGE = "Document has no extracted text; run extraction first."


def error_text(exc: BaseException) -> str:
    """Message suitable for persisting on a row."""
    if isinstance(exc, SalesDeskException):
        return exc.message
    return str(exc) or type(exc).__name__


class IngestionOrchestrator:
    """Run extraction and analysis stages for uploaded documents."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        blob_store: BlobStore,
        dispatcher: StageDispatcher,
        extractor: TextExtractionTask,
        chunker: ChunkingTask,
        identifier: EntityIdentificationTask,
        analyzer: EntityAnalysisTask,
        embedder: EmbeddingTask,
        entity_concurrency: int = 3,
    ) -> None:
        """
        Initialize orchestrator with its collaborators.

        Args:
            session_factory: Opens a short-lived session per database write
            blob_store: Source of uploaded file bytes
            dispatcher: Enqueues the follow-up stage
            extractor: Bytes to text
            chunker: Text to chunks (support documents)
            identifier: Text to product names (catalog documents)
            analyzer: Product name to structured record
            embedder: Text to vector
            entity_concurrency: Products or chunks processed at once per document
        """
        self._session_factory = session_factory
        self._blob_store = blob_store
        self._dispatcher = dispatcher
        self._extractor = extractor
        self._chunker = chunker
        self._identifier = identifier
        self._analyzer = analyzer
        self._embedder = embedder
        self._entity_concurrency = entity_concurrency
        # Serializes row writes of concurrent per-entity work; never held across model calls
        self._write_lock = asyncio.Lock()

    async def handle(self, message: StageMessage) -> StageResult:
        """Run the stage a message asks for. Entry point for dispatcher consumers."""
        if message.stage is PipelineStage.EXTRACTION:
            return await self.run_extraction(message.document_id, force=message.force, hint=message)
        return await self.run_analysis(message.document_id, force=message.force)

    async def run_extraction(
        self,
        document_id: UUID,
        force: bool = False,
        hint: StageMessage | None = None,
    ) -> StageResult:
        """
        Extract text from an uploaded document and hand it to analysis.

        Args:
            document_id: Document to process
            force: Start even when the document looks in flight
            hint: Stage message; its storage fields fill gaps in the row

        Returns:
            StageResult: Final status of this stage

        Raises:
            DocumentNotFoundError: No such document
            StageConflictError: Document is in flight and force is False
        """
        started = time.perf_counter()
        document = await self._load(document_id)
        try:
            result = await self._extract(document, force, hint)
        except StageConflictError:
            raise
        except Exception as e:
            result = await self._fail_stage(
                document_id, PipelineStage.EXTRACTION, DocumentStatus.EXTRACTION_FAILED, e
            )
        result.processing_time_ms = round((time.perf_counter() - started) * 1000, 2)
        return result

    async def run_analysis(self, document_id: UUID, force: bool = False) -> StageResult:
        """
        Analyze a document's extracted text.

        Catalog documents get product identification and per-product
        analysis; support documents get chunked and embedded.

        Args:
            document_id: Document to process
            force: Start even when the document looks in flight

        Returns:
            StageResult: Final status of this stage

        Raises:
            DocumentNotFoundError: No such document
            StageConflictError: Document is in flight and force is False
        """
        started = time.perf_counter()
        document = await self._load(document_id)
        is_support = document.context is DocumentContext.SUPPORT_AI
        try:
            if is_support:
                result = await self._embed_chunks(document, force)
            else:
                result = await self._analyze_catalog(document, force)
        except StageConflictError:
            raise
        except Exception as e:
            failed_status = DocumentStatus.EMBEDDING_FAILED if is_support else DocumentStatus.ANALYSIS_FAILED
            result = await self._fail_stage(document_id, PipelineStage.ANALYSIS, failed_status, e)
        result.processing_time_ms = round((time.perf_counter() - started) * 1000, 2)
        return result

    # Extraction

    async def _extract(
        self,
        document: UploadedDocumentModel,
        force: bool,
        hint: StageMessage | None,
    ) -> StageResult:
        document_id = document.id
        bucket = document.storage_bucket or (hint.bucket if hint else None)
        path = document.storage_path or (hint.storage_path if hint else None)
        media_type = document.media_type or (hint.media_type if hint else None)

        await self._transition(
            document_id,
            DocumentStatus.EXTRACTION_IN_PROGRESS,
            refuse_from=None if force else EXTRACTION_REFUSED_FROM,
        )

        if not bucket or not path:
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.EXTRACTION_FAILED,
                "Document has no storage location.",
            )

        try:
            data = await self._blob_store.get(bucket, path)
        except BlobStoreError as e:
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.EXTRACTION_FAILED,
                f"Download failed: {error_text(e)}",
            )

        outcome = self._extractor.extract(data, media_type)
        logger.info(
            f"{__name__}:_extract - Extraction outcome {outcome.kind.value}",
            extra={"document_id": str(document_id), "media_type": media_type, "size_bytes": len(data)},
        )

        if outcome.kind is ExtractionKind.SKIPPED:
            return await self._finish(
                document_id, PipelineStage.EXTRACTION, DocumentStatus.PDF_EXTRACTION_SKIPPED, outcome.reason
            )
        if outcome.kind is ExtractionKind.UNSUPPORTED:
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.UNSUPPORTED_TYPE,
                f"Unsupported file type for text extraction: {outcome.media_type}",
            )
        if outcome.kind is ExtractionKind.FAILED:
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.EXTRACTION_FAILED,
                f"Text decoding error: {outcome.error}",
            )

        text = outcome.text or ""
        if not text.strip():
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.ANALYSIS_SKIPPED_EMPTY_TEXT,
                EMPTY_TEXT_MESSAGE,
                extracted_text=text,
            )

        await self._transition(document_id, DocumentStatus.TEXT_EXTRACTED, extracted_text=text)
        await self._transition(document_id, DocumentStatus.PENDING_FULL_ANALYSIS)

        try:
            await self._dispatcher.dispatch(
                StageMessage(document_id=document_id, stage=PipelineStage.ANALYSIS)
            )
        except DispatchError as e:
            logger.error(
                f"{__name__}:_extract - Analysis dispatch failed",
                extra={"document_id": str(document_id), "error": str(e)},
            )
            return await self._finish(
                document_id,
                PipelineStage.EXTRACTION,
                DocumentStatus.ANALYSIS_INVOCATION_FAILED,
                f"Invoking analysis stage failed: {error_text(e)}",
            )

        return StageResult(
            document_id=document_id,
            stage=PipelineStage.EXTRACTION,
            status=DocumentStatus.PENDING_FULL_ANALYSIS,
            next_stage_dispatched=True,
        )

    # Catalog analysis

    async def _analyze_catalog(self, document: UploadedDocumentModel, force: bool) -> StageResult:
        document_id = document.id
        text = document.extracted_text
        guard = None if force else IN_FLIGHT_STATUSES

        if text is None:
            return await self._finish(
                document_id, PipelineStage.ANALYSIS, DocumentStatus.ANALYSIS_FAILED, NO_TEXT_MESSAGE, refuse_from=guard
            )
        if not text.strip():
            return await self._finish(
                document_id,
                PipelineStage.ANALYSIS,
                DocumentStatus.ANALYSIS_SKIPPED_EMPTY_TEXT,
                EMPTY_TEXT_MESSAGE,
                refuse_from=guard,
            )

        await self._transition(document_id, DocumentStatus.IDENTIFICATION_IN_PROGRESS, refuse_from=guard)
        await self._clear_derived_rows(document_id)

        try:
            names = await self._identifier.identify(text)
        except Exception as e:
            log_exception_with_context(
                logger, f"{__name__}:_analyze_catalog - Identification failed", e, document_id=document_id
            )
            return await self._finish(
                document_id,
                PipelineStage.ANALYSIS,
                DocumentStatus.ANALYSIS_FAILED,
                f"Product identification failed: {error_text(e)}",
            )

        if not names:
            return await self._finish(document_id, PipelineStage.ANALYSIS, DocumentStatus.ANALYSIS_NO_ENTITIES_FOUND)

        await self._transition(document_id, DocumentStatus.ENTITY_ANALYSIS_IN_PROGRESS)

        semaphore = asyncio.Semaphore(self._entity_concurrency)
        outcomes = await asyncio.gather(
            *(
                self._process_entity(document_id, position, name, text, semaphore)
                for position, name in enumerate(names)
            )
        )

        failed = outcomes.count(False)
        logger.info(
            f"{__name__}:_analyze_catalog - Analyzed products",
            extra={"document_id": str(document_id), "total": len(names), "failed": failed},
        )
        if failed:
            return await self._finish(
                document_id,
                PipelineStage.ANALYSIS,
                DocumentStatus.ANALYSIS_COMPLETE_WITH_ERRORS,
                f"{failed} out of {len(names)} products had analysis/storage issues.",
                items_total=len(names),
                items_failed=failed,
            )
        return await self._finish(
            document_id,
            PipelineStage.ANALYSIS,
            DocumentStatus.ANALYSIS_COMPLETE_ALL,
            items_total=len(names),
        )

    async def _process_entity(
        self,
        document_id: UUID,
        position: int,
        name: str,
        text: str,
        semaphore: asyncio.Semaphore,
    ) -> bool:
        """Analyze, embed and store one product. Returns True only if all three succeeded."""
        async with semaphore:
            try:
                async with self._write_lock, self._session_factory() as session:
                    entity = await entity_crud.create(
                        session,
                        document_id=document_id,
                        position=position,
                        name=name,
                        status=EntityStatus.PENDING,
                    )
                    await session.commit()
                    entity_id = entity.id
            except Exception as e:
                await self._entity_storage_failed(document_id, name, e)
                return False

            analysis: EntityAnalysis | None = None
            embedding: list[float] | None = None
            error: str | None = None
            try:
                analysis = await self._analyzer.analyze(name, text)
                embedding = await self._embedder.embed(self._analyzer.embedding_input(analysis, text))
            except Exception as e:
                error = error_text(e)
                logger.warning(
                    f"{__name__}:_process_entity - Product analysis failed",
                    extra={"document_id": str(document_id), "entity": name, "error": error},
                )

            values: dict[str, Any] = self._entity_values(analysis) if analysis else {}
            values.update(
                embedding=embedding,
                status=EntityStatus.FAILED if error else EntityStatus.ANALYZED,
                error_message=error[:MAX_ERROR_LENGTH] if error else None,
            )
            try:
                async with self._write_lock, self._session_factory() as session:
                    await entity_crud.update_by_id(session, entity_id, **values)
                    await session.commit()
            except Exception as e:
                await self._mark_entity_failed(document_id, entity_id, name, e)
                await self._entity_storage_failed(document_id, name, e)
                return False

            return error is None

    @staticmethod
    def _entity_values(analysis: EntityAnalysis) -> dict[str, Any]:
        return {
            "name": analysis.name,
            "entity_type": analysis.entity_type,
            "price": analysis.price,
            "discounted_price": analysis.discounted_price,
            "features": analysis.features,
            "pros": analysis.pros,
            "cons": analysis.cons,
            "rationale": analysis.rationale,
            "summary": analysis.summary,
            "source_snippet": analysis.source_snippet,
        }

    async def _mark_entity_failed(self, document_id: UUID, entity_id: UUID, name: str, exc: Exception) -> None:
        """Status-only write so a product never stays pending after its document finishes."""
        try:
            async with self._write_lock, self._session_factory() as session:
                await entity_crud.update_by_id(
                    session,
                    entity_id,
                    status=EntityStatus.FAILED,
                    error_message=f"Failed to store analysis: {error_text(exc)}"[:MAX_ERROR_LENGTH],
                )
                await session.commit()
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:_mark_entity_failed - Could not mark product as failed",
                e,
                document_id=document_id,
                entity=name,
            )

    async def _entity_storage_failed(self, document_id: UUID, name: str, exc: Exception) -> None:
        log_exception_with_context(
            logger, f"{__name__}:_process_entity - Failed to store product", exc, document_id=document_id, entity=name
        )
        async with self._write_lock, self._session_factory() as session:
            await DocumentStatusUpdater(session).record_error(
                document_id, f"Failed to store analysis for product '{name}': {error_text(exc)}"
            )

    # Support document chunking

    async def _embed_chunks(self, document: UploadedDocumentModel, force: bool) -> StageResult:
        document_id = document.id
        text = document.extracted_text
        guard = None if force else IN_FLIGHT_STATUSES

        if text is None:
            return await self._finish(
                document_id, PipelineStage.ANALYSIS, DocumentStatus.EMBEDDING_FAILED, NO_TEXT_MESSAGE, refuse_from=guard
            )
        if not text.strip():
            return await self._finish(
                document_id,
                PipelineStage.ANALYSIS,
                DocumentStatus.ANALYSIS_SKIPPED_EMPTY_TEXT,
                EMPTY_TEXT_MESSAGE,
                refuse_from=guard,
            )

        await self._transition(document_id, DocumentStatus.EMBEDDING_IN_PROGRESS, refuse_from=guard)
        await self._clear_derived_rows(document_id)

        chunks = self._chunker.chunk(text)
        if not chunks:
            return await self._finish(document_id, PipelineStage.ANALYSIS, DocumentStatus.EMBEDDING_SKIPPED_NO_CHUNKS)

        semaphore = asyncio.Semaphore(self._entity_concurrency)
        outcomes = await asyncio.gather(
            *(self._process_chunk(document_id, index, chunk, semaphore) for index, chunk in enumerate(chunks))
        )
        succeeded = outcomes.count(True)
        total = len(chunks)

        if succeeded == 0:
            status, message = DocumentStatus.EMBEDDING_FAILED, f"All {total} chunks failed to embed or store."
        elif succeeded < total:
            status, message = (
                DocumentStatus.EMBEDDING_PARTIAL_SUCCESS,
                f"Successfully embedded {succeeded} out of {total} chunks.",
            )
        else:
            status, message = DocumentStatus.EMBEDDING_COMPLETED, None

        return await self._finish(
            document_id,
            PipelineStage.ANALYSIS,
            status,
            message,
            items_total=total,
            items_failed=total - succeeded,
        )

    async def _process_chunk(
        self,
        document_id: UUID,
        index: int,
        chunk: str,
        semaphore: asyncio.Semaphore,
    ) -> bool:
        async with semaphore:
            try:
                embedding = await self._embedder.embed(chunk)
                if embedding is None:
                    raise ValueError("chunk produced no embedding")
                async with self._write_lock, self._session_factory() as session:
                    await chunk_crud.create(
                        session,
                        document_id=document_id,
                        chunk_index=index,
                        content=chunk,
                        embedding=embedding,
                    )
                    await session.commit()
            except Exception as e:
                logger.warning(
                    f"{__name__}:_process_chunk - Chunk {index} failed",
                    extra={"document_id": str(document_id), "chunk_index": index, "error": error_text(e)},
                )
                return False
            return True

    # Persistence helpers

    async def _load(self, document_id: UUID) -> UploadedDocumentModel:
        async with self._session_factory() as session:
            document = await document_crud.get_by_id(session, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def _clear_derived_rows(self, document_id: UUID) -> None:
        async with self._write_lock, self._session_factory() as session:
            removed_entities = await entity_crud.delete_by_document(session, document_id)
            removed_chunks = await chunk_crud.delete_by_document(session, document_id)
            await session.commit()
        if removed_entities or removed_chunks:
            logger.info(
                f"{__name__}:_clear_derived_rows - Removed rows from a previous run",
                extra={"document_id": str(document_id), "entities": removed_entities, "chunks": removed_chunks},
            )

    async def _transition(
        self,
        document_id: UUID,
        status: DocumentStatus,
        error_message: str | None = None,
        **kwargs,
    ) -> None:
        async with self._write_lock, self._session_factory() as session:
            await DocumentStatusUpdater(session).transition(document_id, status, error_message, **kwargs)

    async def _finish(
        self,
        document_id: UUID,
        stage: PipelineStage,
        status: DocumentStatus,
        error_message: str | None = None,
        *,
        items_total: int = 0,
        items_failed: int = 0,
        **kwargs,
    ) -> StageResult:
        await self._transition(document_id, status, error_message, **kwargs)
        return StageResult(
            document_id=document_id,
            stage=stage,
            status=status,
            error_message=error_message,
            items_total=items_total,
            items_failed=items_failed,
        )

    async def _fail_stage(
        self,
        document_id: UUID,
        stage: PipelineStage,
        status: DocumentStatus,
        exc: Exception,
    ) -> StageResult:
        log_exception_with_context(
            logger,
            f"{__name__}:_fail_stage - Unexpected error in {stage.value} stage",
            exc,
            document_id=document_id,
        )
        return await self._finish(document_id, stage, status, f"General function error: {error_text(exc)}")

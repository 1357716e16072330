"""
Retrieval engine.

Embeds a query and ranks stored product or chunk vectors by cosine
similarity, keeping matches at or above a threshold. When the query
cannot be embedded the engine falls back to case-insensitive substring
matching. Retrieval errors are reported in the response rather than
raised, so search and chat callers can degrade gracefully.

Dependencies: numpy, pydantic, sqlalchemy
System role: Search backend for catalog search and support chat
"""

import logging
from enum import Enum
from typing import Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from salesdesk.boundary.db.CRUD.entity_crud import entity_crud
from salesdesk.boundary.db.models.chunk_model import DocumentChunkModel
from salesdesk.boundary.db.models.entity_model import ExtractedEntityModel
from salesdesk.configs.retrieval import RetrievalSettings
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.exceptions import EmbeddingError, ValidationError
from salesdesk.core.retrieval.query_parser import ParsedQuery, QueryParser
from salesdesk.core.retrieval.similarity import rank_by_similarity

logger = logging.getLogger(__name__)

MatchT = TypeVar("MatchT")


class SearchStrategy(str, Enum):
    VECTOR = "vector"
    LEXICAL = "lexical"
    GENERATIVE = "generative"


class EntityMatch(BaseModel):
    """A product returned by search."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
    name: str
    entity_type: str | None = None
    price: str | None = None
    discounted_price: str | None = None
    features: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    rationale: str | None = None
    summary: str | None = None
    source_snippet: str | None = None
    similarity: float | None = Field(default=None, description="Raw cosine similarity; None for lexical matches")


class ChunkMatch(BaseModel):
    """A support document chunk returned by search."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    document_id: UUID
    chunk_index: int
    content: str
    similarity: float | None = Field(default=None, description="Raw cosine similarity; None for lexical matches")


class RetrievalResponse(BaseModel, Generic[MatchT]):
    """Ranked results, or an empty list plus an error message."""

    results: list[MatchT] = Field(default_factory=list)
    strategy: SearchStrategy = SearchStrategy.VECTOR
    error: str | None = None
    parsed_query: ParsedQuery | None = None


class RetrievalEngine:
    """Similarity search over products and chunks."""

    def __init__(
        self,
        embedder: EmbeddingTask,
        settings: RetrievalSettings | None = None,
        query_parser: QueryParser | None = None,
    ) -> None:
        """
        Args:
            embedder: Query embedding
            settings: Thresholds and result caps
            query_parser: Catalog query parser
        """
        self._embedder = embedder
        self._settings = settings or RetrievalSettings()
        self._query_parser = query_parser or QueryParser()

    def clamp_count(self, requested: int | None, default: int | None = None) -> int:
        """Result count limited to 1..max_match_count."""
        count = requested or default or self._settings.default_match_count
        return max(1, min(count, self._settings.max_match_count))

    async def search_entities(
        self,
        session: AsyncSession,
        query: str,
        *,
        document_id: UUID | None = None,
        category: str | None = None,
        match_count: int | None = None,
        threshold: float | None = None,
    ) -> RetrievalResponse[EntityMatch]:
        """
        Search analyzed products.

        Args:
            session: Async database session
            query: Free-text query
            document_id: Restrict to one document
            category: Product type filter; parsed from the query when omitted
            match_count: Results wanted (clamped to the configured maximum)
            threshold: Minimum similarity (catalog default when omitted)

        Returns:
            RetrievalResponse[EntityMatch]: Best matches first

        Raises:
            ValidationError: When the query is blank
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="query")

        parsed = self._query_parser.parse(query)
        if category:
            parsed = parsed.model_copy(update={"category": category.lower()})
        count = self.clamp_count(match_count)
        min_similarity = self._settings.catalog_threshold if threshold is None else threshold

        try:
            vector = await self._embed_query(query)
            if vector is None:
                rows = await entity_crud.lexical_search(
                    session,
                    parsed.keywords,
                    document_id=document_id,
                    type_pattern=parsed.type_pattern,
                    limit=count,
                )
                return RetrievalResponse[EntityMatch](
                    results=[EntityMatch.model_validate(row) for row in rows],
                    strategy=SearchStrategy.LEXICAL,
                    parsed_query=parsed,
                )

            candidates = await entity_crud.get_embedded_candidates(
                session,
                document_id=document_id,
                type_pattern=parsed.type_pattern,
            )
            ranked = rank_by_similarity(
                vector,
                [(row, row.embedding) for row in candidates],
                min_similarity,
                count,
            )
            results = [self._entity_match(row, score) for row, score in ranked]
        except Exception as e:
            logger.exception(
                f"{__name__}:search_entities - Search failed",
                extra={"document_id": str(document_id) if document_id else None},
            )
            return RetrievalResponse[EntityMatch](error=f"Search failed: {e}", parsed_query=parsed)

        logger.info(
            f"{__name__}:search_entities - {len(results)} matches",
            extra={
                "document_id": str(document_id) if document_id else None,
                "candidates": len(candidates),
                "category": parsed.category,
            },
        )
        return RetrievalResponse[EntityMatch](results=results, parsed_query=parsed)

    async def search_chunks(
        self,
        session: AsyncSession,
        query: str,
        *,
        document_id: UUID | None = None,
        match_count: int | None = None,
        threshold: float | None = None,
    ) -> RetrievalResponse[ChunkMatch]:
        """
        Search support document chunks.

        Args:
            session: Async database session
            query: User question
            document_id: Restrict to one document; None searches every support document
            match_count: Chunks wanted (chat default when omitted)
            threshold: Minimum similarity (chat default when omitted)

        Returns:
            RetrievalResponse[ChunkMatch]: Best matches first

        Raises:
            ValidationError: When the query is blank
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="query")

        count = self.clamp_count(match_count, self._settings.chat_match_count)
        min_similarity = self._settings.chat_threshold if threshold is None else threshold

        try:
            vector = await self._embed_query(query)
            if vector is None:
                keywords = self._query_parser.parse(query).keywords
                rows = await chunk_crud.lexical_search(session, keywords, document_id=document_id, limit=count)
                return RetrievalResponse[ChunkMatch](
                    results=[ChunkMatch.model_validate(row) for row in rows],
                    strategy=SearchStrategy.LEXICAL,
                )

            candidates = await chunk_crud.get_candidates(session, document_id=document_id)
            ranked = rank_by_similarity(
                vector,
                [(row, row.embedding) for row in candidates],
                min_similarity,
                count,
            )
        except Exception as e:
            logger.exception(f"{__name__}:search_chunks - Search failed")
            return RetrievalResponse[ChunkMatch](error=f"Search failed: {e}")

        return RetrievalResponse[ChunkMatch](
            results=[self._chunk_match(row, score) for row, score in ranked],
        )

    async def _embed_query(self, query: str) -> list[float] | None:
        try:
            return await self._embedder.embed(query)
        except EmbeddingError as e:
            logger.warning(
                f"{__name__}:_embed_query - Query embedding failed, using lexical fallback",
                extra={"error": str(e)},
            )
            return None

    @staticmethod
    def _entity_match(row: ExtractedEntityModel, score: float) -> EntityMatch:
        match = EntityMatch.model_validate(row)
        match.similarity = score
        return match

    @staticmethod
    def _chunk_match(row: DocumentChunkModel, score: float) -> ChunkMatch:
        match = ChunkMatch.model_validate(row)
        match.similarity = score
        return match

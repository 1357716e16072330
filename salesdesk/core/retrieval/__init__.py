"""
Retrieval engine.

Similarity search over analyzed products and support document chunks,
with a lexical fallback when the query cannot be embedded.
"""

from salesdesk.core.retrieval.query_parser import ParsedQuery, QueryParser
from salesdesk.core.retrieval.retrieval_engine import (
    ChunkMatch,
    EntityMatch,
    RetrievalEngine,
    RetrievalResponse,
    SearchStrategy,
)
from salesdesk.core.retrieval.similarity import rank_by_similarity

__all__ = [
    "ChunkMatch",
    "EntityMatch",
    "ParsedQuery",
    "QueryParser",
    "RetrievalEngine",
    "RetrievalResponse",
    "SearchStrategy",
    "rank_by_similarity",
]

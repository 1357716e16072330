"""
Pipeline tasks.

Each task is a single step with no database access; the orchestrator
persists what they return.
"""

from salesdesk.core.document_processing.tasks.chunking_task import ChunkingTask
from salesdesk.core.document_processing.tasks.embedding_task import EmbeddingTask
from salesdesk.core.document_processing.tasks.entity_analysis_task import EntityAnalysisTask
from salesdesk.core.document_processing.tasks.entity_identification_task import (
    EntityIdentificationTask,
)
from salesdesk.core.document_processing.tasks.text_extraction_task import TextExtractionTask

__all__ = [
    "ChunkingTask",
    "EmbeddingTask",
    "EntityAnalysisTask",
    "EntityIdentificationTask",
    "TextExtractionTask",
]

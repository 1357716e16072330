"""
Pipeline data models.
"""

from salesdesk.core.document_processing.models.entity_analysis import EntityAnalysis
from salesdesk.core.document_processing.models.extraction import ExtractionKind, ExtractionOutcome
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.document_processing.models.stage_result import StageResult

__all__ = [
    "EntityAnalysis",
    "ExtractionKind",
    "ExtractionOutcome",
    "PipelineStage",
    "StageMessage",
    "StageResult",
]

"""
Entity analysis task.

Produces a structured record for one product using the whole document
as context, and builds the labeled text that represents the product in
the vector index.

Dependencies: langchain_core (prompt), pydantic, salesdesk.boundary.llm
System role: Per-product analysis step of the catalog path
"""

import logging

from salesdesk.boundary.llm.gemini import TextGenerator
from salesdesk.core.document_processing.model_output import parse_model_json
from salesdesk.core.document_processing.models.entity_analysis import EntityAnalysis
from salesdesk.core.document_processing.prompts import ANALYSIS_PROMPT

logger = logging.getLogger(__name__)


def build_embedding_text(analysis: EntityAnalysis) -> str:
    """
    Labeled, on-topic text for embedding a product.

    Parts are emitted in a fixed order (name, type, summary, features,
    pros, cons, rationale); empty parts are left out.
    """
    parts = []
    if analysis.name:
        parts.append(f"Product Name: {analysis.name}.")
    if analysis.entity_type:
        parts.append(f"Type: {analysis.entity_type}.")
    if analysis.summary:
        parts.append(f"Summary: {analysis.summary}")
    if analysis.features:
        parts.append(f"Features: {', '.join(analysis.features)}.")
    if analysis.pros:
        parts.append(f"Pros: {', '.join(analysis.pros)}.")
    if analysis.cons:
        parts.append(f"Cons: {', '.join(analysis.cons)}.")
    if analysis.rationale:
        parts.append(f"Key Selling Points: {analysis.rationale}")
    return " ".join(parts).strip()


class EntityAnalysisTask:
    """Analyze a single identified product."""

    def __init__(self, generator: TextGenerator, max_input_chars: int = 15000) -> None:
        self._generator = generator
        self._max_input_chars = max_input_chars

    async def analyze(self, entity_name: str, document_text: str) -> EntityAnalysis:
        """
        Analyze one product.

        Args:
            entity_name: Name proposed by identification
            document_text: Full extracted text (truncated to the shared prefix)

        Returns:
            EntityAnalysis: Validated record; name falls back to entity_name

        Raises:
            GenerationError: When the model call fails
            ModelOutputError: When the output is not the expected JSON object
        """
        prompt = ANALYSIS_PROMPT.format(
            entity_name=entity_name,
            document_text=document_text[: self._max_input_chars],
        )
        raw = await self._generator.generate(prompt)
        analysis: EntityAnalysis = parse_model_json(raw, EntityAnalysis, strict=True)

        if not analysis.name:
            analysis = analysis.model_copy(update={"name": entity_name})
        return analysis

    def embedding_input(self, analysis: EntityAnalysis, document_text: str) -> str:
        """Text to embed for a product; the document text when the record has nothing usable."""
        return build_embedding_text(analysis) or document_text

"""
Entity identification task.

Asks the generative model which distinct products a document mentions.
Unusable output counts as "no products"; a failed model call does not.

Dependencies: langchain_core (prompt), salesdesk.boundary.llm
System role: Product discovery step of the catalog path
"""

import logging

from salesdesk.boundary.llm.gemini import TextGenerator
from salesdesk.core.document_processing.model_output import parse_model_json
from salesdesk.core.document_processing.prompts import IDENTIFICATION_PROMPT

logger = logging.getLogger(__name__)


class EntityIdentificationTask:
    """Identify distinct product names in document text."""

    def __init__(self, generator: TextGenerator, max_input_chars: int = 15000) -> None:
        """
        Args:
            generator: Generative model adapter (low temperature)
            max_input_chars: Document prefix length sent to the model
        """
        self._generator = generator
        self._max_input_chars = max_input_chars

    async def identify(self, document_text: str | None) -> list[str]:
        """
        Identify product names.

        Args:
            document_text: Full extracted text

        Returns:
            list[str]: Distinct non-blank names in model order; [] for blank text or unusable output

        Raises:
            GenerationError: When the model call itself fails
        """
        if not document_text or not document_text.strip():
            return []

        prompt = IDENTIFICATION_PROMPT.format(document_text=document_text[: self._max_input_chars])
        raw = await self._generator.generate(prompt)

        parsed = parse_model_json(raw, list[str], strict=False)
        if parsed is None:
            return []

        # Distinct by case-insensitive name, first occurrence wins
        names: list[str] = []
        seen: set[str] = set()
        for name in parsed:
            name = name.strip()
            if name and name.casefold() not in seen:
                seen.add(name.casefold())
                names.append(name)

        logger.info(
            f"{__name__}:identify - Identified {len(names)} products",
            extra={"count": len(names)},
        )
        return names

"""
Embedding task.

Turns text into a dense vector through a LangChain Embeddings client.
Input is truncated to the model limit and blank input is never sent.

Dependencies: langchain_core
System role: Vector generation for products, chunks and search queries
"""

import logging
import math
from numbers import Real

from langchain_core.embeddings import Embeddings

from salesdesk.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Generate embeddings with input truncation and response validation."""

    def __init__(
        self,
        embeddings: Embeddings,
        max_input_chars: int = 8000,
        expected_dimension: int | None = None,
    ) -> None:
        """
        Initialize embedding task.

        Args:
            embeddings: LangChain embeddings client
            max_input_chars: Characters kept from the input
            expected_dimension: Reject vectors of any other length when set
        """
        self._embeddings = embeddings
        self._max_input_chars = max_input_chars
        self._expected_dimension = expected_dimension

    async def embed(self, text: str | None) -> list[float] | None:
        """
        Embed one text.

        Args:
            text: Text to embed

        Returns:
            list[float] | None: The vector, or None for empty/whitespace input

        Raises:
            EmbeddingError: When the call fails or the response is not a valid vector
        """
        if not text or not text.strip():
            return None

        payload = text[: self._max_input_chars]
        try:
            vector = await self._embeddings.aembed_query(payload)
        except Exception as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        return self._validate(vector)

    def _validate(self, vector) -> list[float]:
        if not isinstance(vector, (list, tuple)) or not vector:
            raise EmbeddingError(
                f"Unexpected embedding response: expected a non-empty list of floats, got {type(vector).__name__}"
            )
        values = []
        for value in vector:
            if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value):
                raise EmbeddingError(f"Unexpected embedding response: invalid element {value!r}")
            values.append(float(value))

        if self._expected_dimension is not None and len(values) != self._expected_dimension:
            raise EmbeddingError(
                f"Embedding dimension {len(values)} does not match configured {self._expected_dimension}"
            )
        return values

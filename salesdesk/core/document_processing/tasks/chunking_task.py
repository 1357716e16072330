"""
Text chunking task.

Splits support document text into overlapping fixed-size windows for
embedding. Window starts advance by chunk_size - chunk_overlap and the
last window always reaches the end of the text.

Dependencies: None
System role: Chunking stage of the support document path
"""


class ChunkingTask:
    """Sliding-window character chunker."""

    def __init__(self, chunk_size: int = 1500, chunk_overlap: int = 200) -> None:
        """
        Initialize chunking task.

        Args:
            chunk_size: Maximum characters per chunk
            chunk_overlap: Characters shared by consecutive chunks

        Raises:
            ValueError: Unless chunk_size > chunk_overlap >= 0
        """
        if chunk_overlap < 0 or chunk_size <= chunk_overlap:
            raise ValueError(
                f"chunk_size must exceed chunk_overlap >= 0 (got {chunk_size}, {chunk_overlap})"
            )
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def step(self) -> int:
        return self._chunk_size - self._chunk_overlap

    def windows(self, text: str) -> list[str]:
        """
        All windows over the text, including whitespace-only ones.

        Taking window[:step] of every window but the last, plus the last
        window, rebuilds the text exactly.
        """
        windows = []
        for start in range(0, len(text), self.step):
            windows.append(text[start : start + self._chunk_size])
            if start + self._chunk_size >= len(text):
                break
        return windows

    def chunk(self, text: str) -> list[str]:
        """
        Split text into chunks for embedding.

        Args:
            text: Source text

        Returns:
            list[str]: Windows that are non-empty after trimming; [] for blank text
        """
        if not text or not text.strip():
            return []
        return [window for window in self.windows(text) if window.strip()]

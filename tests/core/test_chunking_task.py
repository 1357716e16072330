"""
Tests for ChunkingTask.

Covers the window arithmetic, full coverage of the text and the
non-empty guarantee over a range of text lengths.

System role: Verification of support document chunking
"""

import pytest

from salesdesk.core.document_processing.tasks.chunking_task import ChunkingTask

SIZE = 50
OVERLAP = 10


def rebuild(chunker: ChunkingTask, text: str) -> str:
    windows = chunker.windows(text)
    if not windows:
        return ""
    return "".join(window[: chunker.step] for window in windows[:-1]) + windows[-1]


@pytest.fixture
def chunker() -> ChunkingTask:
    return ChunkingTask(chunk_size=SIZE, chunk_overlap=OVERLAP)


class TestChunkingTaskInit:
    @pytest.mark.parametrize("size, overlap", [(10, 10), (10, 20), (10, -1), (0, 0)])
    def test_rejects_invalid_window(self, size: int, overlap: int) -> None:
        with pytest.raises(ValueError):
            ChunkingTask(chunk_size=size, chunk_overlap=overlap)

    def test_step_is_size_minus_overlap(self, chunker: ChunkingTask) -> None:
        assert chunker.step == SIZE - OVERLAP


class TestChunkingCoverage:
    """Windows rebuild the text exactly and never exceed the size."""

    @pytest.mark.parametrize("length", [1, SIZE - 1, SIZE, SIZE + 1, 10 * SIZE])
    @pytest.mark.parametrize("alphabet", ["abcdefghij", "éßø€中文🙂 "])
    def test_windows_cover_text(self, chunker: ChunkingTask, length: int, alphabet: str) -> None:
        # Arrange
        text = (alphabet * (length // len(alphabet) + 1))[:length]

        # Act
        windows = chunker.windows(text)

        # Assert
        assert rebuild(chunker, text) == text
        assert all(len(window) <= SIZE for window in windows)
        assert windows[-1] == text[-len(windows[-1]) :]

    def test_consecutive_windows_share_overlap(self, chunker: ChunkingTask) -> None:
        text = "".join(chr(ord("a") + i % 26) for i in range(3 * SIZE))

        windows = chunker.windows(text)

        for previous, current in zip(windows, windows[1:]):
            assert previous[-OVERLAP:] == current[:OVERLAP]

    def test_text_of_exactly_one_window(self, chunker: ChunkingTask) -> None:
        text = "x" * SIZE

        assert chunker.windows(text) == [text]


class TestChunk:
    """Test suite for ChunkingTask.chunk()."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n"])
    def test_blank_text_has_no_chunks(self, chunker: ChunkingTask, text: str) -> None:
        assert chunker.chunk(text) == []

    @pytest.mark.parametrize("length", [1, SIZE - 1, SIZE, SIZE + 1, 10 * SIZE])
    def test_every_chunk_is_non_empty(self, chunker: ChunkingTask, length: int) -> None:
        text = ("word " * length)[:length]

        chunks = chunker.chunk(text)

        assert chunks
        assert all(chunk.strip() for chunk in chunks)

    def test_whitespace_only_windows_are_dropped(self, chunker: ChunkingTask) -> None:
        # Arrange
        text = "start" + " " * (4 * SIZE) + "end"

        # Act
        chunks = chunker.chunk(text)

        # Assert
        assert len(chunks) < len(chunker.windows(text))
        assert chunks[0].startswith("start")
        assert chunks[-1].endswith("end")

"""
Tests for TextExtractionTask.

System role: Verification of media type handling and decoding
"""

import pytest

from salesdesk.core.document_processing.models.extraction import ExtractionKind
from salesdesk.core.document_processing.tasks.text_extraction_task import (
    PDF_SKIP_REASON,
    TextExtractionTask,
    normalize_media_type,
)


@pytest.fixture
def extractor() -> TextExtractionTask:
    return TextExtractionTask()


class TestNormalizeMediaType:
    def test_drops_parameters_and_lowercases(self) -> None:
        assert normalize_media_type("Text/Plain; charset=UTF-8") == "text/plain"

    def test_none_becomes_empty(self) -> None:
        assert normalize_media_type(None) == ""


class TestExtract:
    """Test suite for TextExtractionTask.extract()."""

    def test_plain_text_is_decoded(self, extractor: TextExtractionTask) -> None:
        # Act
        outcome = extractor.extract("Phone X1 costs $499".encode("utf-8"), "text/plain")

        # Assert
        assert outcome.kind is ExtractionKind.EXTRACTED
        assert outcome.text == "Phone X1 costs $499"

    def test_byte_order_mark_is_removed(self, extractor: TextExtractionTask) -> None:
        outcome = extractor.extract("\ufeffcatalog".encode("utf-8"), "text/csv")

        assert outcome.text == "catalog"

    def test_unicode_text_round_trips(self, extractor: TextExtractionTask) -> None:
        text = "Téléphone ₹49,999 — 5G 📱"

        outcome = extractor.extract(text.encode("utf-8"), "text/markdown")

        assert outcome.text == text

    def test_converted_document_export_is_text(self, extractor: TextExtractionTask) -> None:
        outcome = extractor.extract(b"Doc body", "application/vnd.google-apps.document")

        assert outcome.kind is ExtractionKind.EXTRACTED

    def test_pdf_is_skipped_not_parsed(self, extractor: TextExtractionTask) -> None:
        # Act
        outcome = extractor.extract(b"%PDF-1.4\n...", "application/pdf")

        # Assert
        assert outcome.kind is ExtractionKind.SKIPPED
        assert outcome.reason == PDF_SKIP_REASON
        assert outcome.text is None

    @pytest.mark.parametrize(
        "media_type",
        [
            "image/png",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            None,
        ],
    )
    def test_other_types_are_unsupported(self, extractor: TextExtractionTask, media_type) -> None:
        outcome = extractor.extract(b"\x89PNG", media_type)

        assert outcome.kind is ExtractionKind.UNSUPPORTED
        assert outcome.media_type == (media_type or "unknown")

    def test_empty_bytes_are_empty_text(self, extractor: TextExtractionTask) -> None:
        outcome = extractor.extract(b"", "text/plain")

        assert outcome.kind is ExtractionKind.EMPTY
        assert outcome.text == ""

    def test_invalid_utf8_fails_with_error(self, extractor: TextExtractionTask) -> None:
        # Act
        outcome = extractor.extract(b"\xff\xfe\xfa broken", "text/plain")

        # Assert
        assert outcome.kind is ExtractionKind.FAILED
        assert outcome.error

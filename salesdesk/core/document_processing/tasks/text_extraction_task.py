"""
Text extraction task.

Turns stored file bytes into plain text. Only text-like uploads are
decoded; PDFs are deliberately skipped rather than parsed.

Dependencies: None
System role: First processing step of the ingestion pipeline
"""

import logging

from salesdesk.core.document_processing.models.extraction import ExtractionOutcome

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
PDF_SKIP_REASON = "PDF text extraction is not supported; the file was stored without text."

# Document exports converted to plain text before upload
TEXT_DOCUMENT_MEDIA_TYPES = frozenset(
    {
        "application/vnd.google-apps.document",
        "application/json",
        "application/xml",
    }
)


def normalize_media_type(media_type: str | None) -> str:
    """Lowercase the MIME type and drop parameters such as charset."""
    return (media_type or "").split(";", 1)[0].strip().lower()


class TextExtractionTask:
    """Decode uploaded bytes into text according to their media type."""

    def is_supported(self, media_type: str | None) -> bool:
        normalized = normalize_media_type(media_type)
        return normalized.startswith("text/") or normalized in TEXT_DOCUMENT_MEDIA_TYPES

    def extract(self, data: bytes, media_type: str | None) -> ExtractionOutcome:
        """
        Extract text from file bytes.

        Args:
            data: File content, possibly empty
            media_type: Declared MIME type

        Returns:
            ExtractionOutcome: EXTRACTED, EMPTY, SKIPPED (PDF), UNSUPPORTED or FAILED
        """
        normalized = normalize_media_type(media_type)

        if normalized == PDF_MEDIA_TYPE:
            return ExtractionOutcome.skipped(PDF_SKIP_REASON)

        if not self.is_supported(normalized):
            return ExtractionOutcome.unsupported(media_type or "unknown")

        if not data:
            return ExtractionOutcome.empty()

        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            logger.warning(
                f"{__name__}:extract - Decoding failed",
                extra={"media_type": normalized, "size_bytes": len(data), "error": str(e)},
            )
            return ExtractionOutcome.failed(str(e))

        if not text:
            return ExtractionOutcome.empty()
        return ExtractionOutcome.extracted(text)

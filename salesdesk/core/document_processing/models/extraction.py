"""
Text extraction outcome.

Dependencies: dataclasses
System role: Result record of the extraction task
"""

from dataclasses import dataclass
from enum import Enum


class ExtractionKind(str, Enum):
    EXTRACTED = "extracted"
    EMPTY = "empty"
    SKIPPED = "skipped"
    UNSUPPORTED = "unsupported"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractionOutcome:
    """
    What the extractor made of one file.

    Only the field that belongs to the kind is set: text for EXTRACTED,
    reason for SKIPPED, media_type for UNSUPPORTED, error for FAILED.
    EMPTY carries text="" so callers can persist it unchanged.
    """

    kind: ExtractionKind
    text: str | None = None
    reason: str | None = None
    media_type: str | None = None
    error: str | None = None

    @classmethod
    def extracted(cls, text: str) -> "ExtractionOutcome":
        return cls(ExtractionKind.EXTRACTED, text=text)

    @classmethod
    def empty(cls) -> "ExtractionOutcome":
        return cls(ExtractionKind.EMPTY, text="")

    @classmethod
    def skipped(cls, reason: str) -> "ExtractionOutcome":
        return cls(ExtractionKind.SKIPPED, reason=reason)

    @classmethod
    def unsupported(cls, media_type: str) -> "ExtractionOutcome":
        return cls(ExtractionKind.UNSUPPORTED, media_type=media_type)

    @classmethod
    def failed(cls, error: str) -> "ExtractionOutcome":
        return cls(ExtractionKind.FAILED, error=error)

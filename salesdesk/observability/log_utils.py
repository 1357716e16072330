"""
Bounded log payloads.

Pipeline logs carry model output, document text and error messages of
arbitrary size; these helpers keep `extra` values short and printable.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any
from uuid import UUID


def safe_log_value(value: Any, max_length: int = 500) -> str:
    """
    Short printable form of a value for a log record.

    Collections are summarized by size and bytes by length; everything
    else is stringified and cut at max_length.
    """
    if value is None:
        return "None"
    if isinstance(value, (bytes, bytearray)):
        return f"<{len(value)} bytes>"
    if isinstance(value, (list, tuple, set)):
        text = f"{type(value).__name__}({len(value)} items)"
    elif isinstance(value, dict):
        text = f"dict({len(value)} keys)"
    else:
        text = str(value)

    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}... (truncated, {len(text)} total)"


def log_exception_with_context(
    logger: logging.Logger,
    message: str,
    exc: BaseException,
    document_id: UUID | str | None = None,
    **context,
) -> None:
    """
    Log a pipeline failure with its traceback.

    Args:
        logger: Logger of the failing module
        message: Log message
        exc: The exception being handled
        document_id: Document the failure belongs to
        **context: Further fields (product name, stage, ...)
    """
    extra = {key: safe_log_value(value) for key, value in context.items()}
    if document_id is not None:
        extra["document_id"] = str(document_id)
    extra["error_type"] = type(exc).__name__
    extra["error_msg"] = safe_log_value(str(exc))
    logger.error(message, exc_info=exc, extra=extra)

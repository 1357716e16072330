"""
Parsing of JSON produced by generative models.

Model output is untrusted text: it may be wrapped in markdown code fences,
may not be JSON at all, or may have the wrong shape. One helper handles
all three cases for every caller, with the failure policy chosen per call.

Dependencies: pydantic
System role: Boundary validation for identification, analysis and generative search
"""

import logging
import re
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from salesdesk.core.exceptions import ModelOutputError
from salesdesk.observability.log_utils import safe_log_value

logger = logging.getLogger(__name__)

T = TypeVar("T")

_LEADING_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*")
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ``` or ```json fence, if any."""
    return _TRAILING_FENCE.sub("", _LEADING_FENCE.sub("", raw)).strip()


def parse_model_json(raw: str | None, schema: Any, *, strict: bool) -> Any:
    """
    Parse model output against an expected schema.

    Args:
        raw: Raw generated text
        schema: Type accepted by pydantic.TypeAdapter (list[str], a BaseModel, ...)
        strict: Raise on failure instead of returning None

    Returns:
        The validated value, or None when parsing fails and strict is False

    Raises:
        ModelOutputError: When parsing fails and strict is True
    """
    adapter: TypeAdapter = TypeAdapter(schema)
    cleaned = strip_code_fences(raw or "")
    if not cleaned:
        error = "Model returned empty output"
    else:
        try:
            return adapter.validate_json(cleaned)
        except ValidationError as e:
            error = f"Model output did not match expected JSON shape: {e.errors(include_url=False)[0]['msg']}"

    if strict:
        raise ModelOutputError(error, details={"raw_output": safe_log_value(raw, 300)})

    logger.warning(
        f"{__name__}:parse_model_json - Discarding unusable model output",
        extra={"error": error, "raw_output": safe_log_value(raw, 300)},
    )
    return None

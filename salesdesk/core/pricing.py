"""
Best-effort price interpretation.

Prices are stored exactly as the source document wrote them. These
helpers read a number and a currency out of such strings for display
and filtering hints; the result is never authoritative.

Dependencies: pydantic
System role: Price normalization for search results and query parsing
"""

import re

from pydantic import BaseModel, Field

_NUMBER = re.compile(r"\d[\d,]*(?:\.\d+)?")
_UNIT = re.compile(r"\d[\d,]*(?:\.\d+)?\s*(k|thousand|lakhs?|l|crores?|cr)\b", re.IGNORECASE)

UNIT_MULTIPLIERS = {
    "k": 1_000,
    "thousand": 1_000,
    "l": 100_000,
    "lakh": 100_000,
    "lakhs": 100_000,
    "cr": 10_000_000,
    "crore": 10_000_000,
    "crores": 10_000_000,
}


class PriceInfo(BaseModel):
    """Numeric reading of a product's price strings."""

    amount: float = Field(description="Effective price (discounted when available)")
    currency: str = Field(description="USD or INR, guessed from the text")
    original_amount: float | None = Field(default=None, description="List price when discounted")
    discount_amount: float | None = Field(default=None, description="Saving in currency units")
    discount_percentage: int | None = Field(default=None, description="Saving as a whole percentage")
    is_on_sale: bool = Field(default=False, description="Whether a lower discounted price exists")


def to_amount(number: str, unit: str | None = None) -> float:
    """Convert '1,299.50' plus an optional unit (k, lakh, crore) to a float."""
    value = float(number.replace(",", ""))
    if unit:
        value *= UNIT_MULTIPLIERS.get(unit.lower(), 1)
    return value


def parse_amount(text: str | None) -> float | None:
    """First number in the text, scaled by a following unit word if any."""
    if not text:
        return None
    match = _NUMBER.search(text)
    if match is None:
        return None
    unit_match = _UNIT.search(text, match.start())
    unit = unit_match.group(1) if unit_match and unit_match.start() == match.start() else None
    try:
        return to_amount(match.group(0), unit)
    except ValueError:
        return None


def detect_currency(*texts: str | None) -> str:
    joined = " ".join(text for text in texts if text).lower()
    return "USD" if "$" in joined or "usd" in joined else "INR"


def parse_price(price: str | None, discounted_price: str | None = None) -> PriceInfo | None:
    """
    Interpret a product's price strings.

    Args:
        price: Listed price as written
        discounted_price: Sale price as written

    Returns:
        PriceInfo, or None when neither string holds a number
    """
    original = parse_amount(price)
    discounted = parse_amount(discounted_price)
    currency = detect_currency(price, discounted_price)

    if original is None and discounted is None:
        return None
    if original is None:
        return PriceInfo(amount=discounted, currency=currency)
    if discounted is None or discounted >= original:
        return PriceInfo(amount=original, currency=currency)

    saving = original - discounted
    return PriceInfo(
        amount=discounted,
        currency=currency,
        original_amount=original,
        discount_amount=round(saving, 2),
        discount_percentage=round(saving / original * 100) if original else None,
        is_on_sale=True,
    )

"""
Catalog search query parser.

Reads a free-text shopping query ("noise cancelling headphones under
5k") into keywords, a product category and price bounds. The category
narrows vector search; keywords drive the lexical fallback.

Dependencies: pydantic, salesdesk.core.pricing
System role: Query understanding for catalog search
"""

import re

from pydantic import BaseModel, Field

from salesdesk.core.pricing import to_amount

_AMOUNT = r"(?:rs\.?|inr|usd|\$|₹)?\s*(\d[\d,]*(?:\.\d+)?)\s*(k|thousand|lakhs?|l|crores?|cr)?\b"

# Checked in order; only the first match is used
_PRICE_PATTERNS = (
    ("between", re.compile(rf"\bbetween\s+{_AMOUNT}\s*(?:and|to|-)\s*{_AMOUNT}", re.IGNORECASE)),
    ("max", re.compile(rf"\b(?:under|below|less than|upto|up to|max(?:imum)? price(?: of)?|within)\s+{_AMOUNT}", re.IGNORECASE)),
    ("min", re.compile(rf"\b(?:above|over|more than|min(?:imum)? price(?: of)?|starting(?: from| at)?)\s+{_AMOUNT}", re.IGNORECASE)),
)

CATEGORY_ALIASES = {
    "smartphones": "smartphones",
    "smartphone": "smartphones",
    "mobiles": "smartphones",
    "mobile": "smartphones",
    "phones": "smartphones",
    "phone": "smartphones",
    "laptops": "laptops",
    "laptop": "laptops",
    "computers": "computers",
    "computer": "computers",
    "headphones": "headphones",
    "headphone": "headphones",
    "earphones": "headphones",
    "earphone": "headphones",
    "televisions": "televisions",
    "television": "televisions",
    "tv": "televisions",
    "tvs": "televisions",
}

STOPWORDS = frozenset(
    """
    a an the and or for with without of in on at to from by is are be me my i we you
    show find get give list want need looking look search some any all best good top
    buy cheap price priced cost costs rs inr usd which what that this these those
    product products item items please
    """.split()
)

_TOKEN = re.compile(r"[a-z0-9]+(?:[-'][a-z0-9]+)*")


class ParsedQuery(BaseModel):
    """Structured reading of a search query."""

    text: str = Field(description="Original query")
    keywords: list[str] = Field(default_factory=list, description="Terms for lexical matching")
    category: str | None = Field(default=None, description="Normalized product category")
    min_price: float | None = Field(default=None, description="Lower price bound")
    max_price: float | None = Field(default=None, description="Upper price bound")

    @property
    def type_pattern(self) -> str | None:
        """Substring matched against stored product types ("smartphones" -> "smartphone")."""
        if not self.category:
            return None
        return self.category[:-1] if self.category.endswith("s") else self.category


class QueryParser:
    """Parse catalog search queries."""

    def parse(self, query: str) -> ParsedQuery:
        remaining = query
        min_price = max_price = None

        for kind, pattern in _PRICE_PATTERNS:
            match = pattern.search(remaining)
            if match is None:
                continue
            if kind == "between":
                low = to_amount(match.group(1), match.group(2))
                high = to_amount(match.group(3), match.group(4))
                min_price, max_price = min(low, high), max(low, high)
            elif kind == "max":
                max_price = to_amount(match.group(1), match.group(2))
            else:
                min_price = to_amount(match.group(1), match.group(2))
            remaining = remaining[: match.start()] + " " + remaining[match.end() :]
            break

        category = None
        keywords = []
        for token in _TOKEN.findall(remaining.lower()):
            if token in CATEGORY_ALIASES:
                category = category or CATEGORY_ALIASES[token]
                continue
            if token in STOPWORDS or len(token) <= 1:
                continue
            if token not in keywords:
                keywords.append(token)

        parsed = ParsedQuery(
            text=query,
            keywords=keywords,
            category=category,
            min_price=min_price,
            max_price=max_price,
        )
        if not keywords and category:
            parsed.keywords = [parsed.type_pattern]
        return parsed

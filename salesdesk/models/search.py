"""
Catalog search schemas.

Dependencies: pydantic
System role: Search API contracts
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from salesdesk.core.pricing import PriceInfo
from salesdesk.core.retrieval.query_parser import ParsedQuery
from salesdesk.core.retrieval.retrieval_engine import SearchStrategy


class SearchRequest(BaseModel):
    """Request schema for catalog search."""

    query: str = Field(min_length=1, description="Free-text shopping query")
    document_id: uuid.UUID | None = Field(default=None, description="Search within one catalog document")
    match_count: int | None = Field(default=None, ge=1, description="Results wanted")


class ProductResult(BaseModel):
    """A product in search results."""

    id: uuid.UUID | None = Field(default=None, description="Stored product id; None for generated results")
    document_id: uuid.UUID | None = None
    name: str
    entity_type: str | None = None
    price: str | None = None
    discounted_price: str | None = None
    pricing: PriceInfo | None = Field(default=None, description="Best-effort numeric price reading")
    features: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    rationale: str | None = None
    summary: str | None = None
    source_snippet: str | None = None
    similarity: float | None = None


class SearchResponse(BaseModel):
    """Search results, or an empty list plus an error message."""

    results: list[ProductResult] = Field(default_factory=list)
    strategy: SearchStrategy
    error: str | None = None
    parsed_query: ParsedQuery | None = None


class CompareProduct(BaseModel):
    """A product the user selected for comparison."""

    id: str = Field(min_length=1, description="Client-side product id; recommendations refer to it")
    name: str = Field(min_length=1)
    entity_type: str | None = None
    price: str | None = None
    discounted_price: str | None = None
    features: list[str] = Field(default_factory=list)
    pros: list[str] = Field(default_factory=list)
    cons: list[str] = Field(default_factory=list)
    summary: str | None = None


class CompareQuestion(BaseModel):
    """A clarifying question with answer options."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(min_length=1)
    text: str = Field(min_length=1)
    options: list[str] = Field(min_length=1)


class Recommendation(BaseModel):
    """The best product for the user's answers."""

    recommended_product_id: str
    explanation: str


class AnalyzeRequest(BaseModel):
    """
    Request schema for product comparison.

    Without answers the response carries clarifying questions; with
    answers (question id to chosen option) it carries a recommendation.
    """

    products: list[CompareProduct] = Field(min_length=1, description="Products being compared")
    answers: dict[str, str] | None = Field(default=None, description="Answers keyed by question id")


class AnalyzeResponse(BaseModel):
    questions: list[CompareQuestion] | None = None
    recommendation: Recommendation | None = None

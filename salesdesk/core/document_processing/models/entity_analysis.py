"""
Structured analysis record for one product.

Validated once at the model boundary. Field aliases are the JSON keys
the analysis prompt asks for; downstream code only sees the Python names
and never has to check whether a key was present.

Dependencies: pydantic
System role: Schema for per-product analysis output
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class EntityAnalysis(BaseModel):
    """Analysis of a single product within a document."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, alias="product_name", description="Product name")
    entity_type: str | None = Field(default=None, alias="product_type", description="Product category")
    price: str | None = Field(default=None, description="Listed price, as written")
    discounted_price: str | None = Field(default=None, description="Sale price, as written")
    features: list[str] = Field(default_factory=list, description="Key features")
    pros: list[str] = Field(default_factory=list, description="Advantages")
    cons: list[str] = Field(default_factory=list, description="Drawbacks")
    rationale: str | None = Field(default=None, alias="why_should_i_buy", description="Why buy it")
    summary: str | None = Field(default=None, alias="analysis_summary", description="Short summary")
    source_snippet: str | None = Field(
        default=None,
        alias="source_text_snippet",
        description="Evidence quoted from the document",
    )

    @field_validator(
        "name",
        "entity_type",
        "price",
        "discounted_price",
        "rationale",
        "summary",
        "source_snippet",
        mode="before",
    )
    @classmethod
    def _scalar_text(cls, value: Any) -> Any:
        # Models sometimes emit prices as bare numbers
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            stripped = value.strip()
            return stripped or None
        return value

    @field_validator("features", "pros", "cons", mode="before")
    @classmethod
    def _string_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, list):
            return [str(item).strip() for item in value if item is not None and str(item).strip()]
        return value

"""
Catalog search service.

Searches within one catalog document through the retrieval engine.
Unscoped searches have no corpus to rank, so they ask the generative
model for suggestions instead. Product comparison asks the model for
clarifying questions, then for a recommendation from the answers.

Dependencies: pydantic, sqlalchemy, salesdesk.core.retrieval
System role: Sales AI product search and recommendations
"""

import json
import logging
from typing import Mapping, Sequence
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.application.prompts import (
    COMPARE_QUESTIONS_PROMPT,
    GENERATIVE_SEARCH_PROMPT,
    RECOMMENDATION_PROMPT,
)
from salesdesk.boundary.db.CRUD.document_crud import document_crud
from salesdesk.boundary.llm.gemini import TextGenerator
from salesdesk.configs.retrieval import RetrievalSettings
from salesdesk.core.document_processing.model_output import parse_model_json
from salesdesk.core.document_processing.models.entity_analysis import EntityAnalysis
from salesdesk.core.exceptions import (
    DocumentNotFoundError,
    GenerationError,
    ModelOutputError,
    ValidationError,
)
from salesdesk.core.pricing import parse_price
from salesdesk.core.retrieval.query_parser import QueryParser
from salesdesk.core.retrieval.retrieval_engine import EntityMatch, RetrievalEngine, SearchStrategy
from salesdesk.models.search import (
    CompareProduct,
    CompareQuestion,
    ProductResult,
    Recommendation,
    SearchResponse,
)

logger = logging.getLogger(__name__)

COMPARE_QUESTION_COUNT = 5


def products_json(products: Sequence[CompareProduct]) -> str:
    return json.dumps([product.model_dump(exclude_none=True) for product in products], indent=2, ensure_ascii=False)


class GeneratedCatalog(BaseModel):
    results: list[EntityAnalysis] = Field(default_factory=list)


class GeneratedRecommendation(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    recommended_product_id: str = Field(alias="recommendedProductId", min_length=1)
    explanation: str = Field(min_length=1)


class CatalogSearchService:
    """Product search for the Sales AI assistant."""

    def __init__(
        self,
        db: AsyncSession,
        retrieval_engine: RetrievalEngine,
        generator: TextGenerator,
        settings: RetrievalSettings | None = None,
    ) -> None:
        self.db = db
        self._engine = retrieval_engine
        self._generator = generator
        self._settings = settings or RetrievalSettings()
        self._query_parser = QueryParser()

    async def search(
        self,
        query: str,
        document_id: UUID | None = None,
        match_count: int | None = None,
    ) -> SearchResponse:
        """
        Search products.

        Args:
            query: Free-text query
            document_id: Catalog document to search; None for generative suggestions
            match_count: Results wanted

        Returns:
            SearchResponse: Results best first, or empty results plus an error

        Raises:
            ValidationError: Blank query
            DocumentNotFoundError: document_id does not exist
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="query")

        if document_id is None:
            return await self._generative_search(query, match_count)

        if await document_crud.get_by_id(self.db, document_id) is None:
            raise DocumentNotFoundError(document_id)

        response = await self._engine.search_entities(
            self.db,
            query,
            document_id=document_id,
            match_count=match_count,
            threshold=self._settings.catalog_threshold,
        )
        return SearchResponse(
            results=[self._from_match(match) for match in response.results],
            strategy=response.strategy,
            error=response.error,
            parsed_query=response.parsed_query,
        )

    async def _generative_search(self, query: str, match_count: int | None) -> SearchResponse:
        count = self._engine.clamp_count(match_count)
        parsed = self._query_parser.parse(query)
        prompt = GENERATIVE_SEARCH_PROMPT.format(query=query, count=count)
        try:
            raw = await self._generator.generate(prompt)
        except GenerationError as e:
            logger.error(f"{__name__}:_generative_search - {e}")
            return SearchResponse(
                strategy=SearchStrategy.GENERATIVE,
                error=f"Search failed: {e.message}",
                parsed_query=parsed,
            )

        catalog = parse_model_json(raw, GeneratedCatalog, strict=False)
        if catalog is None:
            return SearchResponse(
                strategy=SearchStrategy.GENERATIVE,
                error="Search failed: the model returned an unusable answer",
                parsed_query=parsed,
            )

        results = [self._from_analysis(item) for item in catalog.results[:count] if item.name]
        return SearchResponse(results=results, strategy=SearchStrategy.GENERATIVE, parsed_query=parsed)

    async def compare_questions(self, products: Sequence[CompareProduct]) -> list[CompareQuestion]:
        """
        Clarifying questions that tell the compared products apart.

        Args:
            products: Products the user is choosing between

        Returns:
            list[CompareQuestion]: Questions with answer options, in model order

        Raises:
            ValidationError: No products
            GenerationError: Model call failed
            ModelOutputError: Output is not a non-empty question list
        """
        if not products:
            raise ValidationError("At least one product is required", field="products")

        prompt = COMPARE_QUESTIONS_PROMPT.format(count=COMPARE_QUESTION_COUNT, products=products_json(products))
        raw = await self._generator.generate(prompt)
        questions = parse_model_json(raw, list[CompareQuestion], strict=True)
        if not questions:
            raise ModelOutputError("Model returned no comparison questions")

        logger.info(
            f"{__name__}:compare_questions - Generated {len(questions)} questions",
            extra={"products": len(products)},
        )
        return questions

    async def recommend(self, products: Sequence[CompareProduct], answers: Mapping[str, str]) -> Recommendation:
        """
        Pick the product that best fits the user's answers.

        Args:
            products: Products the user is choosing between
            answers: Chosen option per question id

        Returns:
            Recommendation: Id of one of the given products and the reasoning

        Raises:
            ValidationError: No products or no answers
            GenerationError: Model call failed
            ModelOutputError: Output unusable or names a product not in the list
        """
        if not products:
            raise ValidationError("At least one product is required", field="products")
        if not answers:
            raise ValidationError("At least one answer is required", field="answers")

        prompt = RECOMMENDATION_PROMPT.format(
            products=products_json(products),
            answers=json.dumps(dict(answers), indent=2, ensure_ascii=False),
        )
        raw = await self._generator.generate(prompt)
        generated = parse_model_json(raw, GeneratedRecommendation, strict=True)

        if generated.recommended_product_id not in {product.id for product in products}:
            raise ModelOutputError(
                "Model recommended a product that was not compared",
                details={"recommended_product_id": generated.recommended_product_id},
            )
        return Recommendation(
            recommended_product_id=generated.recommended_product_id,
            explanation=generated.explanation,
        )

    @staticmethod
    def _from_match(match: EntityMatch) -> ProductResult:
        return ProductResult(
            **match.model_dump(),
            pricing=parse_price(match.price, match.discounted_price),
        )

    @staticmethod
    def _from_analysis(item: EntityAnalysis) -> ProductResult:
        return ProductResult(
            **item.model_dump(by_alias=False),
            pricing=parse_price(item.price, item.discounted_price),
        )

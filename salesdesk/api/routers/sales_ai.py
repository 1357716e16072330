"""
Sales AI API endpoints.

Routes:
- POST /sales-ai/documents - Upload catalog documents
- GET /sales-ai/documents - List searchable catalog documents
- GET /sales-ai/documents/{document_id} - Document detail with analyzed products
- DELETE /sales-ai/documents/{document_id} - Delete a document
- POST /sales-ai/search - Product search
- POST /sales-ai/search/analyze - Comparison questions or a recommendation

Dependencies: salesdesk.application.services, salesdesk.models
System role: Catalog document and product search HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from salesdesk.api.deps import get_catalog_search_service, get_document_service
from salesdesk.api.routers.router_utils import to_http_exception, to_incoming_files
from salesdesk.application.services.catalog_search_service import CatalogSearchService
from salesdesk.application.services.document_service import DocumentService
from salesdesk.boundary.db.models.document_model import DocumentContext
from salesdesk.core.exceptions import SalesDeskException
from salesdesk.models.document import (
    DocumentDetailResponse,
    DocumentListResponse,
    DocumentResponse,
    EntityResponse,
    UploadDocumentsRequest,
)
from salesdesk.models.search import AnalyzeRequest, AnalyzeResponse, SearchRequest, SearchResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sales-ai", tags=["sales-ai"])


@router.post("/documents", response_model=DocumentListResponse, status_code=status.HTTP_201_CREATED)
async def upload_catalog_documents(
    request: UploadDocumentsRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """
    Upload catalog documents and start product analysis.

    Each document is returned with its status right after upload;
    extraction and analysis continue in the background.

    Raises:
        HTTPException(400): Invalid request content
    """
    try:
        documents = await document_service.upload(
            owner=request.uploaded_by,
            files=to_incoming_files(request),
            context=DocumentContext.SALES_AI,
        )
    except SalesDeskException as e:
        raise to_http_exception(e) from e

    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.get("/documents", response_model=DocumentListResponse)
async def list_catalog_documents(
    limit: int = Query(default=100, ge=1, le=500),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List catalog documents ready for search, newest first."""
    documents = await document_service.list_searchable(DocumentContext.SALES_AI, limit=limit)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.get("/documents/{document_id}", response_model=DocumentDetailResponse)
async def get_catalog_document(
    document_id: UUID,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentDetailResponse:
    """
    Get a document with its analyzed products.

    Raises:
        HTTPException(404): Document not found
    """
    try:
        document, entities = await document_service.get_with_entities(document_id)
    except SalesDeskException as e:
        raise to_http_exception(e) from e

    return DocumentDetailResponse(
        **DocumentResponse.model_validate(document).model_dump(),
        entities=[EntityResponse.model_validate(entity) for entity in entities],
    )


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_catalog_document(
    document_id: UUID,
    requested_by: str = Query(min_length=1, description="Identifier of the requesting user"),
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document, its products and its stored file.

    Raises:
        HTTPException(403): Requester is not the uploader
        HTTPException(404): Document not found
    """
    try:
        await document_service.delete(document_id, requested_by)
    except SalesDeskException as e:
        raise to_http_exception(e) from e
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/search", response_model=SearchResponse)
async def search_products(
    request: SearchRequest,
    search_service: CatalogSearchService = Depends(get_catalog_search_service),
) -> SearchResponse:
    """
    Search products by free-text query.

    With document_id the search ranks that catalog's products by
    similarity. Without it the assistant suggests products itself.

    Raises:
        HTTPException(400): Blank query
        HTTPException(404): Document not found
    """
    try:
        return await search_service.search(
            query=request.query,
            document_id=request.document_id,
            match_count=request.match_count,
        )
    except SalesDeskException as e:
        raise to_http_exception(e) from e


@router.post("/search/analyze", response_model=AnalyzeResponse)
async def analyze_products(
    request: AnalyzeRequest,
    search_service: CatalogSearchService = Depends(get_catalog_search_service),
) -> AnalyzeResponse:
    """
    Compare selected products.

    Without answers, returns clarifying questions with answer options.
    With answers, returns the recommended product and why.

    Raises:
        HTTPException(400): Empty answers
        HTTPException(502): Model call failed or returned unusable output
    """
    try:
        if request.answers is None:
            questions = await search_service.compare_questions(request.products)
            return AnalyzeResponse(questions=questions)
        recommendation = await search_service.recommend(request.products, request.answers)
        return AnalyzeResponse(recommendation=recommendation)
    except SalesDeskException as e:
        logger.error(f"{__name__}:analyze_products - {type(e).__name__}: {e.message}")
        raise to_http_exception(e) from e

"""
Support AI API endpoints.

Routes:
- POST /support-ai/documents - Upload support documents
- GET /support-ai/documents - List an owner's support documents
- POST /support-ai/chat - Ask the support assistant

Dependencies: salesdesk.application.services, salesdesk.models
System role: Support document and chat HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from salesdesk.api.deps import get_chat_service, get_document_service
from salesdesk.api.routers.router_utils import to_http_exception, to_incoming_files
from salesdesk.application.services.chat_service import SupportChatService
from salesdesk.application.services.document_service import DocumentService
from salesdesk.boundary.db.models.document_model import DocumentContext
from salesdesk.core.exceptions import SalesDeskException
from salesdesk.models.chat import ChatRequest, ChatResponse
from salesdesk.models.document import (
    DocumentListResponse,
    DocumentResponse,
    UploadDocumentsRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/support-ai", tags=["support-ai"])


@router.post("/documents", response_model=DocumentListResponse, status_code=status.HTTP_201_CREATED)
async def upload_support_documents(
    request: UploadDocumentsRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """
    Upload support documents for chunking and embedding.

    Raises:
        HTTPException(400): Invalid request content
    """
    try:
        documents = await document_service.upload(
            owner=request.uploaded_by,
            files=to_incoming_files(request),
            context=DocumentContext.SUPPORT_AI,
        )
    except SalesDeskException as e:
        raise to_http_exception(e) from e

    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.get("/documents", response_model=DocumentListResponse)
async def list_support_documents(
    owner: str = Query(min_length=1, description="Uploader identifier"),
    limit: int = Query(default=100, ge=1, le=500),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List an owner's support documents with their processing status."""
    documents = await document_service.list_for_owner(owner, context=DocumentContext.SUPPORT_AI, limit=limit)
    return DocumentListResponse(
        documents=[DocumentResponse.model_validate(document) for document in documents],
        total=len(documents),
    )


@router.post("/chat", response_model=ChatResponse)
async def support_chat(
    request: ChatRequest,
    chat_service: SupportChatService = Depends(get_chat_service),
) -> ChatResponse:
    """
    Answer a support question from the uploaded support documents.

    Raises:
        HTTPException(400): Blank message
    """
    try:
        return await chat_service.reply(request.message, request.conversation_history)
    except SalesDeskException as e:
        raise to_http_exception(e) from e

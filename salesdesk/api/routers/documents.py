"""
Pipeline control endpoints.

Routes: POST /documents/{document_id}/reprocess

Dependencies: salesdesk.application.services, salesdesk.models
System role: Manual stage re-trigger for stuck or failed documents
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from salesdesk.api.deps import get_document_service
from salesdesk.api.routers.router_utils import to_http_exception
from salesdesk.application.services.document_service import DocumentService
from salesdesk.core.exceptions import SalesDeskException
from salesdesk.models.document import ReprocessRequest, ReprocessResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/{document_id}/reprocess",
    response_model=ReprocessResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def reprocess_document(
    document_id: UUID,
    request: ReprocessRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> ReprocessResponse:
    """
    Dispatch a pipeline stage again for a document.

    Raises:
        HTTPException(404): Document not found
        HTTPException(503): Stage could not be enqueued
    """
    try:
        message = await document_service.reprocess(document_id, request.stage, force=request.force)
    except SalesDeskException as e:
        raise to_http_exception(e) from e

    logger.info(
        f"{__name__}:reprocess_document - Stage dispatched",
        extra={"document_id": str(document_id), "stage": message.stage.value, "force": request.force},
    )
    return ReprocessResponse(document_id=document_id, stage=message.stage)

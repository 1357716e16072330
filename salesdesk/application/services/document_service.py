"""
Document service.

Accepts uploads, hands them to the ingestion pipeline, and serves the
listing, detail, deletion and re-run operations behind the document
routes of both assistants.

Dependencies: sqlalchemy, salesdesk.boundary, salesdesk.core
System role: Document lifecycle management
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.boundary.db.CRUD.chunk_crud import chunk_crud
from salesdesk.boundary.db.CRUD.document_crud import document_crud
from salesdesk.boundary.db.CRUD.entity_crud import entity_crud
from salesdesk.boundary.db.models.document_model import (
    SEARCHABLE_STATUSES,
    DocumentContext,
    DocumentStatus,
    UploadedDocumentModel,
)
from salesdesk.boundary.db.models.entity_model import ExtractedEntityModel
from salesdesk.boundary.storage.blob_store import BlobStore
from salesdesk.core.document_processing.database.document_status_updater import (
    DocumentStatusUpdater,
)
from salesdesk.core.document_processing.dispatch import StageDispatcher
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.exceptions import (
    BlobStoreError,
    DispatchError,
    DocumentNotFoundError,
    PermissionDeniedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def safe_filename(name: str) -> str:
    """Filename with every character outside [a-zA-Z0-9._-] replaced by '_'."""
    cleaned = _UNSAFE_CHARS.sub("_", name.strip()).strip("._")
    return cleaned or "file"


@dataclass(frozen=True)
class IncomingFile:
    """File content received by an upload request."""

    name: str
    media_type: str
    data: bytes
    size_bytes: int | None = None


class DocumentService:
    """
    Document lifecycle operations.

    Upload writes the blob and the row, then dispatches extraction.
    Everything after that happens in the pipeline.
    """

    def __init__(
        self,
        db: AsyncSession,
        blob_store: BlobStore,
        dispatcher: StageDispatcher,
        bucket: str,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            blob_store: Storage for uploaded bytes
            dispatcher: Stage hand-off for extraction and re-runs
            bucket: Bucket new uploads are written to
        """
        self.db = db
        self._blob_store = blob_store
        self._dispatcher = dispatcher
        self._bucket = bucket

    async def upload(
        self,
        owner: str,
        files: Sequence[IncomingFile],
        context: DocumentContext,
    ) -> list[UploadedDocumentModel]:
        """
        Store files and start ingestion for each.

        A file that cannot be stored still gets a row, in
        upload_to_storage_failed, so the user sees what happened.

        Args:
            owner: Uploader identifier
            files: Files to upload
            context: Assistant the documents belong to

        Returns:
            list[UploadedDocumentModel]: One row per file, in request order

        Raises:
            ValidationError: Missing owner or files
        """
        if not owner or not owner.strip():
            raise ValidationError("Uploader is required", field="uploaded_by")
        if not files:
            raise ValidationError("No files provided", field="files")

        owner_prefix = safe_filename(owner.split("@", 1)[0])
        documents = []
        for incoming in files:
            path = f"{owner_prefix}/{int(time.time() * 1000)}_{safe_filename(incoming.name)}"
            storage_path: str | None = path
            status = DocumentStatus.UPLOADED
            error_message = None
            try:
                await self._blob_store.put(self._bucket, path, incoming.data, incoming.media_type)
            except BlobStoreError as e:
                logger.error(
                    f"{__name__}:upload - Storage upload failed",
                    extra={"document_name": incoming.name, "error": str(e)},
                )
                storage_path = None
                status = DocumentStatus.UPLOAD_TO_STORAGE_FAILED
                error_message = f"Upload to storage failed: {e.message}"

            document = await document_crud.create(
                self.db,
                owner=owner,
                name=incoming.name,
                media_type=incoming.media_type,
                size_bytes=incoming.size_bytes if incoming.size_bytes is not None else len(incoming.data),
                storage_bucket=self._bucket,
                storage_path=storage_path,
                status=status,
                error_message=error_message,
                context=context,
            )
            documents.append(document)

        await self.db.commit()

        for document in documents:
            if document.status is DocumentStatus.UPLOADED:
                await self._dispatch_extraction(document)

        logger.info(
            f"{__name__}:upload - Accepted {len(documents)} documents",
            extra={"owner": owner, "context": context.value},
        )
        return documents

    async def _dispatch_extraction(self, document: UploadedDocumentModel) -> None:
        message = StageMessage(
            document_id=document.id,
            stage=PipelineStage.EXTRACTION,
            bucket=document.storage_bucket,
            storage_path=document.storage_path,
            media_type=document.media_type,
        )
        try:
            await self._dispatcher.dispatch(message)
        except DispatchError as e:
            error_message = f"Invoking extraction stage failed: {e.message}"
            await DocumentStatusUpdater(self.db).transition(
                document.id, DocumentStatus.ANALYSIS_INVOCATION_FAILED, error_message
            )
            await self.db.refresh(document)

    async def list_searchable(
        self,
        context: DocumentContext = DocumentContext.SALES_AI,
        limit: int = 100,
    ) -> Sequence[UploadedDocumentModel]:
        """Documents that finished analysis (or were stored without text), newest first."""
        return await document_crud.get_by_statuses(self.db, SEARCHABLE_STATUSES, context=context, limit=limit)

    async def list_for_owner(
        self,
        owner: str,
        context: DocumentContext | None = None,
        limit: int = 100,
    ) -> Sequence[UploadedDocumentModel]:
        return await document_crud.get_by_owner(self.db, owner, context=context, limit=limit)

    async def get_document(self, document_id: UUID) -> UploadedDocumentModel:
        """
        Raises:
            DocumentNotFoundError: No such document
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return document

    async def get_with_entities(
        self,
        document_id: UUID,
    ) -> tuple[UploadedDocumentModel, Sequence[ExtractedEntityModel]]:
        document = await self.get_document(document_id)
        entities = await entity_crud.get_by_document(self.db, document_id)
        return document, entities

    async def delete(self, document_id: UUID, requested_by: str) -> None:
        """
        Delete a document, its derived rows and its blob.

        A blob store failure is logged and does not stop the deletion.

        Args:
            document_id: Document to delete
            requested_by: Identifier of the requesting user

        Raises:
            DocumentNotFoundError: No such document
            PermissionDeniedError: Requester does not own the document
        """
        document = await self.get_document(document_id)
        if document.owner != requested_by:
            raise PermissionDeniedError(
                "Only the uploader can delete this document",
                {"document_id": str(document_id)},
            )

        try:
            await entity_crud.delete_by_document(self.db, document_id)
            await chunk_crud.delete_by_document(self.db, document_id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:delete - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        if document.storage_path:
            try:
                await self._blob_store.delete(document.storage_bucket, [document.storage_path])
            except BlobStoreError as e:
                logger.error(
                    f"{__name__}:delete - Blob removal failed, deleting record anyway",
                    extra={"document_id": str(document_id), "error": str(e)},
                )

        try:
            await document_crud.delete_by_id(self.db, document_id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:delete - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(f"{__name__}:delete - Document deleted", extra={"document_id": str(document_id)})

    async def reprocess(self, document_id: UUID, stage: PipelineStage, force: bool = False) -> StageMessage:
        """
        Re-dispatch a pipeline stage for a document.

        Recovery path for documents stuck after a crash or a failed
        dispatch. The stage itself checks whether it may run.

        Raises:
            DocumentNotFoundError: No such document
            DispatchError: The stage could not be enqueued
        """
        document = await self.get_document(document_id)
        message = StageMessage(
            document_id=document.id,
            stage=stage,
            bucket=document.storage_bucket,
            storage_path=document.storage_path,
            media_type=document.media_type,
            force=force,
        )
        await self._dispatcher.dispatch(message)
        return message

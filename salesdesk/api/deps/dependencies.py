"""
Dependency injection factories.

Factory functions for FastAPI dependencies. Each request gets its own
AsyncSession; clients come from the process-wide ServiceContainer.

Dependencies: fastapi, salesdesk.configs, salesdesk.application, salesdesk.dependencies
System role: DI factories for service injection
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.application.services import (
    CatalogSearchService,
    DocumentService,
    SupportChatService,
)
from salesdesk.boundary.db import get_async_db
from salesdesk.configs import Settings, get_settings
from salesdesk.dependencies import ServiceContainer


@lru_cache
def get_service_container() -> ServiceContainer:
    """Get service container singleton."""
    return ServiceContainer(get_settings())


def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_document_service(db: AsyncSession = Depends(get_async_db)) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        DocumentService: Document service wired to the blob store and stage dispatcher
    """
    container = get_service_container()
    # The dispatcher only runs stages once the orchestrator is bound to it
    _ = container.orchestrator
    return DocumentService(
        db=db,
        blob_store=container.blob_store,
        dispatcher=container.dispatcher,
        bucket=container.settings.s3_documents.bucket,
    )


def get_catalog_search_service(db: AsyncSession = Depends(get_async_db)) -> CatalogSearchService:
    """
    Get catalog search service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        CatalogSearchService: Search service with retrieval engine and generative fallback
    """
    container = get_service_container()
    return CatalogSearchService(
        db=db,
        retrieval_engine=container.retrieval_engine,
        generator=container.analysis_generator,
        settings=container.settings.retrieval,
    )


def get_chat_service(db: AsyncSession = Depends(get_async_db)) -> SupportChatService:
    """
    Get support chat service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SupportChatService: Chat service with chunk retrieval
    """
    container = get_service_container()
    return SupportChatService(
        db=db,
        retrieval_engine=container.retrieval_engine,
        generator=container.chat_generator,
        settings=container.settings.retrieval,
    )

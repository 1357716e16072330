"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, uvicorn, salesdesk.api.routers
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from salesdesk.api.deps.dependencies import get_service_container
from salesdesk.configs import get_settings
from salesdesk.core.document_processing.dispatch import InProcessDispatcher
from salesdesk.observability import configure_logging
from salesdesk.observability.middleware import RequestLoggingMiddleware

from .routers import (
    documents_router,
    health_router,
    sales_ai_router,
    support_ai_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging and, for the in-process dispatcher, starts the
    stage workers on startup and drains them on shutdown.
    """
    settings = get_settings()
    configure_logging(settings.observability)
    logger = logging.getLogger(__name__)

    # Startup
    container = get_service_container()
    dispatcher = None
    if settings.pipeline.dispatcher == "inprocess":
        _ = container.orchestrator
        dispatcher = container.dispatcher
        if isinstance(dispatcher, InProcessDispatcher):
            await dispatcher.start()
            logger.info("In-process stage dispatcher started")

    yield

    # Shutdown
    if isinstance(dispatcher, InProcessDispatcher):
        await dispatcher.stop()
        logger.info("In-process stage dispatcher stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    settings = get_settings()
    app = FastAPI(
        title="SalesDesk AI API",
        description="Catalog product search and document-grounded support chat",
        version="0.1.0",
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.observability.request_logging:
        app.add_middleware(RequestLoggingMiddleware)

    # Register all routers with /api/v1 prefix for versioning
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(sales_ai_router, prefix="/api/v1")
    app.include_router(support_ai_router, prefix="/api/v1")
    app.include_router(documents_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "salesdesk.api.main:app",
        host="0.0.0.0",
        port=8000,
    )

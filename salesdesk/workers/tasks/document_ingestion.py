"""
Document ingestion Celery tasks.

Tasks: extract_document_text(message), analyze_document(message)
Flow: StageMessage payload -> IngestionOrchestrator stage -> StageResult dict

Stage failures are written to the document by the orchestrator, so the
tasks are not retried; a re-run goes through the reprocess endpoint.

Dependencies: celery, python-dotenv, salesdesk.dependencies
System role: Worker-side entry points for pipeline stages
"""

import asyncio
import logging
from typing import Any

from dotenv import load_dotenv
from sqlalchemy.ext.asyncio import async_sessionmaker

from salesdesk.boundary.db.connection import build_async_engine
from salesdesk.configs import get_settings
from salesdesk.core.document_processing.dispatch import CeleryDispatcher
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.dependencies import ServiceContainer
from salesdesk.observability import configure_logging
from salesdesk.workers import celery_app, celery_config

load_dotenv()

logger = logging.getLogger(__name__)


def _run_stage(payload: dict[str, Any], expected: PipelineStage) -> dict[str, Any]:
    message = StageMessage.model_validate(payload)
    if message.stage is not expected:
        raise ValueError(f"Task for {expected.value} received a {message.stage.value} message")

    settings = get_settings()
    configure_logging(settings.observability)

    async def _handle() -> dict[str, Any]:
        # Engines are bound to the loop that created them; one per task run
        engine = build_async_engine(settings.database)
        session_factory = async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        container = ServiceContainer(
            settings,
            session_factory=session_factory,
            dispatcher=CeleryDispatcher(celery_app, settings.celery),
        )
        try:
            result = await container.orchestrator.handle(message)
        finally:
            await engine.dispose()
        return result.model_dump(mode="json")

    logger.info(
        f"{__name__}:_run_stage - Running stage",
        extra={"document_id": str(message.document_id), "stage": message.stage.value},
    )
    return asyncio.run(_handle())


@celery_app.task(name=celery_config.extraction_task)
def extract_document_text(message: dict[str, Any]) -> dict[str, Any]:
    """
    Run the extraction stage.

    Args:
        message: StageMessage as JSON

    Returns:
        dict: StageResult as JSON
    """
    return _run_stage(message, PipelineStage.EXTRACTION)


@celery_app.task(name=celery_config.analysis_task)
def analyze_document(message: dict[str, Any]) -> dict[str, Any]:
    """
    Run the analysis stage.

    Args:
        message: StageMessage as JSON

    Returns:
        dict: StageResult as JSON
    """
    return _run_stage(message, PipelineStage.ANALYSIS)

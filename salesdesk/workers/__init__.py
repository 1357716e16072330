"""
Celery workers module.

Background execution of the extraction and analysis stages.

Dependencies: celery, salesdesk.configs
System role: Background task processing
"""

from celery import Celery

from salesdesk.configs import get_settings

settings = get_settings()
celery_config = settings.celery

celery_app = Celery(
    "salesdesk",
    broker=celery_config.broker_url,
    backend=celery_config.result_backend,
    include=["salesdesk.workers.tasks.document_ingestion"],
)

celery_app.conf.update(
    task_serializer=celery_config.task_serializer,
    accept_content=celery_config.accept_content,
    timezone=celery_config.timezone,
    task_ignore_result=celery_config.result_backend is None,
)

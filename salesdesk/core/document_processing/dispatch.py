"""
Stage dispatchers.

Hand-off between pipeline stages is fire-and-forget: the triggering
stage enqueues a StageMessage and returns. A dispatcher only reports
whether the message was accepted; DispatchError means it was not.

Dependencies: asyncio, celery
System role: Message passing between pipeline stages
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol

from celery import Celery

from salesdesk.configs.celery_config import CelerySettings
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.exceptions import DispatchError

logger = logging.getLogger(__name__)

StageHandler = Callable[[StageMessage], Awaitable[Any]]


class StageDispatcher(Protocol):
    async def dispatch(self, message: StageMessage) -> None:
        """Enqueue a message. Raises DispatchError when it cannot be accepted."""
        ...


class InProcessDispatcher:
    """
    asyncio.Queue backed dispatcher for a single process.

    Consumer tasks pull messages and run the bound handler. Messages
    dispatched before start() or after stop() are rejected.
    """

    def __init__(self, workers: int = 2, maxsize: int = 0) -> None:
        """
        Args:
            workers: Number of consumer tasks
            maxsize: Queue capacity; 0 is unbounded
        """
        self._workers = workers
        self._queue: asyncio.Queue[StageMessage] = asyncio.Queue(maxsize=maxsize)
        self._handler: StageHandler | None = None
        self._tasks: list[asyncio.Task] = []
        self._accepting = False

    def bind(self, handler: StageHandler) -> None:
        """Set the coroutine that processes each message."""
        self._handler = handler

    @property
    def running(self) -> bool:
        return self._accepting

    async def start(self) -> None:
        if self._handler is None:
            raise RuntimeError("InProcessDispatcher.start() called before bind()")
        if self._accepting:
            return
        self._accepting = True
        self._tasks = [
            asyncio.create_task(self._consume(index), name=f"stage-consumer-{index}")
            for index in range(self._workers)
        ]
        logger.info(f"{__name__}:start - Started {self._workers} stage consumers")

    async def dispatch(self, message: StageMessage) -> None:
        if not self._accepting:
            raise DispatchError("Stage dispatcher is not running", stage=message.stage.value)
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull as e:
            raise DispatchError("Stage queue is full", stage=message.stage.value) from e
        logger.info(
            f"{__name__}:dispatch - Enqueued stage",
            extra={"document_id": str(message.document_id), "stage": message.stage.value},
        )

    async def join(self) -> None:
        """Wait until every enqueued message, including follow-up stages, is processed."""
        await self._queue.join()

    async def stop(self) -> None:
        """Stop accepting, cancel consumers. Messages still queued are dropped."""
        self._accepting = False
        for task in self._tasks:
            task.cancel()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []

    async def _consume(self, index: int) -> None:
        while True:
            message = await self._queue.get()
            try:
                await self._handler(message)
            except Exception:
                # Stage failures are already recorded on the document
                logger.exception(
                    f"{__name__}:_consume - Stage handler raised",
                    extra={
                        "consumer": index,
                        "document_id": str(message.document_id),
                        "stage": message.stage.value,
                    },
                )
            finally:
                self._queue.task_done()


class CeleryDispatcher:
    """Dispatcher that sends stage messages to Celery workers."""

    def __init__(self, app: Celery, settings: CelerySettings) -> None:
        self._app = app
        self._task_names = {
            PipelineStage.EXTRACTION: settings.extraction_task,
            PipelineStage.ANALYSIS: settings.analysis_task,
        }

    async def dispatch(self, message: StageMessage) -> None:
        task_name = self._task_names[message.stage]
        try:
            await asyncio.to_thread(
                self._app.send_task,
                task_name,
                kwargs={"message": message.model_dump(mode="json")},
            )
        except Exception as e:
            raise DispatchError(f"Failed to send {task_name}: {e}", stage=message.stage.value) from e
        logger.info(
            f"{__name__}:dispatch - Sent stage task",
            extra={"document_id": str(message.document_id), "task": task_name},
        )

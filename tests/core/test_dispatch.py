"""
Tests for stage dispatchers.

System role: Verification of in-process and Celery stage hand-off
"""

import uuid
from unittest.mock import MagicMock

import pytest

from salesdesk.configs.celery_config import CelerySettings
from salesdesk.core.document_processing.dispatch import CeleryDispatcher, InProcessDispatcher
from salesdesk.core.document_processing.models.stage_message import PipelineStage, StageMessage
from salesdesk.core.exceptions import DispatchError


def message(stage: PipelineStage = PipelineStage.ANALYSIS) -> StageMessage:
    return StageMessage(document_id=uuid.uuid4(), stage=stage)


class TestInProcessDispatcher:
    """Test suite for InProcessDispatcher."""

    @pytest.mark.asyncio
    async def test_start_requires_handler(self) -> None:
        with pytest.raises(RuntimeError):
            await InProcessDispatcher().start()

    @pytest.mark.asyncio
    async def test_dispatch_before_start_is_rejected(self) -> None:
        dispatcher = InProcessDispatcher()

        with pytest.raises(DispatchError, match="not running"):
            await dispatcher.dispatch(message())

    @pytest.mark.asyncio
    async def test_messages_reach_handler(self) -> None:
        # Arrange
        handled: list[StageMessage] = []

        async def handler(msg: StageMessage) -> None:
            handled.append(msg)

        dispatcher = InProcessDispatcher(workers=2)
        dispatcher.bind(handler)
        await dispatcher.start()
        sent = [message(), message(PipelineStage.EXTRACTION)]

        # Act
        for msg in sent:
            await dispatcher.dispatch(msg)
        await dispatcher.join()
        await dispatcher.stop()

        # Assert
        assert sorted(m.document_id for m in handled) == sorted(m.document_id for m in sent)
        assert dispatcher.running is False

    @pytest.mark.asyncio
    async def test_handler_error_does_not_stop_consumer(self) -> None:
        # Arrange
        handled: list[StageMessage] = []

        async def handler(msg: StageMessage) -> None:
            handled.append(msg)
            if len(handled) == 1:
                raise RuntimeError("stage crashed")

        dispatcher = InProcessDispatcher(workers=1)
        dispatcher.bind(handler)
        await dispatcher.start()

        # Act
        await dispatcher.dispatch(message())
        await dispatcher.dispatch(message())
        await dispatcher.join()
        await dispatcher.stop()

        # Assert
        assert len(handled) == 2

    @pytest.mark.asyncio
    async def test_full_queue_is_rejected(self) -> None:
        dispatcher = InProcessDispatcher(workers=0, maxsize=1)
        dispatcher.bind(MagicMock())
        await dispatcher.start()

        await dispatcher.dispatch(message())
        with pytest.raises(DispatchError, match="full"):
            await dispatcher.dispatch(message())

        await dispatcher.stop()

    @pytest.mark.asyncio
    async def test_dispatch_after_stop_is_rejected(self) -> None:
        dispatcher = InProcessDispatcher(workers=1)
        dispatcher.bind(MagicMock())
        await dispatcher.start()
        await dispatcher.stop()

        with pytest.raises(DispatchError):
            await dispatcher.dispatch(message())


class TestCeleryDispatcher:
    """Test suite for CeleryDispatcher."""

    @pytest.mark.asyncio
    async def test_sends_task_named_for_stage(self) -> None:
        # Arrange
        app = MagicMock()
        settings = CelerySettings()
        dispatcher = CeleryDispatcher(app, settings)
        msg = message(PipelineStage.EXTRACTION)

        # Act
        await dispatcher.dispatch(msg)

        # Assert
        app.send_task.assert_called_once_with(
            settings.extraction_task,
            kwargs={"message": msg.model_dump(mode="json")},
        )

    @pytest.mark.asyncio
    async def test_broker_failure_is_dispatch_error(self) -> None:
        app = MagicMock()
        app.send_task.side_effect = ConnectionError("Connection refused")
        dispatcher = CeleryDispatcher(app, CelerySettings())

        with pytest.raises(DispatchError, match="Connection refused"):
            await dispatcher.dispatch(message())

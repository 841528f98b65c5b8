"""Testes de classificação por lane e do PriorityDispatcher."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import pytest

from app.domain.message_record import MessageRecord
from app.infra.queues import MemoryLaneQueue
from app.queue import Lane, PriorityDispatcher, classify_lane, derive_tags
from fsm.states import DeliveryStatus


def _record(message_type: str = "text", chat: str = "5511999999999@s.whatsapp.net"):
    return MessageRecord(
        sender="5511999999999@s.whatsapp.net",
        chat=chat,
        type=message_type,
        sending_time=datetime(2026, 3, 1, tzinfo=UTC),
        content="oi",
    )


class TestClassifyLane:
    @pytest.mark.parametrize(
        ("message_type", "lane"),
        [
            ("text", Lane.HIGH),
            ("reaction", Lane.HIGH),
            ("image", Lane.DEFAULT),
            ("audio", Lane.DEFAULT),
            ("video", Lane.LOW),
            ("document", Lane.LOW),
            ("poll-update", Lane.DEFAULT),
        ],
    )
    def test_type_to_lane(self, message_type: str, lane: Lane) -> None:
        assert classify_lane(message_type) == lane


class TestDeriveTags:
    def test_chat_tag_truncated(self) -> None:
        tags = derive_tags(_record(chat="120363012345678901234@g.us"))
        assert tags == ("whatsapp", "type:text", "chat:12036301234567890123")


class TestPriorityDispatcher:
    @pytest.mark.asyncio
    async def test_dispatch_enqueues_fresh_attempt_state(self) -> None:
        queue = MemoryLaneQueue(clock=lambda: 1000.0)
        dispatcher = PriorityDispatcher(
            queue,
            max_attempts=3,
            backoff_schedule=(5.0, 15.0, 30.0),
            id_factory=lambda: "item-1",
            clock=lambda: 1000.0,
        )

        assignment = await dispatcher.dispatch(_record("video"), correlation_id="corr-1")

        assert assignment.lane == Lane.LOW
        assert assignment.item_id == "item-1"
        assert await queue.depth(Lane.LOW) == 1

        leased = await queue.dequeue()
        assert leased is not None
        item = leased.item
        assert item.attempt.status == DeliveryStatus.PENDING
        assert item.attempt.attempts_made == 0
        assert item.attempt.max_attempts == 3
        assert item.correlation_id == "corr-1"
        assert item.enqueued_at == 1000.0
        assert MessageRecord.from_dict(item.record) == _record("video")

    @pytest.mark.asyncio
    async def test_dispatch_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        dispatcher = PriorityDispatcher(MemoryLaneQueue())

        with caplog.at_level(logging.INFO):
            assignment = await dispatcher.dispatch(_record("text"))

        records = [r for r in caplog.records if r.message == "message_dispatched"]
        assert len(records) == 1
        assert records[0].lane == "high"
        assert records[0].item_id == assignment.item_id

"""Testes do MemoryLaneQueue (FIFO, prioridade, lease, atraso)."""

from __future__ import annotations

import asyncio

import pytest

from app.infra.queues import MemoryLaneQueue
from app.queue import Lane, QueuedItem
from fsm.types.attempt import DeliveryAttemptState


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _item(item_id: str, lane: Lane = Lane.HIGH) -> QueuedItem:
    return QueuedItem(
        item_id=item_id,
        lane=lane,
        record={"sender": "5511", "chat": "5511", "type": "text"},
        attempt=DeliveryAttemptState.fresh(),
    )


class TestOrdering:
    @pytest.mark.asyncio
    async def test_fifo_within_lane(self) -> None:
        queue = MemoryLaneQueue()
        for item_id in ("a", "b", "c"):
            await queue.enqueue(_item(item_id))

        order = [(await queue.dequeue()).item.item_id for _ in range(3)]

        assert order == ["a", "b", "c"]
        assert await queue.dequeue() is None

    @pytest.mark.asyncio
    async def test_high_drained_before_default_before_low(self) -> None:
        queue = MemoryLaneQueue()
        await queue.enqueue(_item("low-1", Lane.LOW))
        await queue.enqueue(_item("default-1", Lane.DEFAULT))
        await queue.enqueue(_item("high-1", Lane.HIGH))
        await queue.enqueue(_item("high-2", Lane.HIGH))

        order = [(await queue.dequeue()).item.item_id for _ in range(4)]

        assert order == ["high-1", "high-2", "default-1", "low-1"]


class TestLeases:
    @pytest.mark.asyncio
    async def test_concurrent_dequeue_never_duplicates(self) -> None:
        queue = MemoryLaneQueue()
        for index in range(50):
            await queue.enqueue(_item(f"item-{index}", list(Lane)[index % 3]))

        results = await asyncio.gather(*(queue.dequeue() for _ in range(80)))
        ids = [leased.item.item_id for leased in results if leased is not None]

        assert len(ids) == 50
        assert len(set(ids)) == 50
        assert await queue.leased_count() == 50

    @pytest.mark.asyncio
    async def test_ack_releases_lease(self) -> None:
        queue = MemoryLaneQueue()
        await queue.enqueue(_item("a"))
        leased = await queue.dequeue()

        await queue.ack(leased)

        assert await queue.leased_count() == 0
        assert await queue.depth(Lane.HIGH) == 0


class TestDelayedRetry:
    @pytest.mark.asyncio
    async def test_item_not_visible_before_delay(self) -> None:
        clock = FakeClock()
        queue = MemoryLaneQueue(clock=clock)
        await queue.enqueue(_item("a", Lane.DEFAULT))
        leased = await queue.dequeue()

        await queue.retry_later(leased, leased.item, delay_seconds=5.0)

        assert await queue.leased_count() == 0
        assert await queue.delayed_count() == 1
        clock.now += 4.9
        assert await queue.promote_due() == 0
        assert await queue.dequeue() is None

        clock.now += 0.1
        assert await queue.promote_due() == 1
        again = await queue.dequeue()
        assert again.item.item_id == "a"
        assert again.item.lane == Lane.DEFAULT

    @pytest.mark.asyncio
    async def test_retry_keeps_updated_attempt_state(self) -> None:
        clock = FakeClock()
        queue = MemoryLaneQueue(clock=clock)
        await queue.enqueue(_item("a"))
        leased = await queue.dequeue()
        updated = leased.item.with_attempt(
            DeliveryAttemptState(attempts_made=1, last_error="boom")
        )

        await queue.retry_later(leased, updated, delay_seconds=0)
        await queue.promote_due()

        again = await queue.dequeue()
        assert again.item.attempt.attempts_made == 1
        assert again.item.attempt.last_error == "boom"

    @pytest.mark.asyncio
    async def test_ping(self) -> None:
        assert await MemoryLaneQueue().ping() is True

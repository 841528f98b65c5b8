"""Despacho de MessageRecord para a lane de prioridade."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.protocols.clock import epoch_seconds
from app.queue.items import QueuedItem
from app.queue.lanes import Lane, classify_lane
from fsm.types.attempt import (
    DEFAULT_BACKOFF_SCHEDULE,
    DEFAULT_MAX_ATTEMPTS,
    DeliveryAttemptState,
)

if TYPE_CHECKING:
    from app.domain.message_record import MessageRecord
    from app.protocols.queue import LaneQueueProtocol

logger = logging.getLogger(__name__)

CHAT_TAG_LENGTH = 20


@dataclass(frozen=True, slots=True)
class LaneAssignment:
    lane: Lane
    item_id: str
    tags: tuple[str, ...]


def derive_tags(record: MessageRecord) -> tuple[str, ...]:
    """Tags de agrupamento do item."""
    return (
        "whatsapp",
        f"type:{record.type}",
        f"chat:{record.chat[:CHAT_TAG_LENGTH]}",
    )


def _new_item_id() -> str:
    return uuid.uuid4().hex


class PriorityDispatcher:
    """Classifica o record, cria o estado de tentativas e enfileira.

    Args:
        queue: Backend de filas
        max_attempts: Limite de tentativas por item
        backoff_schedule: Atrasos entre tentativas (segundos)
        id_factory: Gerador de item_id
        clock: Fonte de epoch (s) para enqueued_at
    """

    def __init__(
        self,
        queue: LaneQueueProtocol,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_schedule: tuple[float, ...] = DEFAULT_BACKOFF_SCHEDULE,
        id_factory: Callable[[], str] = _new_item_id,
        clock: Callable[[], float] = epoch_seconds,
    ) -> None:
        self._queue = queue
        self._max_attempts = max_attempts
        self._backoff_schedule = backoff_schedule
        self._id_factory = id_factory
        self._clock = clock

    async def dispatch(
        self,
        record: MessageRecord,
        correlation_id: str = "",
    ) -> LaneAssignment:
        """Enfileira o record com estado PENDING e attempts_made=0.

        Raises:
            QueueConnectionError: backend indisponível
        """
        lane = classify_lane(record.type)
        tags = derive_tags(record)
        item = QueuedItem(
            item_id=self._id_factory(),
            lane=lane,
            record=record.to_dict(),
            attempt=DeliveryAttemptState.fresh(self._max_attempts, self._backoff_schedule),
            tags=tags,
            correlation_id=correlation_id,
            enqueued_at=self._clock(),
        )
        await self._queue.enqueue(item)

        logger.info(
            "message_dispatched",
            extra={
                "item_id": item.item_id,
                "lane": lane.value,
                "message_type": record.type,
                "tags": list(tags),
                "correlation_id": correlation_id,
            },
        )
        return LaneAssignment(lane=lane, item_id=item.item_id, tags=tags)

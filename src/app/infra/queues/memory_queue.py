"""Fila por lanes em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios
e restrita a um único processo.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from collections import deque
from collections.abc import Callable

from app.protocols.clock import epoch_seconds
from app.protocols.queue import LaneQueueProtocol
from app.queue.items import LeasedItem, QueuedItem
from app.queue.lanes import LANE_PRIORITY, Lane

logger = logging.getLogger(__name__)


class MemoryLaneQueue(LaneQueueProtocol):
    """Fila em memória com lanes FIFO, conjunto atrasado e tabela de leases.

    Itens são guardados serializados para manter a semântica "por valor"
    dos backends reais.

    Args:
        clock: Fonte de epoch (s); injetável para testes de backoff
    """

    def __init__(self, clock: Callable[[], float] = epoch_seconds) -> None:
        self._clock = clock
        self._lock = asyncio.Lock()
        self._pending: dict[Lane, deque[str]] = {lane: deque() for lane in Lane}
        self._delayed: list[tuple[float, int, str]] = []
        self._leases: dict[str, str] = {}
        self._sequence = itertools.count()

    async def enqueue(self, item: QueuedItem) -> None:
        async with self._lock:
            self._pending[item.lane].append(item.to_json())

    async def dequeue(self) -> LeasedItem | None:
        async with self._lock:
            for lane in LANE_PRIORITY:
                lane_items = self._pending[lane]
                if not lane_items:
                    continue
                raw = lane_items.popleft()
                item = QueuedItem.from_json(raw)
                self._leases[item.item_id] = raw
                return LeasedItem(item=item, raw=raw)
        return None

    async def ack(self, leased: LeasedItem) -> None:
        async with self._lock:
            self._leases.pop(leased.item.item_id, None)

    async def retry_later(
        self,
        leased: LeasedItem,
        updated: QueuedItem,
        delay_seconds: float,
    ) -> None:
        eligible_at = self._clock() + max(delay_seconds, 0.0)
        async with self._lock:
            self._leases.pop(leased.item.item_id, None)
            heapq.heappush(
                self._delayed,
                (eligible_at, next(self._sequence), updated.to_json()),
            )

    async def promote_due(self) -> int:
        now = self._clock()
        promoted = 0
        async with self._lock:
            while self._delayed and self._delayed[0][0] <= now:
                _, _, raw = heapq.heappop(self._delayed)
                item = QueuedItem.from_json(raw)
                self._pending[item.lane].append(raw)
                promoted += 1
        if promoted:
            logger.debug("queue_delayed_promoted", extra={"count": promoted})
        return promoted

    async def depth(self, lane: Lane) -> int:
        async with self._lock:
            return len(self._pending[lane])

    async def delayed_count(self) -> int:
        async with self._lock:
            return len(self._delayed)

    async def leased_count(self) -> int:
        async with self._lock:
            return len(self._leases)

    async def ping(self) -> bool:
        return True

"""Redis Lane Queue: fila confiável por lanes com reentrega atrasada.

Padrão reliable queue por lane:
    {prefix}lanes:{lane}             LIST  pendentes (LPUSH / LMOVE RIGHT)
    {prefix}lanes:{lane}:processing  LIST  em lease (LMOVE ... LEFT, LREM no ack)
    {prefix}lanes:{lane}:delayed     ZSET  retries (score = epoch elegível)

LMOVE é atômico: dois workers nunca recebem o mesmo item.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from app.protocols.clock import epoch_seconds
from app.protocols.queue import LaneQueueProtocol
from app.queue.items import LeasedItem, QueuedItem
from app.queue.lanes import LANE_PRIORITY, Lane
from utils.errors import QueueConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "relay:"


class RedisLaneQueue(LaneQueueProtocol):
    """Fila por lanes em Redis (Upstash compatível).

    Args:
        redis_client: Cliente Redis assíncrono
        key_prefix: Namespace das chaves
        clock: Fonte de epoch (s) para o conjunto atrasado
    """

    def __init__(
        self,
        redis_client: AsyncRedis[bytes],
        key_prefix: str = DEFAULT_KEY_PREFIX,
        clock: Callable[[], float] = epoch_seconds,
    ) -> None:
        self._redis = redis_client
        self._prefix = key_prefix
        self._clock = clock

    def _pending_key(self, lane: Lane) -> str:
        return f"{self._prefix}lanes:{lane.value}"

    def _processing_key(self, lane: Lane) -> str:
        return f"{self._prefix}lanes:{lane.value}:processing"

    def _delayed_key(self, lane: Lane) -> str:
        return f"{self._prefix}lanes:{lane.value}:delayed"

    async def enqueue(self, item: QueuedItem) -> None:
        try:
            await self._redis.lpush(self._pending_key(item.lane), item.to_json())
        except Exception as exc:
            raise QueueConnectionError("Falha ao enfileirar item no Redis") from exc

    async def dequeue(self) -> LeasedItem | None:
        for lane in LANE_PRIORITY:
            try:
                raw = await self._redis.lmove(
                    self._pending_key(lane),
                    self._processing_key(lane),
                    "RIGHT",
                    "LEFT",
                )
            except Exception as exc:
                raise QueueConnectionError("Falha ao retirar item do Redis") from exc
            if raw is None:
                continue
            try:
                item = QueuedItem.from_json(raw)
            except (ValueError, KeyError, TypeError):
                logger.error(
                    "queue_item_corrupt_discarded",
                    extra={"lane": lane.value},
                )
                await self._lrem(self._processing_key(lane), raw)
                continue
            return LeasedItem(item=item, raw=raw)
        return None

    async def ack(self, leased: LeasedItem) -> None:
        await self._lrem(self._processing_key(leased.item.lane), leased.raw)

    async def retry_later(
        self,
        leased: LeasedItem,
        updated: QueuedItem,
        delay_seconds: float,
    ) -> None:
        eligible_at = self._clock() + max(delay_seconds, 0.0)
        try:
            pipeline = self._redis.pipeline(transaction=True)
            pipeline.lrem(self._processing_key(leased.item.lane), 1, leased.raw)
            pipeline.zadd(self._delayed_key(updated.lane), {updated.to_json(): eligible_at})
            await pipeline.execute()
        except Exception as exc:
            raise QueueConnectionError("Falha ao reagendar item no Redis") from exc

    async def promote_due(self) -> int:
        now = self._clock()
        promoted = 0
        for lane in LANE_PRIORITY:
            delayed_key = self._delayed_key(lane)
            try:
                due = await self._redis.zrangebyscore(delayed_key, "-inf", now)
                for raw in due:
                    # ZREM == 1 garante que só um worker promove o item
                    if await self._redis.zrem(delayed_key, raw) == 1:
                        await self._redis.lpush(self._pending_key(lane), raw)
                        promoted += 1
            except Exception as exc:
                raise QueueConnectionError("Falha ao promover itens atrasados") from exc
        if promoted:
            logger.debug("queue_delayed_promoted", extra={"count": promoted})
        return promoted

    async def depth(self, lane: Lane) -> int:
        try:
            return int(await self._redis.llen(self._pending_key(lane)))
        except Exception as exc:
            raise QueueConnectionError("Falha ao consultar tamanho da lane") from exc

    async def ping(self) -> bool:
        try:
            return bool(await self._redis.ping())
        except Exception as exc:
            raise QueueConnectionError("Falha ao pingar Redis") from exc

    async def _lrem(self, key: str, raw: str | bytes) -> None:
        try:
            await self._redis.lrem(key, 1, raw)
        except Exception as exc:
            raise QueueConnectionError("Falha ao liberar lease no Redis") from exc

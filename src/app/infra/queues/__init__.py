"""Backends de fila por lanes (memória para dev/test, Redis para produção)."""

from app.infra.queues.memory_queue import MemoryLaneQueue
from app.infra.queues.redis_queue import RedisLaneQueue

__all__ = ["MemoryLaneQueue", "RedisLaneQueue"]

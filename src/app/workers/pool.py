"""Pool de workers de entrega (tasks asyncio) com drain no shutdown."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING, Any

from app.workers.delivery_worker import DEFAULT_ATTEMPT_TIMEOUT_SECONDS, DeliveryWorker
from utils.errors import QueueConnectionError

if TYPE_CHECKING:
    from app.protocols.handler import MessageHandlerProtocol
    from app.protocols.queue import LaneQueueProtocol

logger = logging.getLogger(__name__)


class DeliveryWorkerPool:
    """N workers concorrentes consumindo as lanes.

    Cada worker, quando ocioso, aguarda poll_interval_seconds antes de
    consultar a fila de novo. stop() sinaliza e aguarda o término; tasks
    que excederem o timeout são canceladas.
    """

    def __init__(
        self,
        queue: LaneQueueProtocol,
        handler: MessageHandlerProtocol,
        worker_count: int = 2,
        poll_interval_seconds: float = 0.5,
        attempt_timeout_seconds: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS,
    ) -> None:
        if worker_count < 1:
            raise ValueError("worker_count deve ser >= 1")
        self._poll_interval = poll_interval_seconds
        self._workers = [
            DeliveryWorker(
                queue,
                handler,
                attempt_timeout_seconds=attempt_timeout_seconds,
                worker_id=f"worker-{index}",
            )
            for index in range(worker_count)
        ]
        self._stop_event = asyncio.Event()
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    def start(self) -> None:
        """Cria uma task por worker (idempotente)."""
        if self.running:
            return
        self._stop_event.clear()
        for worker in self._workers:
            task = asyncio.create_task(self._run(worker), name=worker.worker_id)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
        logger.info("delivery_pool_started", extra={"worker_count": len(self._workers)})

    async def stop(self, timeout_seconds: float = 30.0) -> None:
        """Sinaliza parada e aguarda workers; cancela os que excederem timeout."""
        self._stop_event.set()
        if not self._tasks:
            return

        pending_now = list(self._tasks)
        logger.info(
            "delivery_pool_shutdown_wait",
            extra={"pending_tasks": len(pending_now), "timeout_seconds": timeout_seconds},
        )
        _, pending = await asyncio.wait(pending_now, timeout=timeout_seconds)
        if not pending:
            logger.info("delivery_pool_stopped")
            return

        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        logger.warning(
            "delivery_pool_shutdown_cancelled",
            extra={"cancelled_tasks": len(pending)},
        )

    async def _run(self, worker: DeliveryWorker) -> None:
        while not self._stop_event.is_set():
            try:
                processed = await worker.run_once()
            except QueueConnectionError as exc:
                logger.error(
                    "delivery_worker_queue_unavailable",
                    extra={"worker_id": worker.worker_id, "error": str(exc)},
                )
                processed = False
            except Exception:
                logger.exception(
                    "delivery_worker_loop_failed",
                    extra={"worker_id": worker.worker_id},
                )
                processed = False

            if not processed:
                await self._idle_wait()

    async def _idle_wait(self) -> None:
        with contextlib.suppress(TimeoutError):
            await asyncio.wait_for(self._stop_event.wait(), timeout=self._poll_interval)

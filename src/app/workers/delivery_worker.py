"""Worker de entrega: aplica a máquina de estados a cada item da fila.

Fluxo por item:
1. Restaura estado de tentativas e correlation_id do item
2. FAILED_RETRYABLE → PENDING (retorno após backoff)
3. PENDING → IN_PROGRESS (attempts += 1), loga o início e chama o handler
   com timeout
4. Sucesso → SUCCEEDED + ack
5. Falha → FAILED_RETRYABLE (reagenda com backoff) ou FAILED_TERMINAL
   (log crítico + ack/descarte)
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from app.domain.message_record import MessageRecord
from app.observability import (
    record_delivery_outcome,
    record_latency,
    reset_correlation_id,
    set_correlation_id,
)
from fsm import DeliveryStateMachine, DeliveryStatus
from utils.errors import HandlerFailureError

if TYPE_CHECKING:
    from app.protocols.handler import MessageHandlerProtocol
    from app.protocols.queue import LaneQueueProtocol
    from app.queue.items import LeasedItem

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPT_TIMEOUT_SECONDS = 120.0


class DeliveryWorker:
    """Processa itens da fila entregando-os ao handler downstream.

    Args:
        queue: Backend de filas
        handler: Handler downstream
        attempt_timeout_seconds: Limite de cada chamada ao handler
        worker_id: Identificador para logs
    """

    def __init__(
        self,
        queue: LaneQueueProtocol,
        handler: MessageHandlerProtocol,
        attempt_timeout_seconds: float = DEFAULT_ATTEMPT_TIMEOUT_SECONDS,
        worker_id: str = "worker-0",
    ) -> None:
        self._queue = queue
        self._handler = handler
        self._attempt_timeout = attempt_timeout_seconds
        self._worker_id = worker_id

    @property
    def worker_id(self) -> str:
        return self._worker_id

    async def run_once(self) -> bool:
        """Promove atrasados vencidos e processa no máximo um item.

        Returns:
            True se um item foi processado; False se as lanes estavam vazias.
        """
        await self._queue.promote_due()
        leased = await self._queue.dequeue()
        if leased is None:
            return False
        await self.process(leased)
        return True

    async def process(self, leased: LeasedItem) -> DeliveryStatus:
        """Executa uma tentativa de entrega e aplica o desfecho na fila."""
        token = set_correlation_id(leased.item.correlation_id or None)
        try:
            return await self._process(leased)
        finally:
            reset_correlation_id(token)

    async def _process(self, leased: LeasedItem) -> DeliveryStatus:
        item = leased.item
        machine = DeliveryStateMachine.from_snapshot(item.attempt, item_id=item.item_id)

        try:
            record = MessageRecord.from_dict(item.record)
        except (TypeError, ValueError) as exc:
            logger.critical(
                "delivery_item_corrupt",
                extra={"item_id": item.item_id, "lane": item.lane.value, "error": str(exc)},
            )
            await self._queue.ack(leased)
            return DeliveryStatus.FAILED_TERMINAL

        if machine.current_state == DeliveryStatus.FAILED_RETRYABLE:
            machine.resume_after_backoff()

        started = machine.begin_attempt()
        if not started.success:
            logger.error(
                "delivery_attempt_not_started",
                extra={
                    "item_id": item.item_id,
                    "lane": item.lane.value,
                    "status": machine.current_state.value,
                    "reason": started.error_reason,
                },
            )
            await self._queue.ack(leased)
            return machine.current_state

        attempt = machine.attempts_made
        logger.info(
            "delivery_attempt_started",
            extra={
                "item_id": item.item_id,
                "lane": item.lane.value,
                "attempt": attempt,
                "max_attempts": machine.max_attempts,
                "message_type": record.type,
                "sender": record.sender,
                "chat": record.chat,
                "worker_id": self._worker_id,
            },
        )
        start = time.perf_counter()
        failure: HandlerFailureError | None = None
        try:
            await asyncio.wait_for(self._handler.handle(record), timeout=self._attempt_timeout)
        except Exception as exc:
            failure = HandlerFailureError(attempt, exc)
        latency_ms = (time.perf_counter() - start) * 1000
        record_latency("delivery_worker", "handle", latency_ms, item.correlation_id)

        if failure is None:
            machine.mark_succeeded()
            await self._queue.ack(leased)
            logger.info(
                "delivery_succeeded",
                extra={
                    "item_id": item.item_id,
                    "lane": item.lane.value,
                    "attempts": attempt,
                    "tags": list(item.tags),
                    "worker_id": self._worker_id,
                },
            )
            record_delivery_outcome(
                item.lane.value, "succeeded", attempt, list(item.tags), item.correlation_id
            )
            return machine.current_state

        error_detail = _describe(failure.cause)
        logger.error(
            "delivery_attempt_failed",
            extra={
                "item_id": item.item_id,
                "lane": item.lane.value,
                "attempt": attempt,
                "max_attempts": machine.max_attempts,
                "message_type": record.type,
                "sender": record.sender,
                "error": error_detail,
                "error_type": type(failure.cause).__name__,
                "worker_id": self._worker_id,
            },
        )
        machine.mark_failed(error_detail)

        if machine.current_state == DeliveryStatus.FAILED_RETRYABLE:
            delay = machine.next_backoff()
            await self._queue.retry_later(leased, item.with_attempt(machine.snapshot()), delay)
            logger.info(
                "delivery_retry_scheduled",
                extra={
                    "item_id": item.item_id,
                    "lane": item.lane.value,
                    "attempt": attempt,
                    "delay_seconds": delay,
                },
            )
            record_delivery_outcome(
                item.lane.value, "retry_scheduled", attempt, list(item.tags), item.correlation_id
            )
            return machine.current_state

        logger.critical(
            "delivery_failed_terminal",
            extra={
                "item_id": item.item_id,
                "lane": item.lane.value,
                "attempts": attempt,
                "message_type": record.type,
                "sender": record.sender,
                "chat": record.chat,
                "message_id": record.message_id,
                "error": error_detail,
                "tags": list(item.tags),
            },
        )
        await self._queue.ack(leased)
        record_delivery_outcome(
            item.lane.value, "failed_terminal", attempt, list(item.tags), item.correlation_id
        )
        return machine.current_state


def _describe(exc: BaseException) -> str:
    if isinstance(exc, TimeoutError):
        return "attempt_timeout"
    return str(exc) or type(exc).__name__

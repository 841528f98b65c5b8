"""Factories de fila, handler e runtime do relay.

Centraliza a criação das implementações concretas a partir das
configurações de ambiente.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from api.connectors.receiver.auth import (
    CredentialGate,
    build_receiver_gate,
    build_webhook_gate,
)
from api.normalizers.receiver import ReceiverMessageNormalizer
from app.bootstrap.clients import create_async_redis_client
from app.infra.handlers import HttpForwardingHandler, LoggingMessageHandler
from app.infra.queues import MemoryLaneQueue, RedisLaneQueue
from app.queue.dispatcher import PriorityDispatcher
from app.workers.pool import DeliveryWorkerPool
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_downstream_settings,
    get_queue_settings,
)

if TYPE_CHECKING:
    from app.protocols.handler import MessageHandlerProtocol
    from app.protocols.queue import LaneQueueProtocol
    from config.settings import (
        AuthSettings,
        BaseSettings,
        DownstreamSettings,
        ProcessingMode,
        QueueSettings,
    )

logger = logging.getLogger(__name__)


@dataclass
class RelayRuntime:
    """Componentes montados do relay (um por processo)."""

    queue: LaneQueueProtocol
    dispatcher: PriorityDispatcher
    normalizer: ReceiverMessageNormalizer
    handler: MessageHandlerProtocol
    worker_pool: DeliveryWorkerPool
    webhook_gate: CredentialGate
    receiver_gate: CredentialGate
    processing_mode: ProcessingMode = "queued"


def create_lane_queue(
    queue_settings: QueueSettings,
    base_settings: BaseSettings,
) -> LaneQueueProtocol:
    """Cria backend de filas conforme QUEUE_BACKEND.

    - "memory": MemoryLaneQueue (dev/test)
    - "redis": RedisLaneQueue (staging/production)
    """
    backend = queue_settings.backend

    if backend == "redis":
        queue: LaneQueueProtocol = RedisLaneQueue(
            create_async_redis_client(),
            key_prefix=queue_settings.key_prefix,
        )
        logger.info("lane_queue_created", extra={"backend": "redis"})
        return queue

    if backend == "memory":
        if not base_settings.is_development:
            logger.warning(
                "memory_queue_in_non_dev",
                extra={"backend": "memory", "environment": base_settings.environment},
            )
        logger.info("lane_queue_created", extra={"backend": "memory"})
        return MemoryLaneQueue()

    msg = f"QUEUE_BACKEND inválido: {backend}"
    raise ValueError(msg)


def create_message_handler(downstream: DownstreamSettings) -> MessageHandlerProtocol:
    """HttpForwardingHandler se DOWNSTREAM_URL existir; senão handler de log."""
    if downstream.enabled:
        logger.info("message_handler_created", extra={"handler": "http_forwarding"})
        return HttpForwardingHandler(
            downstream.url,
            timeout_seconds=downstream.timeout_seconds,
            auth_token=downstream.auth_token,
        )
    logger.info("message_handler_created", extra={"handler": "logging"})
    return LoggingMessageHandler()


def create_gates(auth: AuthSettings) -> tuple[CredentialGate, CredentialGate]:
    """Cria (webhook_gate, receiver_gate) com o modo produção explícito."""
    return (
        build_webhook_gate(auth.webhook_secret, production_mode=auth.production_mode),
        build_receiver_gate(auth.receiver_api_key, production_mode=auth.production_mode),
    )


def create_relay_runtime(
    queue: LaneQueueProtocol | None = None,
    handler: MessageHandlerProtocol | None = None,
) -> RelayRuntime:
    """Monta o runtime a partir das settings (fila/handler injetáveis)."""
    base_settings = get_base_settings()
    queue_settings = get_queue_settings()

    lane_queue = queue or create_lane_queue(queue_settings, base_settings)
    message_handler = handler or create_message_handler(get_downstream_settings())
    webhook_gate, receiver_gate = create_gates(get_auth_settings())

    return RelayRuntime(
        queue=lane_queue,
        dispatcher=PriorityDispatcher(
            lane_queue,
            max_attempts=queue_settings.max_attempts,
            backoff_schedule=queue_settings.backoff_seconds,
        ),
        normalizer=ReceiverMessageNormalizer(),
        handler=message_handler,
        worker_pool=DeliveryWorkerPool(
            lane_queue,
            message_handler,
            worker_count=queue_settings.worker_count,
            poll_interval_seconds=queue_settings.poll_interval_seconds,
            attempt_timeout_seconds=queue_settings.attempt_timeout_seconds,
        ),
        webhook_gate=webhook_gate,
        receiver_gate=receiver_gate,
        processing_mode=queue_settings.processing_mode,
    )

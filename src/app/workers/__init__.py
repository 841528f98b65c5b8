"""Workers de entrega."""

from app.workers.delivery_worker import DEFAULT_ATTEMPT_TIMEOUT_SECONDS, DeliveryWorker
from app.workers.pool import DeliveryWorkerPool

__all__ = [
    "DEFAULT_ATTEMPT_TIMEOUT_SECONDS",
    "DeliveryWorker",
    "DeliveryWorkerPool",
]

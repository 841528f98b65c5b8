"""Settings das filas de entrega.

Configurações das lanes de prioridade, do backend de fila e da
máquina de retry/backoff dos workers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

QueueBackend = Literal["memory", "redis"]
ProcessingMode = Literal["queued", "inline"]

DEFAULT_BACKOFF_SECONDS: tuple[float, ...] = (5.0, 15.0, 30.0)


@dataclass(frozen=True)
class QueueSettings:
    """Configurações de fila e entrega.

    Attributes:
        backend: Backend das lanes (memory|redis)
        processing_mode: queued (workers) ou inline (handler no request)
        max_attempts: Máximo de tentativas por item
        backoff_seconds: Espera antes de cada retry (uma por retry)
        attempt_timeout_seconds: Timeout de parede de cada tentativa
        worker_count: Quantidade de workers concorrentes
        poll_interval_seconds: Espera entre polls quando as lanes estão vazias
        key_prefix: Namespace das chaves Redis
    """

    backend: QueueBackend = "memory"
    processing_mode: ProcessingMode = "queued"
    max_attempts: int = 3
    backoff_seconds: tuple[float, ...] = DEFAULT_BACKOFF_SECONDS
    attempt_timeout_seconds: float = 120.0
    worker_count: int = 2
    poll_interval_seconds: float = 0.5
    key_prefix: str = "relay:"

    def validate(self, redis_url: str, is_development: bool) -> list[str]:
        """Valida configurações de fila.

        Args:
            redis_url: URL Redis configurada.
            is_development: Se está em ambiente de desenvolvimento.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.backend not in ("memory", "redis"):
            errors.append(f"QUEUE_BACKEND inválido: {self.backend}")

        if self.backend == "memory" and not is_development:
            errors.append(
                "QUEUE_BACKEND=memory proibido em staging/production. Use redis."
            )

        if self.backend == "redis" and not redis_url:
            errors.append("QUEUE_BACKEND=redis requer REDIS_URL configurado")

        if self.processing_mode not in ("queued", "inline"):
            errors.append("QUEUE_PROCESSING_MODE deve ser 'queued' ou 'inline'")

        if self.max_attempts < 1:
            errors.append("DELIVERY_MAX_ATTEMPTS deve ser >= 1")

        if len(self.backoff_seconds) < self.max_attempts - 1:
            errors.append(
                "DELIVERY_BACKOFF_SECONDS precisa de um valor por retry "
                f"({self.max_attempts - 1} esperados)"
            )

        if any(delay < 0 for delay in self.backoff_seconds):
            errors.append("DELIVERY_BACKOFF_SECONDS não aceita valores negativos")

        if self.attempt_timeout_seconds <= 0:
            errors.append("DELIVERY_ATTEMPT_TIMEOUT_SECONDS deve ser > 0")

        if self.worker_count < 1:
            errors.append("DELIVERY_WORKER_COUNT deve ser >= 1")

        return errors


def parse_backoff(raw: str) -> tuple[float, ...]:
    """Converte "5,15,30" em (5.0, 15.0, 30.0)."""
    parts = [part.strip() for part in raw.split(",") if part.strip()]
    if not parts:
        return DEFAULT_BACKOFF_SECONDS
    return tuple(float(part) for part in parts)


def _load_queue_from_env() -> QueueSettings:
    """Carrega QueueSettings de variáveis de ambiente."""
    backend_str = os.getenv("QUEUE_BACKEND", "memory").lower()
    backend: QueueBackend = "redis" if backend_str == "redis" else "memory"
    mode_str = os.getenv("QUEUE_PROCESSING_MODE", "queued").lower()
    processing_mode: ProcessingMode = "inline" if mode_str == "inline" else "queued"

    return QueueSettings(
        backend=backend,
        processing_mode=processing_mode,
        max_attempts=int(os.getenv("DELIVERY_MAX_ATTEMPTS", "3")),
        backoff_seconds=parse_backoff(os.getenv("DELIVERY_BACKOFF_SECONDS", "5,15,30")),
        attempt_timeout_seconds=float(os.getenv("DELIVERY_ATTEMPT_TIMEOUT_SECONDS", "120")),
        worker_count=int(os.getenv("DELIVERY_WORKER_COUNT", "2")),
        poll_interval_seconds=float(os.getenv("QUEUE_POLL_INTERVAL_SECONDS", "0.5")),
        key_prefix=os.getenv("QUEUE_KEY_PREFIX", "relay:"),
    )


@lru_cache(maxsize=1)
def get_queue_settings() -> QueueSettings:
    """Retorna instância cacheada de QueueSettings."""
    return _load_queue_from_env()

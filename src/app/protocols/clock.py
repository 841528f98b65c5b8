"""Protocolo de relógio injetável (normalização e filas)."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import Protocol


class ClockProtocol(Protocol):
    """Fonte de "agora" em UTC com timezone."""

    def __call__(self) -> datetime: ...


def utc_now() -> datetime:
    """Relógio padrão de produção."""
    return datetime.now(UTC)


def epoch_seconds() -> float:
    """Fonte de tempo padrão para atrasos de fila (epoch em segundos)."""
    return time.time()

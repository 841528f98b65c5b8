"""Agregador de settings de infraestrutura.

Re-exporta as settings de infraestrutura para uso externo.
"""

from __future__ import annotations

from config.settings.infra.queue import (
    DEFAULT_BACKOFF_SECONDS,
    ProcessingMode,
    QueueBackend,
    QueueSettings,
    get_queue_settings,
    parse_backoff,
)

__all__ = [
    "DEFAULT_BACKOFF_SECONDS",
    "ProcessingMode",
    "QueueBackend",
    "QueueSettings",
    "get_queue_settings",
    "parse_backoff",
]

"""Agregador de settings do relay.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Auth settings
from config.settings.auth import (
    AuthSettings,
    get_auth_settings,
)

# Base settings
from config.settings.base import (
    BaseSettings,
    Environment,
    get_base_settings,
    parse_environment,
)

# Downstream handler settings
from config.settings.downstream import (
    DownstreamSettings,
    get_downstream_settings,
)

# Infrastructure settings
from config.settings.infra import (
    DEFAULT_BACKOFF_SECONDS,
    ProcessingMode,
    QueueBackend,
    QueueSettings,
    get_queue_settings,
    parse_backoff,
)

__all__ = [
    "DEFAULT_BACKOFF_SECONDS",
    # Auth
    "AuthSettings",
    # Base
    "BaseSettings",
    # Downstream
    "DownstreamSettings",
    "Environment",
    "ProcessingMode",
    "QueueBackend",
    # Infrastructure
    "QueueSettings",
    "get_auth_settings",
    "get_base_settings",
    "get_downstream_settings",
    "get_queue_settings",
    "parse_backoff",
    "parse_environment",
]

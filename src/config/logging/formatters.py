"""Formatters de logging estruturado.

Campos obrigatórios em todo log:
- correlation_id
- service
- timestamp (asctime)
- level
- logger (name)
- message
"""

from __future__ import annotations

import logging

from pythonjsonlogger.json import JsonFormatter

# Campos obrigatórios em todo log estruturado
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

# Mapeamento de nomes de campos para formato padrão
FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}

TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(correlation_id)s] %(message)s"


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Campos passados via `extra` entram no JSON no mesmo nível:
        {
            "asctime": "2026-02-02T10:30:00",
            "level": "WARNING",
            "logger": "workers.delivery",
            "message": "delivery_attempt_failed",
            "correlation_id": "abc-123",
            "service": "whatsapp_relay",
            "lane": "high",
            "attempt": 2
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)

    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
    )


def create_text_formatter() -> logging.Formatter:
    """Cria formatter texto para uso local (sem campos extras)."""
    return logging.Formatter(TEXT_FORMAT)

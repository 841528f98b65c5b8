"""Parse do corpo JSON dos requests do receiver (sem PII em logs)."""

from __future__ import annotations

import json
from typing import Any


class ReceiverRequestError(ValueError):
    """Erro base para falhas de request do receiver."""


class InvalidJsonError(ReceiverRequestError):
    """JSON inválido ou payload que não é objeto."""


def load_json_object(raw_body: bytes) -> dict[str, Any]:
    """Parseia o corpo como objeto JSON.

    Raises:
        InvalidJsonError: Se o JSON estiver inválido ou não for objeto
    """
    try:
        payload = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc

    if not isinstance(payload, dict):
        raise InvalidJsonError("payload_not_object")

    return payload


def try_load_json_object(raw_body: bytes) -> dict[str, Any] | None:
    """Versão tolerante usada antes da autenticação (credencial no body)."""
    try:
        return load_json_object(raw_body)
    except InvalidJsonError:
        return None

"""Conector do serviço receiver: gates de credencial e parse do body."""

from .auth import (
    RECEIVER_SOURCES,
    WEBHOOK_SOURCES,
    AuthDecision,
    AuthResult,
    CallerInfo,
    CredentialGate,
    CredentialSource,
    build_receiver_gate,
    build_webhook_gate,
    credentials_match,
    extract_credential,
)
from .receive import InvalidJsonError, load_json_object, try_load_json_object

__all__ = [
    "RECEIVER_SOURCES",
    "WEBHOOK_SOURCES",
    "AuthDecision",
    "AuthResult",
    "CallerInfo",
    "CredentialGate",
    "CredentialSource",
    "InvalidJsonError",
    "build_receiver_gate",
    "build_webhook_gate",
    "credentials_match",
    "extract_credential",
    "load_json_object",
    "try_load_json_object",
]

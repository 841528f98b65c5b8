"""Gates de credencial compartilhada para requests inbound.

Cada gate conhece seu secret, a ordem das fontes de credencial e o modo
produção (argumento explícito). A comparação é em tempo constante e a
credencial recebida nunca vai para logs.
"""

from __future__ import annotations

import hmac
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Literal

from app.observability import record_auth_decision
from utils.errors import AuthFailureError, ServiceUnavailableError

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "
WEBHOOK_SECRET_BODY_FIELD = "webhook_secret"


class AuthDecision(StrEnum):
    ALLOW = "ALLOW"
    REJECT = "REJECT"
    ALLOW_WITH_WARNING = "ALLOW_WITH_WARNING"


@dataclass(frozen=True, slots=True)
class CredentialSource:
    """Local de onde a credencial pode ser lida.

    Attributes:
        location: "header" ou "body"
        name: Nome do header (case-insensitive) ou do campo do body
        strip_bearer: Remove o prefixo "Bearer " se presente
    """

    location: Literal["header", "body"]
    name: str
    strip_bearer: bool = False


@dataclass(frozen=True, slots=True)
class CallerInfo:
    """Dados do chamador para logs de rejeição (sem credencial)."""

    ip: str | None = None
    user_agent: str | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True)
class AuthResult:
    decision: AuthDecision
    status_code: int | None = None
    reason: str | None = None

    @property
    def allowed(self) -> bool:
        return self.decision != AuthDecision.REJECT


WEBHOOK_SOURCES: tuple[CredentialSource, ...] = (
    CredentialSource("header", "x-webhook-secret"),
    CredentialSource("header", "x-api-key"),
    CredentialSource("header", "authorization", strip_bearer=True),
    CredentialSource("body", WEBHOOK_SECRET_BODY_FIELD),
)

RECEIVER_SOURCES: tuple[CredentialSource, ...] = (
    CredentialSource("header", "x-api-key"),
    CredentialSource("header", "authorization", strip_bearer=True),
)


def _lookup_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def extract_credential(
    sources: tuple[CredentialSource, ...],
    headers: Mapping[str, str],
    body: Mapping[str, Any] | None = None,
) -> str | None:
    """Retorna a primeira credencial não-vazia segundo a ordem das fontes."""
    for source in sources:
        if source.location == "header":
            value = _lookup_header(headers, source.name)
        else:
            raw = body.get(source.name) if body else None
            value = raw if isinstance(raw, str) else None

        if not value:
            continue
        if source.strip_bearer and value.startswith(BEARER_PREFIX):
            value = value[len(BEARER_PREFIX):]
        if value:
            return value
    return None


def credentials_match(expected: str, provided: str | None) -> bool:
    """Comparação em tempo constante (bytes UTF-8)."""
    return hmac.compare_digest(
        expected.encode("utf-8"),
        (provided or "").encode("utf-8"),
    )


class CredentialGate:
    """Gate de credencial compartilhada.

    Args:
        name: Nome do gate para logs ("webhook" | "receiver")
        secret: Secret esperado ("" = não configurado)
        sources: Fontes de credencial em ordem de precedência
        production_mode: Bloqueia (503) quando o secret não existe
        unauthorized_message: Mensagem do envelope 401
    """

    def __init__(
        self,
        name: str,
        secret: str,
        sources: tuple[CredentialSource, ...],
        *,
        production_mode: bool,
        unauthorized_message: str = "Unauthorized: Invalid credential",
    ) -> None:
        self._name = name
        self._secret = secret or ""
        self._sources = sources
        self._production_mode = production_mode
        self.unauthorized_message = unauthorized_message

    @property
    def name(self) -> str:
        return self._name

    @property
    def production_mode(self) -> bool:
        return self._production_mode

    def authorize(
        self,
        headers: Mapping[str, str],
        body: Mapping[str, Any] | None = None,
        caller: CallerInfo | None = None,
    ) -> AuthResult:
        """Decide ALLOW, REJECT ou ALLOW_WITH_WARNING. Não levanta exceção."""
        if not self._secret:
            logger.critical(
                "auth_secret_not_configured",
                extra={"gate": self._name, "production_mode": self._production_mode},
            )
            if self._production_mode:
                record_auth_decision(self._name, AuthDecision.REJECT.value)
                return AuthResult(
                    decision=AuthDecision.REJECT,
                    status_code=503,
                    reason="secret_not_configured",
                )
            record_auth_decision(self._name, AuthDecision.ALLOW_WITH_WARNING.value)
            return AuthResult(decision=AuthDecision.ALLOW_WITH_WARNING)

        provided = extract_credential(self._sources, headers, body)
        if credentials_match(self._secret, provided):
            return AuthResult(decision=AuthDecision.ALLOW)

        caller = caller or CallerInfo()
        reason = "missing_credential" if provided is None else "invalid_credential"
        logger.warning(
            "auth_rejected",
            extra={
                "gate": self._name,
                "reason": reason,
                "ip": caller.ip,
                "user_agent": caller.user_agent,
                "url": caller.url,
            },
        )
        record_auth_decision(self._name, AuthDecision.REJECT.value)
        return AuthResult(decision=AuthDecision.REJECT, status_code=401, reason=reason)

    def enforce(
        self,
        headers: Mapping[str, str],
        body: Mapping[str, Any] | None = None,
        caller: CallerInfo | None = None,
    ) -> AuthResult:
        """Como authorize(), mas levanta exceção em REJECT.

        Raises:
            ServiceUnavailableError: secret ausente em produção
            AuthFailureError: credencial ausente ou inválida
        """
        result = self.authorize(headers, body, caller)
        if result.decision != AuthDecision.REJECT:
            return result
        if result.status_code == 503:
            raise ServiceUnavailableError("Service unavailable: credential not configured")
        raise AuthFailureError(self.unauthorized_message)


def build_webhook_gate(secret: str, *, production_mode: bool) -> CredentialGate:
    """Gate do webhook (WEBHOOK_SECRET)."""
    return CredentialGate(
        "webhook",
        secret,
        WEBHOOK_SOURCES,
        production_mode=production_mode,
        unauthorized_message="Unauthorized: Invalid webhook secret",
    )


def build_receiver_gate(secret: str, *, production_mode: bool) -> CredentialGate:
    """Gate dos endpoints do receiver (RECEIVER_API_KEY)."""
    return CredentialGate(
        "receiver",
        secret,
        RECEIVER_SOURCES,
        production_mode=production_mode,
        unauthorized_message="Unauthorized: Invalid API key",
    )

"""Exceções compartilhadas do relay (autenticação, normalização, entrega, infra)."""

from __future__ import annotations


class RelayError(Exception):
    """Base para erros de domínio do relay."""


# ──────────────────────────────────────────────────────────────
# Trust boundary
# ──────────────────────────────────────────────────────────────


class AuthFailureError(RelayError):
    """Credencial ausente ou inválida (HTTP 401)."""

    status_code = 401


class ServiceUnavailableError(RelayError):
    """Secret não configurado em produção (HTTP 503)."""

    status_code = 503


# ──────────────────────────────────────────────────────────────
# Normalização
# ──────────────────────────────────────────────────────────────


class NormalizationError(RelayError, ValueError):
    """Payload inbound não pode virar MessageRecord."""


class MissingRequiredFieldError(NormalizationError):
    """sender e/ou chat ausentes após aplicar todos os fallbacks."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(f"missing_required_field: {', '.join(self.missing)}")


class InvalidFieldError(NormalizationError):
    """Campo presente mas com formato inaceitável."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"invalid_field: {field} ({reason})")


# ──────────────────────────────────────────────────────────────
# Entrega
# ──────────────────────────────────────────────────────────────


class HandlerFailureError(RelayError):
    """Falha do handler downstream em uma tentativa de entrega."""

    def __init__(self, attempt: int, cause: BaseException) -> None:
        self.attempt = attempt
        self.cause = cause
        detail = str(cause) or type(cause).__name__
        super().__init__(f"attempt {attempt}: {detail}")


# ──────────────────────────────────────────────────────────────
# Infraestrutura
# ──────────────────────────────────────────────────────────────


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class QueueConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar o backend de filas."""

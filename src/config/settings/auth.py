"""Settings de autenticação inbound.

Dois segredos independentes:
- WEBHOOK_SECRET: webhook chamado pelo receiver (X-Webhook-Secret)
- RECEIVER_API_KEY: endpoints do receiver (X-API-Key / Bearer)

O modo produção dos gates vem de AUTH_PRODUCTION_MODE, obrigatório fora
de development, e é passado explicitamente para cada gate.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

_TRUE_VALUES = frozenset({"true", "1", "yes"})
_FALSE_VALUES = frozenset({"false", "0", "no"})


@dataclass(frozen=True)
class AuthSettings:
    """Configurações dos gates de credencial.

    Attributes:
        webhook_secret: Secret compartilhado do webhook
        receiver_api_key: API key do serviço receiver
        production_mode: True bloqueia requests quando o secret não existe
        production_mode_raw: Valor cru de AUTH_PRODUCTION_MODE ("" = ausente)
    """

    webhook_secret: str = ""
    receiver_api_key: str = ""
    production_mode: bool = False
    production_mode_raw: str = ""

    def validate(self, environment: str = "development") -> list[str]:
        """Valida configurações de autenticação.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []
        raw = self.production_mode_raw.strip().lower()

        if environment != "development" and not raw:
            errors.append(f"AUTH_PRODUCTION_MODE obrigatório em {environment}")
        elif raw and raw not in _TRUE_VALUES | _FALSE_VALUES:
            errors.append(f"AUTH_PRODUCTION_MODE inválido: {self.production_mode_raw}")

        if environment == "production" and raw in _FALSE_VALUES:
            errors.append("AUTH_PRODUCTION_MODE=false proibido com ENVIRONMENT=production")

        if self.production_mode and not self.webhook_secret:
            errors.append("WEBHOOK_SECRET obrigatório em produção")

        if self.production_mode and not self.receiver_api_key:
            errors.append("RECEIVER_API_KEY obrigatório em produção")

        return errors


def _load_auth_from_env() -> AuthSettings:
    """Carrega AuthSettings de variáveis de ambiente."""
    raw = os.getenv("AUTH_PRODUCTION_MODE", "")
    return AuthSettings(
        webhook_secret=os.getenv("WEBHOOK_SECRET", ""),
        receiver_api_key=os.getenv("RECEIVER_API_KEY", ""),
        production_mode=raw.strip().lower() in _TRUE_VALUES,
        production_mode_raw=raw,
    )


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Retorna instância cacheada de AuthSettings."""
    return _load_auth_from_env()

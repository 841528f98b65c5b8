"""Settings do handler downstream (destino das mensagens normalizadas)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class DownstreamSettings:
    """Configurações do handler downstream.

    Attributes:
        url: Endpoint HTTP que recebe o MessageRecord (vazio = handler de log)
        timeout_seconds: Timeout da chamada HTTP
        auth_token: Bearer token enviado ao downstream (opcional)
    """

    url: str = ""
    timeout_seconds: float = 30.0
    auth_token: str = ""

    @property
    def enabled(self) -> bool:
        """Retorna True se há endpoint HTTP configurado."""
        return bool(self.url)

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append("DOWNSTREAM_URL deve começar com http:// ou https://")
        if self.timeout_seconds <= 0:
            errors.append("DOWNSTREAM_TIMEOUT_SECONDS deve ser > 0")
        return errors


def _load_downstream_from_env() -> DownstreamSettings:
    """Carrega DownstreamSettings de variáveis de ambiente."""
    return DownstreamSettings(
        url=os.getenv("DOWNSTREAM_URL", ""),
        timeout_seconds=float(os.getenv("DOWNSTREAM_TIMEOUT_SECONDS", "30")),
        auth_token=os.getenv("DOWNSTREAM_AUTH_TOKEN", ""),
    )


@lru_cache(maxsize=1)
def get_downstream_settings() -> DownstreamSettings:
    """Retorna instância cacheada de DownstreamSettings."""
    return _load_downstream_from_env()

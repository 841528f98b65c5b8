"""Settings base do relay.

Ambiente, identidade do serviço, logging e conexão Redis.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

VALID_ENVIRONMENTS = frozenset({"development", "staging", "production"})
_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})


@dataclass(frozen=True)
class BaseSettings:
    """Configurações base do relay.

    Attributes:
        environment: development|staging|production
        service_name: Nome do serviço nos logs
        log_level: Nível do root logger
        log_json: False troca o JSON por texto legível (uso local)
        redis_url: URL Redis (obrigatória com QUEUE_BACKEND=redis)
    """

    environment: Environment = "development"
    service_name: str = "whatsapp-relay"
    log_level: str = "INFO"
    log_json: bool = True
    redis_url: str = ""

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    def validate(self) -> list[str]:
        """Lista de erros (vazia = OK)."""
        errors: list[str] = []

        if self.environment not in VALID_ENVIRONMENTS:
            errors.append(f"ENVIRONMENT inválido: {self.environment}")

        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")

        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL inválido: {self.log_level}")

        return errors


def parse_environment(raw: str) -> Environment:
    """Aceita apelidos (prod, stage); valores desconhecidos viram development."""
    value = raw.strip().lower()
    if value in ("production", "prod"):
        return "production"
    if value in ("staging", "stage"):
        return "staging"
    return "development"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("true", "1", "yes")


def _load_base_from_env() -> BaseSettings:
    """Carrega BaseSettings de variáveis de ambiente."""
    return BaseSettings(
        environment=parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "whatsapp-relay"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        log_json=_env_flag("LOG_JSON", "true"),
        redis_url=os.getenv("REDIS_URL", ""),
    )


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Retorna instância cacheada de BaseSettings."""
    return _load_base_from_env()

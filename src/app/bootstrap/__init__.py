"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
monta o runtime (fila, dispatcher, normalizer, gates e workers).

Uso:
    from app.bootstrap import get_runtime, initialize_app

    # Na inicialização do serviço
    initialize_app()
    runtime = get_runtime()
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_auth_settings,
    get_base_settings,
    get_downstream_settings,
    get_queue_settings,
)

if TYPE_CHECKING:
    from app.bootstrap.dependencies import RelayRuntime

# Nome do serviço para logs e métricas
SERVICE_NAME = "whatsapp_relay"

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado com correlation_id.

    Nível e formato vêm de LOG_LEVEL / LOG_JSON. Deve ser chamada uma
    vez no início do serviço.
    """
    base = get_base_settings()
    configure_logging(
        level=base.log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
        json_output=base.log_json,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"auth: {error}" for error in get_auth_settings().validate(environment))
    errors.extend(
        f"queue: {error}"
        for error in get_queue_settings().validate(base.redis_url, base.is_development)
    )
    errors.extend(f"downstream: {error}" for error in get_downstream_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


@lru_cache(maxsize=1)
def get_runtime() -> RelayRuntime:
    """Obtém o runtime do relay (singleton)."""
    from app.bootstrap.dependencies import create_relay_runtime
    return create_relay_runtime()

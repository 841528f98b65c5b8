"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e agregadas
posteriormente pelo coletor de logs.

Métricas suportadas:
- Latência: tempo de cada tentativa de entrega por lane
- Entrega: contador de desfechos (succeeded, retry_scheduled, failed_terminal)
- Auth: contador de rejeições/avisos por gate

Uso:
    start = time.perf_counter()
    # ... operação ...
    latency_ms = (time.perf_counter() - start) * 1000
    record_latency("delivery_worker", "handle", latency_ms, correlation_id)
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "delivery_worker")
        operation: Nome da operação (ex: "handle")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_delivery_outcome(
    lane: str,
    outcome: str,
    attempts: int,
    tags: list[str] | None = None,
    correlation_id: str | None = None,
) -> None:
    """Registra desfecho de uma tentativa de entrega.

    Args:
        lane: Lane de origem do item (high|default|low)
        outcome: succeeded | retry_scheduled | failed_terminal
        attempts: Tentativas realizadas até aqui
        tags: Tags derivadas do item para agrupamento
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_delivery_outcome",
        extra={
            "metric_type": "delivery_outcome",
            "lane": lane,
            "outcome": outcome,
            "attempts": attempts,
            "tags": tags or [],
            "correlation_id": correlation_id,
        },
    )


def record_auth_decision(gate: str, decision: str) -> None:
    """Registra decisão não-silenciosa de um gate de credencial."""
    logger.info(
        "metric_auth_decision",
        extra={
            "metric_type": "auth_decision",
            "gate": gate,
            "decision": decision,
        },
    )

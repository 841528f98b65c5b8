"""
Exports públicos do módulo fsm/types.

Tipos e estruturas de dados para transições de entrega.
"""

from fsm.types.attempt import (
    DEFAULT_BACKOFF_SCHEDULE,
    DEFAULT_MAX_ATTEMPTS,
    DeliveryAttemptState,
)
from fsm.types.transition import StateTransition, TransitionResult

__all__ = [
    "DEFAULT_BACKOFF_SCHEDULE",
    "DEFAULT_MAX_ATTEMPTS",
    "DeliveryAttemptState",
    "StateTransition",
    "TransitionResult",
]

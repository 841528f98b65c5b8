"""
Módulo FSM: Máquina de Estados de entrega.

Governa o ciclo de vida de cada item enfileirado: tentativas,
backoff e desfecho terminal.

Estrutura:
    - states/: Definições dos estados (DeliveryStatus enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards (estado terminal, orçamento de tentativas)
    - manager/: Máquina de estados (DeliveryStateMachine)
    - types/: Tipos de dados (DeliveryAttemptState, StateTransition)
"""

from fsm.manager import DeliveryStateMachine, create_delivery_fsm
from fsm.rules import GuardResult, evaluate_guards
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    DeliveryStatus,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    DEFAULT_BACKOFF_SCHEDULE,
    DEFAULT_MAX_ATTEMPTS,
    DeliveryAttemptState,
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_BACKOFF_SCHEDULE",
    "DEFAULT_INITIAL_STATE",
    "DEFAULT_MAX_ATTEMPTS",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "DeliveryAttemptState",
    "DeliveryStateMachine",
    "DeliveryStatus",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_delivery_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]

"""
Exports públicos do módulo fsm/states.

Estados canônicos de entrega.
"""

from fsm.states.delivery import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    DeliveryStatus,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "DeliveryStatus",
    "is_terminal",
    "is_valid_state",
]

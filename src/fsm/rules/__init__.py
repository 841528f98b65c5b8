"""
Exports públicos do módulo fsm/rules.

Guards e invariantes para transições de entrega.
"""

from fsm.rules.guards import (
    DEFAULT_GUARDS,
    Guard,
    GuardResult,
    TransitionContext,
    evaluate_guards,
    guard_attempt_budget,
    guard_terminal_state,
    guard_valid_state,
)

__all__ = [
    "DEFAULT_GUARDS",
    "Guard",
    "GuardResult",
    "TransitionContext",
    "evaluate_guards",
    "guard_attempt_budget",
    "guard_terminal_state",
    "guard_valid_state",
]

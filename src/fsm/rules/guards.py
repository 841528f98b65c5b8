"""
Guards e invariantes para transições de entrega.

Guards recebem o estado de origem, o de destino e o orçamento de
tentativas do item. Todos devem permitir para a transição prosseguir.
"""

from collections.abc import Callable
from typing import Protocol

from fsm.states.delivery import TERMINAL_STATES, DeliveryStatus


class TransitionContext(Protocol):
    """Orçamento de tentativas necessário para avaliar guards."""

    @property
    def attempts_made(self) -> int:
        """Tentativas já iniciadas."""
        ...

    @property
    def max_attempts(self) -> int:
        """Limite de tentativas do item."""
        ...


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[DeliveryStatus, DeliveryStatus, TransitionContext], GuardResult]


def guard_valid_state(
    from_state: DeliveryStatus,
    to_state: DeliveryStatus,
    context: TransitionContext,
) -> GuardResult:
    """Guard: ambos os estados precisam ser DeliveryStatus."""
    if not isinstance(from_state, DeliveryStatus):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")
    if not isinstance(to_state, DeliveryStatus):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")
    return GuardResult.allow()


def guard_terminal_state(
    from_state: DeliveryStatus,
    to_state: DeliveryStatus,
    context: TransitionContext,
) -> GuardResult:
    """Guard: estados terminais não permitem saída."""
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_attempt_budget(
    from_state: DeliveryStatus,
    to_state: DeliveryStatus,
    context: TransitionContext,
) -> GuardResult:
    """
    Guard: respeita o limite de tentativas.

    - Nova tentativa (→ IN_PROGRESS) só com orçamento restante
    - FAILED_RETRYABLE só enquanto attempts_made < max_attempts
    - FAILED_TERMINAL só quando attempts_made == max_attempts
    """
    remaining = context.max_attempts - context.attempts_made

    if to_state == DeliveryStatus.IN_PROGRESS and remaining <= 0:
        return GuardResult.deny(
            f"Tentativas esgotadas: {context.attempts_made}/{context.max_attempts}"
        )
    if to_state == DeliveryStatus.FAILED_RETRYABLE and remaining <= 0:
        return GuardResult.deny(
            "Sem tentativas restantes para FAILED_RETRYABLE"
        )
    if to_state == DeliveryStatus.FAILED_TERMINAL and remaining > 0:
        return GuardResult.deny(
            f"Ainda restam {remaining} tentativa(s), FAILED_TERMINAL prematuro"
        )
    return GuardResult.allow()


DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_attempt_budget,
]


def evaluate_guards(
    from_state: DeliveryStatus,
    to_state: DeliveryStatus,
    context: TransitionContext,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state, context)
        if not result.allowed:
            return result

    return GuardResult.allow()

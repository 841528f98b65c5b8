"""
Máquina de estados de entrega (DeliveryStateMachine).

Controla o ciclo PENDING → IN_PROGRESS → SUCCEEDED | FAILED_RETRYABLE |
FAILED_TERMINAL de um item, contabiliza tentativas e calcula o atraso de
backoff. É reconstruída a partir do snapshot que viaja com o item.
"""

from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.delivery import DeliveryStatus, is_terminal
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.attempt import (
    DEFAULT_BACKOFF_SCHEDULE,
    DEFAULT_MAX_ATTEMPTS,
    DeliveryAttemptState,
)
from fsm.types.transition import StateTransition, TransitionResult


class DeliveryStateMachine:
    """
    Máquina de estados para a entrega de um item da fila.

    Attributes:
        current_state: Status atual
        attempts_made: Tentativas iniciadas
        max_attempts: Limite de tentativas
        history: Transições realizadas nesta instância
    """

    __slots__ = (
        "_attempts_made",
        "_backoff_schedule",
        "_current_state",
        "_history",
        "_item_id",
        "_last_error",
        "_max_attempts",
        "_status_history",
    )

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_schedule: tuple[float, ...] = DEFAULT_BACKOFF_SCHEDULE,
        item_id: str = "",
    ) -> None:
        state = DeliveryAttemptState.fresh(max_attempts, backoff_schedule)
        self._load(state)
        self._item_id = item_id

    @classmethod
    def from_snapshot(
        cls,
        state: DeliveryAttemptState,
        item_id: str = "",
    ) -> "DeliveryStateMachine":
        """Reconstrói a máquina a partir do snapshot carregado com o item."""
        machine = cls.__new__(cls)
        machine._load(state)
        machine._item_id = item_id
        return machine

    def _load(self, state: DeliveryAttemptState) -> None:
        self._current_state = state.status
        self._attempts_made = state.attempts_made
        self._max_attempts = state.max_attempts
        self._backoff_schedule = state.backoff_schedule
        self._last_error = state.last_error
        self._status_history = list(state.history)
        self._history: list[StateTransition] = []

    @property
    def current_state(self) -> DeliveryStatus:
        return self._current_state

    @property
    def attempts_made(self) -> int:
        return self._attempts_made

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def last_error(self) -> str | None:
        return self._last_error

    @property
    def item_id(self) -> str:
        return self._item_id

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self._current_state)

    def can_transition_to(self, target: DeliveryStatus) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target, self).allowed

    def get_valid_targets(self) -> frozenset[DeliveryStatus]:
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: DeliveryStatus,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho
            metadata: Dados adicionais para auditoria (nunca PII)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target, self)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )
        self._current_state = target
        self._history.append(transition)
        self._status_history.append(target.value)

        return TransitionResult(success=True, transition=transition)

    def begin_attempt(self) -> TransitionResult:
        """PENDING → IN_PROGRESS, contabilizando a tentativa."""
        result = self.transition(DeliveryStatus.IN_PROGRESS, trigger="attempt_started")
        if result.success:
            self._attempts_made += 1
        return result

    def mark_succeeded(self) -> TransitionResult:
        """IN_PROGRESS → SUCCEEDED."""
        return self.transition(
            DeliveryStatus.SUCCEEDED,
            trigger="handler_succeeded",
            metadata={"attempts": self._attempts_made},
        )

    def mark_failed(self, error: str) -> TransitionResult:
        """
        IN_PROGRESS → FAILED_RETRYABLE ou FAILED_TERMINAL.

        O destino depende do orçamento: com tentativas restantes o item
        aguarda backoff; caso contrário a falha é terminal.
        """
        self._last_error = error
        target = (
            DeliveryStatus.FAILED_RETRYABLE
            if self._attempts_made < self._max_attempts
            else DeliveryStatus.FAILED_TERMINAL
        )
        return self.transition(
            target,
            trigger="handler_failed",
            metadata={"attempts": self._attempts_made},
        )

    def resume_after_backoff(self) -> TransitionResult:
        """FAILED_RETRYABLE → PENDING, quando o item volta a ser entregue."""
        return self.transition(DeliveryStatus.PENDING, trigger="backoff_elapsed")

    def next_backoff(self) -> float:
        """
        Atraso (segundos) antes da próxima tentativa.

        Usa backoff_schedule[attempts_made - 1]; além do fim da tabela,
        repete o último valor.
        """
        if self._attempts_made <= 0:
            return 0.0
        index = min(self._attempts_made - 1, len(self._backoff_schedule) - 1)
        return self._backoff_schedule[index]

    def snapshot(self) -> DeliveryAttemptState:
        """Snapshot imutável para viajar com o item na fila."""
        return DeliveryAttemptState(
            status=self._current_state,
            attempts_made=self._attempts_made,
            max_attempts=self._max_attempts,
            backoff_schedule=self._backoff_schedule,
            last_error=self._last_error,
            history=tuple(self._status_history),
        )

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_delivery_fsm(
    item_id: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_schedule: tuple[float, ...] = DEFAULT_BACKOFF_SCHEDULE,
) -> DeliveryStateMachine:
    """Factory para criar a máquina de um item recém-despachado."""
    return DeliveryStateMachine(
        max_attempts=max_attempts,
        backoff_schedule=backoff_schedule,
        item_id=item_id,
    )

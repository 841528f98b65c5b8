"""
Estado de tentativas de entrega que viaja junto com o item na fila.

Serializável em dict JSON-safe para que o item seja entregue à fila
por valor (memória ou Redis).
"""

from dataclasses import dataclass, field
from typing import Any

from fsm.states.delivery import DeliveryStatus

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BACKOFF_SCHEDULE: tuple[float, ...] = (5.0, 15.0, 30.0)


@dataclass(frozen=True, slots=True)
class DeliveryAttemptState:
    """
    Snapshot imutável do orçamento e status de entrega de um item.

    Attributes:
        status: Status atual
        attempts_made: Tentativas iniciadas (começa em 0)
        max_attempts: Limite de tentativas
        backoff_schedule: Atrasos (segundos) após a 1ª, 2ª, ... falha
        last_error: Descrição do último erro do handler
        history: Sequência de status percorridos (inclui o inicial)
    """

    status: DeliveryStatus = DeliveryStatus.PENDING
    attempts_made: int = 0
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    backoff_schedule: tuple[float, ...] = DEFAULT_BACKOFF_SCHEDULE
    last_error: str | None = None
    history: tuple[str, ...] = field(default=(DeliveryStatus.PENDING.value,))

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts deve ser >= 1")
        if not self.backoff_schedule:
            raise ValueError("backoff_schedule não pode ser vazio")
        if not 0 <= self.attempts_made <= self.max_attempts:
            raise ValueError(
                f"attempts_made fora do intervalo: {self.attempts_made}"
            )

    @classmethod
    def fresh(
        cls,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        backoff_schedule: tuple[float, ...] = DEFAULT_BACKOFF_SCHEDULE,
    ) -> "DeliveryAttemptState":
        """Estado inicial de um item recém-despachado."""
        return cls(
            max_attempts=max_attempts,
            backoff_schedule=tuple(float(v) for v in backoff_schedule),
        )

    @property
    def remaining_attempts(self) -> int:
        return self.max_attempts - self.attempts_made

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "attempts_made": self.attempts_made,
            "max_attempts": self.max_attempts,
            "backoff_schedule": list(self.backoff_schedule),
            "last_error": self.last_error,
            "history": list(self.history),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeliveryAttemptState":
        status = DeliveryStatus(data.get("status", DeliveryStatus.PENDING.value))
        return cls(
            status=status,
            attempts_made=int(data.get("attempts_made", 0)),
            max_attempts=int(data.get("max_attempts", DEFAULT_MAX_ATTEMPTS)),
            backoff_schedule=tuple(
                float(v) for v in data.get("backoff_schedule", DEFAULT_BACKOFF_SCHEDULE)
            ),
            last_error=data.get("last_error"),
            history=tuple(data.get("history") or (status.value,)),
        )

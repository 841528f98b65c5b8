"""
Estados canônicos de uma tentativa de entrega.

Cada item enfileirado carrega seu próprio estado de entrega; não existe
tabela global de tentativas.
"""

from enum import StrEnum


class DeliveryStatus(StrEnum):
    """
    Estados do ciclo de vida de entrega de um item.

    Estados não-terminais:
        - PENDING: Aguardando um worker (nova ou após backoff)
        - IN_PROGRESS: Handler em execução (tentativa contabilizada)
        - FAILED_RETRYABLE: Falhou, aguardando o atraso de backoff

    Estados terminais:
        - SUCCEEDED: Handler concluiu sem erro
        - FAILED_TERMINAL: Tentativas esgotadas, item descartado
    """

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    FAILED_RETRYABLE = "FAILED_RETRYABLE"

    SUCCEEDED = "SUCCEEDED"
    FAILED_TERMINAL = "FAILED_TERMINAL"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, o item não volta para a fila
TERMINAL_STATES: frozenset[DeliveryStatus] = frozenset({
    DeliveryStatus.SUCCEEDED,
    DeliveryStatus.FAILED_TERMINAL,
})

DEFAULT_INITIAL_STATE: DeliveryStatus = DeliveryStatus.PENDING


def is_terminal(state: DeliveryStatus) -> bool:
    """Verifica se o estado é terminal."""
    return state in TERMINAL_STATES


def is_valid_state(state: object) -> bool:
    """Verifica se o valor é um DeliveryStatus válido."""
    return isinstance(state, DeliveryStatus)

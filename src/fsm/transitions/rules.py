"""
Regras de transição válidas entre estados de entrega.

Grafo:
    PENDING → IN_PROGRESS
    IN_PROGRESS → SUCCEEDED | FAILED_RETRYABLE | FAILED_TERMINAL
    FAILED_RETRYABLE → PENDING
"""

from fsm.states.delivery import TERMINAL_STATES, DeliveryStatus

TransitionMap = dict[DeliveryStatus, frozenset[DeliveryStatus]]

VALID_TRANSITIONS: TransitionMap = {
    DeliveryStatus.PENDING: frozenset({
        DeliveryStatus.IN_PROGRESS,
    }),
    DeliveryStatus.IN_PROGRESS: frozenset({
        DeliveryStatus.SUCCEEDED,
        DeliveryStatus.FAILED_RETRYABLE,
        DeliveryStatus.FAILED_TERMINAL,
    }),
    # Após o atraso de backoff o item volta para a mesma lane
    DeliveryStatus.FAILED_RETRYABLE: frozenset({
        DeliveryStatus.PENDING,
    }),
    DeliveryStatus.SUCCEEDED: frozenset(),
    DeliveryStatus.FAILED_TERMINAL: frozenset(),
}


def get_valid_targets(state: DeliveryStatus) -> frozenset[DeliveryStatus]:
    """Retorna os estados de destino válidos (vazio se terminal)."""
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: DeliveryStatus, to_state: DeliveryStatus) -> bool:
    """
    Verifica se uma transição é válida segundo o grafo.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida
    """
    if from_state in TERMINAL_STATES:
        return False
    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in DeliveryStatus:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, DeliveryStatus):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors

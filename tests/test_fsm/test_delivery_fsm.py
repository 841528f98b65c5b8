"""
Testes da máquina de estados de entrega.

Cobre estados, grafo de transições, guards de orçamento e as sequências
completas de falha permanente e de sucesso após falhas.
"""

import pytest

from fsm import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    DeliveryAttemptState,
    DeliveryStateMachine,
    DeliveryStatus,
    GuardResult,
    StateTransition,
    TransitionResult,
    create_delivery_fsm,
    evaluate_guards,
    get_valid_targets,
    is_terminal,
    is_transition_valid,
    is_valid_state,
    validate_transition_map,
)
from fsm.rules.guards import guard_attempt_budget


class _Budget:
    def __init__(self, attempts_made: int, max_attempts: int = 3) -> None:
        self.attempts_made = attempts_made
        self.max_attempts = max_attempts


class TestDeliveryStatusAndTransitions:
    def test_terminal_states_and_initial_state(self) -> None:
        assert TERMINAL_STATES == {
            DeliveryStatus.SUCCEEDED,
            DeliveryStatus.FAILED_TERMINAL,
        }
        assert DEFAULT_INITIAL_STATE == DeliveryStatus.PENDING
        for state in DeliveryStatus:
            assert is_valid_state(state) is True
            assert is_terminal(state) is (state in TERMINAL_STATES)
            assert str(state) == state.name
        assert is_valid_state("PENDING_X") is False

    def test_transition_map_is_consistent(self) -> None:
        assert validate_transition_map() == []
        assert set(VALID_TRANSITIONS) == set(DeliveryStatus)
        assert get_valid_targets(DeliveryStatus.PENDING) == {DeliveryStatus.IN_PROGRESS}
        assert get_valid_targets(DeliveryStatus.FAILED_RETRYABLE) == {
            DeliveryStatus.PENDING
        }

    @pytest.mark.parametrize(
        ("from_state", "to_state", "expected"),
        [
            (DeliveryStatus.PENDING, DeliveryStatus.IN_PROGRESS, True),
            (DeliveryStatus.PENDING, DeliveryStatus.SUCCEEDED, False),
            (DeliveryStatus.IN_PROGRESS, DeliveryStatus.SUCCEEDED, True),
            (DeliveryStatus.IN_PROGRESS, DeliveryStatus.PENDING, False),
            (DeliveryStatus.FAILED_RETRYABLE, DeliveryStatus.PENDING, True),
            (DeliveryStatus.FAILED_RETRYABLE, DeliveryStatus.IN_PROGRESS, False),
            (DeliveryStatus.SUCCEEDED, DeliveryStatus.PENDING, False),
            (DeliveryStatus.FAILED_TERMINAL, DeliveryStatus.PENDING, False),
        ],
    )
    def test_is_transition_valid(self, from_state, to_state, expected) -> None:
        assert is_transition_valid(from_state, to_state) is expected


class TestGuards:
    def test_attempt_budget_blocks_new_attempt_when_exhausted(self) -> None:
        result = guard_attempt_budget(
            DeliveryStatus.PENDING, DeliveryStatus.IN_PROGRESS, _Budget(3)
        )
        assert result.allowed is False
        assert "esgotadas" in (result.reason or "")

    def test_attempt_budget_blocks_premature_terminal(self) -> None:
        result = guard_attempt_budget(
            DeliveryStatus.IN_PROGRESS, DeliveryStatus.FAILED_TERMINAL, _Budget(1)
        )
        assert result.allowed is False

    def test_attempt_budget_blocks_retryable_without_budget(self) -> None:
        result = guard_attempt_budget(
            DeliveryStatus.IN_PROGRESS, DeliveryStatus.FAILED_RETRYABLE, _Budget(3)
        )
        assert result.allowed is False

    def test_evaluate_guards_stops_at_first_denial(self) -> None:
        calls: list[str] = []

        def first(from_state, to_state, context) -> GuardResult:
            calls.append("first")
            return GuardResult.deny("nope")

        def second(from_state, to_state, context) -> GuardResult:
            calls.append("second")
            return GuardResult.allow()

        result = evaluate_guards(
            DeliveryStatus.PENDING,
            DeliveryStatus.IN_PROGRESS,
            _Budget(0),
            guards=[first, second],
        )
        assert result.allowed is False
        assert result.reason == "nope"
        assert calls == ["first"]


class TestDeliveryStateMachine:
    def test_always_failing_handler_ends_terminal_after_max_attempts(self) -> None:
        machine = create_delivery_fsm("item-1")
        backoffs: list[float] = []

        for attempt in range(1, 4):
            if attempt > 1:
                assert machine.resume_after_backoff().success is True
            assert machine.begin_attempt().success is True
            assert machine.attempts_made == attempt
            result = machine.mark_failed(f"boom {attempt}")
            assert result.success is True
            if attempt < 3:
                assert machine.current_state == DeliveryStatus.FAILED_RETRYABLE
                backoffs.append(machine.next_backoff())

        assert machine.current_state == DeliveryStatus.FAILED_TERMINAL
        assert machine.is_terminal is True
        assert backoffs == [5.0, 15.0]
        assert machine.last_error == "boom 3"
        # Nenhuma quarta tentativa é possível
        assert machine.can_transition_to(DeliveryStatus.IN_PROGRESS) is False

    def test_fail_twice_then_succeed(self) -> None:
        machine = DeliveryStateMachine(item_id="item-2")
        for _ in range(2):
            machine.begin_attempt()
            machine.mark_failed("transient")
            machine.resume_after_backoff()

        machine.begin_attempt()
        result = machine.mark_succeeded()

        assert result.success is True
        assert machine.current_state == DeliveryStatus.SUCCEEDED
        assert machine.attempts_made == 3
        assert machine.snapshot().history == (
            "PENDING",
            "IN_PROGRESS",
            "FAILED_RETRYABLE",
            "PENDING",
            "IN_PROGRESS",
            "FAILED_RETRYABLE",
            "PENDING",
            "IN_PROGRESS",
            "SUCCEEDED",
        )

    def test_invalid_transition_is_reported_without_state_change(self) -> None:
        machine = DeliveryStateMachine()
        result = machine.mark_succeeded()

        assert isinstance(result, TransitionResult)
        assert result.success is False
        assert "PENDING" in (result.error_reason or "")
        assert machine.current_state == DeliveryStatus.PENDING
        assert machine.history == []

    def test_snapshot_roundtrip_resumes_same_budget(self) -> None:
        machine = DeliveryStateMachine(max_attempts=2, backoff_schedule=(1.0,))
        machine.begin_attempt()
        machine.mark_failed("first")

        restored = DeliveryStateMachine.from_snapshot(
            DeliveryAttemptState.from_dict(machine.snapshot().to_dict()),
            item_id="item-3",
        )

        assert restored.current_state == DeliveryStatus.FAILED_RETRYABLE
        assert restored.attempts_made == 1
        assert restored.next_backoff() == 1.0
        restored.resume_after_backoff()
        restored.begin_attempt()
        restored.mark_failed("second")
        assert restored.current_state == DeliveryStatus.FAILED_TERMINAL
        # Tabela curta repete o último valor
        assert restored.next_backoff() == 1.0

    def test_history_records_transitions(self) -> None:
        machine = DeliveryStateMachine()
        machine.begin_attempt()
        machine.mark_succeeded()

        history = machine.history
        assert all(isinstance(t, StateTransition) for t in history)
        assert [t.trigger for t in history] == ["attempt_started", "handler_succeeded"]
        summary = machine.get_history_summary()
        assert summary[-1]["to_state"] == "SUCCEEDED"


class TestDeliveryAttemptState:
    def test_fresh_state_defaults(self) -> None:
        state = DeliveryAttemptState.fresh()
        assert state.status == DeliveryStatus.PENDING
        assert state.attempts_made == 0
        assert state.max_attempts == 3
        assert state.backoff_schedule == (5.0, 15.0, 30.0)
        assert state.remaining_attempts == 3
        assert state.history == ("PENDING",)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_attempts": 0},
            {"backoff_schedule": ()},
            {"attempts_made": 4},
        ],
    )
    def test_invalid_budget_is_rejected(self, kwargs) -> None:
        with pytest.raises(ValueError):
            DeliveryAttemptState(**kwargs)

    def test_state_transition_requires_trigger(self) -> None:
        with pytest.raises(ValueError):
            StateTransition(
                from_state=DeliveryStatus.PENDING,
                to_state=DeliveryStatus.IN_PROGRESS,
                trigger="  ",
            )

# tests/unit/core/test_lifecycle.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from exercise_runtime.core.errors import TransitionError
from exercise_runtime.core.lifecycle import TRANSITIONS, LifecycleMachine
from exercise_runtime.core.state import LifecycleState


def test_machine_starts_uninitialized():
    machine = LifecycleMachine()
    assert machine.current_state is LifecycleState.UNINITIALIZED
    assert machine.history == ()


def test_happy_path_transitions():
    machine = LifecycleMachine()
    for target in (
        LifecycleState.INITIALIZING,
        LifecycleState.READY,
        LifecycleState.RUNNING,
        LifecycleState.PAUSED,
        LifecycleState.RUNNING,
        LifecycleState.COMPLETED,
        LifecycleState.READY,
    ):
        machine.transition(target)
    assert machine.current_state is LifecycleState.READY
    assert len(machine.history) == 7


def test_invalid_transition_raises_and_keeps_state():
    machine = LifecycleMachine()
    with pytest.raises(TransitionError) as exc_info:
        machine.transition(LifecycleState.RUNNING)
    assert exc_info.value.source == "uninitialized"
    assert exc_info.value.target == "running"
    assert machine.current_state is LifecycleState.UNINITIALIZED


def test_destroyed_is_reachable_from_every_live_state():
    for state, targets in TRANSITIONS.items():
        if state is LifecycleState.DESTROYED:
            assert targets == frozenset()
        else:
            assert LifecycleState.DESTROYED in targets


def test_is_in_and_can_transition():
    machine = LifecycleMachine()
    assert machine.is_in(LifecycleState.UNINITIALIZED, LifecycleState.READY)
    assert machine.can_transition(LifecycleState.INITIALIZING)
    assert not machine.can_transition(LifecycleState.COMPLETED)


def test_hooks_are_notified_exit_then_enter():
    calls = []
    hook = MagicMock()
    hook.on_exit.side_effect = lambda state: calls.append(("exit", state))
    hook.on_enter.side_effect = lambda state: calls.append(("enter", state))

    machine = LifecycleMachine(hooks=[hook])
    machine.transition(LifecycleState.INITIALIZING)

    assert calls == [
        ("exit", LifecycleState.UNINITIALIZED),
        ("enter", LifecycleState.INITIALIZING),
    ]


def test_hook_without_methods_is_ignored():
    machine = LifecycleMachine(hooks=[object()])
    machine.transition(LifecycleState.INITIALIZING)
    assert machine.current_state is LifecycleState.INITIALIZING


def test_hook_failure_notifies_on_error_and_propagates():
    hook = MagicMock()
    hook.on_enter.side_effect = RuntimeError("hook failed")

    machine = LifecycleMachine()
    machine.add_hook(hook)
    with pytest.raises(RuntimeError):
        machine.transition(LifecycleState.INITIALIZING)
    hook.on_error.assert_called_once()

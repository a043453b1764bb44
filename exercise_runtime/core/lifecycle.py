# exercise_runtime/core/lifecycle.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Dict, FrozenSet, List, Optional, Tuple

from exercise_runtime.core.errors import TransitionError
from exercise_runtime.core.state import LifecycleState

logger = logging.getLogger(__name__)

_S = LifecycleState

# Allowed lifecycle moves. COMPLETED only leaves through reset (to READY) or
# destroy; DESTROYED absorbs everything.
TRANSITIONS: Dict[LifecycleState, FrozenSet[LifecycleState]] = {
    _S.UNINITIALIZED: frozenset({_S.INITIALIZING, _S.DESTROYED}),
    _S.INITIALIZING: frozenset({_S.READY, _S.UNINITIALIZED, _S.DESTROYED}),
    _S.READY: frozenset({_S.RUNNING, _S.COMPLETED, _S.DESTROYED}),
    _S.RUNNING: frozenset({_S.PAUSED, _S.COMPLETED, _S.READY, _S.DESTROYED}),
    _S.PAUSED: frozenset({_S.RUNNING, _S.COMPLETED, _S.READY, _S.DESTROYED}),
    _S.COMPLETED: frozenset({_S.READY, _S.DESTROYED}),
    _S.DESTROYED: frozenset(),
}


class LifecycleMachine:
    """
    Finite state machine for the exercise lifecycle. Transitions are checked
    against TRANSITIONS; hooks are notified on exit of the old state and on
    entry of the new one.
    """

    def __init__(self, hooks: Optional[List] = None) -> None:
        """
        :param hooks: Optional list of hook objects implementing on_enter, on_exit, on_error.
        """
        self._hooks = hooks or []
        self._current_state = LifecycleState.UNINITIALIZED
        self._history: List[Tuple[LifecycleState, LifecycleState]] = []

    @property
    def current_state(self) -> LifecycleState:
        """Get the current lifecycle state."""
        return self._current_state

    @property
    def history(self) -> Tuple[Tuple[LifecycleState, LifecycleState], ...]:
        """Every (source, target) pair taken so far."""
        return tuple(self._history)

    def add_hook(self, hook) -> None:
        self._hooks.append(hook)

    def is_in(self, *states: LifecycleState) -> bool:
        return self._current_state in states

    def can_transition(self, target: LifecycleState) -> bool:
        return target in TRANSITIONS[self._current_state]

    def transition(self, target: LifecycleState) -> None:
        """
        Move to ``target``.

        :raises TransitionError: If the move is not allowed from the current state.
        """
        source = self._current_state
        if not self.can_transition(target):
            raise TransitionError(
                f"Cannot move from {source.value} to {target.value}",
                source=source.value,
                target=target.value,
            )

        try:
            self._notify_exit(source)
            self._current_state = target
            self._history.append((source, target))
            logger.debug("Lifecycle %s -> %s", source.value, target.value)
            self._notify_enter(target)
        except Exception as e:
            self._notify_error(e)
            raise

    def _notify_enter(self, state: LifecycleState) -> None:
        """Invoke on_enter hooks."""
        for hook in self._hooks:
            if hasattr(hook, "on_enter"):
                hook.on_enter(state)

    def _notify_exit(self, state: LifecycleState) -> None:
        """Invoke on_exit hooks."""
        for hook in self._hooks:
            if hasattr(hook, "on_exit"):
                hook.on_exit(state)

    def _notify_error(self, error: Exception) -> None:
        """Invoke on_error hooks."""
        for hook in self._hooks:
            if hasattr(hook, "on_error"):
                hook.on_error(error)

# exercise_runtime/plugins/session_recorder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple, Union

from exercise_runtime.core.events import Event, EventKind

if TYPE_CHECKING:
    from exercise_runtime.core.runtime import ExerciseRuntime

logger = logging.getLogger(__name__)


class SessionRecorder:
    """
    Plugin keeping an in-memory log of the events a runtime publishes.

    State changes are left out unless asked for since every update emits one.
    """

    def __init__(self, kinds: Optional[Iterable[Union[EventKind, str]]] = None) -> None:
        """
        :param kinds: Event kinds to record; defaults to every kind except STATE_CHANGE.
        """
        if kinds is None:
            self._kinds: Tuple[EventKind, ...] = tuple(k for k in EventKind if k is not EventKind.STATE_CHANGE)
        else:
            self._kinds = tuple(k if isinstance(k, EventKind) else EventKind(k) for k in kinds)
        self._runtime: Optional["ExerciseRuntime"] = None
        self.events: List[Event] = []

    @property
    def attached(self) -> bool:
        return self._runtime is not None

    def initialize(self, runtime: "ExerciseRuntime") -> None:
        if self._runtime is not None:
            self.destroy()
        self._runtime = runtime
        for kind in self._kinds:
            runtime.on(kind, self._record)
        logger.debug("Session recorder attached to %s", runtime.id)

    def destroy(self) -> None:
        if self._runtime is None:
            return
        for kind in self._kinds:
            self._runtime.off(kind, self._record)
        self._runtime = None

    def names(self) -> List[str]:
        return [event.name for event in self.events]

    def of_kind(self, kind: Union[EventKind, str]) -> List[Event]:
        kind = kind if isinstance(kind, EventKind) else EventKind(kind)
        return [event for event in self.events if event.kind is kind]

    def clear(self) -> None:
        self.events.clear()

    def _record(self, event: Event) -> None:
        self.events.append(event)

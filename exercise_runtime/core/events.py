# exercise_runtime/core/events.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from exercise_runtime.core.errors import ListenerError
from exercise_runtime.core.state import (
    CompletionReason,
    ExerciseResults,
    LifecycleState,
    RuntimeState,
    ValidationResult,
)
from exercise_runtime.interfaces.types import Clock, OptionID

logger = logging.getLogger(__name__)


class EventKind(Enum):
    """Every event the runtime publishes. Values are the wire-friendly names."""

    INITIALIZED = "initialized"
    STARTED = "started"
    PAUSED = "paused"
    RESUMED = "resumed"
    RESET = "reset"
    STATE_CHANGE = "stateChange"
    USER_INTERACTION = "userInteraction"
    ANSWER_SUBMITTED = "answerSubmitted"
    HINT_SHOWN = "hintShown"
    TIME_WARNING = "timeWarning"
    TIME_UP = "timeUp"
    COMPLETED = "completed"
    PLAYBACK_STARTED = "playbackStarted"
    PLAYBACK_ENDED = "playbackEnded"
    ERROR = "error"
    DESTROYED = "destroyed"


@dataclass(frozen=True)
class LifecyclePayload:
    exercise_id: str
    lifecycle: LifecycleState


@dataclass(frozen=True)
class StateChangePayload:
    old_state: RuntimeState
    new_state: RuntimeState
    updates: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class InteractionPayload:
    type: str
    option: Optional[OptionID] = None
    selected: bool = False
    total_selected: int = 0


@dataclass(frozen=True)
class AnswerSubmittedPayload:
    answer: Tuple[OptionID, ...]
    validation: ValidationResult
    score: float
    attempts: int


@dataclass(frozen=True)
class HintPayload:
    index: int
    text: str


@dataclass(frozen=True)
class TimePayload:
    time_elapsed: int
    time_remaining: Optional[int]


@dataclass(frozen=True)
class CompletedPayload:
    results: ExerciseResults
    reason: CompletionReason


@dataclass(frozen=True)
class PlaybackPayload:
    option: Optional[OptionID] = None
    items: int = 0


@dataclass(frozen=True)
class ErrorPayload:
    context: str
    message: str
    timestamp: float


EventPayload = Union[
    LifecyclePayload,
    StateChangePayload,
    InteractionPayload,
    AnswerSubmittedPayload,
    HintPayload,
    TimePayload,
    CompletedPayload,
    PlaybackPayload,
    ErrorPayload,
]

PAYLOAD_TYPES: Dict[EventKind, Type[Any]] = {
    EventKind.INITIALIZED: LifecyclePayload,
    EventKind.STARTED: LifecyclePayload,
    EventKind.PAUSED: LifecyclePayload,
    EventKind.RESUMED: LifecyclePayload,
    EventKind.RESET: LifecyclePayload,
    EventKind.DESTROYED: LifecyclePayload,
    EventKind.STATE_CHANGE: StateChangePayload,
    EventKind.USER_INTERACTION: InteractionPayload,
    EventKind.ANSWER_SUBMITTED: AnswerSubmittedPayload,
    EventKind.HINT_SHOWN: HintPayload,
    EventKind.TIME_WARNING: TimePayload,
    EventKind.TIME_UP: TimePayload,
    EventKind.COMPLETED: CompletedPayload,
    EventKind.PLAYBACK_STARTED: PlaybackPayload,
    EventKind.PLAYBACK_ENDED: PlaybackPayload,
    EventKind.ERROR: ErrorPayload,
}


@dataclass(frozen=True)
class Event:
    """A fire-and-forget notification published on the bus."""

    kind: EventKind
    payload: Any
    timestamp: float

    @property
    def name(self) -> str:
        return self.kind.value


EventListener = Callable[[Event], None]


def _coerce_kind(kind: Union[EventKind, str]) -> EventKind:
    if isinstance(kind, EventKind):
        return kind
    return EventKind(kind)


class EventBus:
    """
    Typed publish/subscribe keyed by EventKind.

    Runtime Invariants:
    - Listeners run in registration order over a snapshot taken when
      emit() starts; listeners added during dispatch wait for the next emit.
    - A throwing listener is logged and reported to ``on_listener_error``;
      it never reaches the emitter or sibling listeners.
    - Payloads must match the type declared for their kind.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        on_listener_error: Optional[Callable[[Event, ListenerError], None]] = None,
    ) -> None:
        self._clock = clock or time.time
        self._on_listener_error = on_listener_error
        self._listeners: Dict[EventKind, List[EventListener]] = {}

    def on(self, kind: Union[EventKind, str], listener: EventListener) -> None:
        """
        Register a listener for an event kind.

        :param kind: EventKind or its string value.
        :param listener: Callable receiving the Event.
        """
        self._listeners.setdefault(_coerce_kind(kind), []).append(listener)

    def off(self, kind: Union[EventKind, str], listener: EventListener) -> bool:
        """
        Remove the first registration of ``listener`` for ``kind``.

        :return: True if a listener was removed.
        """
        listeners = self._listeners.get(_coerce_kind(kind))
        if not listeners or listener not in listeners:
            return False
        listeners.remove(listener)
        return True

    def emit(self, kind: Union[EventKind, str], payload: Any) -> Event:
        """
        Publish an event to the listeners registered at call time.

        :raises TypeError: If the payload does not match the kind.
        :return: The dispatched Event.
        """
        kind = _coerce_kind(kind)
        expected = PAYLOAD_TYPES[kind]
        if not isinstance(payload, expected):
            raise TypeError(f"{kind.value} expects {expected.__name__}, got {type(payload).__name__}")

        event = Event(kind=kind, payload=payload, timestamp=self._clock())
        for listener in list(self._listeners.get(kind, ())):
            try:
                listener(event)
            except Exception as e:
                logger.exception("Error in event listener for %s", kind.value)
                self._report(event, ListenerError(str(e), kind.value))
        return event

    def _report(self, event: Event, error: ListenerError) -> None:
        if self._on_listener_error is None:
            return
        try:
            self._on_listener_error(event, error)
        except Exception:
            logger.exception("Listener error handler failed for %s", event.kind.value)

    def listener_count(self, kind: Optional[Union[EventKind, str]] = None) -> int:
        if kind is None:
            return sum(len(listeners) for listeners in self._listeners.values())
        return len(self._listeners.get(_coerce_kind(kind), ()))

    def clear(self) -> None:
        """Drop every listener."""
        self._listeners.clear()

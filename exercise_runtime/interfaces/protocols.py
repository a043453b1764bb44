# exercise_runtime/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Protocol, Sequence, runtime_checkable

from exercise_runtime.interfaces.types import Answer, LocalizedText

if TYPE_CHECKING:
    from exercise_runtime.core.definition import ExerciseDefinition
    from exercise_runtime.core.runtime import ExerciseRuntime
    from exercise_runtime.core.state import ContentProjection, RuntimeState, ValidationResult
    from exercise_runtime.core.validation import SchemaReport


@runtime_checkable
class ExerciseVariant(Protocol):
    """
    Capability object implementing one kind of exercise. The runtime holds a
    reference to it and delegates every answer-shaped decision.

    Runtime Invariants:
    - validate_answer() and calculate_score() are pure functions of the
      definition and the answer.
    - calculate_score() returns a number in [0, 100].

    Error Handling:
    - Malformed answers may raise; the runtime catches and reports them.
    """

    def get_type(self) -> str: ...

    def validate_answer(self, answer: Answer) -> "ValidationResult": ...

    def calculate_score(self, answer: Answer) -> float: ...

    def project_content(self, include_solution: bool = False) -> "ContentProjection": ...

    def get_current_answer(self, state: "RuntimeState") -> Answer: ...


@runtime_checkable
class SchemaValidator(Protocol):
    """Checks a definition before the runtime uses it."""

    def validate(self, definition: "ExerciseDefinition") -> "SchemaReport": ...


@runtime_checkable
class Localizer(Protocol):
    """
    Produces human readable strings. Only used for messages, never for
    control flow.
    """

    @property
    def language(self) -> str: ...

    @property
    def direction(self) -> str: ...

    def translate(self, key: str, params: Optional[Mapping[str, Any]] = None) -> str: ...

    def localize(self, text: LocalizedText) -> str: ...

    def is_rtl(self) -> bool: ...


@runtime_checkable
class AccessibilityAnnouncer(Protocol):
    """Fire-and-forget screen reader announcements."""

    def announce(self, message: str, priority: str = "polite") -> None: ...


@runtime_checkable
class AnalyticsSink(Protocol):
    """Fire-and-forget analytics. Failures must never affect the runtime."""

    def track_event(self, name: str, payload: Dict[str, Any]) -> None: ...


@runtime_checkable
class MediaLoader(Protocol):
    """Preloads media referenced by a definition."""

    async def preload(self, references: Sequence[str]) -> None: ...


@runtime_checkable
class AudioSpeaker(Protocol):
    """Speech output. play() resolves when the utterance has finished."""

    async def play(self, text: str, options: Optional[Mapping[str, Any]] = None) -> None: ...

    def cancel(self) -> None: ...


@runtime_checkable
class Plugin(Protocol):
    """
    Extension object attached to a runtime by name. The registry keeps a
    reference; the plugin never owns the runtime. destroy() is optional.
    """

    def initialize(self, runtime: "ExerciseRuntime") -> None: ...


@runtime_checkable
class LifecycleHook(Protocol):
    """Observer of lifecycle state changes."""

    def on_enter(self, state: Any) -> None: ...

    def on_exit(self, state: Any) -> None: ...


__all__: List[str] = [
    "AccessibilityAnnouncer",
    "AnalyticsSink",
    "AudioSpeaker",
    "ExerciseVariant",
    "LifecycleHook",
    "Localizer",
    "MediaLoader",
    "Plugin",
    "SchemaValidator",
]

# exercise_runtime/core/state.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional, Tuple

from exercise_runtime.interfaces.types import OptionID


class LifecycleState(Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    RUNNING = "running"
    PAUSED = "paused"
    COMPLETED = "completed"
    DESTROYED = "destroyed"


class CompletionReason(Enum):
    """Why an exercise completed. Both reasons share the ``completed`` flag."""

    ANSWERED = "answered"
    TIME_UP = "time_up"


class FeedbackKind(Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    ERROR = "error"


@dataclass(frozen=True)
class Feedback:
    message: str
    kind: FeedbackKind


@dataclass(frozen=True)
class ErrorInfo:
    """Last error caught by the runtime."""

    context: str
    message: str
    timestamp: float


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating one submission. Only the most recent result is kept.
    """

    is_correct: bool
    is_partially_correct: bool
    correct_set: FrozenSet[OptionID]
    user_answer: Tuple[OptionID, ...]
    explanation: str = ""


@dataclass(frozen=True)
class AnswerRecord:
    answer: Tuple[OptionID, ...]
    is_correct: bool
    score: float
    timestamp: float


@dataclass(frozen=True)
class OptionView:
    """Presentation-agnostic description of one option."""

    id: OptionID
    text: str
    image: Optional[str] = None
    has_audio: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)
    is_correct: Optional[bool] = None


@dataclass(frozen=True)
class ContentProjection:
    question: str
    instruction: str
    options: Tuple[OptionView, ...]
    category: str
    selection_mode: str
    required_selections: int


@dataclass(frozen=True)
class ExerciseResults:
    exercise_id: str
    exercise_type: str
    score: float
    accuracy: int
    total_time: Optional[float]
    attempts: int
    hints_used: int
    completed: bool
    completion_reason: Optional[CompletionReason]
    answers: Tuple[Tuple[OptionID, ...], ...]


@dataclass(frozen=True)
class RuntimeState:
    """
    Immutable snapshot of an exercise run. The runtime replaces the whole
    object on every update, so a snapshot handed out never changes.
    """

    lifecycle: LifecycleState = LifecycleState.UNINITIALIZED
    started: bool = False
    paused: bool = False
    completed: bool = False
    completion_reason: Optional[CompletionReason] = None
    time_up: bool = False

    selected_answers: Tuple[OptionID, ...] = ()
    answer_history: Tuple[AnswerRecord, ...] = ()
    attempts: int = 0
    hints_used: int = 0
    current_hint: Optional[str] = None

    time_elapsed: int = 0
    time_remaining: Optional[int] = None
    time_warning_sent: bool = False

    score: float = 0
    accuracy: int = 0
    last_validation: Optional[ValidationResult] = None
    feedback: Optional[Feedback] = None
    revealed_answer: Tuple[OptionID, ...] = ()

    loading: bool = False
    error: Optional[ErrorInfo] = None

    is_playing_audio: bool = False
    currently_playing: Optional[OptionID] = None

    start_time: Optional[float] = None
    end_time: Optional[float] = None
    total_time: Optional[float] = None

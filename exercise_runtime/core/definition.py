# exercise_runtime/core/definition.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple

from exercise_runtime.interfaces.types import LocalizedText, OptionID


class SelectionMode(Enum):
    """Policy governing how many options may be selected at once."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class PartialCreditPolicy(Enum):
    """
    How incomplete answers are credited.

    NONE: only exact matches score.
    PROPORTIONAL: any answer containing some, but not all, correct options is
        partially correct; incorrect members do not void the credit.
    STRICT: only a non-empty strict subset of the correct set, with no
        incorrect members, is partially correct.
    """

    NONE = "none"
    PROPORTIONAL = "proportional"
    STRICT = "strict"


@dataclass(frozen=True)
class Option:
    """One selectable option of an exercise."""

    id: OptionID
    text: LocalizedText
    image: Optional[str] = None
    audio: Optional[str] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ExerciseContent:
    question: LocalizedText
    options: Tuple[Option, ...]
    instruction: LocalizedText = ""
    category: str = "general"
    media: Tuple[str, ...] = ()

    def option_ids(self) -> Tuple[OptionID, ...]:
        return tuple(option.id for option in self.options)

    def get_option(self, option_id: OptionID) -> Optional[Option]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


@dataclass(frozen=True)
class SolutionRules:
    correct: FrozenSet[OptionID]
    hints: Tuple[LocalizedText, ...] = ()
    partial_credit: PartialCreditPolicy = PartialCreditPolicy.PROPORTIONAL


@dataclass(frozen=True)
class ExerciseSettings:
    """
    Per-exercise behaviour switches.

    :param selection_mode: Single or multiple selection.
    :param required_selections: Upper bound for multiple selection mode.
    :param time_limit: Timer ticks available, or None for untimed exercises.
        One tick lasts RuntimeConfig.tick_interval seconds.
    :param allow_multiple_attempts: If False the first submission completes.
    :param max_attempts: Optional cap on submissions when multiple attempts are allowed.
    :param show_correct_after_mistakes: Reveal the correct set after a wrong answer.
    """

    selection_mode: SelectionMode = SelectionMode.MULTIPLE
    required_selections: int = 1
    time_limit: Optional[int] = None
    allow_multiple_attempts: bool = True
    max_attempts: Optional[int] = None
    show_correct_after_mistakes: bool = False


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    Immutable description of one exercise. Owned by the host and read-only to
    the runtime. Legacy shapes must be normalized before construction.
    """

    id: str
    variant_type: str
    content: ExerciseContent
    solution: SolutionRules
    settings: ExerciseSettings = field(default_factory=ExerciseSettings)

    def media_references(self) -> Tuple[str, ...]:
        """All media URLs referenced by the content, in declaration order."""
        return tuple(_iter_media(self.content))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ExerciseDefinition":
        """
        Build a definition from its normalized mapping form.

        Keys may be camelCase or snake_case. The correct set is read from
        ``solution.correct`` when present, otherwise from per-option
        ``isCorrect`` flags.

        :raises KeyError: If a required key is missing.
        :raises ValueError: If an enumerated value is unknown.
        """
        content_data = data["content"]
        options = tuple(_option_from_dict(raw) for raw in content_data.get("options", ()))
        content = ExerciseContent(
            question=content_data.get("question", ""),
            instruction=content_data.get("instruction", ""),
            options=options,
            category=content_data.get("category", "general"),
            media=tuple(content_data.get("media", ())),
        )

        solution_data = data.get("solution", {})
        correct = solution_data.get("correct")
        if correct is None:
            correct = [
                raw["id"]
                for raw in content_data.get("options", ())
                if _get(raw, "is_correct", "isCorrect", default=_get(raw.get("metadata", {}), "is_correct", "isCorrect"))
            ]
        partial = _get(solution_data, "partial_credit", "partialCredit", default=PartialCreditPolicy.PROPORTIONAL.value)
        if partial is True:
            partial = PartialCreditPolicy.PROPORTIONAL.value
        elif partial is False:
            partial = PartialCreditPolicy.NONE.value
        solution = SolutionRules(
            correct=frozenset(str(option_id) for option_id in correct),
            hints=tuple(solution_data.get("hints", ())),
            partial_credit=PartialCreditPolicy(partial),
        )

        settings_data = _get(data, "settings", "configuration", default={})
        settings = ExerciseSettings(
            selection_mode=SelectionMode(_get(settings_data, "selection_mode", "selectionMode", default="multiple")),
            required_selections=int(_get(settings_data, "required_selections", "requiredSelections", default=1)),
            time_limit=_get(settings_data, "time_limit", "timeLimit"),
            allow_multiple_attempts=bool(
                _get(settings_data, "allow_multiple_attempts", "allowMultipleAttempts", default=True)
            ),
            max_attempts=_get(settings_data, "max_attempts", "maxAttempts"),
            show_correct_after_mistakes=bool(
                _get(settings_data, "show_correct_after_mistakes", "showHintsAfterMistakes", default=False)
            ),
        )

        return cls(
            id=str(data["id"]),
            variant_type=_get(data, "variant_type", "type", default="multiple-choice"),
            content=content,
            solution=solution,
            settings=settings,
        )


def _get(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return default


def _option_from_dict(raw: Mapping[str, Any]) -> Option:
    metadata: Dict[str, Any] = dict(raw.get("metadata", {}))
    for key in ("isCorrect", "is_correct"):
        metadata.pop(key, None)
    return Option(
        id=str(raw["id"]),
        text=raw.get("text", raw.get("word", "")),
        image=raw.get("image"),
        audio=raw.get("audio"),
        metadata=metadata,
    )


def _iter_media(content: ExerciseContent) -> Iterator[str]:
    yield from content.media
    for option in content.options:
        if option.image:
            yield option.image
        if option.audio:
            yield option.audio

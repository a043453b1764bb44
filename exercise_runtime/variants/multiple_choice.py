# exercise_runtime/variants/multiple_choice.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Tuple

from exercise_runtime.core.definition import ExerciseDefinition, PartialCreditPolicy
from exercise_runtime.core.errors import ValidationError
from exercise_runtime.core.state import ContentProjection, OptionView, RuntimeState, ValidationResult
from exercise_runtime.interfaces.protocols import Localizer
from exercise_runtime.interfaces.types import Answer, OptionID
from exercise_runtime.runtime.localization import CatalogLocalizer
from exercise_runtime.runtime.playback import PlaybackChannel


class MultipleChoiceVariant:
    """
    Selection based exercise: the answer is the set of chosen option ids.

    Scoring: an exact match of the selection with the correct set scores 100.
    A partially correct selection scores ``correct_selected / total_correct
    * 100`` (rounded) under the definition's PartialCreditPolicy. Anything
    else scores 0.
    """

    TYPE = "multiple-choice"

    def __init__(self, definition: ExerciseDefinition, localizer: Optional[Localizer] = None) -> None:
        self._definition = definition
        self._localizer = localizer or CatalogLocalizer()
        self._option_ids = definition.content.option_ids()
        self._correct = definition.solution.correct

    @property
    def definition(self) -> ExerciseDefinition:
        return self._definition

    def get_type(self) -> str:
        return self.TYPE

    def get_current_answer(self, state: RuntimeState) -> Answer:
        return state.selected_answers

    def is_answer_complete(self, answer: Answer) -> bool:
        """True when the answer holds exactly the number of selections asked for."""
        return len(self._normalize(answer)) == self._definition.settings.required_selections

    def validate_answer(self, answer: Answer) -> ValidationResult:
        """
        :raises ValidationError: If the answer is not a collection of known option ids.
        """
        selected = self._normalize(answer)
        chosen = set(selected)
        hits = chosen & self._correct
        is_correct = chosen == self._correct
        return ValidationResult(
            is_correct=is_correct,
            is_partially_correct=not is_correct and self._is_partial(chosen, hits),
            correct_set=self._correct,
            user_answer=selected,
            explanation=self._explain(is_correct),
        )

    def calculate_score(self, answer: Answer) -> float:
        selected = self._normalize(answer)
        chosen = set(selected)
        if chosen == self._correct:
            return 100
        hits = chosen & self._correct
        if not self._correct or not self._is_partial(chosen, hits):
            return 0
        return min(100, max(0, round(len(hits) / len(self._correct) * 100)))

    def project_content(self, include_solution: bool = False) -> ContentProjection:
        localize = self._localizer.localize
        content = self._definition.content
        settings = self._definition.settings
        options = tuple(
            OptionView(
                id=option.id,
                text=localize(option.text),
                image=option.image,
                has_audio=option.audio is not None,
                metadata=dict(option.metadata),
                is_correct=(option.id in self._correct) if include_solution else None,
            )
            for option in content.options
        )
        return ContentProjection(
            question=localize(content.question),
            instruction=localize(content.instruction),
            options=options,
            category=content.category,
            selection_mode=settings.selection_mode.value,
            required_selections=settings.required_selections,
        )

    async def play_option(
        self,
        channel: PlaybackChannel,
        option_id: OptionID,
        options: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """Speak one option's text. Returns False if unknown, rejected or failed."""
        option = self._definition.content.get_option(option_id)
        if option is None:
            return False
        text = self._localizer.localize(option.text)
        return await channel.speak([text], label=option_id, options=options)

    async def play_all(self, channel: PlaybackChannel, options: Optional[Mapping[str, Any]] = None) -> bool:
        """Speak every option in order under a single hold of the playback lock."""
        texts = [self._localizer.localize(option.text) for option in self._definition.content.options]
        return await channel.speak(texts, options=options)

    def _normalize(self, answer: Any) -> Tuple[OptionID, ...]:
        if answer is None:
            raise ValidationError("Answer is missing")
        if isinstance(answer, str):
            answer = (answer,)
        if not isinstance(answer, Iterable):
            raise ValidationError("Answer must be a collection of option ids", {"answer": repr(answer)})

        selected = []
        for option_id in answer:
            if option_id not in self._option_ids:
                raise ValidationError("Answer contains an unknown option", {"option": option_id})
            if option_id not in selected:
                selected.append(option_id)
        return tuple(selected)

    def _is_partial(self, chosen: set, hits: set) -> bool:
        policy = self._definition.solution.partial_credit
        if policy is PartialCreditPolicy.NONE or not hits or len(hits) >= len(self._correct):
            return False
        if policy is PartialCreditPolicy.STRICT:
            return chosen <= self._correct
        return True

    def _explain(self, is_correct: bool) -> str:
        if is_correct:
            return self._localizer.translate("feedback.correct")

        category = self._definition.content.category.replace("-", "_")
        if self._localizer.translate(f"explanations.{category}") == f"explanations.{category}":
            category = "general"
        values = [
            self._localizer.localize(option.text)
            for option in self._definition.content.options
            if option.id in self._correct
        ]
        separator = self._localizer.translate(f"explanations.{category}Separator")
        return self._localizer.translate(f"explanations.{category}", {"answers": separator.join(values)})

# exercise_runtime/runtime/localization.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional

from exercise_runtime.interfaces.types import LocalizedText

logger = logging.getLogger(__name__)

RTL_LANGUAGES = frozenset({"ar", "he", "fa", "ur", "yi"})

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

BUILT_IN_CATALOGUES: Dict[str, Dict[str, Any]] = {
    "en": {
        "feedback": {
            "correct": "Correct! Well done!",
            "incorrect": "Incorrect. Try again!",
            "partiallyCorrect": "Partially correct. Keep going!",
        },
        "accessibility": {
            "optionSelected": "Option selected",
            "optionDeselected": "Option deselected",
            "exerciseStarted": "Exercise started",
            "exerciseReset": "Exercise reset",
            "exerciseCompleted": "Exercise completed",
            "playingAudio": "Playing audio",
        },
        "errors": {
            "timeUp": "Time is up!",
            "tooManyAttempts": "No attempts left.",
        },
        "timer": {
            "warning": "{{remaining}} left",
        },
        "explanations": {
            "general": "The correct answers are: {{answers}}.",
            "generalSeparator": ", ",
            "sound_matching": "The correct words are: {{answers}}. They have the same ending sound.",
            "sound_matchingSeparator": " and ",
            "synonym": "The synonyms are: {{answers}}. They have similar meanings.",
            "synonymSeparator": " and ",
        },
        "exerciseTypes": {
            "multipleAnswers": {
                "selectionCount": "{{selected}}/{{required}} selected",
            },
        },
    },
    "es": {
        "feedback": {
            "correct": "¡Correcto! ¡Bien hecho!",
            "incorrect": "Incorrecto. ¡Inténtalo de nuevo!",
            "partiallyCorrect": "Parcialmente correcto. ¡Sigue así!",
        },
        "errors": {
            "timeUp": "¡Se acabó el tiempo!",
        },
    },
}


def interpolate(text: str, params: Optional[Mapping[str, Any]]) -> str:
    """Replace ``{{name}}`` placeholders; unknown placeholders are left as-is."""
    if not params:
        return text
    return _PLACEHOLDER.sub(lambda m: str(params[m.group(1)]) if m.group(1) in params else m.group(0), text)


def _lookup(catalogue: Optional[Mapping[str, Any]], key: str) -> Optional[str]:
    node: Any = catalogue
    for part in key.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


class CatalogLocalizer:
    """
    Localizer backed by in-memory catalogues of nested dictionaries.

    Lookups fall back to ``fallback_language`` and finally to the key itself.
    """

    def __init__(
        self,
        language: str = "en",
        catalogues: Optional[Mapping[str, Mapping[str, Any]]] = None,
        fallback_language: str = "en",
    ) -> None:
        self._language = language
        self._fallback = fallback_language
        self._catalogues: Dict[str, Mapping[str, Any]] = dict(BUILT_IN_CATALOGUES)
        if catalogues:
            self._catalogues.update(catalogues)

    @property
    def language(self) -> str:
        return self._language

    @property
    def direction(self) -> str:
        return "rtl" if self.is_rtl() else "ltr"

    def set_language(self, language: str) -> None:
        self._language = language

    def add_catalogue(self, language: str, catalogue: Mapping[str, Any]) -> None:
        self._catalogues[language] = catalogue

    def is_rtl(self, language: Optional[str] = None) -> bool:
        return (language or self._language) in RTL_LANGUAGES

    def translate(self, key: str, params: Optional[Mapping[str, Any]] = None) -> str:
        text = _lookup(self._catalogues.get(self._language), key)
        if text is None and self._language != self._fallback:
            text = _lookup(self._catalogues.get(self._fallback), key)
        if text is None:
            logger.warning("Translation missing for key: %s in language: %s", key, self._language)
            text = key
        return interpolate(text, params)

    def localize(self, text: LocalizedText) -> str:
        """Resolve a plain or per-language text for the current language."""
        if isinstance(text, str):
            return text
        if isinstance(text, Mapping):
            return text.get(self._language) or text.get(self._fallback) or next(iter(text.values()), "")
        return ""

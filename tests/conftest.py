# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import copy
from unittest.mock import MagicMock

import pytest

from exercise_runtime.core.definition import ExerciseDefinition
from exercise_runtime.core.runtime import ExerciseRuntime, RuntimeConfig

BASE_DEFINITION = {
    "id": "rhymes-1",
    "type": "multiple-choice",
    "content": {
        "question": "Which words rhyme with cat?",
        "instruction": "Choose two words",
        "category": "sound_matching",
        "options": [
            {"id": "a", "text": "hat"},
            {"id": "b", "text": "dog"},
            {"id": "c", "text": "bat"},
            {"id": "d", "text": "sun"},
        ],
    },
    "solution": {
        "correct": ["a", "c"],
        "hints": ["Listen to the ending", "Both end in -at"],
    },
    "settings": {
        "selectionMode": "multiple",
        "requiredSelections": 2,
    },
}


class FakeClock:
    """Deterministic clock for timestamps and durations."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def definition_data():
    """A fresh, mutable copy of the base definition mapping."""
    return copy.deepcopy(BASE_DEFINITION)


@pytest.fixture
def make_definition():
    """Factory building a definition with overridden settings, solution or content."""

    def _make(settings=None, solution=None, content=None, **top_level):
        data = copy.deepcopy(BASE_DEFINITION)
        data["settings"].update(settings or {})
        data["solution"].update(solution or {})
        data["content"].update(content or {})
        data.update(top_level)
        return ExerciseDefinition.from_dict(data)

    return _make


@pytest.fixture
def definition(make_definition):
    """Four options, two correct, two selections required, proportional partial credit."""
    return make_definition()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    """Manual timer and no pause between played items."""
    return RuntimeConfig(auto_tick=False, playback_pause=0)


@pytest.fixture
def announcer():
    return MagicMock()


@pytest.fixture
def analytics():
    return MagicMock()


@pytest.fixture
def make_runtime(definition, config, announcer, analytics, clock):
    """Factory for runtimes wired to mock collaborators; every runtime is destroyed afterwards."""
    created = []

    def _make(exercise=None, **kwargs):
        kwargs.setdefault("config", config)
        kwargs.setdefault("announcer", announcer)
        kwargs.setdefault("analytics", analytics)
        kwargs.setdefault("clock", clock)
        runtime = ExerciseRuntime(exercise or definition, **kwargs)
        created.append(runtime)
        return runtime

    yield _make
    for runtime in created:
        runtime.destroy()


@pytest.fixture
def runtime(make_runtime):
    return make_runtime()


@pytest.fixture
def capture():
    """Attach a recording listener for the given kinds and return the shared list."""

    def _capture(target, *kinds):
        seen = []
        for kind in kinds:
            target.on(kind, seen.append)
        return seen

    return _capture

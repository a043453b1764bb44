# tests/unit/core/test_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from exercise_runtime.core.errors import (
    ExerciseError,
    InitializationError,
    ListenerError,
    PluginError,
    TransitionError,
    ValidationError,
)


def test_exercise_error_message_only():
    error = ExerciseError("Something failed")
    assert str(error) == "Something failed"
    assert error.message == "Something failed"
    assert error.details == {}


def test_exercise_error_with_details():
    error = ExerciseError("Bad input", {"field": "answer"})
    assert str(error) == "Bad input (details: {'field': 'answer'})"
    assert error.details["field"] == "answer"


@pytest.mark.parametrize("error_class", [InitializationError, ValidationError])
def test_subclasses_share_base(error_class):
    """Every runtime error can be caught as ExerciseError."""
    with pytest.raises(ExerciseError):
        raise error_class("boom")


def test_transition_error_records_states():
    error = TransitionError("Cannot move", source="ready", target="paused")
    assert error.source == "ready"
    assert error.target == "paused"
    assert error.details == {"source": "ready", "target": "paused"}


def test_plugin_error_records_plugin_and_phase():
    error = PluginError("Failed", "recorder", "initialize")
    assert error.plugin_name == "recorder"
    assert error.phase == "initialize"
    assert "recorder" in str(error)


def test_listener_error_records_event_kind():
    error = ListenerError("listener blew up", "started")
    assert error.event_kind == "started"
    assert isinstance(error, ExerciseError)

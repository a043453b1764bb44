# tests/unit/plugins/test_session_recorder.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from exercise_runtime.core.events import EventKind
from exercise_runtime.plugins.session_recorder import SessionRecorder


@pytest.mark.asyncio
async def test_recorder_registered_before_initialize_sees_everything(runtime):
    recorder = SessionRecorder()
    runtime.register_plugin("recorder", recorder)

    await runtime.initialize()
    runtime.start()
    runtime.select_option("a")
    runtime.select_option("c")
    await runtime.submit_answer()

    assert recorder.names() == [
        "initialized",
        "started",
        "userInteraction",
        "userInteraction",
        "answerSubmitted",
        "completed",
    ]
    assert len(recorder.of_kind(EventKind.USER_INTERACTION)) == 2
    assert len(recorder.of_kind("completed")) == 1


@pytest.mark.asyncio
async def test_recorder_with_selected_kinds(runtime):
    recorder = SessionRecorder(kinds=["hintShown", EventKind.STATE_CHANGE])
    runtime.register_plugin("recorder", recorder)
    await runtime.initialize()

    recorder.clear()
    runtime.show_hint()

    assert recorder.names() == ["stateChange", "hintShown"]


@pytest.mark.asyncio
async def test_recorder_survives_reset_and_detaches_on_destroy(runtime):
    recorder = SessionRecorder()
    runtime.register_plugin("recorder", recorder)
    await runtime.initialize()

    runtime.reset()
    assert recorder.attached is True
    assert recorder.names()[-1] == "reset"

    runtime.destroy()
    assert recorder.attached is False


def test_destroy_before_initialize_is_noop():
    recorder = SessionRecorder()
    recorder.destroy()
    assert recorder.attached is False
    assert recorder.events == []

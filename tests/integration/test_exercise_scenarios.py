# tests/integration/test_exercise_scenarios.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import pytest

from exercise_runtime import EventKind, ExerciseDefinition, ExerciseRuntime, LifecycleState, RuntimeConfig
from exercise_runtime.core.state import CompletionReason
from exercise_runtime.plugins.session_recorder import SessionRecorder
from exercise_runtime.runtime.collaborators import LoggingAnnouncer, NullMediaLoader, SilentSpeaker


@pytest.mark.asyncio
async def test_partially_correct_submission_scores_fifty(runtime):
    """Multiple mode, two required, correct {a, c}: selecting a and b earns half credit."""
    await runtime.initialize()
    runtime.start()
    runtime.select_option("a")
    runtime.select_option("b")

    result = await runtime.submit_answer()

    assert result.is_correct is False
    assert result.is_partially_correct is True
    assert runtime.get_state().score == 50
    assert runtime.get_state().completed is False


@pytest.mark.asyncio
async def test_fully_correct_submission_completes(runtime, capture):
    completed = capture(runtime, EventKind.COMPLETED)
    await runtime.initialize()
    runtime.start()
    runtime.select_option("a")
    runtime.select_option("c")

    result = await runtime.submit_answer()

    assert result.is_correct is True
    assert runtime.get_state().score == 100
    assert runtime.get_state().completed is True
    assert len(completed) == 1
    assert completed[0].payload.results.attempts == 1


@pytest.mark.asyncio
async def test_reset_after_three_submissions_keeps_plugins(runtime):
    recorder = SessionRecorder()
    runtime.register_plugin("recorder", recorder)
    await runtime.initialize()
    runtime.start()

    for answer in (["b"], ["b", "d"], ["d"]):
        await runtime.submit_answer(answer)
    assert runtime.get_state().attempts == 3

    runtime.reset()

    state = runtime.get_state()
    assert state.attempts == 0
    assert state.answer_history == ()
    assert state.score == 0
    assert runtime.lifecycle is LifecycleState.READY
    assert runtime.get_plugin("recorder") is recorder
    assert recorder.attached is True

    runtime.start()
    runtime.select_option("a")
    assert recorder.names()[-2:] == ["started", "userInteraction"]


@pytest.mark.asyncio
async def test_single_mode_never_holds_more_than_one_selection(make_runtime, make_definition):
    runtime = make_runtime(
        make_definition(settings={"selectionMode": "single", "requiredSelections": 1}, solution={"correct": ["c"]})
    )
    await runtime.initialize()
    for option_id in ("a", "b", "c", "d", "c", "a"):
        runtime.select_option(option_id)
        assert len(runtime.get_state().selected_answers) <= 1
    assert runtime.get_state().selected_answers == ("a",)


@pytest.mark.asyncio
async def test_timed_run_with_real_collaborators():
    """A full run wired with the bundled collaborators and a legacy-style mapping."""
    definition = ExerciseDefinition.from_dict(
        {
            "id": "synonyms-7",
            "type": "multiple-answers",
            "content": {
                "question": {"en": "Pick the synonyms of happy", "es": "Elige los sinónimos de feliz"},
                "category": "synonym",
                "media": ["happy.mp3"],
                "options": [
                    {"id": "glad", "text": "glad", "isCorrect": True},
                    {"id": "sad", "text": "sad"},
                    {"id": "joyful", "text": "joyful", "isCorrect": True},
                ],
            },
            "solution": {"hints": ["Think of smiling"]},
            "configuration": {"requiredSelections": 2, "timeLimit": 5},
        }
    )
    loader = NullMediaLoader()
    speaker = SilentSpeaker()
    announcer = LoggingAnnouncer()
    runtime = ExerciseRuntime(
        definition,
        RuntimeConfig(auto_tick=False, playback_pause=0),
        media_loader=loader,
        speaker=speaker,
        announcer=announcer,
    )
    recorder = SessionRecorder()
    runtime.register_plugin("recorder", recorder)

    try:
        await runtime.initialize()
        assert loader.requested == ["happy.mp3"]

        runtime.start()
        assert await runtime.play_all_audio() is True
        assert [text for text, _ in speaker.spoken] == ["glad", "sad", "joyful"]

        runtime.select_option("glad")
        runtime.select_option("sad")
        result = await runtime.submit_answer()
        assert result.explanation == "The synonyms are: glad and joyful. They have similar meanings."
        assert runtime.get_state().score == 50

        for _ in range(5):
            runtime.timer.tick()

        state = runtime.get_state()
        assert state.completed is True
        assert state.completion_reason is CompletionReason.TIME_UP
        assert announcer.last_message == "Exercise completed"

        results = runtime.get_results()
        assert results.exercise_type == "multiple-choice"
        assert results.attempts == 1
        assert results.answers == (("glad", "sad"),)
        assert recorder.names()[-3:] == ["timeWarning", "timeUp", "completed"]
    finally:
        runtime.destroy()

    assert runtime.lifecycle is LifecycleState.DESTROYED

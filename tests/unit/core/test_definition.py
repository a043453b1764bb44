# tests/unit/core/test_definition.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import dataclasses

import pytest

from exercise_runtime.core.definition import (
    ExerciseDefinition,
    ExerciseSettings,
    PartialCreditPolicy,
    SelectionMode,
)


def test_from_dict_reads_normalized_shape(definition):
    assert definition.id == "rhymes-1"
    assert definition.variant_type == "multiple-choice"
    assert definition.content.option_ids() == ("a", "b", "c", "d")
    assert definition.content.category == "sound_matching"
    assert definition.solution.correct == frozenset({"a", "c"})
    assert definition.solution.hints == ("Listen to the ending", "Both end in -at")
    assert definition.solution.partial_credit is PartialCreditPolicy.PROPORTIONAL
    assert definition.settings.selection_mode is SelectionMode.MULTIPLE
    assert definition.settings.required_selections == 2
    assert definition.settings.time_limit is None
    assert definition.settings.allow_multiple_attempts is True


def test_from_dict_accepts_snake_case_settings(definition_data):
    definition_data["settings"] = {
        "selection_mode": "single",
        "required_selections": 1,
        "time_limit": 30,
        "allow_multiple_attempts": False,
        "max_attempts": 3,
        "show_correct_after_mistakes": True,
    }
    settings = ExerciseDefinition.from_dict(definition_data).settings
    assert settings == ExerciseSettings(
        selection_mode=SelectionMode.SINGLE,
        required_selections=1,
        time_limit=30,
        allow_multiple_attempts=False,
        max_attempts=3,
        show_correct_after_mistakes=True,
    )


def test_from_dict_accepts_configuration_key(definition_data):
    definition_data["configuration"] = definition_data.pop("settings")
    definition_data["configuration"]["timeLimit"] = 45
    assert ExerciseDefinition.from_dict(definition_data).settings.time_limit == 45


def test_correct_set_from_option_flags(definition_data):
    del definition_data["solution"]["correct"]
    definition_data["content"]["options"][1]["isCorrect"] = True
    definition_data["content"]["options"][3]["metadata"] = {"isCorrect": True, "rhyme": "un"}

    definition = ExerciseDefinition.from_dict(definition_data)
    assert definition.solution.correct == frozenset({"b", "d"})
    assert definition.content.get_option("d").metadata == {"rhyme": "un"}


def test_correct_ids_are_stringified(definition_data):
    definition_data["content"]["options"] = [{"id": 1, "text": "one"}, {"id": 2, "text": "two"}]
    definition_data["solution"]["correct"] = [2]
    definition = ExerciseDefinition.from_dict(definition_data)
    assert definition.content.option_ids() == ("1", "2")
    assert definition.solution.correct == frozenset({"2"})


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, PartialCreditPolicy.PROPORTIONAL),
        (False, PartialCreditPolicy.NONE),
        ("strict", PartialCreditPolicy.STRICT),
    ],
)
def test_partial_credit_values(definition_data, value, expected):
    definition_data["solution"]["partialCredit"] = value
    assert ExerciseDefinition.from_dict(definition_data).solution.partial_credit is expected


def test_unknown_selection_mode_raises(definition_data):
    definition_data["settings"]["selectionMode"] = "several"
    with pytest.raises(ValueError):
        ExerciseDefinition.from_dict(definition_data)


def test_missing_content_raises(definition_data):
    del definition_data["content"]
    with pytest.raises(KeyError):
        ExerciseDefinition.from_dict(definition_data)


def test_media_references_in_declaration_order(definition_data):
    definition_data["content"]["media"] = ["intro.mp3"]
    definition_data["content"]["options"][0]["image"] = "hat.png"
    definition_data["content"]["options"][2]["audio"] = "bat.mp3"
    definition = ExerciseDefinition.from_dict(definition_data)
    assert definition.media_references() == ("intro.mp3", "hat.png", "bat.mp3")


def test_get_option_returns_none_for_unknown_id(definition):
    assert definition.content.get_option("a").text == "hat"
    assert definition.content.get_option("zzz") is None


def test_definition_is_immutable(definition):
    with pytest.raises(dataclasses.FrozenInstanceError):
        definition.id = "other"

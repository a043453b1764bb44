# tests/unit/variants/test_variant_registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from unittest.mock import MagicMock

import pytest

from exercise_runtime.variants.multiple_choice import MultipleChoiceVariant
from exercise_runtime.variants.registry import VariantRegistry, default_registry


def test_default_registry_knows_multiple_choice_and_aliases():
    registry = default_registry()
    assert registry.types() == ["multiple-answers", "multiple-choice", "single-choice"]
    assert registry.supports("single-choice")


@pytest.mark.parametrize("variant_type", ["multiple-choice", "multiple-answers", "single-choice"])
def test_create_resolves_aliases(make_definition, variant_type):
    variant = default_registry().create(make_definition(type=variant_type))
    assert isinstance(variant, MultipleChoiceVariant)


def test_create_passes_localizer(definition):
    factory = MagicMock()
    localizer = MagicMock()
    registry = VariantRegistry()
    registry.register("multiple-choice", factory)

    registry.create(definition, localizer)
    factory.assert_called_once_with(definition, localizer)


def test_unknown_type_raises(make_definition):
    with pytest.raises(ValueError):
        default_registry().create(make_definition(type="matching"))


def test_duplicate_registration_raises():
    registry = default_registry()
    with pytest.raises(ValueError):
        registry.register("custom", MagicMock(), aliases=("single-choice",))
    assert registry.supports("custom") is False


def test_unregister():
    registry = default_registry()
    registry.unregister("single-choice")
    assert registry.supports("single-choice") is False
    assert registry.supports("multiple-choice") is True

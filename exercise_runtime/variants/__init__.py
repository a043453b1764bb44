# exercise_runtime/variants/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Concrete exercise variants and the registry resolving them by type."""

from exercise_runtime.variants.multiple_choice import MultipleChoiceVariant
from exercise_runtime.variants.registry import VariantRegistry, default_registry

__all__ = ["MultipleChoiceVariant", "VariantRegistry", "default_registry"]

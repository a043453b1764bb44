# exercise_runtime/variants/registry.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

from typing import Callable, Dict, Iterable, List, Optional

from exercise_runtime.core.definition import ExerciseDefinition
from exercise_runtime.interfaces.protocols import ExerciseVariant, Localizer
from exercise_runtime.variants.multiple_choice import MultipleChoiceVariant

VariantFactory = Callable[[ExerciseDefinition, Optional[Localizer]], ExerciseVariant]


class VariantRegistry:
    """
    Maps a definition's ``variant_type`` to the factory building its
    variant. Aliases resolve to the same factory.
    """

    def __init__(self) -> None:
        self._factories: Dict[str, VariantFactory] = {}

    def register(self, variant_type: str, factory: VariantFactory, aliases: Iterable[str] = ()) -> None:
        """
        :raises ValueError: If the type or one of its aliases is already registered.
        """
        names = [variant_type, *aliases]
        for name in names:
            if name in self._factories:
                raise ValueError(f"Variant type '{name}' is already registered")
        for name in names:
            self._factories[name] = factory

    def unregister(self, variant_type: str) -> None:
        self._factories.pop(variant_type, None)

    def supports(self, variant_type: str) -> bool:
        return variant_type in self._factories

    def types(self) -> List[str]:
        return sorted(self._factories)

    def create(self, definition: ExerciseDefinition, localizer: Optional[Localizer] = None) -> ExerciseVariant:
        """
        Build the variant for ``definition``.

        :raises ValueError: If no factory is registered for its variant type.
        """
        factory = self._factories.get(definition.variant_type)
        if factory is None:
            raise ValueError(f"No variant registered for type '{definition.variant_type}'")
        return factory(definition, localizer)


def default_registry() -> VariantRegistry:
    """Registry preloaded with the built-in variants."""
    registry = VariantRegistry()
    registry.register(
        MultipleChoiceVariant.TYPE,
        MultipleChoiceVariant,
        aliases=("multiple-answers", "single-choice"),
    )
    return registry

# exercise_runtime/core/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Core types: definitions, run state, lifecycle, events, validation and errors.

The runtime itself lives in exercise_runtime.core.runtime and is re-exported
from the top-level package.
"""

from exercise_runtime.core.definition import (
    ExerciseContent,
    ExerciseDefinition,
    ExerciseSettings,
    Option,
    PartialCreditPolicy,
    SelectionMode,
    SolutionRules,
)
from exercise_runtime.core.errors import (
    ExerciseError,
    InitializationError,
    ListenerError,
    PluginError,
    TransitionError,
    ValidationError,
)
from exercise_runtime.core.events import Event, EventBus, EventKind
from exercise_runtime.core.lifecycle import LifecycleMachine
from exercise_runtime.core.state import CompletionReason, LifecycleState, RuntimeState, ValidationResult
from exercise_runtime.core.validation import DefinitionValidator, ValidationRule, ValidationSeverity

# exercise_runtime/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""exercise_runtime: lifecycle engine for interactive learning exercises

A runtime drives a single exercise through its lifecycle and keeps the run
state. It validates and scores answers through a variant, tracks attempts,
hints and time, and publishes typed events to presentation layers and
plugins.

Responsibilities:
    - Lifecycle management (initialize, start, pause, resume, reset, complete, destroy)
    - Run state snapshots and change notification
    - Answer submission through the injected variant
    - Time limits, hints, playback and keyboard shortcuts
    - Plugin hosting

Interactions:
    - Presentation layers through events and get_state()
    - Hosts through injected collaborators (localizer, analytics, speaker...)
    - Logging system for diagnostics
"""

from exercise_runtime.core.definition import ExerciseDefinition
from exercise_runtime.core.events import EventKind
from exercise_runtime.core.runtime import ExerciseRuntime, RuntimeConfig
from exercise_runtime.core.state import LifecycleState

__version__ = "0.1.0"

__all__ = [
    "EventKind",
    "ExerciseDefinition",
    "ExerciseRuntime",
    "LifecycleState",
    "RuntimeConfig",
    "__version__",
]

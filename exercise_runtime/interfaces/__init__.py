# exercise_runtime/interfaces/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Structural interfaces consumed by the runtime: the variant capability and the
external collaborators it talks to.
"""

from exercise_runtime.interfaces.protocols import (
    AccessibilityAnnouncer,
    AnalyticsSink,
    AudioSpeaker,
    ExerciseVariant,
    LifecycleHook,
    Localizer,
    MediaLoader,
    Plugin,
    SchemaValidator,
)

__all__ = [
    "AccessibilityAnnouncer",
    "AnalyticsSink",
    "AudioSpeaker",
    "ExerciseVariant",
    "LifecycleHook",
    "Localizer",
    "MediaLoader",
    "Plugin",
    "SchemaValidator",
]

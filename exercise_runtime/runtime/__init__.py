# exercise_runtime/runtime/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Runtime services owned by an ExerciseRuntime: timer, playback, plugins,
keyboard input, localization and default collaborators."""

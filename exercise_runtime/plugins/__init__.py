# exercise_runtime/plugins/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Optional plugins that attach to a runtime."""

from exercise_runtime.plugins.session_recorder import SessionRecorder

__all__ = ["SessionRecorder"]

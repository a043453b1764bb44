# exercise_runtime/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, Optional


class ExerciseError(Exception):
    """
    Base exception class for errors raised by the exercise runtime.

    :param message: Human readable description.
    :param details: Optional mapping with additional context.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class InitializationError(ExerciseError):
    """
    Raised when an exercise cannot be brought to the Ready state: a hard
    content load failure, or a schema failure while running in strict mode.
    """


class ValidationError(ExerciseError):
    """
    Raised when a variant cannot validate or score an answer, usually because
    the answer is malformed.
    """


class TransitionError(ExerciseError):
    """
    Raised when a lifecycle transition is not allowed from the current state.
    """

    def __init__(self, message: str, source: Any = None, target: Any = None) -> None:
        self.source = source
        self.target = target
        super().__init__(message, {"source": source, "target": target})


class PluginError(ExerciseError):
    """
    Raised (and contained) when a plugin fails during initialize or destroy.
    """

    def __init__(self, message: str, plugin_name: str, phase: str) -> None:
        self.plugin_name = plugin_name
        self.phase = phase
        super().__init__(message, {"plugin": plugin_name, "phase": phase})


class ListenerError(ExerciseError):
    """
    Wraps an exception raised by an event listener. Never propagates out of
    the event bus.
    """

    def __init__(self, message: str, event_kind: Any) -> None:
        self.event_kind = event_kind
        super().__init__(message, {"event": event_kind})

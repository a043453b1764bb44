# exercise_runtime/runtime/input.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, Set

if TYPE_CHECKING:
    from exercise_runtime.core.runtime import ExerciseRuntime

logger = logging.getLogger(__name__)

KeyAction = Callable[[], Any]


def default_shortcuts(runtime: "ExerciseRuntime") -> Dict[str, KeyAction]:
    """Keyboard shortcuts every exercise understands."""
    shortcuts: Dict[str, KeyAction] = {
        "Enter": runtime.submit_answer,
        " ": runtime.submit_answer,
        "Space": runtime.submit_answer,
        "Escape": runtime.reset,
        "r": runtime.reset,
        "h": runtime.show_hint,
    }
    for index in range(5):
        shortcuts[str(index + 1)] = _select_at(runtime, index)
    return shortcuts


def _select_at(runtime: "ExerciseRuntime", index: int) -> KeyAction:
    return lambda: runtime.select_option_at(index)


class KeyBindings:
    """
    Maps key presses to runtime actions while attached.

    Presses combined with ctrl, alt or meta are left to the host. Actions
    returning a coroutine (submit) are scheduled on the running loop.
    """

    def __init__(self, shortcuts: Dict[str, KeyAction]) -> None:
        self._shortcuts = dict(shortcuts)
        self._attached = False
        self._pending: Set[asyncio.Task] = set()

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> None:
        self._attached = True

    def detach(self) -> None:
        self._attached = False

    def bind(self, key: str, action: KeyAction) -> None:
        self._shortcuts[key] = action

    def unbind(self, key: str) -> None:
        self._shortcuts.pop(key, None)

    def action_for(self, key: str) -> Optional[KeyAction]:
        return self._shortcuts.get(key)

    def handle(self, key: str, ctrl: bool = False, alt: bool = False, meta: bool = False) -> bool:
        """
        Dispatch one key press.

        :return: True if the key was consumed.
        """
        if not self._attached or ctrl or alt or meta:
            return False
        action = self._shortcuts.get(key)
        if action is None:
            return False

        result = action()
        if asyncio.iscoroutine(result):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                result.close()
                logger.warning("Key %r needs a running event loop, ignored", key)
                return False
            task = loop.create_task(result)
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)
        return True

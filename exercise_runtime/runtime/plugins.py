# exercise_runtime/runtime/plugins.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from exercise_runtime.core.errors import PluginError

if TYPE_CHECKING:
    from exercise_runtime.core.runtime import ExerciseRuntime

logger = logging.getLogger(__name__)

PluginErrorHandler = Callable[[PluginError], None]


class PluginHost:
    """
    Named registry of plugins attached to one runtime.

    Plugins registered before the runtime is initialized are initialized by
    initialize_all(); later registrations are initialized immediately. Each
    plugin call is isolated: a failure is wrapped in PluginError, logged and
    handed to ``on_error`` without affecting the other plugins.
    """

    def __init__(self, on_error: Optional[PluginErrorHandler] = None) -> None:
        self._plugins: Dict[str, Any] = {}
        self._initialized: set = set()
        self._on_error = on_error

    def register(self, name: str, plugin: Any, runtime: Optional["ExerciseRuntime"] = None) -> None:
        """
        Register ``plugin`` under ``name``, replacing (and destroying) any
        previous plugin of that name.

        :param runtime: When given, the plugin is initialized right away.
        """
        if name in self._plugins:
            self.unregister(name)
        self._plugins[name] = plugin
        if runtime is not None:
            self._initialize(name, plugin, runtime)

    def unregister(self, name: str) -> bool:
        """
        Remove a plugin, calling its destroy() when present.

        :return: True if a plugin was registered under ``name``.
        """
        plugin = self._plugins.pop(name, None)
        if plugin is None:
            return False
        self._destroy(name, plugin)
        self._initialized.discard(name)
        return True

    def get(self, name: str) -> Optional[Any]:
        """Return the plugin registered under ``name`` or None."""
        return self._plugins.get(name)

    def names(self) -> List[str]:
        return list(self._plugins)

    def is_initialized(self, name: str) -> bool:
        return name in self._initialized

    def initialize_all(self, runtime: "ExerciseRuntime") -> None:
        """Initialize every registered plugin that has not been initialized yet."""
        for name, plugin in list(self._plugins.items()):
            if name not in self._initialized:
                self._initialize(name, plugin, runtime)

    def destroy_all(self) -> None:
        """Call destroy() on every plugin. Registrations are kept."""
        for name, plugin in list(self._plugins.items()):
            self._destroy(name, plugin)
        self._initialized.clear()

    def _initialize(self, name: str, plugin: Any, runtime: "ExerciseRuntime") -> None:
        try:
            plugin.initialize(runtime)
            self._initialized.add(name)
            logger.debug("Plugin %s initialized", name)
        except Exception as e:
            self._fail(PluginError(f"Failed to initialize plugin {name}: {e}", name, "initialize"))

    def _destroy(self, name: str, plugin: Any) -> None:
        destroy = getattr(plugin, "destroy", None)
        if destroy is None:
            return
        try:
            destroy()
        except Exception as e:
            self._fail(PluginError(f"Failed to destroy plugin {name}: {e}", name, "destroy"))

    def _fail(self, error: PluginError) -> None:
        logger.exception(error.message)
        if self._on_error is not None:
            self._on_error(error)

    def __contains__(self, name: str) -> bool:
        return name in self._plugins

    def __len__(self) -> int:
        return len(self._plugins)

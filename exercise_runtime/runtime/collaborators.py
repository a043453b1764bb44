# exercise_runtime/runtime/collaborators.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Default collaborators used when the host does not inject its own. They log
instead of reaching any external system.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


class LoggingAnalytics:
    """AnalyticsSink that writes every event to the debug log."""

    def track_event(self, name: str, payload: Dict[str, Any]) -> None:
        logger.debug("Analytics event %s: %s", name, payload)


class LoggingAnnouncer:
    """AccessibilityAnnouncer that keeps the last message and logs it."""

    def __init__(self) -> None:
        self.last_message: Optional[str] = None

    def announce(self, message: str, priority: str = "polite") -> None:
        self.last_message = message
        logger.debug("Announce (%s): %s", priority, message)


class NullMediaLoader:
    """MediaLoader that records what it was asked to preload."""

    def __init__(self) -> None:
        self.requested: List[str] = []

    async def preload(self, references: Sequence[str]) -> None:
        self.requested.extend(references)


class SilentSpeaker:
    """AudioSpeaker that produces no sound; useful on hosts without speech output."""

    def __init__(self) -> None:
        self.spoken: List[Tuple[str, Mapping[str, Any]]] = []

    async def play(self, text: str, options: Optional[Mapping[str, Any]] = None) -> None:
        self.spoken.append((text, dict(options or {})))

    def cancel(self) -> None:
        logger.debug("Speech cancelled")

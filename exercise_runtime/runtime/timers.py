# exercise_runtime/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Optional

from exercise_runtime.interfaces.types import TickCallback

logger = logging.getLogger(__name__)


class TimerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class ExerciseTimer:
    """
    Calls ``on_tick`` once per ``interval`` seconds from an asyncio task.

    The owner decides what a tick means; the timer only keeps time. tick()
    may also be driven by hand, which is how hosts without a running event
    loop (and the tests) advance time. Once stopped the timer never ticks
    again.
    """

    def __init__(self, on_tick: TickCallback, interval: float = 1.0) -> None:
        """
        :param on_tick: Callback invoked once per elapsed time unit.
        :param interval: Seconds per time unit.
        :raises ValueError: If interval is not positive or on_tick is missing.
        """
        if on_tick is None:
            raise ValueError("on_tick callback is required")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._on_tick = on_tick
        self._interval = interval
        self._state = TimerState.IDLE
        self._task: Optional[asyncio.Task] = None
        self._ticks = 0

    @property
    def state(self) -> TimerState:
        return self._state

    @property
    def ticks(self) -> int:
        """Number of ticks delivered so far."""
        return self._ticks

    @property
    def interval(self) -> float:
        return self._interval

    def start(self) -> None:
        """
        Begin ticking. Schedules a background task when an event loop is
        running; otherwise the timer stays in manual mode.
        """
        if self._state is not TimerState.IDLE:
            return
        self._state = TimerState.RUNNING
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, timer is driven manually")
            return
        self._task = loop.create_task(self._run())

    async def _run(self) -> None:
        while self._state is TimerState.RUNNING:
            await asyncio.sleep(self._interval)
            self.tick()

    def tick(self) -> None:
        """Deliver one tick. Callback errors are logged and do not stop the timer."""
        if self._state is TimerState.STOPPED:
            return
        self._ticks += 1
        try:
            self._on_tick()
        except Exception:
            logger.exception("Timer tick callback failed")

    def stop(self) -> None:
        """Stop synchronously: the background task is cancelled and no further tick is delivered."""
        self._state = TimerState.STOPPED
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

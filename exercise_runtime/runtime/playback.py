# exercise_runtime/runtime/playback.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from exercise_runtime.interfaces.protocols import AudioSpeaker

logger = logging.getLogger(__name__)

PlaybackCallback = Callable[[Optional[str], int], None]


class PlaybackChannel:
    """
    Runtime-owned mutual exclusion around an AudioSpeaker.

    Single-item and play-all requests share one lock. A request made while
    the lock is held is rejected (speak() returns False), never queued.
    cancel() stops the current request before its next item; close() does the
    same for good and rejects later requests.
    """

    def __init__(
        self,
        speaker: AudioSpeaker,
        pause: float = 0.5,
        on_start: Optional[PlaybackCallback] = None,
        on_end: Optional[PlaybackCallback] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ) -> None:
        self._speaker = speaker
        self._pause = pause
        self._on_start = on_start
        self._on_end = on_end
        self._on_error = on_error
        self._busy = False
        self._closed = False
        self._cancelled = False

    @property
    def busy(self) -> bool:
        """True while the playback lock is held."""
        return self._busy

    @property
    def closed(self) -> bool:
        return self._closed

    async def speak(
        self,
        texts: Sequence[str],
        label: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        """
        Speak ``texts`` in order, pausing between items.

        :param label: Identifier reported to the start/end callbacks (e.g. an option id).
        :return: True if every item was spoken, False if rejected, failed or closed.
        """
        if self._busy or self._closed:
            logger.debug("Playback request %r rejected, channel busy or closed", label)
            return False

        self._busy = True
        self._cancelled = False
        self._notify(self._on_start, label, len(texts))
        completed = False
        try:
            for index, text in enumerate(texts):
                if self._closed or self._cancelled:
                    break
                await self._speaker.play(text, options)
                if self._pause and index < len(texts) - 1:
                    await asyncio.sleep(self._pause)
            else:
                completed = not (self._closed or self._cancelled)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.exception("Error playing audio")
            if self._on_error is not None:
                self._on_error(e)
        finally:
            self._busy = False
            if not self._closed:
                self._notify(self._on_end, label, len(texts))
        return completed

    def cancel(self) -> None:
        """Stop whatever the speaker is currently saying and skip the rest of the request."""
        if self._busy:
            self._cancelled = True
        try:
            self._speaker.cancel()
        except Exception:
            logger.exception("Failed to cancel speech output")

    def close(self) -> None:
        self._closed = True
        self.cancel()

    def _notify(self, callback: Optional[PlaybackCallback], label: Optional[str], items: int) -> None:
        if callback is None:
            return
        try:
            callback(label, items)
        except Exception:
            logger.exception("Playback callback failed")

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class SingleSlotTimer:
    """A deferred callback with room for exactly one pending call."""

    def __init__(self, name: str, loop: asyncio.AbstractEventLoop | None = None):
        self.name = name
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float, callback: Callable[[], None]) -> bool:
        """Arm the timer; returns False and changes nothing if a call is already pending."""
        if self._handle is not None:
            logger.debug("Timer %s already pending; not rescheduled", self.name)
            return False
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay), self._fire, callback)
        return True

    def cancel(self) -> bool:
        handle = self._handle
        if handle is None:
            return False
        self._handle = None
        handle.cancel()
        return True

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()

"""
Repeating timer on the asyncio event loop.

Each run is scheduled only after the previous one has finished, so a slow
callback stretches the interval instead of overlapping with itself.
"""

import asyncio
import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """
    Self-rescheduling timer.

    Args:
        interval: Seconds between the end of one run and the start of the next
        callback: Zero-argument callable to run
    """

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self.runs = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._active = False

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def pending(self) -> bool:
        """Started, but waiting for an event loop to schedule on."""
        return self._active and self._handle is None

    def start(self) -> None:
        """
        Schedule the first run.

        Without a running event loop the timer stays pending; calling start()
        again from inside a loop begins it.
        """
        self._active = True
        if self._handle is not None:
            return
        try:
            self._loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, periodic save is pending")
            return
        self._schedule()

    def cancel(self) -> None:
        """Stop the timer; a run already in progress completes."""
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _schedule(self) -> None:
        self._handle = self._loop.call_later(self.interval, self._run)

    def _run(self) -> None:
        self._handle = None
        try:
            self.callback()
        except Exception:
            logger.exception("Periodic save failed")
        self.runs += 1
        if self._active:
            self._schedule()

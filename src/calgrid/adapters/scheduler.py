"""Timer schedulers for edge navigation.

- `AsyncioScheduler` runs callbacks on an asyncio event loop.
- `ManualScheduler` is driven explicitly with `advance()`; use it for tests
  and for hosts that pump their own clock.
"""

import asyncio
import logging
from collections.abc import Callable

from calgrid.interfaces.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)


def _check_interval(interval: float) -> None:
    if interval <= 0:
        raise ValueError("interval must be > 0")


# ============================================================================
#                                  asyncio
# ============================================================================


class _AsyncioTimer(TimerHandle):
    """Repeating timer re-armed with `loop.call_later` after every tick."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        interval: float,
        callback: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._interval = interval
        self._callback = callback
        self._cancelled = False
        self._handle = loop.call_later(interval, self._tick)

    def _tick(self) -> None:
        if self._cancelled:
            return
        self._handle = self._loop.call_later(self._interval, self._tick)
        self._callback()

    def cancel(self) -> None:
        self._cancelled = True
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class AsyncioScheduler(Scheduler):
    """Scheduler running timers on an asyncio event loop.

    Args:
        loop: Loop to schedule on. Defaults to the running loop at the time
            a timer is requested.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_repeatedly(
        self, interval: float, callback: Callable[[], None]
    ) -> TimerHandle:
        _check_interval(interval)
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTimer(loop, interval, callback)


# ============================================================================
#                                  manual
# ============================================================================


class _ManualTimer(TimerHandle):
    def __init__(
        self, interval: float, callback: Callable[[], None], due: float
    ) -> None:
        self.interval = interval
        self.callback = callback
        self.due = due
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Deterministic scheduler whose clock only moves on `advance()`."""

    def __init__(self) -> None:
        self._now = 0.0
        self._timers: list[_ManualTimer] = []

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def active_timers(self) -> int:
        """Number of timers that have not been cancelled."""
        return sum(1 for timer in self._timers if not timer.cancelled)

    def call_repeatedly(
        self, interval: float, callback: Callable[[], None]
    ) -> TimerHandle:
        _check_interval(interval)
        timer = _ManualTimer(interval, callback, self._now + interval)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every tick that falls due.

        Returns:
            The number of callbacks invoked.
        """
        if seconds < 0:
            raise ValueError("seconds must be >= 0")
        target = self._now + seconds
        fired = 0
        while True:
            self._timers = [timer for timer in self._timers if not timer.cancelled]
            due = [timer for timer in self._timers if timer.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: t.due)
            self._now = timer.due
            timer.due += timer.interval
            timer.callback()
            fired += 1
        self._now = target
        logger.debug("Advanced manual clock to %.3fs (%d ticks)", target, fired)
        return fired

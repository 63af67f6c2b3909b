"""Interface for periodic timers.

Edge navigation during a drag needs a repeating timer on the UI event loop.
The engine never sleeps or spawns threads itself; it asks a `Scheduler` for a
timer and must cancel the returned handle when the gesture ends.
"""

import abc
from collections.abc import Callable

# pylint: disable=too-few-public-methods


class TimerHandle(abc.ABC):
    """A cancellable repeating timer."""

    @abc.abstractmethod
    def cancel(self) -> None:
        """Stop the timer. Cancelling twice is harmless."""

    @property
    @abc.abstractmethod
    def cancelled(self) -> bool:
        """True once `cancel()` has been called."""


class Scheduler(abc.ABC):
    """Contract for a single-threaded timer source."""

    @abc.abstractmethod
    def call_repeatedly(
        self, interval: float, callback: Callable[[], None]
    ) -> TimerHandle:
        """Invoke `callback` every `interval` seconds until cancelled.

        The first call happens one interval after scheduling.

        Raises:
            ValueError: If `interval` is not positive.
        """

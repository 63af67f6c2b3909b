"""Event store interface for CALGRID.

This module defines:
- The `EventStore` port (framework-free ABC) the engine commits edits to.
- The `StoreChanged` message the store emits to its subscribers.
- A small, adapter-agnostic exception hierarchy for precise error handling.

Contract overview
-----------------
Reads:
- `list_all()` returns every stored BaseEvent (series, single events and
  detached overrides). Order is not significant.
- `get(event_id)` returns the record or None.

Writes:
- `add(event)` stores a new record and returns it. Duplicate ids raise
  `DuplicateEventError`.
- `update(event_id, patch)` applies an `EventPatch`; unknown ids raise
  `EventNotFoundError`.
- `remove(event_id)` deletes a record; unknown ids raise `EventNotFoundError`.
- Operational failures raise `StoreUnavailableError`; the engine performs no
  retries, callers may.

Change notifications:
- Every successful write emits exactly one `StoreChanged` message to each
  subscriber, synchronously, after the write is visible to readers.
- `subscribe(listener)` returns a callable that removes the subscription.
"""

from __future__ import annotations

import abc
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from calgrid.domain.model import BaseEvent, EventPatch

# --- Exceptions to standardize adapter behavior ---


class StoreError(Exception):
    """Base class for CALGRID event store errors."""


class EventNotFoundError(StoreError, LookupError):
    """The referenced event does not exist in the store."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event ({event_id}) not found in store")
        self.event_id = event_id


class DuplicateEventError(StoreError):
    """An event with the same id already exists."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event ({event_id}) already exists in store")
        self.event_id = event_id


class StoreUnavailableError(StoreError):
    """Operational/timeout/connection errors; callers may retry."""


# --- Change messages ---


class ChangeKind(Enum):
    """Kinds of store changes."""

    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"


@dataclass(frozen=True, slots=True)
class StoreChanged:
    """Message emitted by the store after a successful write."""

    kind: ChangeKind
    event_id: str


type StoreListener = Callable[[StoreChanged], None]
type Unsubscribe = Callable[[], None]


# --- Event Store Interface ---


class EventStore(abc.ABC):
    """An abstract base class for the durable event store collaborator."""

    @abc.abstractmethod
    def list_all(self) -> list[BaseEvent]:
        """Return every stored event."""

    @abc.abstractmethod
    def get(self, event_id: str) -> BaseEvent | None:
        """Return the event with `event_id`, or None if it does not exist."""

    @abc.abstractmethod
    def add(self, event: BaseEvent) -> BaseEvent:
        """Store a new event.

        Raises:
            DuplicateEventError: If an event with the same id exists.
            StoreUnavailableError: For operational failures.

        Returns:
            The stored event.
        """

    @abc.abstractmethod
    def update(self, event_id: str, patch: EventPatch) -> None:
        """Apply `patch` to the stored event `event_id`.

        Raises:
            EventNotFoundError: If the event does not exist.
            StoreUnavailableError: For operational failures.
        """

    @abc.abstractmethod
    def remove(self, event_id: str) -> None:
        """Delete the stored event `event_id`.

        Raises:
            EventNotFoundError: If the event does not exist.
            StoreUnavailableError: For operational failures.
        """

    @abc.abstractmethod
    def subscribe(self, listener: StoreListener) -> Unsubscribe:
        """Register `listener` for change messages.

        Returns:
            A callable removing the subscription. Calling it twice is harmless.
        """

"""In memory event store implementation.

All records are kept in a dict and lost when the instance is discarded.
Use for unit tests, the CLI, prototyping, or hosts that persist elsewhere.

This implementation passes all contract tests for the EventStore interface.
"""

import logging
from collections.abc import Iterable

from calgrid.domain.model import BaseEvent, EventPatch
from calgrid.interfaces.event_store import (
    ChangeKind,
    DuplicateEventError,
    EventNotFoundError,
    EventStore,
    StoreChanged,
    StoreListener,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


class InMemoryEventStore(EventStore):
    """In-memory EventStore for testing and non-durable use cases.

    - Non-durable: all data is lost when the instance is discarded.
    - Listing preserves insertion order.
    - Listeners are notified synchronously after each successful write.
    """

    def __init__(self, events: Iterable[BaseEvent] = ()) -> None:
        self._events: dict[str, BaseEvent] = {}
        self._listeners: list[StoreListener] = []
        for event in events:
            if event.id in self._events:
                raise DuplicateEventError(event.id)
            self._events[event.id] = event

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def list_all(self) -> list[BaseEvent]:
        return list(self._events.values())

    def get(self, event_id: str) -> BaseEvent | None:
        return self._events.get(event_id)

    def add(self, event: BaseEvent) -> BaseEvent:
        if event.id in self._events:
            raise DuplicateEventError(event.id)
        self._events[event.id] = event
        self._publish(StoreChanged(ChangeKind.ADDED, event.id))
        return event

    def update(self, event_id: str, patch: EventPatch) -> None:
        if (current := self._events.get(event_id)) is None:
            raise EventNotFoundError(event_id)
        self._events[event_id] = patch.apply(current)
        self._publish(StoreChanged(ChangeKind.UPDATED, event_id))

    def remove(self, event_id: str) -> None:
        if self._events.pop(event_id, None) is None:
            raise EventNotFoundError(event_id)
        self._publish(StoreChanged(ChangeKind.REMOVED, event_id))

    def subscribe(self, listener: StoreListener) -> Unsubscribe:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _publish(self, message: StoreChanged) -> None:
        logger.debug("Store %s event %s", message.kind.value, message.event_id)
        for listener in list(self._listeners):
            listener(message)

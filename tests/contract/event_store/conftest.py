"""Pytest fixtures for EventStore contract tests."""

from __future__ import annotations

from collections.abc import Iterable

import pytest

from calgrid.adapters.event_store import InMemoryEventStore
from calgrid.interfaces.event_store import EventStore, StoreChanged


@pytest.fixture(params=["memory"])
def event_store(request: pytest.FixtureRequest) -> Iterable[EventStore]:
    """Return a fresh, empty event store for the requested backend.

    Current params:
      - `"memory"` → `InMemoryEventStore` (non-durable, in-memory)

    Extend by adding new identifiers to `params` and branching below to
    construct the corresponding backend. Each invocation yields a brand-new
    store instance for isolation.
    """
    match request.param:
        case "memory":
            yield InMemoryEventStore()
        case _:
            raise ValueError(f"unknown store type: {request.param}")


@pytest.fixture
def messages(event_store: EventStore) -> list[StoreChanged]:
    """Change messages emitted by `event_store`, in order."""
    received: list[StoreChanged] = []
    event_store.subscribe(received.append)
    return received

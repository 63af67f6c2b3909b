"""Event id generators for CALGRID.

Generated ids name stored records, so they must never contain the
occurrence separator ``::`` that joins a series id and an instance start.
Generators are selected by name through `build_id_generator` (the
``CALGRID_ID_GENERATOR`` setting).
"""

import threading
import uuid
from collections.abc import Callable

from ulid import monotonic

from calgrid.domain.recurrence import OCCURRENCE_ID_SEPARATOR
from calgrid.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


def _checked_prefix(prefix: str) -> str:
    if OCCURRENCE_ID_SEPARATOR in prefix:
        raise ValueError(
            f"id prefix {prefix!r} contains the occurrence separator "
            f"{OCCURRENCE_ID_SEPARATOR!r}"
        )
    return prefix


class ULIDGenerator(IdGenerator):
    """Monotonic ULIDs, so records created later sort later.

    Args:
        prefix: Text put in front of every id, e.g. ``"evt_"``.
    """

    def __init__(self, prefix: str = "") -> None:
        self._prefix = _checked_prefix(prefix)
        self._lock = threading.Lock()

    def new_id(self) -> str:
        # monotonic.new() keeps order within one millisecond; the lock keeps
        # that guarantee across threads
        with self._lock:
            return self._prefix + str(monotonic.new())


class UUIDv4Generator(IdGenerator):
    """Random UUIDv4 ids; the default for events created through the bus."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


class SequentialIdGenerator(IdGenerator):
    """Readable sequential ids such as ``evt-0001``.

    Note:
        Not unique across processes; intended for tests and demos.
    """

    def __init__(self, prefix: str = "evt-", width: int = 4) -> None:
        self._prefix = _checked_prefix(prefix)
        self._width = width
        self._lock = threading.Lock()
        self._counter = 0

    def new_id(self) -> str:
        with self._lock:
            self._counter += 1
            return f"{self._prefix}{self._counter:0{self._width}d}"


ID_GENERATORS: dict[str, Callable[[], IdGenerator]] = {
    "uuid4": UUIDv4Generator,
    "ulid": ULIDGenerator,
    "sequential": SequentialIdGenerator,
}


def build_id_generator(name: str) -> IdGenerator:
    """Return a fresh generator registered under `name`.

    Raises:
        ValueError: If no generator has that name.
    """
    try:
        factory = ID_GENERATORS[name.lower()]
    except KeyError:
        raise ValueError(
            f"unknown id generator {name!r}; expected one of {', '.join(ID_GENERATORS)}"
        ) from None
    return factory()

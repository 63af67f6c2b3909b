"""Value objects for stored events, their occurrences and edit patches."""

from dataclasses import dataclass, fields, replace
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any, Self, TypeVar

from .errors import InvalidEventError
from .timeutils import is_aware
from .unsettable import UNSET, Unsettable, is_unset, resolve

# pylint: disable=too-many-instance-attributes

DEFAULT_MINIMUM_DURATION = timedelta(minutes=30)

E = TypeVar("E", bound="BaseEvent")


class Category(Enum):
    """Enumeration of event categories."""

    COLLEGE = "College"
    PERSONAL = "Personal"
    OTHER = "Other"


@dataclass(frozen=True, slots=True)
class BaseEvent:
    """A durable calendar record, possibly recurring.

    A record with `parent_id` set is a detached override: a standalone copy of
    one instance of the series `parent_id`, which is never expanded again.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    category: Category | None = None
    color: str | None = None
    tags: tuple[str, ...] = ()
    location: str | None = None
    notes: str | None = None
    reminder_offsets: tuple[int, ...] = ()  # minutes before start
    rrule: str | None = None
    exdates: tuple[datetime, ...] = ()
    parent_id: str | None = None

    def __post_init__(self) -> None:
        if not is_aware(self.start) or not is_aware(self.end):
            raise InvalidEventError(self.id, "start and end must be tz-aware")
        if any(not is_aware(exdate) for exdate in self.exdates):
            raise InvalidEventError(self.id, "exdates must be tz-aware")

    @property
    def duration(self) -> timedelta:
        """Elapsed time between start and end (DST transitions included)."""
        return self.end.astimezone(UTC) - self.start.astimezone(UTC)

    @property
    def is_recurring(self) -> bool:
        """True for a series definition (has a rule and is not a detachment)."""
        return bool(self.rrule) and self.parent_id is None


@dataclass(frozen=True, slots=True)
class Occurrence(BaseEvent):
    """A concrete, renderable instance derived from a BaseEvent.

    `source_id` is set only for instances expanded from a recurrence rule; the
    occurrence id is then ``"<source_id>::<instance start ISO>"``.
    """

    source_id: str | None = None

    @property
    def base_id(self) -> str:
        """The id of the stored record an edit of this occurrence targets."""
        return self.source_id or self.id

    @classmethod
    def from_event(cls, event: BaseEvent, **overrides: Any) -> Self:
        """Build an occurrence carrying all fields of `event` plus `overrides`."""
        values = {f.name: getattr(event, f.name) for f in fields(BaseEvent)}
        values.update(overrides)
        return cls(**values)


def normalize_event(
    event: E, minimum: timedelta = DEFAULT_MINIMUM_DURATION
) -> E:
    """Return `event` with ``end > start`` restored.

    Records whose end is at or before their start get ``end = start + minimum``.
    Valid records are returned unchanged.
    """
    if event.end > event.start:
        return event
    return replace(event, end=event.start + minimum)


@dataclass(frozen=True, slots=True)
class EventPatch:
    """A partial update for a stored event.

    Fields left as ``UNSET`` are not part of the patch. Gesture commits only
    produce start/end (and exdates for detachments); the remaining fields
    support ordinary edits dispatched through the message bus.
    """

    title: Unsettable[str] = UNSET
    start: Unsettable[datetime] = UNSET
    end: Unsettable[datetime] = UNSET
    all_day: Unsettable[bool] = UNSET
    category: Unsettable[Category] = UNSET
    color: Unsettable[str] = UNSET
    tags: Unsettable[tuple[str, ...]] = UNSET
    location: Unsettable[str] = UNSET
    notes: Unsettable[str] = UNSET
    reminder_offsets: Unsettable[tuple[int, ...]] = UNSET
    rrule: Unsettable[str] = UNSET
    exdates: Unsettable[tuple[datetime, ...]] = UNSET
    parent_id: Unsettable[str] = UNSET

    _CLEARABLE = frozenset(
        {"category", "color", "location", "notes", "rrule", "parent_id"}
    )

    def as_changes(self) -> dict[str, Any]:
        """Return only the fields this patch sets (or clears)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if not is_unset(getattr(self, f.name))
        }

    @property
    def is_empty(self) -> bool:
        """True when the patch changes nothing."""
        return not self.as_changes()

    def apply(self, event: E) -> E:
        """Return a copy of `event` with this patch applied.

        Raises:
            InvalidPatchError: If the patch clears a field that cannot be cleared.
            InvalidEventError: If the patched event is not valid.
        """
        changes = {
            name: resolve(
                value,
                getattr(event, name),
                clearable=name in self._CLEARABLE,
                field=name,
                event_id=event.id,
            )
            for name, value in self.as_changes().items()
        }
        return replace(event, **changes)

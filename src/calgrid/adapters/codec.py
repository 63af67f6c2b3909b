"""JSON codec for stored event records.

Records use camelCase keys and ISO-8601 timestamps::

    {
      "id": "r1",
      "title": "Standup",
      "start": "2025-09-22T09:00:00.000Z",
      "end": "2025-09-22T10:00:00.000Z",
      "allDay": false,
      "category": "College",
      "tags": ["team"],
      "reminderMinutes": [10],
      "rrule": "FREQ=WEEKLY;BYDAY=MO",
      "exdates": ["2025-09-29T09:00:00.000Z"],
      "parentId": null
    }

Only ``id``, ``title``, ``start`` and ``end`` are required. Timestamps
without an offset are interpreted in the decoder's default timezone.
"""

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, tzinfo
from pathlib import Path
from typing import Any

from dateutil.parser import isoparse

from calgrid.domain.errors import InvalidEventError
from calgrid.domain.model import BaseEvent, Category, normalize_event
from calgrid.domain.timeutils import to_iso

logger = logging.getLogger(__name__)

_REQUIRED = ("id", "title", "start", "end")


class EventDecodeError(ValueError):
    """Raised when a record cannot be decoded into a BaseEvent."""

    def __init__(self, position: int | str, reason: str) -> None:
        super().__init__(f"Cannot decode event {position}: {reason}")
        self.position = position
        self.reason = reason


def _timestamp(value: Any, default_tz: tzinfo, position: int | str) -> datetime:
    if not isinstance(value, str):
        raise EventDecodeError(position, f"expected an ISO timestamp, got {value!r}")
    try:
        parsed = isoparse(value)
    except ValueError as exc:
        raise EventDecodeError(position, f"bad timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed


def _strings(value: Any, key: str, position: int | str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise EventDecodeError(position, f"{key} must be a list of strings")
    return tuple(value)


def event_from_dict(
    data: Mapping[str, Any],
    *,
    default_tz: tzinfo = UTC,
    position: int | str | None = None,
) -> BaseEvent:
    """Decode one record.

    Raises:
        EventDecodeError: If a required key is missing or a value is malformed.
    """
    where = position if position is not None else data.get("id", "?")
    if missing := [key for key in _REQUIRED if key not in data]:
        raise EventDecodeError(where, f"missing {', '.join(missing)}")

    category = data.get("category")
    try:
        decoded_category = Category(category) if category is not None else None
    except ValueError as exc:
        raise EventDecodeError(where, f"unknown category {category!r}") from exc

    reminders = data.get("reminderMinutes") or []
    if not all(isinstance(m, int) and not isinstance(m, bool) for m in reminders):
        raise EventDecodeError(where, "reminderMinutes must be a list of integers")

    try:
        return BaseEvent(
            id=str(data["id"]),
            title=str(data["title"]),
            start=_timestamp(data["start"], default_tz, where),
            end=_timestamp(data["end"], default_tz, where),
            all_day=bool(data.get("allDay", False)),
            category=decoded_category,
            color=data.get("color"),
            tags=_strings(data.get("tags"), "tags", where),
            location=data.get("location"),
            notes=data.get("notes"),
            reminder_offsets=tuple(reminders),
            rrule=data.get("rrule") or None,
            exdates=tuple(
                _timestamp(value, default_tz, where)
                for value in data.get("exdates") or ()
            ),
            parent_id=data.get("parentId"),
        )
    except InvalidEventError as exc:
        raise EventDecodeError(where, exc.reason) from exc


def event_to_dict(event: BaseEvent) -> dict[str, Any]:
    """Encode one record, omitting empty optional fields."""
    data: dict[str, Any] = {
        "id": event.id,
        "title": event.title,
        "start": to_iso(event.start),
        "end": to_iso(event.end),
    }
    optional = {
        "allDay": event.all_day or None,
        "category": event.category.value if event.category else None,
        "color": event.color,
        "tags": list(event.tags) or None,
        "location": event.location,
        "notes": event.notes,
        "reminderMinutes": list(event.reminder_offsets) or None,
        "rrule": event.rrule,
        "exdates": [to_iso(d) for d in event.exdates] or None,
        "parentId": event.parent_id,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


def decode_events(
    records: Iterable[Mapping[str, Any]],
    *,
    default_tz: tzinfo = UTC,
    normalize: bool = True,
) -> list[BaseEvent]:
    """Decode a sequence of records.

    With `normalize`, records whose end is not after their start are repaired
    with `normalize_event` and a warning is logged.
    """
    events = []
    for index, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise EventDecodeError(index, "expected an object")
        event = event_from_dict(record, default_tz=default_tz, position=index)
        if normalize and event.end <= event.start:
            logger.warning("Event %s ends before it starts; normalizing", event.id)
            event = normalize_event(event)
        events.append(event)
    return events


def load_events(
    path: str | Path, *, default_tz: tzinfo = UTC, normalize: bool = True
) -> list[BaseEvent]:
    """Read a JSON file holding a list of records (or ``{"events": [...]}``).

    Raises:
        EventDecodeError: If the file is not valid JSON or a record is malformed.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise EventDecodeError(str(path), f"invalid JSON ({exc.msg})") from exc
    if isinstance(payload, Mapping):
        payload = payload.get("events", [])
    if not isinstance(payload, list):
        raise EventDecodeError(str(path), "expected a list of events")
    events = decode_events(payload, default_tz=default_tz, normalize=normalize)
    logger.info("Loaded %d events from %s", len(events), path)
    return events


def dump_events(events: Iterable[BaseEvent], indent: int | None = 2) -> str:
    """Serialize records to a JSON list."""
    return json.dumps([event_to_dict(event) for event in events], indent=indent)

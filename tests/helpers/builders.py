"""Builders for events, occurrences and segments used across the suite."""

from __future__ import annotations

import itertools
from datetime import UTC, datetime, timedelta, tzinfo
from typing import Any

from calgrid.domain.model import BaseEvent, Occurrence
from calgrid.domain.segments import Segment

_counter = itertools.count(1)


def at(
    year: int, month: int, day: int, hour: int = 0, minute: int = 0, tz: tzinfo = UTC
) -> datetime:
    """Return an aware datetime, UTC unless `tz` is given."""
    return datetime(year, month, day, hour, minute, tzinfo=tz)


def build_event(**overrides: Any) -> BaseEvent:
    """Return a valid one-hour event on Monday 2025-09-29 09:00 UTC.

    Any BaseEvent field can be overridden; `end` defaults to one hour after
    the (possibly overridden) `start`.
    """
    start = overrides.pop("start", at(2025, 9, 29, 9))
    values: dict[str, Any] = {
        "id": f"evt-{next(_counter)}",
        "title": "Test event",
        "start": start,
        "end": overrides.pop("end", start + timedelta(hours=1)),
    }
    values.update(overrides)
    return BaseEvent(**values)


def build_occurrence(source_id: str | None = None, **overrides: Any) -> Occurrence:
    """Return an occurrence built like `build_event`."""
    return Occurrence.from_event(build_event(**overrides), source_id=source_id)


def build_segment(segment_id: str, start_minutes: int, end_minutes: int) -> Segment:
    """Return a segment whose occurrence is a placeholder."""
    return Segment(
        id=segment_id,
        start_minutes=start_minutes,
        end_minutes=end_minutes,
        occurrence=build_occurrence(id=segment_id),
    )

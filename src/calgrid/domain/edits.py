"""Pure move/resize math for committing pointer gestures.

Every function returns a minimal `EventPatch` (start and end for moves, end
only for resizes). Minute arguments are absolute minutes from local midnight
of the target day in `tz`; out-of-range values are clamped, never wrapped.
Durations are preserved as elapsed time.
"""

from datetime import date, datetime, timedelta, tzinfo

from .coordinates import TimeGrid, clamp
from .model import BaseEvent, EventPatch
from .timeutils import (
    MINUTES_PER_DAY,
    as_local_date,
    at_minutes,
    minutes_of_day,
    shift_absolute,
)

DAYS_PER_WEEK = 7


def week_day(week_start: date | datetime, day_index: int, tz: tzinfo) -> date:
    """Return the date `day_index` days after `week_start`, index clamped to 0-6."""
    offset = int(clamp(day_index, 0, DAYS_PER_WEEK - 1))
    return as_local_date(week_start, tz) + timedelta(days=offset)


def _duration(event: BaseEvent) -> timedelta:
    return max(timedelta(0), event.duration)


def _minimum_end(event: BaseEvent, grid: TimeGrid) -> datetime:
    return shift_absolute(event.start, timedelta(minutes=grid.snap_minutes))


def move_within_day(
    event: BaseEvent,
    day: date | datetime,
    new_start_minutes: float,
    grid: TimeGrid,
    tz: tzinfo,
) -> EventPatch:
    """Move `event` to start at `new_start_minutes` on `day`, keeping its duration.

    The start is snapped and clamped into ``[0, 1440 - step]``.
    """
    start = at_minutes(as_local_date(day, tz), grid.snap_start(new_start_minutes), tz)
    return EventPatch(start=start, end=shift_absolute(start, _duration(event)))


def resize_within_day(
    event: BaseEvent,
    day: date | datetime,
    new_end_minutes: float,
    grid: TimeGrid,
    tz: tzinfo,
) -> EventPatch:
    """Move the end of `event` to `new_end_minutes` on `day`.

    The end is clamped into ``[start + step, 1440]`` (start taken as the
    event's local wall-clock minutes) and snapped. The result never ends
    before one snap step after the start.
    """
    step = grid.snap_minutes
    minimum = minutes_of_day(event.start, tz) + step
    snapped = grid.snap(clamp(new_end_minutes, minimum, MINUTES_PER_DAY))
    minutes = clamp(snapped, 0, MINUTES_PER_DAY)
    end = at_minutes(as_local_date(day, tz), int(minutes), tz)
    return EventPatch(end=max(end, _minimum_end(event, grid)))


def move_to_day(
    event: BaseEvent,
    week_start: date | datetime,
    day_index: int,
    new_start_minutes: float,
    grid: TimeGrid,
    tz: tzinfo,
) -> EventPatch:
    """Move `event` to another column of a week view, keeping its duration.

    `day_index` counts from `week_start` and is clamped to ``[0, 6]``.
    """
    return move_within_day(
        event, week_day(week_start, day_index, tz), new_start_minutes, grid, tz
    )


def resize_to_day(
    event: BaseEvent,
    week_start: date | datetime,
    day_index: int,
    new_end_minutes: float,
    grid: TimeGrid,
    tz: tzinfo,
) -> EventPatch:
    """Move the end of `event` to a minute of any column of a week view.

    The end day is resolved independently of the start day, so a resize may
    stretch an event across midnight. The end never falls before
    ``start + step``.
    """
    snapped = grid.snap(clamp(new_end_minutes, 0, MINUTES_PER_DAY))
    minutes = clamp(snapped, 0, MINUTES_PER_DAY)
    end = at_minutes(week_day(week_start, day_index, tz), int(minutes), tz)
    return EventPatch(end=max(end, _minimum_end(event, grid)))

"""Date and time helpers shared by the domain layer.

All engine timestamps are tz-aware datetimes. Day-local values (minutes from
midnight, day boundaries) are computed in an explicit view timezone so the
same stored event lays out consistently regardless of the host's local zone.
"""

from datetime import UTC, date, datetime, time, timedelta, tzinfo

MINUTES_PER_DAY = 24 * 60

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
_ONE_MS = timedelta(milliseconds=1)


def is_aware(value: datetime) -> bool:
    """Return True if `value` carries a usable UTC offset."""
    return value.tzinfo is not None and value.utcoffset() is not None


def epoch_millis(value: datetime) -> int:
    """Return `value` as whole milliseconds since the Unix epoch.

    Used for exact instant comparisons (e.g. matching exdates), where two
    datetimes in different zones denote the same instant.
    """
    return (value - _EPOCH) // _ONE_MS


def to_iso(value: datetime) -> str:
    """Render `value` as a UTC ISO-8601 string with millisecond precision.

    Example:
        ``2025-09-29T09:00:00.000Z``
    """
    utc = value.astimezone(UTC)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}Z"


def as_local_date(value: date | datetime, tz: tzinfo) -> date:
    """Return the calendar date of `value` in `tz`.

    Plain dates are returned unchanged.
    """
    if isinstance(value, datetime):
        return value.astimezone(tz).date()
    return value


def day_start(day: date, tz: tzinfo) -> datetime:
    """Return local midnight of `day` in `tz`."""
    return datetime.combine(day, time(), tzinfo=tz)


def start_of_day(value: date | datetime, tz: tzinfo) -> datetime:
    """Return local midnight of the day containing `value`."""
    return day_start(as_local_date(value, tz), tz)


def end_of_day(value: date | datetime, tz: tzinfo) -> datetime:
    """Return the last millisecond (23:59:59.999) of the day containing `value`."""
    return datetime.combine(
        as_local_date(value, tz), time(23, 59, 59, 999_000), tzinfo=tz
    )


def minutes_of_day(value: datetime, tz: tzinfo) -> int:
    """Return the local wall-clock minutes from midnight of `value` in `tz`."""
    local = value.astimezone(tz)
    return local.hour * 60 + local.minute


def at_minutes(day: date, minutes: int, tz: tzinfo) -> datetime:
    """Return the local time `minutes` after midnight of `day`.

    `minutes` may equal 1440, which yields midnight of the following day.
    """
    return day_start(day, tz) + timedelta(minutes=minutes)


def shift_absolute(value: datetime, delta: timedelta) -> datetime:
    """Add `delta` as elapsed time (not wall-clock time) to `value`.

    The result keeps the tzinfo of `value`.
    """
    return (value.astimezone(UTC) + delta).astimezone(value.tzinfo)

"""Per-day clamping of occurrences into day-local segments."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta, tzinfo

from .model import Occurrence
from .timeutils import MINUTES_PER_DAY, as_local_date, day_start, minutes_of_day


@dataclass(frozen=True, slots=True)
class Segment:
    """A day-local, render-ready projection of an occurrence.

    Attributes:
        id: The occurrence id.
        start_minutes: Start in minutes from local midnight, in ``[0, 1440]``.
        end_minutes: End in minutes from local midnight, in ``[0, 1440]``.
        occurrence: The originating occurrence.
    """

    id: str
    start_minutes: int
    end_minutes: int
    occurrence: Occurrence

    @property
    def length(self) -> int:
        """Length in minutes; zero or negative for degenerate segments."""
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: "Segment") -> bool:
        """True when the two segments share time (touching does not count)."""
        return (
            self.start_minutes < other.end_minutes
            and other.start_minutes < self.end_minutes
        )


def segments_for_day(
    occurrences: Iterable[Occurrence], day: date, tz: tzinfo
) -> list[Segment]:
    """Clamp the timed occurrences overlapping `day` to that day.

    A multi-day occurrence starts at minute 0 on days after its first and
    ends at minute 1440 on days before its last. All-day occurrences are left
    out; see `all_day_for_day`.
    """
    start = day_start(day, tz)
    end = day_start(day + timedelta(days=1), tz)
    segments = []
    for occurrence in occurrences:
        if occurrence.all_day:
            continue
        if not (occurrence.start < end and occurrence.end > start):
            continue
        start_minutes = (
            minutes_of_day(occurrence.start, tz)
            if as_local_date(occurrence.start, tz) == day
            else 0
        )
        end_minutes = (
            minutes_of_day(occurrence.end, tz)
            if as_local_date(occurrence.end, tz) == day
            else MINUTES_PER_DAY
        )
        segments.append(
            Segment(
                id=occurrence.id,
                start_minutes=start_minutes,
                end_minutes=end_minutes,
                occurrence=occurrence,
            )
        )
    return segments


def all_day_for_day(
    occurrences: Iterable[Occurrence], day: date, tz: tzinfo
) -> list[Occurrence]:
    """Return the all-day occurrences touching `day`."""
    start = day_start(day, tz)
    end = day_start(day + timedelta(days=1), tz)
    return [
        occurrence
        for occurrence in occurrences
        if occurrence.all_day and occurrence.start < end and occurrence.end > start
    ]

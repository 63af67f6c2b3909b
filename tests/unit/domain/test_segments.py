"""Unit tests for per-day segment clamping."""

from datetime import UTC, date
from zoneinfo import ZoneInfo

from calgrid.domain.segments import all_day_for_day, segments_for_day
from tests.helpers.builders import at, build_occurrence, build_segment

# pylint: disable=magic-value-comparison

MONDAY = date(2025, 9, 29)
TUESDAY = date(2025, 9, 30)


def test_single_day_segment():
    """09:00-10:00 becomes minutes 540-600."""
    occurrence = build_occurrence(
        id="a", start=at(2025, 9, 29, 9), end=at(2025, 9, 29, 10)
    )
    (segment,) = segments_for_day([occurrence], MONDAY, UTC)
    assert (segment.id, segment.start_minutes, segment.end_minutes) == ("a", 540, 600)
    assert segment.occurrence is occurrence
    assert segment.length == 60


def test_multi_day_occurrence_is_clamped_per_day():
    """An overnight event ends at 1440 on its first day and starts at 0 on its last."""
    overnight = build_occurrence(start=at(2025, 9, 29, 22), end=at(2025, 9, 30, 2))
    (first,) = segments_for_day([overnight], MONDAY, UTC)
    (second,) = segments_for_day([overnight], TUESDAY, UTC)
    assert (first.start_minutes, first.end_minutes) == (1320, 1440)
    assert (second.start_minutes, second.end_minutes) == (0, 120)


def test_middle_day_of_long_occurrence_spans_whole_day():
    """Days strictly inside a multi-day event are fully covered."""
    long = build_occurrence(start=at(2025, 9, 28, 12), end=at(2025, 9, 30, 12))
    (segment,) = segments_for_day([long], MONDAY, UTC)
    assert (segment.start_minutes, segment.end_minutes) == (0, 1440)


def test_event_ending_at_midnight_does_not_spill():
    """An end exactly at midnight shows only on the first day."""
    late = build_occurrence(start=at(2025, 9, 29, 23), end=at(2025, 9, 30, 0))
    (segment,) = segments_for_day([late], MONDAY, UTC)
    assert segment.end_minutes == 1440
    assert not segments_for_day([late], TUESDAY, UTC)


def test_other_days_are_excluded():
    """Occurrences not touching the day produce no segment."""
    tuesday = build_occurrence(start=at(2025, 9, 30, 9), end=at(2025, 9, 30, 10))
    assert not segments_for_day([tuesday], MONDAY, UTC)


def test_minutes_follow_the_view_zone():
    """Minutes are wall-clock minutes of the view zone."""
    new_york = ZoneInfo("America/New_York")
    occurrence = build_occurrence(
        start=at(2025, 9, 29, 13, 30), end=at(2025, 9, 29, 14, 30)
    )
    (segment,) = segments_for_day([occurrence], MONDAY, new_york)
    assert (segment.start_minutes, segment.end_minutes) == (570, 630)


def test_all_day_occurrences_are_kept_apart():
    """All-day occurrences are not segments; all_day_for_day lists them."""
    trip = build_occurrence(
        id="trip", all_day=True, start=at(2025, 9, 29), end=at(2025, 9, 30)
    )
    assert not segments_for_day([trip], MONDAY, UTC)
    assert all_day_for_day([trip], MONDAY, UTC) == [trip]
    assert not all_day_for_day([trip], TUESDAY, UTC)


def test_overlap_excludes_touching_segments():
    """Touching segments do not overlap; sharing a minute does."""
    a = build_segment("a", 540, 600)
    b = build_segment("b", 600, 660)
    c = build_segment("c", 599, 700)
    assert not a.overlaps(b)
    assert a.overlaps(c)
    assert c.overlaps(b)

"""Unit tests for move/resize commit math."""

from datetime import UTC, date, datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from calgrid.domain.coordinates import TimeGrid
from calgrid.domain.edits import (
    move_to_day,
    move_within_day,
    resize_to_day,
    resize_within_day,
    week_day,
)
from calgrid.domain.unsettable import UNSET
from tests.helpers.builders import at, build_event

# pylint: disable=magic-value-comparison

GRID = TimeGrid()
MONDAY = date(2025, 9, 29)
EVENT = build_event(id="e", start=at(2025, 9, 29, 9), end=at(2025, 9, 29, 10))


# ============================================================================
#                               within a day
# ============================================================================


def test_move_keeps_duration():
    """Moving to 10:00 yields 10:00-11:00."""
    patch = move_within_day(EVENT, MONDAY, 600, GRID, UTC)
    assert patch.start == at(2025, 9, 29, 10)
    assert patch.end == at(2025, 9, 29, 11)
    assert set(patch.as_changes()) == {"start", "end"}


@pytest.mark.parametrize(
    ("minutes", "expected"),
    [(607, (10, 0)), (608, (10, 15)), (-90, (0, 0)), (1500, (23, 45))],
)
def test_move_snaps_and_clamps_start(minutes, expected):
    """Starts snap to 15 minutes and stay inside the day."""
    patch = move_within_day(EVENT, MONDAY, minutes, GRID, UTC)
    assert patch.start == at(2025, 9, 29, *expected)
    assert patch.end - patch.start == timedelta(hours=1)


def test_move_to_last_slot_may_end_next_day():
    """Only the start is clamped; the end follows the duration."""
    patch = move_within_day(EVENT, MONDAY, 1425, GRID, UTC)
    assert patch.end == at(2025, 9, 30, 0, 45)


def test_move_preserves_elapsed_duration_across_dst():
    """A two-hour event moved onto the fall-back night still lasts two hours."""
    new_york = ZoneInfo("America/New_York")
    event = build_event(
        start=datetime(2025, 11, 1, 9, tzinfo=new_york),
        end=datetime(2025, 11, 1, 11, tzinfo=new_york),
    )
    patch = move_within_day(event, date(2025, 11, 2), 0, GRID, new_york)
    assert patch.start.astimezone(UTC) == datetime(2025, 11, 2, 4, tzinfo=UTC)
    assert patch.end.astimezone(UTC) - patch.start.astimezone(UTC) == timedelta(hours=2)
    assert patch.end.astimezone(new_york).hour == 1  # 01:00 EST


def test_resize_sets_only_end():
    """Resizing to 11:40 snaps to 11:45 and leaves the start alone."""
    patch = resize_within_day(EVENT, MONDAY, 700, GRID, UTC)
    assert patch.end == at(2025, 9, 29, 11, 45)
    assert patch.start is UNSET


def test_resize_enforces_minimum_duration():
    """Dragging the end above the start leaves one snap step."""
    patch = resize_within_day(EVENT, MONDAY, 500, GRID, UTC)
    assert patch.end == at(2025, 9, 29, 9, 15)


def test_resize_clamps_to_end_of_day():
    """Ends never pass midnight when resizing within a day."""
    patch = resize_within_day(EVENT, MONDAY, 2000, GRID, UTC)
    assert patch.end == at(2025, 9, 30)


def test_resize_respects_custom_snap():
    """The minimum duration follows the grid's snap step."""
    grid = TimeGrid(snap_minutes=30)
    patch = resize_within_day(EVENT, MONDAY, 0, grid, UTC)
    assert patch.end == at(2025, 9, 29, 9, 30)


# ============================================================================
#                               across days
# ============================================================================


@pytest.mark.parametrize(
    ("index", "expected"), [(0, 29), (3, 2), (6, 5), (9, 5), (-2, 29)]
)
def test_week_day_clamps_index(index, expected):
    """Column indexes are clamped to the seven days of the week."""
    assert week_day(MONDAY, index, UTC).day == expected


def test_move_to_another_day():
    """Moving to Thursday 10:00 keeps the hour-long duration."""
    patch = move_to_day(EVENT, MONDAY, 3, 600, GRID, UTC)
    assert patch.start == at(2025, 10, 2, 10)
    assert patch.end == at(2025, 10, 2, 11)


def test_move_to_day_accepts_datetime_week_start():
    """The week start may be a datetime; its local date is used."""
    patch = move_to_day(EVENT, at(2025, 9, 29, 15), 1, 540, GRID, UTC)
    assert patch.start == at(2025, 9, 30, 9)


def test_resize_across_midnight():
    """The end can be dropped on the next day's column."""
    patch = resize_to_day(EVENT, MONDAY, 1, 120, GRID, UTC)
    assert patch.end == at(2025, 9, 30, 2)
    assert patch.start is UNSET


def test_resize_to_earlier_day_keeps_minimum_duration():
    """An end dropped before the start becomes start + one step."""
    patch = resize_to_day(EVENT, MONDAY, 0, 0, GRID, UTC)
    assert patch.end == at(2025, 9, 29, 9, 15)


def test_move_then_apply_roundtrip():
    """Applying a move patch produces the moved event."""
    moved = move_to_day(EVENT, MONDAY, 2, 870, GRID, UTC).apply(EVENT)
    assert moved.start == at(2025, 10, 1, 14, 30)
    assert moved.duration == EVENT.duration
    assert moved.id == EVENT.id

"""Minute/pixel conversion, snapping and day-start-hour rotation.

A day column is a 24-hour, 1440-minute strip. All edit math works in absolute
minutes from local midnight; a non-zero ``day_start_hour`` only rotates where
those minutes are drawn.
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from .timeutils import MINUTES_PER_DAY, at_minutes

ROW_HEIGHT_PX = 64
SNAP_MINUTES = 15
DEFAULT_SLOT_MINUTES = 60


def clamp(value: float, low: float, high: float) -> float:
    """Return `value` limited to ``[low, high]``."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (``2.5 -> 3``, ``-2.5 -> -2``)."""
    return math.floor(value + 0.5)


@dataclass(frozen=True, slots=True)
class TimeGrid:
    """Geometry of a time-grid column.

    Attributes:
        row_height_px: Height of one hour row in pixels.
        snap_minutes: Snap granularity for drags, resizes and selections.
        day_start_hour: Hour drawn at the top of the column (0-23).
    """

    row_height_px: float = ROW_HEIGHT_PX
    snap_minutes: int = SNAP_MINUTES
    day_start_hour: int = 0

    def __post_init__(self) -> None:
        if self.row_height_px <= 0:
            raise ValueError("row_height_px must be positive")
        if not 0 < self.snap_minutes <= MINUTES_PER_DAY // 2:
            raise ValueError("snap_minutes must be in (0, 720]")
        if not 0 <= self.day_start_hour <= 23:
            raise ValueError("day_start_hour must be in [0, 23]")

    # --- scale ---

    @property
    def pixels_per_minute(self) -> float:
        """Vertical pixels per minute."""
        return self.row_height_px / 60

    @property
    def column_height_px(self) -> float:
        """Height of the full 24-hour column."""
        return self.minutes_to_pixels(MINUTES_PER_DAY)

    def minutes_to_pixels(self, minutes: float) -> float:
        """Convert a minute offset to a pixel offset."""
        return minutes * self.pixels_per_minute

    def pixels_to_minutes(self, pixels: float) -> float:
        """Convert a pixel offset to a (fractional) minute offset."""
        return pixels / self.pixels_per_minute

    # --- snapping ---

    def snap(self, minutes: float) -> int:
        """Round `minutes` to the nearest multiple of the snap step."""
        step = self.snap_minutes
        return round_half_up(minutes / step) * step

    def snap_start(self, minutes: float) -> int:
        """Snap a start-like value into ``[0, 1440 - step]``."""
        step = self.snap_minutes
        top = MINUTES_PER_DAY - step
        return int(clamp(self.snap(clamp(minutes, 0, top)), 0, top))

    def snap_end(self, minutes: float) -> int:
        """Snap an end-like value into ``[step, 1440]``."""
        step = self.snap_minutes
        snapped = self.snap(clamp(minutes, step, MINUTES_PER_DAY))
        return int(clamp(snapped, step, MINUTES_PER_DAY))

    # --- rotation ---

    @property
    def offset_minutes(self) -> int:
        """Rotation offset of the column in minutes."""
        return self.day_start_hour * 60

    def to_grid_minutes(self, absolute: float) -> float:
        """Map absolute minutes-from-midnight to rotated grid minutes."""
        return (absolute - self.offset_minutes + MINUTES_PER_DAY) % MINUTES_PER_DAY

    def to_absolute_minutes(self, grid: float) -> float:
        """Map rotated grid minutes back to absolute minutes-from-midnight."""
        return (grid + self.offset_minutes) % MINUTES_PER_DAY

    def pointer_to_minutes(self, y_px: float) -> float:
        """Return absolute minutes for a pointer offset within a column.

        The offset is clamped to the column first, so pointers above or below
        the column never produce out-of-range minutes.
        """
        grid = clamp(self.pixels_to_minutes(y_px), 0, MINUTES_PER_DAY)
        if not self.offset_minutes:
            return grid
        return self.to_absolute_minutes(grid)

    # --- boxes ---

    def segment_box(
        self, start_minutes: float, end_minutes: float
    ) -> tuple[float, float]:
        """Return ``(top, height)`` in pixels for a day-local minute range.

        The height never drops below half an hour row so short events stay
        grabbable.
        """
        grid_start = (
            self.to_grid_minutes(start_minutes) if self.offset_minutes else start_minutes
        )
        top = self.minutes_to_pixels(grid_start)
        height = max(
            self.row_height_px / 2,
            self.minutes_to_pixels(end_minutes - start_minutes),
        )
        return top, height

    # --- slot helpers ---

    def times_from_vertical_click(
        self,
        day: date,
        y_px: float,
        tz: tzinfo,
        duration_minutes: int = DEFAULT_SLOT_MINUTES,
    ) -> tuple[datetime, datetime]:
        """Return a snapped ``(start, end)`` for a click at `y_px` in the column of `day`."""
        minutes = self.snap_start(self.pointer_to_minutes(y_px))
        start = at_minutes(day, minutes, tz)
        return start, start + timedelta(minutes=duration_minutes)


def default_month_click_times(day: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """Return the default slot for a click on a month cell: noon plus one hour."""
    start = at_minutes(day, 12 * 60, tz)
    return start, start + timedelta(minutes=DEFAULT_SLOT_MINUTES)

"""Visible date range, view navigation and edge navigation during drags."""

import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum

from dateutil.relativedelta import relativedelta

from calgrid.domain.timeutils import day_start
from calgrid.interfaces.scheduler import Scheduler, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_WEEK_STARTS_ON = 1  # Monday
EDGE_MARGIN_PX = 24
EDGE_INTERVAL_S = 0.6


class ViewMode(Enum):
    """Calendar view modes."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def _check_week_start(week_starts_on: int) -> None:
    if not 0 <= week_starts_on <= 6:
        raise ValueError("week_starts_on must be in [0, 6] (0=Sunday)")


def start_of_week(day: date, week_starts_on: int = DEFAULT_WEEK_STARTS_ON) -> date:
    """Return the first day of the week containing `day`.

    Args:
        day: Any day of the week.
        week_starts_on: First weekday, 0=Sunday through 6=Saturday.
    """
    _check_week_start(week_starts_on)
    sunday_based = (day.weekday() + 1) % 7
    return day - timedelta(days=(sunday_based - week_starts_on) % 7)


def week_range(day: date, week_starts_on: int = DEFAULT_WEEK_STARTS_ON) -> list[date]:
    """Return the seven days of the week containing `day`."""
    first = start_of_week(day, week_starts_on)
    return [first + timedelta(days=offset) for offset in range(7)]


def month_grid(day: date, week_starts_on: int = DEFAULT_WEEK_STARTS_ON) -> list[date]:
    """Return the whole weeks covering the month of `day` (28 to 42 days)."""
    first = start_of_week(day.replace(day=1), week_starts_on)
    last_of_month = day.replace(day=1) + relativedelta(months=1, days=-1)
    last = start_of_week(last_of_month, week_starts_on) + timedelta(days=6)
    return [first + timedelta(days=offset) for offset in range((last - first).days + 1)]


def week_day_labels(week_starts_on: int = DEFAULT_WEEK_STARTS_ON) -> list[str]:
    """Return abbreviated weekday names in display order."""
    _check_week_start(week_starts_on)
    names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    return names[week_starts_on:] + names[:week_starts_on]


type ViewListener = Callable[["ViewState"], None]


class ViewState:
    """The anchor date and mode of the calendar, with change notification.

    Args:
        anchor: Any day inside the visible range.
        mode: Day, week or month view.
        week_starts_on: First weekday, 0=Sunday through 6=Saturday.
    """

    def __init__(
        self,
        anchor: date,
        mode: ViewMode = ViewMode.WEEK,
        week_starts_on: int = DEFAULT_WEEK_STARTS_ON,
    ) -> None:
        _check_week_start(week_starts_on)
        self._anchor = anchor
        self._mode = mode
        self._week_starts_on = week_starts_on
        self._listeners: list[ViewListener] = []

    def __repr__(self) -> str:
        return (
            f"ViewState(anchor={self._anchor.isoformat()}, mode={self._mode.value}, "
            f"week_starts_on={self._week_starts_on})"
        )

    @property
    def anchor(self) -> date:
        """The day the view is positioned on."""
        return self._anchor

    @property
    def mode(self) -> ViewMode:
        """The active view mode."""
        return self._mode

    @property
    def week_starts_on(self) -> int:
        """First weekday, 0=Sunday through 6=Saturday."""
        return self._week_starts_on

    # --- derived ranges ---

    def visible_days(self) -> list[date]:
        """Days shown by the current mode, in display order."""
        if self._mode is ViewMode.DAY:
            return [self._anchor]
        if self._mode is ViewMode.WEEK:
            return week_range(self._anchor, self._week_starts_on)
        return month_grid(self._anchor, self._week_starts_on)

    def range_start(self) -> date:
        """First visible day."""
        return self.visible_days()[0]

    def range_end(self) -> date:
        """Last visible day."""
        return self.visible_days()[-1]

    def column_day(self, day_index: int) -> date:
        """Return the day drawn in column `day_index` of a day or week view.

        Raises:
            IndexError: If the column does not exist.
        """
        if not 0 <= day_index < len(days := self.visible_days()):
            raise IndexError(f"column {day_index} is not visible")
        return days[day_index]

    def range_bounds(self, tz: tzinfo) -> tuple[datetime, datetime]:
        """Return local midnight of the first day and of the day after the last."""
        return (
            day_start(self.range_start(), tz),
            day_start(self.range_end() + timedelta(days=1), tz),
        )

    # --- navigation ---

    def go_to(self, anchor: date) -> None:
        """Move the view to `anchor`."""
        if anchor != self._anchor:
            self._anchor = anchor
            self._notify()

    def set_mode(self, mode: ViewMode) -> None:
        """Switch the view mode, keeping the anchor."""
        if mode is not self._mode:
            self._mode = mode
            self._notify()

    def set_week_starts_on(self, week_starts_on: int) -> None:
        """Change the first weekday."""
        _check_week_start(week_starts_on)
        if week_starts_on != self._week_starts_on:
            self._week_starts_on = week_starts_on
            self._notify()

    def step(self, direction: int) -> None:
        """Page the view: one day, one week or one month per unit of `direction`."""
        if self._mode is ViewMode.DAY:
            self.go_to(self._anchor + timedelta(days=direction))
        elif self._mode is ViewMode.WEEK:
            self.go_to(self._anchor + timedelta(weeks=direction))
        else:
            self.go_to(self._anchor + relativedelta(months=direction))

    def edge_step(self, direction: int) -> None:
        """Shift the view during edge navigation: a day in day view, else a week."""
        days = 1 if self._mode is ViewMode.DAY else 7
        self.go_to(self._anchor + timedelta(days=days * direction))

    # --- observers ---

    def subscribe(self, listener: ViewListener) -> Callable[[], None]:
        """Call `listener(view)` after every change.

        Returns:
            A callable removing the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        logger.debug("View changed: %r", self)
        for listener in list(self._listeners):
            listener(self)


class EdgeNavigator:
    """Pages the view while a dragged pointer rests near a horizontal edge.

    `update()` is fed every pointer move of a gesture. Inside the left or
    right margin a repeating timer steps the view in that direction; leaving
    the margin or calling `stop()` cancels the timer.
    """

    def __init__(
        self,
        view: ViewState,
        scheduler: Scheduler,
        margin_px: float = EDGE_MARGIN_PX,
        interval_s: float = EDGE_INTERVAL_S,
    ) -> None:
        self._view = view
        self._scheduler = scheduler
        self._margin_px = margin_px
        self._interval_s = interval_s
        self._direction = 0
        self._timer: TimerHandle | None = None

    @property
    def direction(self) -> int:
        """-1 while paging backwards, 1 while paging forwards, else 0."""
        return self._direction

    @property
    def active(self) -> bool:
        """True while a paging timer is running."""
        return self._timer is not None

    def edge_direction(self, x_px: float, left_px: float, width_px: float) -> int:
        """Return which edge margin `x_px` falls in (-1 left, 1 right, 0 none)."""
        if x_px < left_px + self._margin_px:
            return -1
        if x_px > left_px + width_px - self._margin_px:
            return 1
        return 0

    def update(self, x_px: float, left_px: float, width_px: float) -> int:
        """Start, keep or stop paging for a pointer at `x_px`.

        Args:
            x_px: Pointer x coordinate.
            left_px: Left edge of the scroll container.
            width_px: Width of the scroll container.

        Returns:
            The current paging direction.
        """
        direction = self.edge_direction(x_px, left_px, width_px)
        if direction == self._direction:
            return direction
        self.stop()
        if direction:
            self._direction = direction
            self._timer = self._scheduler.call_repeatedly(self._interval_s, self._tick)
            logger.debug("Edge navigation started (direction %+d)", direction)
        return direction

    def stop(self) -> None:
        """Cancel paging. Stopping twice is harmless."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
            logger.debug("Edge navigation stopped")
        self._direction = 0

    def _tick(self) -> None:
        if self._direction:
            self._view.edge_step(self._direction)

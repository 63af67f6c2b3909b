"""Render-ready day layouts and the live calendar that keeps them current."""

import logging
from collections.abc import Callable, Collection, Mapping
from dataclasses import dataclass
from datetime import date, tzinfo

from calgrid.domain.coordinates import TimeGrid
from calgrid.domain.filtering import filter_occurrences
from calgrid.domain.lanes import LaneAssignment, assign_lanes
from calgrid.domain.model import BaseEvent, Category, Occurrence
from calgrid.domain.recurrence import expand_events
from calgrid.domain.segments import Segment, all_day_for_day, segments_for_day
from calgrid.domain.timeutils import MINUTES_PER_DAY, as_local_date
from calgrid.interfaces.event_store import EventStore, StoreChanged
from calgrid.interfaces.recurrence import RecurrenceError, RecurrenceEvaluator

from .navigation import ViewState
from .preview import PreviewOverride, PreviewStore, display_minutes

logger = logging.getLogger(__name__)

# pylint: disable=too-many-instance-attributes,too-many-arguments


@dataclass(frozen=True, slots=True)
class SegmentBox:
    """Pixel placement of one segment inside its day column.

    Attributes:
        segment: The day-local segment.
        lane: Lane index of the segment.
        top_px: Offset from the top of the column.
        height_px: Box height, at least half an hour row.
        left_pct: Horizontal offset as a percentage of the column width.
        width_pct: Width as a percentage of the column width.
        previewed: True when a preview override is drawn instead of stored times.
        starts_here: True on the day the occurrence starts (drag handle).
        ends_here: True on the day the occurrence ends (resize handle).
        dragged: True for the box of an occurrence being moved across the
            week; it spans the whole column, above the lanes.
    """

    segment: Segment
    lane: int
    top_px: float
    height_px: float
    left_pct: float
    width_pct: float
    previewed: bool = False
    starts_here: bool = True
    ends_here: bool = True
    dragged: bool = False


@dataclass(frozen=True, slots=True)
class DayLayout:
    """Everything a renderer needs for one day column."""

    day: date
    day_index: int
    lanes: LaneAssignment
    boxes: tuple[SegmentBox, ...]
    all_day: tuple[Occurrence, ...]

    @property
    def lane_count(self) -> int:
        """Number of lanes of the day (at least 1)."""
        return self.lanes.lane_count

    def box(self, segment_id: str) -> SegmentBox:
        """Return the box of `segment_id`.

        Raises:
            KeyError: If the segment is not drawn on this day.
        """
        for box in self.boxes:
            if box.segment.id == segment_id:
                return box
        raise KeyError(segment_id)


def build_day_layout(
    occurrences: Collection[Occurrence],
    day: date,
    *,
    grid: TimeGrid,
    tz: tzinfo,
    day_index: int = 0,
    previews: Mapping[str, PreviewOverride] | None = None,
) -> DayLayout:
    """Clamp, pack and place the occurrences of `day`.

    Lanes are computed from stored times; preview overrides only move the
    box of the occurrence being edited. An occurrence dragged in week view
    leaves its stored place and is drawn once, in the column the pointer is
    over.
    """
    lanes = assign_lanes(segments_for_day(occurrences, day, tz))
    width = 100 / lanes.lane_count
    previews = previews or {}

    boxes = []
    for segment in lanes.sorted_segments:
        occurrence = segment.occurrence
        override = previews.get(occurrence.base_id)
        if override is not None and override.lifts(occurrence.id):
            continue
        if override is not None and not override.targets(occurrence.id):
            override = None
        start, end = display_minutes(
            override, day_index, segment.start_minutes, segment.end_minutes
        )
        top, height = grid.segment_box(start, end)
        lane = lanes.lane_of(segment.id)
        boxes.append(
            SegmentBox(
                segment=segment,
                lane=lane,
                top_px=top,
                height_px=height,
                left_pct=width * lane,
                width_pct=width,
                previewed=(start, end) != (segment.start_minutes, segment.end_minutes),
                starts_here=as_local_date(occurrence.start, tz) == day,
                ends_here=as_local_date(occurrence.end, tz) == day,
            )
        )
    boxes.extend(
        dragged_boxes(occurrences, day_index, grid=grid, tz=tz, previews=previews)
    )
    return DayLayout(
        day=day,
        day_index=day_index,
        lanes=lanes,
        boxes=tuple(boxes),
        all_day=tuple(all_day_for_day(occurrences, day, tz)),
    )


def dragged_boxes(
    occurrences: Collection[Occurrence],
    day_index: int,
    *,
    grid: TimeGrid,
    tz: tzinfo,
    previews: Mapping[str, PreviewOverride],
) -> list[SegmentBox]:
    """Return the boxes of occurrences being dragged into column `day_index`.

    The box keeps the length of the occurrence's segment on its first day and
    is cut at midnight of the target column.
    """
    boxes = []
    for occurrence in occurrences:
        override = previews.get(occurrence.base_id)
        if override is None or not override.lifts(occurrence.id):
            continue
        if override.day_index != day_index:
            continue
        home = segments_for_day([occurrence], as_local_date(occurrence.start, tz), tz)
        if not home:
            continue
        start, end = display_minutes(
            override, day_index, home[0].start_minutes, home[0].end_minutes
        )
        end = min(end, MINUTES_PER_DAY)
        top, height = grid.segment_box(start, end)
        boxes.append(
            SegmentBox(
                segment=Segment(
                    id=occurrence.id,
                    start_minutes=start,
                    end_minutes=end,
                    occurrence=occurrence,
                ),
                lane=0,
                top_px=top,
                height_px=height,
                left_pct=0,
                width_pct=100,
                previewed=True,
                dragged=True,
            )
        )
    return boxes


type CalendarListener = Callable[[], None]


class LiveCalendar:
    """Occurrences and day layouts kept in sync with the store and the view.

    The calendar subscribes to store change messages, view changes and
    preview changes. Store and view changes trigger a fresh expansion of the
    visible range; every change notifies the calendar's own listeners, which
    then pull layouts with `day_layout()`.

    Args:
        store: Event store to read from.
        evaluator: Recurrence rule evaluator.
        view: View state defining the visible range.
        preview: Preview store of in-progress gestures.
        grid: Coordinate settings.
        tz: View timezone.
    """

    def __init__(
        self,
        store: EventStore,
        evaluator: RecurrenceEvaluator,
        view: ViewState,
        preview: PreviewStore,
        grid: TimeGrid,
        tz: tzinfo,
    ) -> None:
        self._store = store
        self._evaluator = evaluator
        self._view = view
        self._preview = preview
        self._grid = grid
        self._tz = tz
        self._query: str | None = None
        self._categories: frozenset[Category] = frozenset()
        self._occurrences: list[Occurrence] = []
        self._invalid: set[str] = set()
        self._listeners: list[CalendarListener] = []
        self._unsubscribers = [
            store.subscribe(self._on_store_changed),
            view.subscribe(lambda _view: self.refresh()),
            preview.subscribe(lambda _base_id: self._notify()),
        ]
        self._recompute()

    # --- reads ---

    @property
    def occurrences(self) -> list[Occurrence]:
        """Filtered occurrences of the visible range."""
        return list(self._occurrences)

    @property
    def invalid_event_ids(self) -> frozenset[str]:
        """Ids of records skipped because their rule could not be evaluated."""
        return frozenset(self._invalid)

    def occurrence(self, occurrence_id: str) -> Occurrence:
        """Return the visible occurrence `occurrence_id`.

        Raises:
            KeyError: If it is not visible.
        """
        for occurrence in self._occurrences:
            if occurrence.id == occurrence_id:
                return occurrence
        raise KeyError(occurrence_id)

    def day_layout(self, day_index: int) -> DayLayout:
        """Return the layout of visible column `day_index`."""
        return build_day_layout(
            self._occurrences,
            self._view.column_day(day_index),
            grid=self._grid,
            tz=self._tz,
            day_index=day_index,
            previews=self._preview.snapshot(),
        )

    def layouts(self) -> list[DayLayout]:
        """Return the layouts of every visible day."""
        return [self.day_layout(index) for index in range(len(self._view.visible_days()))]

    # --- filters ---

    def set_filter(
        self, query: str | None = None, categories: Collection[Category] | None = None
    ) -> None:
        """Replace the text/category filter and recompute."""
        self._query = query
        self._categories = frozenset(categories or ())
        self.refresh()

    # --- lifecycle ---

    def refresh(self) -> None:
        """Re-expand the visible range and notify listeners."""
        self._recompute()
        self._notify()

    def subscribe(self, listener: CalendarListener) -> Callable[[], None]:
        """Call `listener()` whenever layouts may have changed.

        Returns:
            A callable removing the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        """Detach from the store, view and preview store."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self._listeners.clear()

    # --- internals ---

    def _on_store_changed(self, message: StoreChanged) -> None:
        logger.debug("Recomputing after store change %s", message)
        self.refresh()

    def _on_expansion_error(self, event: BaseEvent, _error: RecurrenceError) -> None:
        self._invalid.add(event.id)

    def _recompute(self) -> None:
        self._invalid = set()
        expanded = expand_events(
            self._store.list_all(),
            self._view.range_start(),
            self._view.range_end(),
            evaluator=self._evaluator,
            tz=self._tz,
            on_error=self._on_expansion_error,
        )
        self._occurrences = filter_occurrences(
            expanded, self._query, self._categories
        )

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

"""Pointer gestures: live preview while dragging, one store write on release.

A drag or resize is modelled as a `Gesture`, a scoped resource in the manner
of a unit of work: it is acquired on pointer-down, updates only the preview
store while the pointer moves, dispatches at most one command on commit, and
releases its preview entry and edge-navigation timer on every exit path.

`GestureController` is the state machine a view feeds raw pointer input to::

    IDLE -> DRAGGING | RESIZING | SELECTING -> IDLE

Example::

    controller.pointer_down_drag(occurrence, column=2)
    controller.pointer_move(PointerPosition(y_px=640, day_index=3))
    controller.pointer_up()  # one UpdateEvent or DetachOccurrence

Pointer-cancel and teardown (`close`) release everything and send nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Any, Self

from calgrid.domain import edits
from calgrid.domain.coordinates import DEFAULT_SLOT_MINUTES, TimeGrid, clamp
from calgrid.domain.errors import (
    GestureInProgressError,
    GestureReleasedError,
    InvalidTransitionError,
    NoActiveGestureError,
)
from calgrid.domain.model import EventPatch, Occurrence
from calgrid.domain.timeutils import MINUTES_PER_DAY, at_minutes

from .commands import Command, DetachOccurrence, UpdateEvent
from .messagebus import MessageBus
from .navigation import EdgeNavigator, ViewMode, ViewState
from .preview import PreviewStore

logger = logging.getLogger(__name__)

# pylint: disable=too-many-instance-attributes,too-many-arguments


class GestureKind(Enum):
    """Kinds of edit gestures."""

    MOVE = "move"
    RESIZE = "resize"


class GestureState(Enum):
    """States of the gesture controller."""

    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING = "resizing"
    SELECTING = "selecting"


@dataclass(frozen=True, slots=True)
class PointerPosition:
    """A pointer sample in grid coordinates.

    Attributes:
        y_px: Offset from the top of the day column.
        day_index: Column under the pointer (week view), if known.
        x_px: Horizontal position, used for edge navigation when the
            container bounds are known.
    """

    y_px: float
    day_index: int | None = None
    x_px: float | None = None


@dataclass(frozen=True, slots=True)
class SlotSelection:
    """A time range selected by dragging over empty slots."""

    day: date
    day_index: int
    start_minutes: int
    end_minutes: int
    start: datetime
    end: datetime


# ============================================================================
#                                  Gesture
# ============================================================================


class Gesture:
    """One drag or resize of one occurrence.

    Args:
        kind: Move or resize.
        occurrence: The occurrence being edited. Its base id keys the preview.
        column: Column the gesture started in.
        bus: Message bus receiving the single commit command.
        preview: Shared preview store.
        view: Current view; read again at commit time, so edge navigation
            during the gesture is taken into account.
        grid: Snap/coordinate settings.
        tz: View timezone.
        edge: Edge navigator to stop on release, if any.
    """

    def __init__(
        self,
        kind: GestureKind,
        occurrence: Occurrence,
        *,
        column: int,
        bus: MessageBus,
        preview: PreviewStore,
        view: ViewState,
        grid: TimeGrid,
        tz: tzinfo,
        edge: EdgeNavigator | None = None,
    ) -> None:
        self.kind = kind
        self.occurrence = occurrence
        self.column = column
        self._bus = bus
        self._preview = preview
        self._view = view
        self._grid = grid
        self._tz = tz
        self._edge = edge
        self._acquired = False
        self._released = False

    def __repr__(self) -> str:
        return f"Gesture({self.kind.value}, {self.base_id!r}, column={self.column})"

    def __enter__(self) -> Self:
        self.acquire()
        return self

    def __exit__(self, *args) -> None:
        self.release()

    @property
    def base_id(self) -> str:
        """Id of the stored record this gesture edits (series id for instances)."""
        return self.occurrence.base_id

    @property
    def released(self) -> bool:
        """True once the gesture has let go of its resources."""
        return self._released

    def acquire(self) -> None:
        """Claim the preview slot of the base id.

        Raises:
            GestureInProgressError: If another gesture previews the same record.
            GestureReleasedError: If this gesture already ended.
        """
        if self._released:
            raise GestureReleasedError(self.base_id)
        if self._acquired:
            return
        if self.base_id in self._preview:
            raise GestureInProgressError(self.base_id)
        self._acquired = True
        logger.debug("Acquired %r", self)

    def update(self, minutes: float, day_index: int | None = None) -> None:
        """Preview a new start (move) or end (resize). Never touches the store."""
        self._check_live()
        occurrence_id = self.occurrence.id
        if self.kind is GestureKind.MOVE:
            self._preview.set_start(
                self.base_id, minutes, day_index, occurrence_id=occurrence_id
            )
        else:
            self._preview.set_end(
                self.base_id, minutes, day_index, occurrence_id=occurrence_id
            )

    def pending_patch(self) -> EventPatch | None:
        """Return the patch the latest preview value would commit, if any."""
        override = self._preview.get(self.base_id)
        if override is None:
            return None
        minutes = (
            override.start_minutes
            if self.kind is GestureKind.MOVE
            else override.end_minutes
        )
        if minutes is None:
            return None

        event, grid, tz = self.occurrence, self._grid, self._tz
        if self._view.mode is ViewMode.DAY:
            day = self._view.anchor
            if self.kind is GestureKind.MOVE:
                return edits.move_within_day(event, day, minutes, grid, tz)
            return edits.resize_within_day(event, day, minutes, grid, tz)

        week_start = self._view.range_start()
        day_index = override.day_index if override.day_index is not None else self.column
        if self.kind is GestureKind.MOVE:
            return edits.move_to_day(event, week_start, day_index, minutes, grid, tz)
        return edits.resize_to_day(event, week_start, day_index, minutes, grid, tz)

    def command_for(self, patch: EventPatch) -> Command:
        """Return the command persisting `patch` for this occurrence."""
        if self.occurrence.source_id is not None:
            return DetachOccurrence(
                series_id=self.occurrence.source_id,
                instance_start=self.occurrence.start,
                patch=patch,
            )
        return UpdateEvent(event_id=self.occurrence.id, patch=patch)

    def commit(self) -> Any:
        """Dispatch one command built from the latest preview value, then release.

        Without any preview value (a click without movement) nothing is sent.

        Returns:
            The command handler's result, or None when nothing was sent.

        Raises:
            GestureReleasedError: If the gesture already ended.
            StoreError: If the store rejects the write; resources are released
                before the error propagates.
        """
        self._check_live()
        try:
            if (patch := self.pending_patch()) is None:
                logger.debug("Nothing to commit for %r", self)
                return None
            return self._bus.handle(self.command_for(patch))
        finally:
            self.release()

    def release(self) -> None:
        """Clear the preview entry and stop edge navigation. Idempotent."""
        if self._released:
            return
        self._released = True
        if self._acquired:
            self._preview.clear(self.base_id)
        if self._edge is not None:
            self._edge.stop()
        logger.debug("Released %r", self)

    def _check_live(self) -> None:
        if self._released:
            raise GestureReleasedError(self.base_id)
        if not self._acquired:
            raise InvalidTransitionError(f"{self!r} has not been acquired")


# ============================================================================
#                                Controller
# ============================================================================


class GestureController:
    """Single-pointer state machine turning pointer input into edits.

    Args:
        bus: Message bus receiving commit commands.
        preview: Preview store shared with the renderer.
        view: View state (day or week mode for gestures).
        grid: Snap/coordinate settings.
        tz: View timezone.
        edge: Optional edge navigator paging the view during drags.
    """

    def __init__(
        self,
        bus: MessageBus,
        preview: PreviewStore,
        view: ViewState,
        grid: TimeGrid,
        tz: tzinfo,
        edge: EdgeNavigator | None = None,
    ) -> None:
        self._bus = bus
        self._preview = preview
        self._view = view
        self._grid = grid
        self._tz = tz
        self._edge = edge
        self._state = GestureState.IDLE
        self._gesture: Gesture | None = None
        self._container: tuple[float, float] | None = None
        self._selection: tuple[int, int, int] | None = None  # column, start, end

    @property
    def state(self) -> GestureState:
        """Current controller state."""
        return self._state

    @property
    def gesture(self) -> Gesture | None:
        """The active drag/resize, if any."""
        return self._gesture

    @property
    def selection_minutes(self) -> tuple[int, int, int] | None:
        """``(column, anchor, current)`` minutes of the selection in progress."""
        return self._selection

    def set_container_bounds(self, left_px: float, width_px: float) -> None:
        """Tell the controller where the scroll container sits, for edge navigation."""
        self._container = (left_px, width_px)

    # --- pointer down ---

    def pointer_down_drag(
        self, occurrence: Occurrence, column: int = 0
    ) -> Gesture:
        """Start moving `occurrence` from `column`."""
        return self._begin(GestureKind.MOVE, occurrence, column)

    def pointer_down_resize(
        self, occurrence: Occurrence, column: int = 0
    ) -> Gesture:
        """Start resizing the end of `occurrence` from `column`."""
        return self._begin(GestureKind.RESIZE, occurrence, column)

    def pointer_down_select(self, column: int, pointer: PointerPosition) -> None:
        """Start selecting empty slots in `column`."""
        self._require_idle("selection")
        self._require_timed_view()
        start = self._grid.snap_start(self._grid.pointer_to_minutes(pointer.y_px))
        self._selection = (column, start, start)
        self._state = GestureState.SELECTING
        logger.debug("Selection started in column %d at %d", column, start)

    # --- pointer move / up ---

    def pointer_move(self, pointer: PointerPosition) -> None:
        """Feed a pointer sample to the active gesture (preview only).

        Raises:
            NoActiveGestureError: If no gesture is in progress.
        """
        minutes = self._grid.pointer_to_minutes(pointer.y_px)
        if self._state is GestureState.SELECTING and self._selection is not None:
            column, anchor, _ = self._selection
            current = int(clamp(self._grid.snap(minutes), 0, MINUTES_PER_DAY))
            self._selection = (column, anchor, current)
            return
        if (gesture := self._gesture) is None:
            raise NoActiveGestureError()

        day_index = None
        if self._view.mode is not ViewMode.DAY:
            day_index = pointer.day_index if pointer.day_index is not None else gesture.column
        gesture.update(minutes, day_index)

        if self._edge is not None and pointer.x_px is not None and self._container:
            self._edge.update(pointer.x_px, *self._container)

    def pointer_up(self, pointer: PointerPosition | None = None) -> Any:
        """Finish the active gesture.

        A final `pointer` sample, if given, is applied first.

        Returns:
            For drags and resizes, the command handler's result (None when
            nothing was sent). For selections, a `SlotSelection`.

        Raises:
            NoActiveGestureError: If no gesture is in progress.
        """
        if self._state is GestureState.IDLE:
            raise NoActiveGestureError()
        try:
            if pointer is not None:
                self.pointer_move(pointer)
            if self._state is GestureState.SELECTING:
                return self._finish_selection()
            if (gesture := self._gesture) is None:
                raise NoActiveGestureError()
            return gesture.commit()
        finally:
            self._reset()

    def pointer_cancel(self) -> None:
        """Abort the active gesture without writing anything."""
        if self._state is not GestureState.IDLE:
            logger.debug("Gesture cancelled in state %s", self._state.value)
        self._reset()

    def close(self) -> None:
        """Tear down: release any active gesture and stop edge navigation."""
        self._reset()
        if self._edge is not None:
            self._edge.stop()

    # --- internals ---

    def _begin(self, kind: GestureKind, occurrence: Occurrence, column: int) -> Gesture:
        self._require_idle(occurrence.base_id)
        self._require_timed_view()
        gesture = Gesture(
            kind,
            occurrence,
            column=column,
            bus=self._bus,
            preview=self._preview,
            view=self._view,
            grid=self._grid,
            tz=self._tz,
            edge=self._edge,
        )
        gesture.acquire()
        self._gesture = gesture
        self._state = (
            GestureState.DRAGGING if kind is GestureKind.MOVE else GestureState.RESIZING
        )
        return gesture

    def _require_idle(self, target: str) -> None:
        if self._state is not GestureState.IDLE:
            raise GestureInProgressError(
                self._gesture.base_id if self._gesture else target
            )

    def _require_timed_view(self) -> None:
        if self._view.mode is ViewMode.MONTH:
            raise InvalidTransitionError("Time gestures need a day or week view")

    def _finish_selection(self) -> SlotSelection:
        if self._selection is None:
            raise NoActiveGestureError()
        column, anchor, current = self._selection
        start, end = min(anchor, current), max(anchor, current)
        if start == end:
            end = min(MINUTES_PER_DAY, start + DEFAULT_SLOT_MINUTES)
        day = (
            self._view.anchor
            if self._view.mode is ViewMode.DAY
            else self._view.column_day(column)
        )
        return SlotSelection(
            day=day,
            day_index=column,
            start_minutes=start,
            end_minutes=end,
            start=at_minutes(day, start, self._tz),
            end=at_minutes(day, end, self._tz),
        )

    def _reset(self) -> None:
        if self._gesture is not None:
            self._gesture.release()
        self._gesture = None
        self._selection = None
        self._state = GestureState.IDLE

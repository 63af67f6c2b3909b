"""Ephemeral preview values for in-progress drags and resizes.

The preview store is an explicitly owned map keyed by *base* event id (the
series id for a recurring occurrence). Gestures write to it on every pointer
move; renderers pull values from it after being notified. Nothing here ever
touches the event store.

Lifecycle of an entry:
1. created by the first `set_start`/`set_end` of a gesture,
2. updated on every pointer move,
3. cleared when the gesture ends, on every exit path.
"""

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType

from calgrid.domain.coordinates import TimeGrid

logger = logging.getLogger(__name__)

type PreviewListener = Callable[[str], None]


@dataclass(frozen=True, slots=True)
class PreviewOverride:
    """Visual override of one event's displayed time.

    Attributes:
        start_minutes: Previewed start, minutes from local midnight.
        end_minutes: Previewed end, minutes from local midnight.
        day_index: Target column for cross-column gestures, if any.
        occurrence_id: The occurrence being edited. None previews every
            occurrence of the base id.
    """

    start_minutes: int | None = None
    end_minutes: int | None = None
    day_index: int | None = None
    occurrence_id: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when the override carries no value at all."""
        return (
            self.start_minutes is None
            and self.end_minutes is None
            and self.day_index is None
        )

    @property
    def is_move(self) -> bool:
        """True when a start is previewed, i.e. the whole box travels."""
        return self.start_minutes is not None

    def applies_to(self, column: int) -> bool:
        """True when the override should be drawn in `column`."""
        return self.day_index is None or self.day_index == column

    def targets(self, occurrence_id: str) -> bool:
        """True when `occurrence_id` is the occurrence drawn with this override."""
        return self.occurrence_id is None or self.occurrence_id == occurrence_id

    def lifts(self, occurrence_id: str) -> bool:
        """True when the box of `occurrence_id` is dragged into a target column.

        Such a box leaves its stored place and is drawn once, in the
        `day_index` column, whatever day that column shows.
        """
        return (
            self.is_move
            and self.day_index is not None
            and self.occurrence_id is not None
            and self.occurrence_id == occurrence_id
        )


def display_minutes(
    override: PreviewOverride | None,
    column: int,
    start_minutes: int,
    end_minutes: int,
) -> tuple[int, int]:
    """Return the ``(start, end)`` minutes to draw for a segment in `column`.

    A previewed value replaces the stored one only in the column the preview
    targets (or in every column when it has no target).
    """
    if override is None or not override.applies_to(column):
        return start_minutes, end_minutes
    start = override.start_minutes if override.start_minutes is not None else start_minutes
    end = override.end_minutes if override.end_minutes is not None else end_minutes
    if override.start_minutes is not None and override.end_minutes is None:
        # a previewed move carries the segment's length along
        end = start + (end_minutes - start_minutes)
    return start, end


class PreviewStore:
    """Owned map of preview overrides with change notification.

    Values are snapped with `grid`; starts are clamped to
    ``[0, 1440 - step]`` and ends to ``[step, 1440]``.
    """

    def __init__(self, grid: TimeGrid | None = None) -> None:
        self._grid = grid or TimeGrid()
        self._entries: dict[str, PreviewOverride] = {}
        self._listeners: list[PreviewListener] = []

    def __contains__(self, base_id: object) -> bool:
        return base_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, base_id: str) -> PreviewOverride | None:
        """Return the current override for `base_id`, if any."""
        return self._entries.get(base_id)

    def snapshot(self) -> Mapping[str, PreviewOverride]:
        """Return a read-only copy of all current overrides."""
        return MappingProxyType(dict(self._entries))

    # --- writes ---

    def set_start(
        self,
        base_id: str,
        minutes: float,
        day_index: int | None = None,
        *,
        occurrence_id: str | None = None,
    ) -> PreviewOverride:
        """Preview a new start for `base_id`.

        A `day_index` or `occurrence_id` of None keeps the previous value.
        """
        current = self._entries.get(base_id, PreviewOverride())
        return self._put(
            base_id,
            replace(
                current,
                start_minutes=self._grid.snap_start(minutes),
                day_index=day_index if day_index is not None else current.day_index,
                occurrence_id=occurrence_id or current.occurrence_id,
            ),
        )

    def set_end(
        self,
        base_id: str,
        minutes: float,
        day_index: int | None = None,
        *,
        occurrence_id: str | None = None,
    ) -> PreviewOverride:
        """Preview a new end for `base_id`.

        A `day_index` or `occurrence_id` of None keeps the previous value.
        """
        current = self._entries.get(base_id, PreviewOverride())
        return self._put(
            base_id,
            replace(
                current,
                end_minutes=self._grid.snap_end(minutes),
                day_index=day_index if day_index is not None else current.day_index,
                occurrence_id=occurrence_id or current.occurrence_id,
            ),
        )

    def clear_start(self, base_id: str) -> None:
        """Drop the previewed start; the entry goes once it carries no value."""
        if (current := self._entries.get(base_id)) is not None:
            self._put(base_id, replace(current, start_minutes=None))

    def clear_end(self, base_id: str) -> None:
        """Drop the previewed end; the entry goes once it carries no value."""
        if (current := self._entries.get(base_id)) is not None:
            self._put(base_id, replace(current, end_minutes=None))

    def clear(self, base_id: str) -> None:
        """Remove every previewed value of `base_id`. Clearing twice is harmless."""
        if self._entries.pop(base_id, None) is not None:
            self._notify(base_id)

    # --- observers ---

    def subscribe(self, listener: PreviewListener) -> Callable[[], None]:
        """Call `listener(base_id)` after every change.

        Returns:
            A callable removing the subscription.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- internals ---

    def _put(self, base_id: str, override: PreviewOverride) -> PreviewOverride:
        if override.is_empty:
            self._entries.pop(base_id, None)
        else:
            self._entries[base_id] = override
        self._notify(base_id)
        return override

    def _notify(self, base_id: str) -> None:
        for listener in list(self._listeners):
            listener(base_id)

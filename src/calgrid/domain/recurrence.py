"""Recurrence expansion and detachment planning.

`expand_events` turns stored records into concrete occurrences for a date
window. Rule evaluation itself is delegated to a `RecurrenceEvaluator`; this
module owns window rounding, exdate exclusion, identity and failure
isolation.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, tzinfo

from calgrid.interfaces.recurrence import RecurrenceError, RecurrenceEvaluator

from .model import BaseEvent, EventPatch, Occurrence
from .timeutils import end_of_day, epoch_millis, shift_absolute, start_of_day, to_iso

logger = logging.getLogger(__name__)

OCCURRENCE_ID_SEPARATOR = "::"

type ExpansionErrorCallback = Callable[[BaseEvent, RecurrenceError], None]


def occurrence_id(series_id: str, instance_start: datetime) -> str:
    """Return the identity of the instance of `series_id` starting at `instance_start`."""
    return f"{series_id}{OCCURRENCE_ID_SEPARATOR}{to_iso(instance_start)}"


def expand_event(
    event: BaseEvent,
    window_start: datetime,
    window_end: datetime,
    *,
    evaluator: RecurrenceEvaluator,
) -> list[Occurrence]:
    """Expand a single record over an already day-rounded window.

    Raises:
        RecurrenceError: If the record's rule cannot be evaluated.
    """
    if event.parent_id is not None or not event.rrule:
        return [Occurrence.from_event(event)]

    excluded = {epoch_millis(exdate) for exdate in event.exdates}
    duration = event.duration
    seen: set[int] = set()
    occurrences: list[Occurrence] = []
    for instance in evaluator.between(event.rrule, event.start, window_start, window_end):
        key = epoch_millis(instance)
        if key in excluded or key in seen:
            continue
        seen.add(key)
        occurrences.append(
            Occurrence.from_event(
                event,
                id=occurrence_id(event.id, instance),
                start=instance,
                end=shift_absolute(instance, duration),
                source_id=event.id,
            )
        )
    return occurrences


def expand_events(
    events: Iterable[BaseEvent],
    range_start: date | datetime,
    range_end: date | datetime,
    *,
    evaluator: RecurrenceEvaluator,
    tz: tzinfo = UTC,
    on_error: ExpansionErrorCallback | None = None,
) -> list[Occurrence]:
    """Expand stored records into occurrences for a date window.

    The window is inclusive and day-rounded in `tz`: it spans from the start
    of the day of `range_start` to the last millisecond of the day of
    `range_end`.

    Detached overrides (``parent_id`` set) and non-recurring records pass
    through as occurrences without ``source_id``. A record whose rule cannot
    be evaluated is skipped and logged; expansion of the other records
    continues.

    Args:
        events: Stored records, in any order.
        range_start: First day of the window.
        range_end: Last day of the window.
        evaluator: Rule evaluation capability.
        tz: View timezone used for day rounding.
        on_error: Optional callback receiving each skipped record and its error.

    Returns:
        Occurrences, grouped by record in input order.
    """
    window_start = start_of_day(range_start, tz)
    window_end = end_of_day(range_end, tz)

    result: list[Occurrence] = []
    for event in events:
        try:
            result.extend(
                expand_event(event, window_start, window_end, evaluator=evaluator)
            )
        except RecurrenceError as exc:
            logger.warning("Skipping event %s: %s", event.id, exc)
            if on_error is not None:
                on_error(event, exc)
    return result


# ============================================================================
#                               Detachment
# ============================================================================


@dataclass(frozen=True, slots=True)
class Detachment:
    """The two writes that turn one edited instance into a standalone record.

    Attributes:
        series_id: Id of the recurring series.
        series_patch: Patch adding the instance start to the series' exdates.
        detached: New record carrying the edited times.
    """

    series_id: str
    series_patch: EventPatch
    detached: BaseEvent


def detached_id(series_id: str, instance_start: datetime) -> str:
    """Return the id given to the detached copy of one series instance."""
    return f"{series_id}-{to_iso(instance_start)}"


def plan_detachment(
    series: BaseEvent, instance_start: datetime, patch: EventPatch
) -> Detachment:
    """Plan the detachment of the instance of `series` at `instance_start`.

    The series keeps its rule and gains `instance_start` as an exdate. The
    detached record copies the series, drops the rule and exdates, points back
    at the series and takes the times in `patch` (missing times are taken
    from the original instance).
    """
    duration = series.duration
    instance = replace(
        series,
        id=detached_id(series.id, instance_start),
        start=instance_start,
        end=shift_absolute(instance_start, duration),
        rrule=None,
        exdates=(),
        parent_id=series.id,
    )
    detached = patch.apply(instance)

    exdates = series.exdates
    if epoch_millis(instance_start) not in {epoch_millis(d) for d in exdates}:
        exdates = (*exdates, instance_start)
    return Detachment(
        series_id=series.id,
        series_patch=EventPatch(exdates=exdates),
        detached=detached,
    )

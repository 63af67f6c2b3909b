"""Handlers writing event records to the store."""

import logging
from collections.abc import Callable
from dataclasses import replace

from calgrid.domain.model import normalize_event
from calgrid.domain.recurrence import plan_detachment
from calgrid.interfaces.event_store import EventNotFoundError, EventStore, StoreError
from calgrid.interfaces.id_generator import IdGenerator
from calgrid.service_layer import commands

logger = logging.getLogger(__name__)


def create_event(
    cmd: commands.CreateEvent, store: EventStore, id_generator: IdGenerator
) -> str:
    """Add a new event, generating its id when it has none.

    Returns:
        The id of the stored event.
    """
    event = normalize_event(cmd.event)
    if not event.id:
        event = replace(event, id=id_generator.new_id())
    store.add(event)
    logger.info("Created event %s", event.id)
    return event.id


def update_event(cmd: commands.UpdateEvent, store: EventStore) -> None:
    """Apply a patch to a stored event."""
    if cmd.patch.is_empty:
        logger.debug("Ignoring empty patch for event %s", cmd.event_id)
        return
    store.update(cmd.event_id, cmd.patch)
    logger.info(
        "Updated event %s (%s)", cmd.event_id, ", ".join(cmd.patch.as_changes())
    )


def delete_event(cmd: commands.DeleteEvent, store: EventStore) -> None:
    """Remove a stored event and, optionally, the overrides detached from it."""
    if cmd.include_detached:
        for event in store.list_all():
            if event.parent_id == cmd.event_id:
                store.remove(event.id)
    store.remove(cmd.event_id)
    logger.info("Deleted event %s", cmd.event_id)


def detach_occurrence(cmd: commands.DetachOccurrence, store: EventStore) -> str:
    """Turn one instance of a series into a standalone, edited record.

    The detached copy is written first and the series excluded second, so a
    failed write never loses the instance: a failing `add` leaves the series
    untouched and a failing series update removes the copy again.

    Returns:
        The id of the detached record.

    Raises:
        EventNotFoundError: If the series does not exist.
        StoreError: If either write fails.
    """
    if (series := store.get(cmd.series_id)) is None:
        raise EventNotFoundError(cmd.series_id)

    detachment = plan_detachment(series, cmd.instance_start, cmd.patch)
    store.add(detachment.detached)
    try:
        store.update(detachment.series_id, detachment.series_patch)
    except StoreError:
        logger.warning(
            "Removing detached copy %s after series %s could not be updated",
            detachment.detached.id,
            series.id,
        )
        store.remove(detachment.detached.id)
        raise
    logger.info(
        "Detached occurrence %s of series %s", detachment.detached.id, series.id
    )
    return detachment.detached.id


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.CreateEvent: create_event,
    commands.UpdateEvent: update_event,
    commands.DeleteEvent: delete_event,
    commands.DetachOccurrence: detach_occurrence,
}

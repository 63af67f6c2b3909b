"""Module defining Commands."""

from dataclasses import dataclass
from datetime import datetime

from calgrid.domain.model import BaseEvent, EventPatch


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class CreateEvent(Command):
    """Command to add a new event to the store.

    An empty ``event.id`` is replaced by a generated id.
    """

    event: BaseEvent


@dataclass(frozen=True)
class UpdateEvent(Command):
    """Command to apply a patch to a stored event (or a whole series)."""

    event_id: str
    patch: EventPatch


@dataclass(frozen=True)
class DeleteEvent(Command):
    """Command to remove a stored event.

    With `include_detached`, overrides detached from the series `event_id`
    are removed as well.
    """

    event_id: str
    include_detached: bool = False


@dataclass(frozen=True)
class DetachOccurrence(Command):
    """Command to edit one instance of a recurring series.

    The series gains `instance_start` as an exdate and a standalone copy of
    the instance, with `patch` applied, is added to the store.
    """

    series_id: str
    instance_start: datetime
    patch: EventPatch

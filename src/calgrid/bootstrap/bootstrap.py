"""Bootstrap the engine: store, message bus, preview and gesture wiring."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from calgrid.adapters.event_store import InMemoryEventStore
from calgrid.adapters.id_generators import build_id_generator
from calgrid.adapters.recurrence import DateutilRecurrenceEvaluator
from calgrid.adapters.scheduler import AsyncioScheduler
from calgrid.config import EngineSettings
from calgrid.service_layer.gestures import GestureController
from calgrid.service_layer.handlers import COMMAND_HANDLERS
from calgrid.service_layer.messagebus import MessageBus
from calgrid.service_layer.navigation import EdgeNavigator, ViewMode, ViewState
from calgrid.service_layer.preview import PreviewStore
from calgrid.service_layer.views import LiveCalendar

if TYPE_CHECKING:
    from calgrid.domain.model import BaseEvent
    from calgrid.interfaces.event_store import EventStore
    from calgrid.interfaces.id_generator import IdGenerator
    from calgrid.interfaces.recurrence import RecurrenceEvaluator
    from calgrid.interfaces.scheduler import Scheduler
    from calgrid.service_layer.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:  # pylint: disable=too-many-instance-attributes
    """Wired engine components shared by an entry point."""

    settings: EngineSettings
    store: EventStore
    evaluator: RecurrenceEvaluator
    message_bus: MessageBus
    preview: PreviewStore
    view: ViewState
    edge: EdgeNavigator
    gestures: GestureController
    calendar: LiveCalendar

    def close(self) -> None:
        """Release the gesture controller and detach the live calendar."""
        self.gestures.close()
        self.calendar.close()


def build_message_bus(
    store: EventStore,
    command_handlers: Mapping[type[Command], Callable[..., Any]],
    id_generator: IdGenerator,
) -> MessageBus:
    """Build a message bus with injected dependencies."""
    dependencies = {"store": store, "id_generator": id_generator}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }

    return MessageBus(
        store,
        command_handlers=injected_command_handlers,
    )


def bootstrap(  # pylint: disable=too-many-arguments
    settings: EngineSettings | None = None,
    *,
    store: EventStore | None = None,
    evaluator: RecurrenceEvaluator | None = None,
    scheduler: Scheduler | None = None,
    id_generator: IdGenerator | None = None,
    anchor: date | None = None,
    mode: ViewMode = ViewMode.WEEK,
    events: Iterable[BaseEvent] = (),
) -> AppContainer:
    """Wire the engine.

    Every collaborator can be replaced. The defaults are an in-memory store
    seeded with `events`, the python-dateutil evaluator, an asyncio scheduler
    and the id generator named by `settings.id_generator` (UUIDv4 unless
    configured). Settings default to the ``CALGRID_*`` environment.
    """
    settings = settings or EngineSettings.from_env()
    tz = settings.tzinfo
    grid = settings.grid
    store = store if store is not None else InMemoryEventStore(events)
    evaluator = evaluator or DateutilRecurrenceEvaluator()
    scheduler = scheduler or AsyncioScheduler()
    id_generator = id_generator or build_id_generator(settings.id_generator)

    message_bus = build_message_bus(store, COMMAND_HANDLERS, id_generator)
    preview = PreviewStore(grid)
    view = ViewState(
        anchor or datetime.now(tz).date(),
        mode=mode,
        week_starts_on=settings.week_starts_on,
    )
    edge = EdgeNavigator(
        view,
        scheduler,
        margin_px=settings.edge_margin_px,
        interval_s=settings.edge_interval_s,
    )
    gestures = GestureController(message_bus, preview, view, grid, tz, edge=edge)
    calendar = LiveCalendar(store, evaluator, view, preview, grid, tz)
    logger.debug("Bootstrapped engine with %s", settings)

    return AppContainer(
        settings=settings,
        store=store,
        evaluator=evaluator,
        message_bus=message_bus,
        preview=preview,
        view=view,
        edge=edge,
        gestures=gestures,
        calendar=calendar,
    )


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Inject dependencies into a handler function based on its parameters."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return lambda message: handler(message, **deps)

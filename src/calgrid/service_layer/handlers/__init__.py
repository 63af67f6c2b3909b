"""Service layer handlers."""

from collections.abc import Callable

from .event_handlers import COMMAND_HANDLERS as EVENT_COMMAND_HANDLERS

__all__ = ["COMMAND_HANDLERS"]

COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    **EVENT_COMMAND_HANDLERS,
}

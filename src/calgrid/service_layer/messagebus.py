"""Message bus implementation for handling commands."""

import logging
from collections.abc import Callable
from typing import Any

from calgrid.interfaces.event_store import EventStore

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """Exception raised when no handler is found for a command."""

    def __init__(self, cmd: Command) -> None:
        super().__init__(f"No handler found for command {type(cmd).__name__}")


class MessageBus:
    """A simple message bus for handling commands.

    The message bus routes commands to their handlers and logs the dispatch.
    It is the only path through which the engine writes to the event store,
    which it also exposes for convenience.

    Args:
        store: The event store the handlers write to. It should still have
            been injected into the command handlers; it is only exposed here
            for convenience.
        command_handlers: A mapping of command types to their handlers.
            Handlers are callables accepting a single command argument;
            additional dependencies are bound beforehand (see
            `calgrid.bootstrap.inject_dependencies`).

    Note:
        Dispatch is synchronous. Handler errors are logged and re-raised to
        the caller, which decides whether to retry.
    """

    def __init__(
        self,
        store: EventStore,
        command_handlers: dict[type[Command], Callable[..., Any]],
    ) -> None:
        self.store = store
        self._command_handlers = command_handlers

    def handle(self, cmd: Command) -> Any:
        """Handle a command by dispatching it to the appropriate handler.

        Args:
            cmd: The command to handle.

        Returns:
            Whatever the handler returns (e.g. the id of a created event).

        Raises:
            NoHandlerForCommand: If no handler is found for the command type.
            Exception: If the handler raises an exception.
        """

        if handler := self._command_handlers.get(type(cmd)):
            handler_name = self._get_handler_name(handler)
            logger.debug("Handling command %s with handler %s", cmd, handler_name)
            try:
                return handler(cmd)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "Exception handling command %s with handler %s", cmd, handler_name
                )
                raise
        logger.error("No handler found for command %s", type(cmd).__name__)
        raise NoHandlerForCommand(cmd)

    @staticmethod
    def _get_handler_name(fn: Callable[..., Any]) -> str:
        if hasattr(fn, "__name__"):
            return fn.__name__
        if hasattr(fn, "func") and hasattr(fn.func, "__name__"):
            return fn.func.__name__
        return repr(fn)

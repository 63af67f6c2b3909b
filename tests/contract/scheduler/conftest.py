"""Fixtures for Scheduler contract tests."""

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass

import pytest

from calgrid.adapters.scheduler import AsyncioScheduler, ManualScheduler
from calgrid.interfaces.scheduler import Scheduler

# pylint: disable=too-few-public-methods


@dataclass
class SchedulerDriver:
    """A scheduler plus a way to let `seconds` of its clock pass."""

    scheduler: Scheduler
    advance: Callable[[float], None]


@pytest.fixture(params=["manual", "asyncio"])
def driver(request: pytest.FixtureRequest) -> Iterable[SchedulerDriver]:
    """Return a scheduler and its clock for the requested backend.

    Supported params:
      - `"manual"` → ManualScheduler, advanced virtually
      - `"asyncio"` → AsyncioScheduler on a private event loop, advanced by
        running the loop for real time
    """
    match request.param:
        case "manual":
            manual = ManualScheduler()
            yield SchedulerDriver(manual, manual.advance)
        case "asyncio":
            loop = asyncio.new_event_loop()

            def advance(seconds: float) -> None:
                loop.run_until_complete(asyncio.sleep(seconds))

            try:
                yield SchedulerDriver(AsyncioScheduler(loop), advance)
            finally:
                loop.close()
        case _:
            raise ValueError(f"unknown scheduler type: {request.param}")

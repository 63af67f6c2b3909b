"""Logging setup for the CALGRID CLI and embedding applications.

Two handlers hang off the root logger:

* a Rich console handler on stderr whose threshold follows -v/-q, and
* an optional flight recorder: a `MemoryHandler` keeping the latest records
  at DEBUG granularity and dumping them to a file as soon as a WARNING
  arrives (a malformed recurrence rule, for instance), or at exit on request.

`configure_logging` wires both from a `LoggingOptions` value, so embedders get
the same behaviour as the CLI without going through Click.
"""

from __future__ import annotations

import logging
import os
import platform
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from logging.handlers import MemoryHandler
from pathlib import Path
from typing import TYPE_CHECKING, Literal, TypeAlias

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from logging import Logger

# pylint: disable=too-few-public-methods

PROJECT_PREFIX = "calgrid"

# Distributions whose versions are worth knowing when reading a bug report.
DIAGNOSTIC_DISTRIBUTIONS = ("python-dateutil", "click", "click-extra", "rich")

ColorSystem: TypeAlias = Literal["auto", "standard", "256", "truecolor", "windows"]


@dataclass(frozen=True, slots=True)
class LoggingOptions:  # pylint: disable=too-many-instance-attributes
    """How the process should log.

    Attributes:
        verbosity: Number of -v minus number of -q; 0 keeps the WARNING default.
        debug: Developer formatting on the console (implies DEBUG).
        color: Allow ANSI colors on the console.
        log_path: Flight-recorder file.
        flight_recorder: Keep the in-memory flight recorder.
        capacity: Records kept by the flight recorder.
        force_flush: Dump the flight recorder at exit even without warnings.
        logger_levels: Per-logger minimum levels, applied to every handler.
    """

    verbosity: int = 0
    debug: bool = False
    color: bool = True
    log_path: Path | None = None
    flight_recorder: bool = True
    capacity: int = 2000
    force_flush: bool = False
    logger_levels: dict[str, int] = field(default_factory=dict)

    @property
    def console_level(self) -> int:
        """Console threshold: WARNING moved one level per unit of verbosity."""
        level = logging.WARNING - 10 * self.verbosity
        return max(logging.DEBUG, min(logging.CRITICAL, level))

    @property
    def records_to_file(self) -> bool:
        """True when a flight recorder file will be used."""
        return self.flight_recorder and self.log_path is not None


class ThirdPartyPrefixFilter(logging.Filter):
    """Annotate third-party log records with a short prefix.

    Records from loggers outside the project get `record.prefix` set to a
    bracketed token like "[asyncio]"; project records get an empty prefix.
    The filter never drops a record.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith(PROJECT_PREFIX):
            record.prefix = ""
        else:
            record.prefix = f"[{record.name.partition('.')[0]}]"
        return True


def config_console_handler(
    level: int = logging.INFO, debug_mode: bool = False, color: bool = True
) -> RichHandler:
    """Return a Rich handler writing to stderr.

    In debug mode the handler logs at DEBUG with timestamps, logger names and
    source locations; otherwise third-party records are prefixed with their
    library name.
    """
    color_system: ColorSystem | None = "auto" if color else None
    handler = RichHandler(
        level=logging.DEBUG if debug_mode else level,
        console=Console(color_system=color_system, stderr=True),
        rich_tracebacks=True,
        show_time=False,
        show_path=debug_mode,
        enable_link_path=debug_mode,
    )
    if debug_mode:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
        handler.addFilter(ThirdPartyPrefixFilter())
    return handler


def config_flight_recorder(
    path: Path,
    capacity: int = 2000,
    flush_level: int = logging.WARNING,
    flush_on_close: bool = False,
) -> MemoryHandler:
    """Return a memory handler dumping its buffer to `path`.

    The file is opened lazily and truncated on the first dump, so a clean run
    leaves no file behind and each run replaces the previous log.

    Args:
        path: Destination file; missing parent directories are created.
        capacity: Number of records buffered in memory.
        flush_level: Records at or above this level trigger a dump.
        flush_on_close: Also dump whatever is buffered when closed.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setLevel(logging.DEBUG)
    target.setFormatter(
        logging.Formatter("[%(asctime)s] %(levelname)s %(name)s:%(lineno)d: %(message)s")
    )
    return MemoryHandler(
        capacity=capacity,
        flushLevel=flush_level,
        target=target,
        flushOnClose=flush_on_close,
    )


def configure_logging(options: LoggingOptions) -> list[logging.Handler]:
    """Install the console handler and flight recorder on the root logger.

    Any previous root configuration is replaced. The root logger itself
    passes everything; handlers and `options.logger_levels` do the filtering.

    Returns:
        The installed handlers, console first.
    """
    handlers: list[logging.Handler] = [
        config_console_handler(
            level=options.console_level, debug_mode=options.debug, color=options.color
        )
    ]
    if options.records_to_file and options.log_path is not None:
        handlers.append(
            config_flight_recorder(
                options.log_path,
                capacity=options.capacity,
                flush_on_close=options.force_flush,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in options.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def distribution_versions(
    names: tuple[str, ...] = DIAGNOSTIC_DISTRIBUTIONS,
) -> dict[str, str]:
    """Return installed versions of `names` ("<missing>" when not installed)."""
    versions = {}
    for name in names:
        try:
            versions[name] = version(name)
        except PackageNotFoundError:
            versions[name] = "<missing>"
    return versions


def log_startup(
    logger: Logger,
    options: LoggingOptions,
    handlers: list[logging.Handler],
    *,
    app_version: str,
) -> None:
    """Log a one-line startup summary at INFO, then DEBUG diagnostics.

    The diagnostics land in the flight recorder, so a dumped log always
    says which interpreter, platform and library versions produced it.
    """
    logger.info(
        "CALGRID %s: console=%s, flight-recorder=%s",
        app_version,
        logging.getLevelName(options.console_level),
        "ON" if options.records_to_file else "OFF",
    )
    logger.debug("Python: %s", sys.version.split()[0])
    logger.debug("Platform: %s %s", platform.system(), platform.release())
    logger.debug("PID: %s", os.getpid())
    logger.debug("CWD: %s", Path.cwd())
    for name, dist_version in distribution_versions().items():
        logger.debug("%s: %s", name, dist_version)
    logger.debug("Handlers: %s", [type(h).__name__ for h in handlers])
    if options.records_to_file:
        logger.debug(
            "Flight recorder: path=%s, capacity=%s, flush_on_close=%s",
            options.log_path,
            options.capacity,
            options.force_flush,
        )
    overrides = {
        name: logging.getLevelName(level)
        for name, level in options.logger_levels.items()
    }
    logger.debug("Per-logger overrides: %s", overrides or "<none>")

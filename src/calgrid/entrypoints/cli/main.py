"""CALGRID CLI entry point.

Defines the top-level ``calgrid`` command (via Click-Extra): console and
flight-recorder logging shared by every subcommand, plus the subcommands.

Available commands
- ``calgrid expand``: list the occurrences of an event file in a date range.
- ``calgrid layout``: show the lanes and pixel boxes of a day or week.

Notes
- The CLI version is sourced from `calgrid.__version__` and displayed
  automatically by Click-Extra (``--version``).
- The logging options map one to one onto `calgrid.logging.LoggingOptions`.

Examples
    $ calgrid --version
    $ calgrid -v expand events.json --start 2025-09-29 --end 2025-10-05
    $ calgrid --force-flush layout events.json --date 2025-09-30 --mode week
"""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import click_extra as clickx
from platformdirs import user_log_dir

from calgrid import __version__
from calgrid.logging import LoggingOptions, configure_logging, log_startup

from .calendar_cmds import expand, layout
from .helpers import file_link
from .helpers.log_level_parser import parse_log_level

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = Path(user_log_dir("calgrid", appauthor=False)) / "latest.log"

HELP = """CALGRID command-line interface.

    CALGRID lays out calendars: it expands stored (possibly recurring) events
    into concrete occurrences, clamps them to days, packs overlapping events
    into side-by-side lanes and computes their pixel boxes on a time grid.
    """

EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('Logs:', fg='blue', bold=True, underline=True)}",
        "  Flight recorder: " + file_link(DEFAULT_LOG_PATH),
    ]
)


def logging_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the console and flight-recorder options to `command`."""
    options = [
        click.option(
            "--verbose",
            "-v",
            "verbose_count",
            count=True,
            help="Show one more level than WARNING on the console per repetition.",
        ),
        click.option(
            "--quiet",
            "-q",
            "quiet_count",
            count=True,
            help="Show one level less than WARNING on the console per repetition.",
        ),
        click.option(
            "--debug/--no-debug",
            default=False,
            help="Log everything with timestamps, logger names and source lines.",
        ),
        click.option(
            "--log-path",
            type=click.Path(dir_okay=False, path_type=Path),
            default=DEFAULT_LOG_PATH,
            envvar="CALGRID_LOG_PATH",
            show_default=True,
            show_envvar=True,
            help="File the flight recorder writes to.",
        ),
        click.option(
            "--flight-recorder-capacity",
            type=click.IntRange(min=1),
            default=2000,
            hidden=True,
            envvar="CALGRID_FLIGHT_RECORDER_CAPACITY",
            show_envvar=True,
            help="Number of log records kept by the flight recorder.",
        ),
        click.option(
            "--flight-recorder/--no-flight-recorder",
            default=True,
            show_envvar=True,
            help=(
                "Keep the latest log records in memory at DEBUG granularity and "
                "write them to --log-path when a WARNING or ERROR is logged, for "
                "example when an event's recurrence rule cannot be parsed. "
                "Console verbosity is unaffected."
            ),
        ),
        click.option(
            "--force-flush/--no-force-flush",
            "force_flush",
            default=False,
            show_default=True,
            show_envvar=True,
            help="Also write the flight recorder buffer at exit on clean runs.",
        ),
        click.option(
            "-L",
            "--logger-level",
            "logger_levels",
            multiple=True,
            callback=parse_log_level,
            default=("asyncio=WARNING",),
            show_default=True,
            show_envvar=True,
            help=(
                "Minimum level of one logger as NAME=LEVEL, applied to the console "
                "and the flight recorder alike. Repeatable, e.g. "
                "-L calgrid.service_layer.gestures=DEBUG -L asyncio=INFO, or via "
                "CALGRID_LOGGER_LEVELS (comma/space list)."
            ),
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@logging_options
@clickx.pass_context
def calgrid(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """CALGRID command-line interface."""
    options = LoggingOptions(
        verbosity=verbose_count - quiet_count,
        debug=debug,
        color=ctx.color is not False,  # None or True => allow color
        log_path=log_path,
        flight_recorder=flight_recorder,
        capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
    )
    handlers = configure_logging(options)
    log_startup(logger, options, handlers, app_version=__version__)

    # handlers flush (and the flight recorder dumps) once the command returns
    ctx.call_on_close(logging.shutdown)


calgrid.add_command(expand)
calgrid.add_command(layout)

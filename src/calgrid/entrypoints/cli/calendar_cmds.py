"""CALGRID calendar commands: ``expand`` and ``layout``.

Both commands read a JSON event file (see `calgrid.adapters.codec`), run the
engine over it and print a Rich table, or JSON with ``--json``. Events whose
recurrence rule cannot be evaluated are skipped with a warning on stderr;
the remaining events are still shown.

Engine settings mirror the ``CALGRID_*`` environment variables.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.table import Table

from calgrid.adapters.codec import EventDecodeError, event_to_dict, load_events
from calgrid.adapters.recurrence import DateutilRecurrenceEvaluator
from calgrid.bootstrap import bootstrap
from calgrid.config import EngineSettings, InvalidSettingError
from calgrid.domain.filtering import filter_occurrences
from calgrid.domain.model import BaseEvent, Category
from calgrid.domain.recurrence import expand_events
from calgrid.domain.timeutils import MINUTES_PER_DAY, end_of_day, start_of_day, to_iso
from calgrid.service_layer.navigation import ViewMode

from .helpers import error, warn

if TYPE_CHECKING:
    from calgrid.domain.model import Occurrence
    from calgrid.interfaces.recurrence import RecurrenceError
    from calgrid.service_layer.views import DayLayout

DATE_FORMATS = ["%Y-%m-%d"]


# ============================================================================
#                               shared options
# ============================================================================


def settings_options(command: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the engine-settings options to `command`."""
    defaults = EngineSettings()
    options = [
        click.option(
            "--timezone",
            "timezone",
            default=defaults.timezone,
            envvar="CALGRID_TIMEZONE",
            show_default=True,
            show_envvar=True,
            help="IANA timezone used for day boundaries and wall-clock minutes.",
        ),
        click.option(
            "--row-height",
            "row_height_px",
            type=click.FloatRange(min=0, min_open=True),
            default=defaults.row_height_px,
            envvar="CALGRID_ROW_HEIGHT_PX",
            show_default=True,
            show_envvar=True,
            help="Pixel height of one hour row.",
        ),
        click.option(
            "--snap-minutes",
            type=click.IntRange(min=1),
            default=defaults.snap_minutes,
            envvar="CALGRID_SNAP_MINUTES",
            show_default=True,
            show_envvar=True,
            help="Snap granularity in minutes; must divide a day, at most 720.",
        ),
        click.option(
            "--day-start-hour",
            type=click.IntRange(0, 23),
            default=defaults.day_start_hour,
            envvar="CALGRID_DAY_START_HOUR",
            show_default=True,
            show_envvar=True,
            help="Hour drawn at the top of a day column.",
        ),
        click.option(
            "--week-starts-on",
            type=click.IntRange(0, 6),
            default=defaults.week_starts_on,
            envvar="CALGRID_WEEK_STARTS_ON",
            show_default=True,
            show_envvar=True,
            help="First day of the week (0=Sunday ... 6=Saturday).",
        ),
    ]
    for option in reversed(options):
        command = option(command)
    return command


def _build_settings(**values: Any) -> EngineSettings:
    try:
        return EngineSettings(**values)
    except InvalidSettingError as exc:
        raise click.BadParameter(str(exc)) from exc


def _read_events(path: Path, settings: EngineSettings) -> list[BaseEvent]:
    try:
        return load_events(path, default_tz=settings.tzinfo)
    except EventDecodeError as exc:
        error(f"Cannot read {path}")
        raise click.ClickException(str(exc)) from exc


def _hhmm(minutes: float) -> str:
    minutes = int(minutes)
    if minutes >= MINUTES_PER_DAY:
        return "24:00"
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value is not None else None


def _occurrence_to_dict(occurrence: Occurrence) -> dict[str, Any]:
    data = event_to_dict(occurrence)
    if occurrence.source_id is not None:
        data["sourceId"] = occurrence.source_id
    return data


# ============================================================================
#                                   expand
# ============================================================================


@click.command()
@click.argument(
    "events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--start",
    type=click.DateTime(formats=DATE_FORMATS),
    required=True,
    help="First day of the window (inclusive).",
)
@click.option(
    "--end",
    type=click.DateTime(formats=DATE_FORMATS),
    default=None,
    help="Last day of the window (inclusive). Defaults to --start.",
)
@click.option("--query", "-s", default=None, help="Case-insensitive text filter.")
@click.option(
    "--category",
    "categories",
    multiple=True,
    type=click.Choice([c.value for c in Category], case_sensitive=False),
    help="Only show these categories. Repeatable.",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@settings_options
def expand(  # pylint: disable=too-many-arguments, too-many-locals
    events_file: Path,
    start: datetime,
    end: datetime | None,
    query: str | None,
    categories: tuple[str, ...],
    as_json: bool,
    **settings_values: Any,
) -> None:
    """List the occurrences of EVENTS_FILE between --start and --end."""
    settings = _build_settings(**settings_values)
    events = _read_events(events_file, settings)
    first, last = start.date(), _as_date(end) or start.date()
    if last < first:
        raise click.BadParameter("--end must not be before --start", param_hint="--end")

    def on_error(event: BaseEvent, exc: RecurrenceError) -> None:
        warn(f"Skipped event {event.id}: {exc}")

    occurrences = filter_occurrences(
        expand_events(
            events,
            first,
            last,
            evaluator=DateutilRecurrenceEvaluator(),
            tz=settings.tzinfo,
            on_error=on_error,
        ),
        query,
        [Category(_canonical_category(c)) for c in categories],
    )
    window_start = start_of_day(first, settings.tzinfo)
    window_end = end_of_day(last, settings.tzinfo)
    # single events pass through expansion whatever their dates
    occurrences = [
        o for o in occurrences if o.start <= window_end and o.end > window_start
    ]
    occurrences.sort(key=lambda o: (o.start, o.id))

    if as_json:
        click.echo(json.dumps([_occurrence_to_dict(o) for o in occurrences], indent=2))
        return

    table = Table(title=f"Occurrences {first.isoformat()} .. {last.isoformat()}")
    for column in ("Id", "Title", "Start", "End", "Series"):
        table.add_column(column)
    for occurrence in occurrences:
        table.add_row(
            occurrence.id,
            occurrence.title,
            to_iso(occurrence.start),
            to_iso(occurrence.end),
            occurrence.source_id or "",
        )
    Console().print(table)


def _canonical_category(value: str) -> str:
    return next(c.value for c in Category if c.value.lower() == value.lower())


# ============================================================================
#                                   layout
# ============================================================================


def _layout_to_dict(layout: DayLayout) -> dict[str, Any]:
    return {
        "day": layout.day.isoformat(),
        "laneCount": layout.lane_count,
        "segments": [
            {
                "id": box.segment.id,
                "title": box.segment.occurrence.title,
                "startMinutes": box.segment.start_minutes,
                "endMinutes": box.segment.end_minutes,
                "lane": box.lane,
                "top": box.top_px,
                "height": box.height_px,
                "leftPct": box.left_pct,
                "widthPct": box.width_pct,
            }
            for box in layout.boxes
        ],
        "allDay": [occurrence.id for occurrence in layout.all_day],
    }


def _layout_table(layout: DayLayout) -> Table:
    lanes = "lane" if layout.lane_count == 1 else "lanes"
    table = Table(
        title=f"{layout.day:%a} {layout.day.isoformat()} ({layout.lane_count} {lanes})"
    )
    for column in ("Id", "Title", "Time", "Lane", "Top", "Height", "Left %", "Width %"):
        table.add_column(column)
    for box in layout.boxes:
        table.add_row(
            box.segment.id,
            box.segment.occurrence.title,
            f"{_hhmm(box.segment.start_minutes)}-{_hhmm(box.segment.end_minutes)}",
            str(box.lane),
            f"{box.top_px:.1f}",
            f"{box.height_px:.1f}",
            f"{box.left_pct:.1f}",
            f"{box.width_pct:.1f}",
        )
    if layout.all_day:
        table.caption = "All day: " + ", ".join(o.title for o in layout.all_day)
    return table


@click.command()
@click.argument(
    "events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--date",
    "anchor",
    type=click.DateTime(formats=DATE_FORMATS),
    required=True,
    help="Day to lay out (any day of the week in week mode).",
)
@click.option(
    "--mode",
    type=click.Choice([ViewMode.DAY.value, ViewMode.WEEK.value], case_sensitive=False),
    default=ViewMode.DAY.value,
    show_default=True,
    help="Lay out a single day or a whole week.",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of tables.")
@settings_options
def layout(
    events_file: Path,
    anchor: datetime,
    mode: str,
    as_json: bool,
    **settings_values: Any,
) -> None:
    """Show lanes and pixel boxes of EVENTS_FILE for a day or a week."""
    settings = _build_settings(**settings_values)
    events = _read_events(events_file, settings)
    container = bootstrap(
        settings,
        events=events,
        anchor=anchor.date(),
        mode=ViewMode(mode.lower()),
    )
    try:
        for event_id in sorted(container.calendar.invalid_event_ids):
            warn(f"Skipped event {event_id}: invalid recurrence rule")
        layouts = container.calendar.layouts()
    finally:
        container.close()

    if as_json:
        click.echo(json.dumps([_layout_to_dict(day) for day in layouts], indent=2))
        return
    console = Console()
    for day_layout in layouts:
        console.print(_layout_table(day_layout))

"""Configuration utilities for CALGRID.

Engine settings are read from ``CALGRID_*`` environment variables. Every
value has a default, so an empty environment yields the standard grid: 64 px
hour rows, 15 minute snapping, midnight at the top, weeks starting on Monday
and UTC as the view timezone.
"""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calgrid.adapters.id_generators import ID_GENERATORS
from calgrid.domain.coordinates import TimeGrid
from calgrid.domain.timeutils import MINUTES_PER_DAY

ENV_PREFIX = "CALGRID_"  # pragma: no mutate


class InvalidSettingError(ValueError):
    """Raised when a CALGRID_* setting cannot be parsed or is out of range."""

    def __init__(self, name: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid value {value!r} for {ENV_PREFIX}{name}: {reason}")
        self.name = name
        self.value = value
        self.reason = reason


def resolve_timezone(name: str) -> tzinfo:
    """Return the tzinfo for an IANA zone name ("UTC" maps to `datetime.UTC`).

    Raises:
        InvalidSettingError: If the zone is unknown.
    """
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise InvalidSettingError("TIMEZONE", name, "unknown timezone") from exc


@dataclass(frozen=True, slots=True)
class EngineSettings:  # pylint: disable=too-many-instance-attributes
    """Validated engine settings.

    Attributes:
        row_height_px: Height of one hour row.
        snap_minutes: Snap granularity; must divide a day evenly, at most 720.
        day_start_hour: Hour drawn at the top of a day column.
        week_starts_on: First weekday, 0=Sunday through 6=Saturday.
        timezone: IANA name of the view timezone.
        edge_margin_px: Width of the edge-navigation margin.
        edge_interval_s: Seconds between edge-navigation steps.
        id_generator: Name of the id generator for new events: "uuid4",
            "ulid" or "sequential".
    """

    row_height_px: float = 64
    snap_minutes: int = 15
    day_start_hour: int = 0
    week_starts_on: int = 1
    timezone: str = "UTC"
    edge_margin_px: float = 24
    edge_interval_s: float = 0.6
    id_generator: str = "uuid4"

    def __post_init__(self) -> None:
        if self.row_height_px <= 0:
            raise InvalidSettingError("ROW_HEIGHT_PX", self.row_height_px, "must be > 0")
        if (
            not 0 < self.snap_minutes <= MINUTES_PER_DAY // 2
            or MINUTES_PER_DAY % self.snap_minutes
        ):
            raise InvalidSettingError(
                "SNAP_MINUTES",
                self.snap_minutes,
                "must divide 1440 and be at most 720",
            )
        if not 0 <= self.day_start_hour <= 23:
            raise InvalidSettingError("DAY_START_HOUR", self.day_start_hour, "must be 0-23")
        if not 0 <= self.week_starts_on <= 6:
            raise InvalidSettingError(
                "WEEK_STARTS_ON", self.week_starts_on, "must be 0-6 (0=Sunday)"
            )
        if self.edge_margin_px < 0:
            raise InvalidSettingError("EDGE_MARGIN_PX", self.edge_margin_px, "must be >= 0")
        if self.edge_interval_s <= 0:
            raise InvalidSettingError("EDGE_INTERVAL_S", self.edge_interval_s, "must be > 0")
        if self.id_generator.lower() not in ID_GENERATORS:
            raise InvalidSettingError(
                "ID_GENERATOR",
                self.id_generator,
                f"expected one of {', '.join(ID_GENERATORS)}",
            )
        resolve_timezone(self.timezone)

    @property
    def grid(self) -> TimeGrid:
        """The coordinate/snap settings as a TimeGrid."""
        return TimeGrid(
            row_height_px=self.row_height_px,
            snap_minutes=self.snap_minutes,
            day_start_hour=self.day_start_hour,
        )

    @property
    def tzinfo(self) -> tzinfo:
        """The view timezone."""
        return resolve_timezone(self.timezone)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EngineSettings":
        """Build settings from ``CALGRID_*`` variables, defaulting the missing ones.

        Raises:
            InvalidSettingError: If a variable cannot be parsed or is out of range.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def read(name: str, parse: Callable[[str], Any], default: Any) -> Any:
            raw = env.get(f"{ENV_PREFIX}{name}")
            if raw is None or not raw.strip():
                return default
            try:
                return parse(raw.strip())
            except ValueError as exc:
                raise InvalidSettingError(name, raw, f"expected {parse.__name__}") from exc

        return cls(
            row_height_px=read("ROW_HEIGHT_PX", float, defaults.row_height_px),
            snap_minutes=read("SNAP_MINUTES", int, defaults.snap_minutes),
            day_start_hour=read("DAY_START_HOUR", int, defaults.day_start_hour),
            week_starts_on=read("WEEK_STARTS_ON", int, defaults.week_starts_on),
            timezone=read("TIMEZONE", str, defaults.timezone),
            edge_margin_px=read("EDGE_MARGIN_PX", float, defaults.edge_margin_px),
            edge_interval_s=read("EDGE_INTERVAL_S", float, defaults.edge_interval_s),
            id_generator=read("ID_GENERATOR", str, defaults.id_generator),
        )

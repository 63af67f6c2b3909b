"""Unit tests for calgrid.config."""

from datetime import UTC
from zoneinfo import ZoneInfo

import pytest

from calgrid.config import EngineSettings, InvalidSettingError, resolve_timezone
from calgrid.domain.coordinates import TimeGrid

# pylint: disable=magic-value-comparison


def test_defaults():
    """An empty environment yields the standard grid."""
    settings = EngineSettings.from_env({})
    assert settings == EngineSettings()
    assert settings.grid == TimeGrid(
        row_height_px=64, snap_minutes=15, day_start_hour=0
    )
    assert settings.week_starts_on == 1
    assert settings.tzinfo is UTC


def test_from_env_reads_prefixed_variables():
    """CALGRID_* variables override the defaults."""
    settings = EngineSettings.from_env(
        {
            "CALGRID_ROW_HEIGHT_PX": "48",
            "CALGRID_SNAP_MINUTES": "30",
            "CALGRID_DAY_START_HOUR": "6",
            "CALGRID_WEEK_STARTS_ON": "0",
            "CALGRID_TIMEZONE": "Europe/Berlin",
            "CALGRID_EDGE_MARGIN_PX": "40",
            "CALGRID_EDGE_INTERVAL_S": "1.5",
            "CALGRID_ID_GENERATOR": "ulid",
            "UNRELATED": "ignored",
        }
    )
    assert settings.grid == TimeGrid(
        row_height_px=48, snap_minutes=30, day_start_hour=6
    )
    assert settings.week_starts_on == 0
    assert settings.tzinfo == ZoneInfo("Europe/Berlin")
    assert settings.edge_margin_px == 40
    assert settings.edge_interval_s == 1.5
    assert settings.id_generator == "ulid"


def test_blank_variables_fall_back_to_defaults():
    """Empty values are treated as unset."""
    assert EngineSettings.from_env({"CALGRID_SNAP_MINUTES": "  "}).snap_minutes == 15


def test_unparseable_variable():
    """Values of the wrong type name the variable."""
    with pytest.raises(InvalidSettingError, match="CALGRID_SNAP_MINUTES"):
        EngineSettings.from_env({"CALGRID_SNAP_MINUTES": "quarter"})


@pytest.mark.parametrize(
    ("kwargs", "name"),
    [
        ({"row_height_px": 0}, "ROW_HEIGHT_PX"),
        ({"snap_minutes": 7}, "SNAP_MINUTES"),
        ({"snap_minutes": -15}, "SNAP_MINUTES"),
        ({"snap_minutes": 1440}, "SNAP_MINUTES"),
        ({"day_start_hour": 24}, "DAY_START_HOUR"),
        ({"week_starts_on": 7}, "WEEK_STARTS_ON"),
        ({"edge_margin_px": -1}, "EDGE_MARGIN_PX"),
        ({"edge_interval_s": 0}, "EDGE_INTERVAL_S"),
        ({"timezone": "Mars/Olympus_Mons"}, "TIMEZONE"),
        ({"id_generator": "snowflake"}, "ID_GENERATOR"),
    ],
)
def test_out_of_range_settings(kwargs, name):
    """Every setting is validated on construction."""
    with pytest.raises(InvalidSettingError) as excinfo:
        EngineSettings(**kwargs)
    assert excinfo.value.name == name


@pytest.mark.parametrize("snap", [1, 15, 60, 360, 720])
def test_accepted_snap_builds_grid(snap):
    """Any snap the settings accept is accepted by the grid too."""
    assert EngineSettings(snap_minutes=snap).grid.snap_minutes == snap


def test_whole_day_snap_from_env_is_a_setting_error():
    """A one-day snap is refused as a setting, before any grid is built."""
    with pytest.raises(InvalidSettingError, match="at most 720"):
        EngineSettings.from_env({"CALGRID_SNAP_MINUTES": "1440"})


def test_resolve_timezone():
    """UTC maps to datetime.UTC; other names go through zoneinfo."""
    assert resolve_timezone("utc") is UTC
    assert resolve_timezone("America/New_York") == ZoneInfo("America/New_York")

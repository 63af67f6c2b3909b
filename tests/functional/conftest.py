"""Default marks and CLI fixtures for tests under `tests/functional/`."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from calgrid.entrypoints.cli.main import calgrid

# pylint: disable=unused-argument

FUNCTIONAL_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "functional"


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `functional` marks to items in `tests/functional/`."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        if FUNCTIONAL_ROOT in path.parents:
            if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
                item.add_marker(pytest.mark.functional)


@pytest.fixture
def run_cli(tmp_path: Path):
    """Invoke ``calgrid`` with the flight recorder writing under `tmp_path`.

    Returns a callable taking the CLI arguments and returning the click result.
    """
    runner = CliRunner()
    log_path = tmp_path / "calgrid.log"

    def invoke(*args: str):
        # wide enough for the Rich tables not to wrap
        return runner.invoke(
            calgrid, ["--log-path", str(log_path), *args], env={"COLUMNS": "200"}
        )

    return invoke

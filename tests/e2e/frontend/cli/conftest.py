"""Fixtures for end-to-end CLI logging tests.

Provides a test-only `log-demo` Click command that logs one line per level
on a project logger and on a third-party logger, plus fixtures to register it,
obtain a CliRunner and run each test in an isolated filesystem.
"""

import logging

import click
import pytest
from click.testing import CliRunner

from calgrid.entrypoints.cli.main import calgrid

# pylint: disable=redefined-outer-name


@click.command()
def log_demo():
    """Log a line per level on 'calgrid.demo' and on 'some.thirdparty'."""
    logger = logging.getLogger("calgrid.demo")
    logger.debug("demo debug line")
    logger.info("demo info line")
    logger.warning("demo warning line")
    logger.error("demo error line")
    logger.critical("demo critical line")
    third_party = logging.getLogger("some.thirdparty")
    third_party.debug("thirdparty debug line")
    third_party.info("thirdparty info line")
    third_party.warning("thirdparty warning line")
    logger.debug("demo trailing debug line")


def _unregister(group: click.Group, name: str) -> None:
    """Drop `name` from `group` and from any Click-Extra help sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for section in getattr(group, "_sections", []):
        getattr(section, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register 'log-demo' on the `calgrid` group for one test."""
    calgrid.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _unregister(calgrid, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner."""
    return CliRunner()


@pytest.fixture
def fs(runner):
    """Run the test inside an isolated working directory."""
    with runner.isolated_filesystem():
        yield

"""Parsing of ``-L NAME=LEVEL`` logger-level options.

Values may be repeated or given as one comma/space-separated string (as
happens with the ``CALGRID_LOGGER_LEVELS`` environment variable).
"""

import logging
import re

import click

# Libraries that are noisy at DEBUG and rarely interesting to engine users.
DEFAULT_LIB_LEVELS = {"asyncio": logging.WARNING}


def _normalize_items(value: str | list[str] | tuple[str, ...] | None) -> list[str]:
    """Split the raw option value(s) on commas and whitespace, dropping blanks."""
    if value is None:
        return []
    chunks = [value] if isinstance(value, str) else list(value)
    return [item for chunk in chunks for item in re.split(r"[,\s]+", chunk) if item]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...] | None,
) -> dict[str, int]:
    """Click callback turning NAME=LEVEL items into a name->level dict.

    The result starts from DEFAULT_LIB_LEVELS; later items win.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """
    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        level = logging.getLevelNamesMapping().get(level_str.strip().upper())
        if level is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = level
    return levels

"""User-facing status lines for the CALGRID CLI.

Lines go to stderr so tables printed on stdout stay pipeable. Emoji glyphs
fall back to ASCII on terminals that cannot encode them.
"""

import click


def _glyph(emoji: str, fallback: str) -> str:
    """Return `emoji` if stderr can encode it, else `fallback`."""
    encoding = getattr(click.get_text_stream("stderr"), "encoding", None) or "ascii"
    try:
        emoji.encode(encoding)
    except UnicodeEncodeError:
        return fallback
    return emoji


def warn(msg: str) -> None:
    """Emit a yellow warning line, e.g. ``⚠️  Skipped 1 event``."""
    click.secho(f"{_glyph('⚠️', '[!]')}  {msg}", fg="yellow", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red error line."""
    click.secho(f"{_glyph('❌', '[X]')}  {msg}", fg="red", bold=True, err=True)

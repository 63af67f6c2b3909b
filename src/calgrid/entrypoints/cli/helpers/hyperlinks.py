"""OSC-8 terminal hyperlinks for the CALGRID CLI.

Links are only emitted on terminals known to render them; everywhere else
(pipes, redirects, unknown terminals) the plain text is returned.
"""

import os
import sys
from pathlib import Path
from typing import TextIO

_OSC8_TERMINALS = frozenset({"apple_terminal", "vscode", "iterm.app", "wezterm", "kitty"})


def supports_osc8(stream: TextIO | None = None) -> bool:
    """Heuristically detect whether `stream` renders OSC-8 hyperlinks.

    Args:
        stream: Text stream to check; defaults to ``sys.stdout``.

    Returns:
        bool: False for non-TTY streams; otherwise True when the terminal
        identifies as one of a conservative allowlist.
    """
    stream = stream or sys.stdout
    if not getattr(stream, "isatty", lambda: False)():
        return False
    terminal_program = (os.getenv("TERM_PROGRAM") or "").lower()
    return bool(
        terminal_program in _OSC8_TERMINALS
        or os.getenv("WT_SESSION")  # Windows Terminal
        or os.getenv("VTE_VERSION")  # GNOME Terminal, Tilix, etc.
        or os.getenv("TERM", "").startswith(("alacritty", "konsole"))
    )


def hyperlink(url: str, text: str | None = None, stream: TextIO | None = None) -> str:
    """Return `text` (default: `url`) linked to `url` when the terminal supports it."""
    label = text or url
    if not supports_osc8(stream):
        return label
    return f"\x1b]8;;{url}\x07{label}\x1b]8;;\x07"  # OSC 8 ; ; URL BEL


def file_link(path: Path, stream: TextIO | None = None) -> str:
    """Return `path` as text, clickable as a ``file://`` link where supported."""
    resolved = path.expanduser().resolve()
    return hyperlink(resolved.as_uri(), str(path), stream)

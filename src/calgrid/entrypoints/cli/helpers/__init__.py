"""Helpers for the CALGRID CLI.

Terminal hyperlinks, ``NAME=LEVEL`` option parsing and stderr status lines
with emoji to ASCII fallbacks.
"""

from .hyperlinks import file_link, hyperlink
from .messages import error, warn

__all__ = ["error", "file_link", "hyperlink", "warn"]

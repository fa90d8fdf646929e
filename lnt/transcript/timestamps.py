"""Clock-style timestamp parsing and formatting."""

from __future__ import annotations

import re

# Comma fractions come from SRT captions, periods from VTT and plain clock notes.
TIMESTAMP_PATTERN = r"(?:(\d{1,2}):)?(\d{1,2}):(\d{2})(?:[.,](\d{1,3}))?"

_TIMESTAMP_RE = re.compile(rf"^{TIMESTAMP_PATTERN}$")


def parse_timestamp_ms(token: str) -> int | None:
    """
    Convert ``[H]H:MM:SS[.fff]`` or ``MM:SS[.fff]`` into milliseconds.

    The fraction may use a comma or a period and is right-padded to three
    digits (``,5`` is 500 ms). Returns None for anything that is not a
    timestamp; never raises.
    """
    match = _TIMESTAMP_RE.match(token.strip())
    if match is None:
        return None
    hours, minutes, seconds, fraction = match.groups()
    try:
        millis = int((fraction or "0").ljust(3, "0"))
        total = (int(hours or 0) * 60 + int(minutes)) * 60 + int(seconds)
    except ValueError:
        return None
    return total * 1000 + millis


def format_timestamp_ms(ms: int) -> str:
    """Render milliseconds as ``HH:MM:SS.mmm``."""
    ms = max(0, int(ms))
    seconds, millis = divmod(ms, 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{millis:03d}"

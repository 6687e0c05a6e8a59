from __future__ import annotations

import re

_trailing_comma_re = re.compile(r'("(?:\\.|[^"\\])*")|,(\s*[}\]])')


def format_elapsed(seconds: float) -> str:
    """Format a duration as HH:MM:SS.cc (hundredths, truncated)."""

    centis = int(seconds * 100)
    hours, centis = divmod(centis, 360_000)
    minutes, centis = divmod(centis, 6_000)
    secs, centis = divmod(centis, 100)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.{centis:02d}"


def strip_trailing_commas(text: str) -> str:
    """Drop commas that directly precede `}` or `]`, leaving string literals alone."""

    return _trailing_comma_re.sub(lambda m: m.group(1) or m.group(2), text)

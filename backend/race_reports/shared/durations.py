"""
Duration parsing and formatting.

Results files carry times as free text ("3:45:10", "45:10", "13510").
Everything is converted to whole seconds for arithmetic and rendered back
as fixed-width strings.
"""

import math
import re

from .constants import ZERO_PACE, ZERO_TIME

_DIGITS = re.compile(r"[0-9]+")


def parse_duration(value: str | None) -> int | None:
    """
    Parse a time string to seconds.

    Accepts H:M:S, M:S and plain seconds. Every part must be ASCII digits.

    Examples:
        "03:45:10" → 13510
        "45:10"    → 2710
        "90"       → 90
        "-1:00"    → None
        "1h05"     → None

    Returns:
        Seconds, or None if the text is empty or malformed
    """
    if value is None:
        return None
    trimmed = value.strip()
    if not trimmed:
        return None

    parts = trimmed.split(":")
    if all(_DIGITS.fullmatch(part) for part in parts):
        numbers = [int(part) for part in parts]
        if len(numbers) == 3:
            hours, minutes, seconds = numbers
            return hours * 3600 + minutes * 60 + seconds
        if len(numbers) == 2:
            minutes, seconds = numbers
            return minutes * 60 + seconds
        if len(numbers) == 1:
            return numbers[0]

    if _DIGITS.fullmatch(trimmed):
        return int(trimmed)
    return None


def _whole_seconds(total_seconds: float) -> int:
    """Round half up to whole seconds; negative and non-finite become 0."""
    if not math.isfinite(total_seconds):
        return 0
    return max(0, math.floor(total_seconds + 0.5))


def format_hhmmss(total_seconds: float) -> str:
    """
    Format seconds as 'HH:MM:SS'.

    Hours are not capped: 100 hours renders as '100:00:00'.
    """
    safe = _whole_seconds(total_seconds)
    hours, remainder = divmod(safe, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_mmss(total_seconds: float) -> str:
    """Format seconds as 'MM:SS' (minutes are not capped)."""
    safe = _whole_seconds(total_seconds)
    minutes, seconds = divmod(safe, 60)
    return f"{minutes:02d}:{seconds:02d}"


def sanitize_hhmmss(value: str | None) -> str:
    """
    Re-render a time cell as 'HH:MM:SS'.

    Empty or unparseable input becomes '00:00:00', so after sanitizing a
    missing time and an explicit zero look the same.
    """
    seconds = parse_duration(value)
    if seconds is None:
        return ZERO_TIME
    return format_hhmmss(seconds)


def sanitize_mmss(value: str | None) -> str:
    """Re-render a time cell as 'MM:SS'; empty or unparseable gives the zero pace."""
    seconds = parse_duration(value)
    if seconds is None:
        return ZERO_PACE
    return format_mmss(seconds)


def positive_seconds(value: str | None) -> int:
    """Seconds of a time cell, with missing or malformed values counted as 0."""
    return parse_duration(value) or 0

"""Functions for converting between displayed and stored stop times.

Terminology:

- `stored`: `H:MM:SS` or `HH:MM:SS` as written to GTFS. Hours may exceed 23 to express
    service after midnight. An empty string means the time is unset.
- `display`: `HH:MM` as shown to a person editing a schedule. An empty string means unset.
"""

from __future__ import annotations

import math
import re
from typing import Any, Iterable, Optional

DISPLAY_OR_STORED_RE = re.compile(r"^(\d+):(\d{2})(?::(\d{2}))?$")
SHORT_DISPLAY_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
STORED_RE = re.compile(r"^\d+:\d{2}:\d{2}$")


def is_blank(value: Any) -> bool:
    """True if value is None, NaN or an all-whitespace string."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value.strip() == ""


def to_display(stored: Any) -> str:
    """Convert a stored time to `HH:MM` for display.

    Values which don't look like a time are passed through unchanged.

    Examples:
        >>> to_display("9:05:00")
        '09:05'
        >>> to_display("25:10:00")
        '25:10'
        >>> to_display("soon")
        'soon'
    """
    if is_blank(stored):
        return ""
    stored = str(stored)
    match = DISPLAY_OR_STORED_RE.match(stored)
    if not match:
        return stored
    hours, minutes, _ = match.groups()
    return f"{hours.zfill(2)}:{minutes}"


def to_stored(display: Any) -> str:
    """Convert a displayed `H:MM` / `HH:MM` time to the stored `HH:MM:SS` form.

    Full stored values and anything unrecognized are returned unchanged so that pasted raw
    values survive and validation can flag them later.
    """
    if is_blank(display):
        return ""
    display = str(display).strip()
    match = SHORT_DISPLAY_RE.match(display)
    if match:
        hours, minutes = match.groups()
        return f"{hours.zfill(2)}:{minutes}:00"
    return display


def time_str_to_seconds(time_str: Any) -> Optional[int]:
    """Seconds since midnight for `H:MM` or `H:MM:SS`, or None if it can't be parsed."""
    if is_blank(time_str):
        return None
    match = DISPLAY_OR_STORED_RE.match(str(time_str).strip())
    if not match:
        return None
    hours, minutes, seconds = match.groups()
    return int(hours) * 3600 + int(minutes) * 60 + int(seconds or 0)


def seconds_to_time_str(seconds: int) -> str:
    """Format seconds since midnight as `HH:MM:SS`, letting hours run past 23."""
    hours, rem = divmod(int(seconds), 3600)
    minutes, secs = divmod(rem, 60)
    return f"{hours:02}:{minutes:02}:{secs:02}"


def normalize_time_str(time_str: Any) -> str:
    """Zero-padded `HH:MM:SS` for export. Blank stays blank, malformed passes through."""
    if is_blank(time_str):
        return ""
    seconds = time_str_to_seconds(time_str)
    if seconds is None:
        return str(time_str)
    return seconds_to_time_str(seconds)


def add_minutes(time_str: str, minutes: int) -> str:
    """Add minutes to a time string, returning `HH:MM:SS`.

    Raises:
        ValueError: if time_str can't be parsed.
    """
    seconds = time_str_to_seconds(time_str)
    if seconds is None:
        msg = f"Can't add minutes to unparseable time: {time_str}"
        raise ValueError(msg)
    return seconds_to_time_str(seconds + 60 * minutes)


def is_non_decreasing(times: Iterable[Any]) -> bool:
    """False iff a parseable time is earlier than the previous parseable time.

    Blank and unparseable entries are skipped rather than treated as failures.
    """
    prev = None
    for t in times:
        secs = time_str_to_seconds(t)
        if secs is None:
            continue
        if prev is not None and secs < prev:
            return False
        prev = secs
    return True

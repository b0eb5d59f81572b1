"""Timestamp formatting, parsing, and frame-step helpers.

WHY: Marker times are float seconds, but reviewers read and type them
as "mm:ss.mmm". Every display surface (lane reports, the CLI, status
messages) must render the same value the same way, and frame nudging
must use one shared step instead of ad hoc 1/30 literals.

HOW: format_seconds() works in whole milliseconds so that rounding
carries correctly into seconds and minutes. parse_time_string() splits
on colons and reads the last field as fractional seconds.

RULES:
- Minutes and seconds are floored; milliseconds rounded to 3 digits
- An hours field is prepended only for times of one hour or more
- "mm:ss" without milliseconds parses with milliseconds = 0
- Negative input is not supported by format_seconds()
"""

from __future__ import annotations

import math

FRAME_RATE = 30
FRAME_STEP = 1.0 / FRAME_RATE
"""Duration of one video frame in seconds, used for frame-accurate nudging."""


def format_seconds(seconds: float, with_millis: bool = False) -> str:
    """Render seconds as ``mm:ss`` or ``mm:ss.mmm``.

    RULES:
    - 75.5 → "01:15", with millis → "01:15.500"
    - 59.9996 with millis → "01:00.000" (rounding carries)
    - 3723.0 → "1:02:03" (hours only when non-zero, unpadded)

    Args:
        seconds: Non-negative time in seconds.
        with_millis: Append a three-digit millisecond component.

    Returns:
        The formatted timestamp.
    """
    if with_millis:
        total_ms = int(round(seconds * 1000))
    else:
        total_ms = int(math.floor(seconds)) * 1000

    total_s, millis = divmod(total_ms, 1000)
    hours, rem = divmod(total_s, 3600)
    minutes, secs = divmod(rem, 60)

    result = "{:02d}:{:02d}".format(minutes, secs)
    if hours > 0:
        result = "{}:{}".format(hours, result)
    if with_millis:
        result += ".{:03d}".format(millis)
    return result


def parse_time_string(text: str) -> float:
    """Parse ``mm:ss.mmm`` (or ``mm:ss`` / ``h:mm:ss.mmm``) into seconds.

    RULES:
    - Missing millisecond component defaults to 0
    - A bare number is read as seconds
    - Non-finite values ("nan", "inf") are rejected
    - Raises ValueError for anything else

    Args:
        text: The timestamp as typed by the reviewer.

    Returns:
        Time in float seconds.
    """
    parts = text.strip().split(":")
    if not parts or len(parts) > 3 or any(not p.strip() for p in parts):
        raise ValueError("Invalid time string: {!r}".format(text))

    try:
        seconds = float(parts[-1])
        whole = [int(p) for p in parts[:-1]]
    except ValueError:
        raise ValueError("Invalid time string: {!r}".format(text)) from None

    if not math.isfinite(seconds) or seconds < 0 or any(v < 0 for v in whole):
        raise ValueError("Invalid time string: {!r}".format(text))

    total = seconds
    multiplier = 60
    for value in reversed(whole):
        total += value * multiplier
        multiplier *= 60
    return total


def step_frames(seconds: float, frames: int = 1) -> float:
    """Move a time by a whole number of frames, clamped at zero."""
    return max(0.0, seconds + frames * FRAME_STEP)

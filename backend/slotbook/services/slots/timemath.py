# backend/slotbook/services/slots/timemath.py
"""
Time-of-day arithmetic shared by every availability and conflict check.

Times are "HH:MM" strings (24h) on the wire and in the database, and
minute offsets since midnight inside the engine. Intervals are half-open:
[start, end); touching endpoints never overlap.
"""

import re

from ...errors import InvalidTimeFormat

MINUTES_PER_DAY = 24 * 60

# "HH:MM", optionally with ":SS" as returned by some databases
_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def to_minutes(hhmm: str | int) -> int:
    """Parse "HH:MM" into minutes since midnight. "24:00" is accepted as end of day."""
    if isinstance(hhmm, int) and not isinstance(hhmm, bool):
        return hhmm
    if not isinstance(hhmm, str):
        raise InvalidTimeFormat(f"Invalid time: {hhmm!r}")

    match = _TIME_RE.match(hhmm.strip())
    if not match:
        raise InvalidTimeFormat(f"Time must be in HH:MM format, got {hhmm!r}")

    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise InvalidTimeFormat(f"Time out of range: {hhmm!r}")
    return hours * 60 + minutes


def to_hhmm(minutes: int) -> str:
    """Format minutes since midnight as zero-padded "HH:MM"."""
    if minutes < 0 or minutes > MINUTES_PER_DAY:
        raise ValueError(f"minutes must be within a day, got {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def overlaps(start_a, end_a, start_b, end_b) -> bool:
    """
    Half-open interval overlap: start_a < end_b and end_a > start_b.

    Accepts "HH:MM" strings or minute offsets.
    """
    return to_minutes(start_a) < to_minutes(end_b) and to_minutes(end_a) > to_minutes(start_b)


def fits_within(start, end, window_start, window_end) -> bool:
    """True if [start, end) lies entirely inside [window_start, window_end)."""
    return to_minutes(window_start) <= to_minutes(start) and to_minutes(end) <= to_minutes(window_end)


def subtract_window(
    windows: list[tuple[int, int]],
    cut_start: int,
    cut_end: int,
) -> list[tuple[int, int]]:
    """Remove [cut_start, cut_end) from a list of minute windows."""
    result = []
    for start, end in windows:
        if not overlaps(start, end, cut_start, cut_end):
            result.append((start, end))
            continue
        if start < cut_start:
            result.append((start, cut_start))
        if cut_end < end:
            result.append((cut_end, end))
    return result

"""Wall-clock time helpers.

Times are ``HH:MM`` strings on a single day. All arithmetic goes through
minutes since midnight.
"""

import re

from app.errors import ValidationError

TIME_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")


def parse_time(value: str) -> tuple[int, int]:
    match = TIME_PATTERN.fullmatch(value or "")
    if not match:
        raise ValidationError(f"Invalid time format '{value}' (use HH:MM)", code="INVALID_TIME_FORMAT")
    return int(match.group(1)), int(match.group(2))


def format_time(value: str) -> str:
    hour, minute = parse_time(value)
    return f"{hour:02d}:{minute:02d}"


def to_minutes(value: str) -> int:
    hour, minute = parse_time(value)
    return hour * 60 + minute


def duration_hours(start: str, end: str) -> float:
    # callers check end > start first
    return (to_minutes(end) - to_minutes(start)) / 60


def intervals_overlap(a_start: str, a_end: str, b_start: str, b_end: str) -> bool:
    """True when the half-open windows [a_start, a_end) and [b_start, b_end) intersect.

    Windows that only touch (a_end == b_start) do not overlap.
    """
    return to_minutes(a_start) < to_minutes(b_end) and to_minutes(b_start) < to_minutes(a_end)


def is_in_range(value: str, lo: str, hi: str) -> bool:
    return to_minutes(lo) <= to_minutes(value) <= to_minutes(hi)

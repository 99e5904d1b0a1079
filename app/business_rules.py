from datetime import date, datetime, timedelta
from typing import Iterable

from app import config
from app.errors import ValidationError
from app.timeutils import duration_hours, intervals_overlap, is_in_range, parse_time, to_minutes


def validate_event_date(event_date: date, now: datetime) -> None:
    # the event must always be strictly after today
    advance_days = max(1, config.ADVANCE_BOOKING_DAYS)
    earliest = now.date() + timedelta(days=advance_days)
    if event_date < earliest:
        raise ValidationError(
            "Event date must be in the future",
            code="INVALID_DATE",
            details={"earliest_date": earliest.isoformat()},
        )


def validate_time_range(start_time: str, end_time: str) -> None:
    parse_time(start_time)
    parse_time(end_time)

    if to_minutes(end_time) <= to_minutes(start_time):
        raise ValidationError("End time must be after start time", code="INVALID_TIME_RANGE")

    duration = duration_hours(start_time, end_time)
    if duration < config.MIN_DURATION_HOURS:
        raise ValidationError(
            f"Booking duration must be at least {config.MIN_DURATION_HOURS:g} hours",
            code="DURATION_OUT_OF_BOUNDS",
        )
    if duration > config.MAX_DURATION_HOURS:
        raise ValidationError(
            f"Booking duration must not exceed {config.MAX_DURATION_HOURS:g} hours",
            code="DURATION_OUT_OF_BOUNDS",
        )


def validate_working_hours(start_time: str, end_time: str) -> None:
    start, end = config.WORKING_HOURS_START, config.WORKING_HOURS_END
    if not is_in_range(start_time, start, end) or not is_in_range(end_time, start, end):
        raise ValidationError(
            f"Bookings must be within working hours ({start} - {end})",
            code="OUTSIDE_WORKING_HOURS",
        )


def validate_function_type_choice(function_type_id: str | None, function_type_custom: str | None) -> None:
    has_id = bool(function_type_id and function_type_id.strip())
    has_custom = bool(function_type_custom and function_type_custom.strip())
    if has_id == has_custom:
        raise ValidationError(
            "Exactly one of function_type_id or function_type_custom must be provided",
            code="FUNCTION_TYPE_REQUIRED",
        )


def find_conflicts(start_time: str, end_time: str, existing: Iterable) -> list:
    """Return the bookings in ``existing`` whose window overlaps [start_time, end_time)."""
    return [
        booking
        for booking in existing
        if intervals_overlap(start_time, end_time, booking.start_time, booking.end_time)
    ]

from datetime import date, datetime
from types import SimpleNamespace

import pytest

from app import config
from app.business_rules import (
    find_conflicts,
    validate_event_date,
    validate_function_type_choice,
    validate_time_range,
    validate_working_hours,
)
from app.errors import ValidationError

NOW = datetime(2030, 5, 10, 15, 0)


def test_event_date_must_be_after_today():
    validate_event_date(date(2030, 5, 11), NOW)
    for bad in (date(2030, 5, 9), date(2030, 5, 10)):
        with pytest.raises(ValidationError) as exc:
            validate_event_date(bad, NOW)
        assert exc.value.code == "INVALID_DATE"


def test_advance_booking_days(monkeypatch):
    monkeypatch.setattr(config, "ADVANCE_BOOKING_DAYS", 3)
    with pytest.raises(ValidationError):
        validate_event_date(date(2030, 5, 12), NOW)
    validate_event_date(date(2030, 5, 13), NOW)


def test_duration_bounds():
    validate_time_range("10:00", "12:00")
    validate_time_range("08:00", "20:00")
    for start, end in (("10:00", "11:59"), ("08:00", "20:01")):
        with pytest.raises(ValidationError) as exc:
            validate_time_range(start, end)
        assert exc.value.code == "DURATION_OUT_OF_BOUNDS"


def test_end_must_follow_start():
    for start, end in (("12:00", "12:00"), ("14:00", "10:00")):
        with pytest.raises(ValidationError) as exc:
            validate_time_range(start, end)
        assert exc.value.code == "INVALID_TIME_RANGE"


def test_time_range_rejects_bad_format():
    with pytest.raises(ValidationError) as exc:
        validate_time_range("10am", "12:00")
    assert exc.value.code == "INVALID_TIME_FORMAT"


def test_working_hours_boundaries():
    validate_working_hours("08:00", "22:00")
    with pytest.raises(ValidationError) as exc:
        validate_working_hours("07:59", "10:00")
    assert exc.value.code == "OUTSIDE_WORKING_HOURS"
    with pytest.raises(ValidationError):
        validate_working_hours("20:00", "22:01")


def test_function_type_choice_is_exclusive():
    validate_function_type_choice("ft-1", None)
    validate_function_type_choice(None, "Naming Ceremony")
    for ft_id, custom in (("ft-1", "Naming Ceremony"), (None, None), ("", "  ")):
        with pytest.raises(ValidationError) as exc:
            validate_function_type_choice(ft_id, custom)
        assert exc.value.code == "FUNCTION_TYPE_REQUIRED"


def test_find_conflicts_returns_overlapping_only():
    existing = [
        SimpleNamespace(id="a", start_time="08:00", end_time="10:00"),
        SimpleNamespace(id="b", start_time="10:00", end_time="12:00"),
        SimpleNamespace(id="c", start_time="13:00", end_time="15:00"),
    ]
    assert [b.id for b in find_conflicts("11:00", "13:00", existing)] == ["b"]
    assert find_conflicts("15:00", "17:00", existing) == []

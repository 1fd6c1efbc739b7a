# shelter_visits/services/availability/validation.py
"""
Invariant checks for hours, policy and exception records.

Every validator takes a complete record and returns a normalized copy, or
raises ValidationError naming the offending field. Partial updates go
through merge_record() first so the whole merged record is re-checked.
"""
import dataclasses
from datetime import date
from typing import Any, Dict, Optional, TypeVar

import pytz

from shelter_visits.core.errors import ValidationError
from shelter_visits.models.availability_exception import ExceptionType
from shelter_visits.services.availability.records import ExceptionRecord, HoursRecord, PolicyRecord
from shelter_visits.utils.time_utils import is_valid_time, strip_seconds, time_to_minutes

RecordT = TypeVar("RecordT")

# Minimum accepted value per policy field
POLICY_MINIMUMS = {
    "visit_duration_minutes": 15,
    "slot_interval_minutes": 15,
    "max_concurrent_visits": 1,
    "min_advance_booking_hours": 0,
    "max_advance_booking_days": 1,
}


def merge_record(record: RecordT, partial: Dict[str, Any]) -> RecordT:
    """Return a copy of `record` with `partial` applied; unknown keys are rejected"""
    known = {f.name for f in dataclasses.fields(record)}
    for key in partial:
        if key not in known:
            raise ValidationError(key, f"Unknown field: {key}")
    return dataclasses.replace(record, **partial)


def normalize_time(value: Any, field: str) -> Optional[str]:
    if value is None or value == "":
        return None
    text = strip_seconds(value)
    if not is_valid_time(text):
        raise ValidationError(
            field,
            f"Invalid time format for {field}: {value}. Expected format: HH:mm (e.g., 09:00)"
        )
    return text


def _require_order(start: str, end: str, field: str, message: str) -> None:
    if time_to_minutes(start) >= time_to_minutes(end):
        raise ValidationError(field, message)


def _require_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(field, f"{field} must be an integer")
    return value


def validate_day_of_week(day_of_week: Any) -> int:
    day = _require_int(day_of_week, "day_of_week")
    if not 0 <= day <= 6:
        raise ValidationError("day_of_week", "day_of_week must be between 0 (Sunday) and 6 (Saturday)")
    return day


def validate_hours(record: HoursRecord) -> HoursRecord:
    validate_day_of_week(record.day_of_week)

    normalized = dataclasses.replace(
        record,
        is_open=bool(record.is_open),
        open_time=normalize_time(record.open_time, "open_time"),
        close_time=normalize_time(record.close_time, "close_time"),
        lunch_start=normalize_time(record.lunch_start, "lunch_start"),
        lunch_end=normalize_time(record.lunch_end, "lunch_end"),
    )

    if bool(normalized.lunch_start) != bool(normalized.lunch_end):
        missing = "lunch_end" if normalized.lunch_start else "lunch_start"
        raise ValidationError(missing, "Lunch break needs both a start and an end time")

    if not normalized.is_open:
        return normalized

    if not normalized.open_time:
        raise ValidationError("open_time", "open_time is required when the day is open")
    if not normalized.close_time:
        raise ValidationError("close_time", "close_time is required when the day is open")

    _require_order(normalized.open_time, normalized.close_time,
                   "close_time", "Open time must be before close time")

    if normalized.has_lunch_break:
        _require_order(normalized.lunch_start, normalized.lunch_end,
                       "lunch_end", "Lunch break start must be before end")
        if time_to_minutes(normalized.lunch_start) < time_to_minutes(normalized.open_time):
            raise ValidationError("lunch_start", "Lunch break must be within operating hours")
        if time_to_minutes(normalized.lunch_end) > time_to_minutes(normalized.close_time):
            raise ValidationError("lunch_end", "Lunch break must be within operating hours")

    return normalized


def validate_policy(record: PolicyRecord) -> PolicyRecord:
    for field, minimum in POLICY_MINIMUMS.items():
        value = _require_int(getattr(record, field), field)
        if value < minimum:
            raise ValidationError(field, f"{field} must be at least {minimum}")

    if not isinstance(record.allow_weekend_bookings, bool):
        raise ValidationError("allow_weekend_bookings", "allow_weekend_bookings must be a boolean")

    if record.timezone not in pytz.all_timezones_set:
        raise ValidationError("timezone", f"Unknown timezone: {record.timezone}")

    return record


def _coerce_date(value: Any, field: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(field, f"Invalid date for {field}: {value}. Expected format: YYYY-MM-DD")


def validate_exception(record: ExceptionRecord) -> ExceptionRecord:
    if record.exception_type not in ExceptionType.ALL:
        raise ValidationError(
            "exception_type",
            f"exception_type must be one of: {', '.join(ExceptionType.ALL)}"
        )

    normalized = dataclasses.replace(
        record,
        start_date=_coerce_date(record.start_date, "start_date"),
        end_date=_coerce_date(record.end_date, "end_date"),
        start_time=normalize_time(record.start_time, "start_time"),
        end_time=normalize_time(record.end_time, "end_time"),
        reason=(record.reason or "").strip() or None,
    )

    if normalized.start_date > normalized.end_date:
        raise ValidationError("end_date", "Start date must be before or equal to end date")

    if bool(normalized.start_time) != bool(normalized.end_time):
        missing = "end_time" if normalized.start_time else "start_time"
        raise ValidationError(missing, "A time range needs both a start and an end time")

    if normalized.start_time and normalized.end_time:
        _require_order(normalized.start_time, normalized.end_time,
                       "end_time", "Start time must be before end time")

    return normalized

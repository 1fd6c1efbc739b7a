# shelter_visits/services/availability/records.py
"""
Immutable scheduling records.

The stores translate ORM rows into these before any validation or slot
computation happens, so the engine never touches a session-bound object.
"""
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional


@dataclass(frozen=True)
class HoursRecord:
    day_of_week: int
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None

    @property
    def has_lunch_break(self) -> bool:
        return bool(self.lunch_start and self.lunch_end)

    @classmethod
    def from_model(cls, row) -> "HoursRecord":
        return cls(
            day_of_week=row.day_of_week,
            is_open=bool(row.is_open),
            open_time=row.open_time,
            close_time=row.close_time,
            lunch_start=row.lunch_start,
            lunch_end=row.lunch_end,
        )


@dataclass(frozen=True)
class PolicyRecord:
    visit_duration_minutes: int = 60
    slot_interval_minutes: int = 30
    max_concurrent_visits: int = 1
    min_advance_booking_hours: int = 24
    max_advance_booking_days: int = 30
    allow_weekend_bookings: bool = True
    timezone: str = "UTC"

    @classmethod
    def from_model(cls, row) -> "PolicyRecord":
        return cls(
            visit_duration_minutes=row.visit_duration_minutes,
            slot_interval_minutes=row.slot_interval_minutes,
            max_concurrent_visits=row.max_concurrent_visits,
            min_advance_booking_hours=row.min_advance_booking_hours,
            max_advance_booking_days=row.max_advance_booking_days,
            allow_weekend_bookings=bool(row.allow_weekend_bookings),
            timezone=row.timezone,
        )


@dataclass(frozen=True)
class ExceptionRecord:
    exception_type: str
    start_date: date
    end_date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None

    @property
    def is_full_day(self) -> bool:
        return not (self.start_time and self.end_time)

    def covers(self, target_date: date) -> bool:
        return self.start_date <= target_date <= self.end_date

    @classmethod
    def from_model(cls, row) -> "ExceptionRecord":
        return cls(
            exception_type=row.exception_type,
            start_date=row.start_date,
            end_date=row.end_date,
            start_time=row.start_time,
            end_time=row.end_time,
            reason=row.reason,
        )


@dataclass(frozen=True)
class Slot:
    start_time: datetime
    end_time: datetime
    available: Optional[bool] = None  # unset until the engine annotates it
    reason: Optional[str] = None


@dataclass(frozen=True)
class ScheduleSummary:
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


@dataclass(frozen=True)
class DayAvailability:
    date: date
    slots: List[Slot]
    schedule_summary: ScheduleSummary


@dataclass(frozen=True)
class MonthAvailability:
    year: int
    month: int
    available_dates: List[date] = field(default_factory=list)

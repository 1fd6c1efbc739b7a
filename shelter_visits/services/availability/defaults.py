# shelter_visits/services/availability/defaults.py
"""Default week, default policy and the fixed holiday calendar"""
from datetime import date
from typing import List, Tuple

from shelter_visits.services.availability.records import HoursRecord, PolicyRecord


def default_week() -> Tuple[HoursRecord, ...]:
    """
    Mon-Fri 09:00-18:00 with a 12:00-13:00 lunch break,
    Sat 09:00-13:00, Sun closed.
    """
    weekdays = tuple(
        HoursRecord(
            day_of_week=day,
            is_open=True,
            open_time="09:00",
            close_time="18:00",
            lunch_start="12:00",
            lunch_end="13:00",
        )
        for day in range(1, 6)
    )
    sunday = HoursRecord(day_of_week=0, is_open=False)
    saturday = HoursRecord(day_of_week=6, is_open=True, open_time="09:00", close_time="13:00")
    return (sunday,) + weekdays + (saturday,)


def default_policy(timezone: str = "UTC") -> PolicyRecord:
    return PolicyRecord(
        visit_duration_minutes=60,
        slot_interval_minutes=30,
        max_concurrent_visits=1,
        min_advance_booking_hours=24,
        max_advance_booking_days=30,
        allow_weekend_bookings=True,
        timezone=timezone,
    )


def national_holidays(year: int) -> List[Tuple[date, str]]:
    """Fixed-date national holidays (Portugal)"""
    return [
        (date(year, 1, 1), "New Year's Day"),
        (date(year, 4, 25), "Freedom Day"),
        (date(year, 5, 1), "Labour Day"),
        (date(year, 6, 10), "Portugal Day"),
        (date(year, 8, 15), "Assumption Day"),
        (date(year, 10, 5), "Republic Day"),
        (date(year, 11, 1), "All Saints' Day"),
        (date(year, 12, 1), "Restoration of Independence"),
        (date(year, 12, 8), "Immaculate Conception"),
        (date(year, 12, 25), "Christmas Day"),
    ]

# shelter_visits/utils/time_utils.py
"""Wall-clock helpers shared by the stores and the slot generator"""
import re
from datetime import date, datetime, time, timedelta
from typing import Optional, Union

import pytz

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_WITH_SECONDS = re.compile(r"^(\d{2}:\d{2}):\d{2}(\.\d+)?$")


def strip_seconds(value: Union[str, time, None]) -> Optional[str]:
    """
    Normalize "HH:MM:SS" (as returned by TIME columns) and time objects to "HH:MM".
    Anything else is returned untouched for the format check to reject.
    """
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")

    text = str(value).strip()
    match = _WITH_SECONDS.match(text)
    if match:
        return match.group(1)
    return text


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value))


def time_to_minutes(value: str) -> int:
    """Minutes since midnight for an "HH:MM" string"""
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def weekday_of(target_date: date) -> int:
    """Day of week with 0=Sunday ... 6=Saturday"""
    return (target_date.weekday() + 1) % 7


def get_timezone(name: Optional[str]) -> pytz.BaseTzInfo:
    """Resolve an IANA name, falling back to UTC for empty values"""
    if not name:
        return pytz.UTC
    return pytz.timezone(name)


def localize(target_date: date, minutes: int, tz: pytz.BaseTzInfo) -> datetime:
    """
    Aware datetime for a wall-clock minute offset on a given date.

    Each instant is localized on its own so a DST switch on that day moves
    the UTC offset, never the wall-clock time.
    """
    naive = datetime.combine(target_date, time.min) + timedelta(minutes=minutes)
    return tz.localize(naive)


def as_utc(value: datetime) -> datetime:
    """Naive datetimes read back from the database are UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=pytz.UTC)
    return value.astimezone(pytz.UTC)


def local_day_bounds(target_date: date, tz: pytz.BaseTzInfo):
    """[start, end) of a local calendar day as aware datetimes"""
    start = tz.localize(datetime.combine(target_date, time.min))
    end = tz.localize(datetime.combine(target_date + timedelta(days=1), time.min))
    return start, end

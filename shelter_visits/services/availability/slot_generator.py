# shelter_visits/services/availability/slot_generator.py
"""
Slot Generation

Turns one day's operating hours and the organization's policy into the
ordered list of candidate slots for that date. Availability is left unset;
the availability service annotates it afterwards.
"""
from datetime import date, timedelta
from typing import List

import pytz

from shelter_visits.services.availability.conflict_checker import overlaps
from shelter_visits.services.availability.records import HoursRecord, PolicyRecord, Slot
from shelter_visits.utils.time_utils import localize, time_to_minutes


def generate_slots(
        target_date: date,
        hours: HoursRecord,
        policy: PolicyRecord,
        tz: pytz.BaseTzInfo = pytz.UTC
) -> List[Slot]:
    """
    Candidate slots for `target_date`.

    Algorithm:
        1. Convert open/close/lunch times to minutes after midnight
        2. Starting at open, step by slot_interval_minutes while
           start + visit_duration_minutes <= close
        3. Drop any slot whose [start, end) overlaps [lunch_start, lunch_end)
        4. Anchor each start to target_date in the organization timezone;
           the end is start + duration in elapsed time, so a slot crossing
           a DST switch still lasts exactly visit_duration_minutes
    """
    if not hours.is_open or not hours.open_time or not hours.close_time:
        return []

    open_minutes = time_to_minutes(hours.open_time)
    close_minutes = time_to_minutes(hours.close_time)

    lunch = None
    if hours.has_lunch_break:
        lunch = (time_to_minutes(hours.lunch_start), time_to_minutes(hours.lunch_end))

    duration = policy.visit_duration_minutes
    step = policy.slot_interval_minutes
    length = timedelta(minutes=duration)

    slots = []
    current = open_minutes

    while current + duration <= close_minutes:
        slot_end = current + duration

        if lunch is None or not overlaps(current, slot_end, lunch[0], lunch[1]):
            start = localize(target_date, current, tz)
            slots.append(Slot(
                start_time=start,
                end_time=tz.normalize(start + length),
            ))

        current += step

    return slots

# ===== shelter_visits/services/availability/availability_service.py =====
import calendar
import dataclasses
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, List, Optional

import pytz
from sqlalchemy.orm import Session

from shelter_visits.config.settings import get_settings
from shelter_visits.core.errors import ValidationError
from shelter_visits.models.availability_exception import ExceptionType
from shelter_visits.models.booking import BookingStatus
from shelter_visits.services.availability.conflict_checker import capacity_exceeded, overlaps
from shelter_visits.services.availability.records import (
    DayAvailability,
    ExceptionRecord,
    HoursRecord,
    MonthAvailability,
    ScheduleSummary,
    Slot,
)
from shelter_visits.services.availability.slot_generator import generate_slots
from shelter_visits.services.booking.booking_service import BookingService
from shelter_visits.services.exceptions.availability_exception_service import AvailabilityExceptionService
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService
from shelter_visits.utils.time_utils import (
    as_utc,
    get_timezone,
    local_day_bounds,
    localize,
    time_to_minutes,
    weekday_of,
)

logger = logging.getLogger(__name__)

REASON_TOO_SOON = "too soon"
REASON_FULLY_BOOKED = "fully booked"
REASON_BLOCKED = "blocked"


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class AvailabilityService:
    """
    Combines weekly hours, policy, exceptions and confirmed bookings into
    bookable slots for one day, or bookable dates for one month.

    Read-only: every call recomputes from the stores, so one instance per
    request is all the state there is.
    """

    def __init__(
            self,
            db: Session,
            clock: Optional[Callable[[], datetime]] = None,
            partial_day_blocks_whole_day: Optional[bool] = None
    ):
        self.db = db
        self.clock = clock or utc_now
        self.hours = OperatingHoursService(db)
        self.policies = AppointmentPolicyService(db)
        self.exceptions = AvailabilityExceptionService(db, clock=self.clock)
        self.bookings = BookingService(db, clock=self.clock)

        if partial_day_blocks_whole_day is None:
            partial_day_blocks_whole_day = get_settings().PARTIAL_DAY_BLOCKS_WHOLE_DAY
        self.partial_day_blocks_whole_day = partial_day_blocks_whole_day

    def get_day_slots(
            self,
            org_id: str,
            target_date: date,
            bookings: Optional[Iterable] = None
    ) -> DayAvailability:
        """
        Annotated slots for one calendar day.

        `bookings` may be supplied by the caller (anything with
        scheduled_start_time, scheduled_end_time and status); when omitted,
        confirmed bookings overlapping the day are loaded from the store.
        """
        if target_date >= date.max:
            raise ValidationError("date", "date is out of range")

        row = self.hours.get(org_id, weekday_of(target_date))
        hours = HoursRecord.from_model(row) if row is not None else None

        if hours is None or not hours.is_open:
            return DayAvailability(
                date=target_date,
                slots=[],
                schedule_summary=self._summary(hours, is_open=False),
            )

        policy = self.policies.get_record(org_id)
        tz = get_timezone(policy.timezone)

        blocks = self._blocked_exceptions(self.exceptions.find_covering(org_id, target_date))
        if any(self._blocks_whole_day(block) for block in blocks):
            logger.info(f"Org {org_id} is blocked on {target_date}")
            return DayAvailability(
                date=target_date,
                slots=[],
                schedule_summary=self._summary(hours, is_open=False),
            )

        candidates = generate_slots(target_date, hours, policy, tz)

        if bookings is None:
            day_start, day_end = local_day_bounds(target_date, tz)
            bookings = self.bookings.find_confirmed_overlapping(org_id, day_start, day_end)

        booked = [
            (as_utc(b.scheduled_start_time), as_utc(b.scheduled_end_time))
            for b in bookings
            if b.status == BookingStatus.CONFIRMED
        ]

        partial_blocks = [
            (localize(target_date, time_to_minutes(b.start_time), tz),
             localize(target_date, time_to_minutes(b.end_time), tz))
            for b in blocks
            if not b.is_full_day
        ]

        min_bookable = self.clock() + timedelta(hours=policy.min_advance_booking_hours)

        slots = [
            self._annotate(slot, min_bookable, partial_blocks, booked, policy.max_concurrent_visits)
            for slot in candidates
        ]

        return DayAvailability(
            date=target_date,
            slots=slots,
            schedule_summary=self._summary(hours, is_open=True),
        )

    def get_month_dates(self, org_id: str, year: int, month: int) -> MonthAvailability:
        """
        Dates of a month on which the organization accepts visits.

        A date is listed when it lies within [today, today + max_advance_booking_days],
        its weekday is open and no blocking exception covers it. Slot capacity
        is not checked, so a listed date may turn out to be fully booked.
        """
        if not 1 <= month <= 12:
            raise ValidationError("month", f"Invalid month: {month}. Expected 1-12")
        if not 1 <= year <= 9999:
            raise ValidationError("year", f"Invalid year: {year}")

        policy = self.policies.get_record(org_id)
        tz = get_timezone(policy.timezone)

        today = self.clock().astimezone(tz).date()
        max_date = today + timedelta(days=policy.max_advance_booking_days)

        week = {row.day_of_week: HoursRecord.from_model(row) for row in self.hours.get_week(org_id)}

        days_in_month = calendar.monthrange(year, month)[1]
        first_day = date(year, month, 1)
        last_day = date(year, month, days_in_month)

        blocks = [
            block
            for block in self._blocked_exceptions(self.exceptions.find_in_range(org_id, first_day, last_day))
            if self._blocks_whole_day(block)
        ]

        available_dates = []
        for day in range(1, days_in_month + 1):
            current = date(year, month, day)

            if current < today or current > max_date:
                continue

            hours = week.get(weekday_of(current))
            if hours is None or not hours.is_open:
                continue

            if any(block.covers(current) for block in blocks):
                continue

            available_dates.append(current)

        logger.debug(f"Org {org_id} has {len(available_dates)} bookable dates in {year}-{month:02d}")
        return MonthAvailability(year=year, month=month, available_dates=available_dates)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _blocks_whole_day(self, block: ExceptionRecord) -> bool:
        return self.partial_day_blocks_whole_day or block.is_full_day

    @staticmethod
    def _blocked_exceptions(rows) -> List[ExceptionRecord]:
        return [
            ExceptionRecord.from_model(row)
            for row in rows
            if row.exception_type == ExceptionType.BLOCKED
        ]

    @staticmethod
    def _annotate(slot: Slot, min_bookable: datetime, partial_blocks, booked, capacity: int) -> Slot:
        if slot.start_time < min_bookable:
            return dataclasses.replace(slot, available=False, reason=REASON_TOO_SOON)

        if any(overlaps(slot.start_time, slot.end_time, start, end) for start, end in partial_blocks):
            return dataclasses.replace(slot, available=False, reason=REASON_BLOCKED)

        if capacity_exceeded(slot.start_time, slot.end_time, booked, capacity):
            return dataclasses.replace(slot, available=False, reason=REASON_FULLY_BOOKED)

        return dataclasses.replace(slot, available=True, reason=None)

    @staticmethod
    def _summary(hours: Optional[HoursRecord], is_open: bool) -> ScheduleSummary:
        if hours is None:
            return ScheduleSummary(is_open=False)
        return ScheduleSummary(
            is_open=is_open,
            open_time=hours.open_time,
            close_time=hours.close_time,
            lunch_start=hours.lunch_start,
            lunch_end=hours.lunch_end,
        )

"""
Tests for the availability engine.

Day view: closed days, lunch gaps, advance window, capacity and blocked
exceptions. Month view: booking window bounds, closed weekdays and blocks.
"""
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest
import pytz

from shelter_visits.core.errors import ValidationError
from shelter_visits.models import BookingStatus, ExceptionType, VisitBooking
from shelter_visits.services.availability.availability_service import (
    REASON_BLOCKED,
    REASON_FULLY_BOOKED,
    REASON_TOO_SOON,
    AvailabilityService,
)
from shelter_visits.services.exceptions.availability_exception_service import AvailabilityExceptionService
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService

from conftest import ORG_ID, fixed_clock

SUNDAY = date(2030, 1, 6)
MONDAY = date(2030, 1, 7)
SATURDAY = date(2030, 1, 12)


@pytest.fixture
def engine(db, clock):
    return AvailabilityService(db, clock=clock)


def _starts(day):
    return [slot.start_time.strftime("%H:%M") for slot in day.slots]


def _slot(day, hhmm):
    return next(slot for slot in day.slots if slot.start_time.strftime("%H:%M") == hhmm)


def _book(db, lisbon, target_date, hhmm, minutes=60, status=BookingStatus.CONFIRMED):
    hour, minute = map(int, hhmm.split(":"))
    start = lisbon.localize(datetime(target_date.year, target_date.month, target_date.day, hour, minute))
    booking = VisitBooking(
        org_id=ORG_ID,
        visitor_name="Ana Silva",
        visitor_email="ana@example.com",
        scheduled_start_time=start.astimezone(pytz.UTC),
        scheduled_end_time=(start + timedelta(minutes=minutes)).astimezone(pytz.UTC),
        status=status,
    )
    db.add(booking)
    db.commit()
    return booking


class TestDaySlots:

    def test_default_weekday(self, engine):
        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert _starts(day) == [
            "09:00", "09:30", "10:00", "10:30", "11:00",
            "13:00", "13:30", "14:00", "14:30", "15:00", "15:30", "16:00", "16:30", "17:00",
        ]
        assert all(slot.available and slot.reason is None for slot in day.slots)
        assert day.schedule_summary.is_open
        assert (day.schedule_summary.lunch_start, day.schedule_summary.lunch_end) == ("12:00", "13:00")

    def test_slots_are_in_org_timezone(self, engine):
        first = engine.get_day_slots(ORG_ID, MONDAY).slots[0]

        assert first.start_time.tzinfo.zone == "Europe/Lisbon"
        assert first.end_time - first.start_time == timedelta(minutes=60)

    def test_closed_sunday(self, engine):
        day = engine.get_day_slots(ORG_ID, SUNDAY)

        assert day.slots == []
        assert not day.schedule_summary.is_open

    def test_saturday_morning(self, engine):
        assert len(engine.get_day_slots(ORG_ID, SATURDAY).slots) == 7

    def test_deleted_day_is_closed(self, engine, db):
        OperatingHoursService(db).get_week(ORG_ID)
        OperatingHoursService(db).delete_day(ORG_ID, 1)

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert day.slots == []
        assert not day.schedule_summary.is_open
        assert day.schedule_summary.open_time is None

    def test_last_representable_date(self, engine):
        with pytest.raises(ValidationError) as exc_info:
            engine.get_day_slots(ORG_ID, date.max)

        assert exc_info.value.field == "date"


class TestAdvanceWindow:

    def test_minimum_advance_is_inclusive(self, db):
        # 24h before Monday 10:00 Lisbon
        engine = AvailabilityService(db, clock=fixed_clock(datetime(2030, 1, 6, 10, 0, tzinfo=pytz.UTC)))

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert _slot(day, "09:00").reason == REASON_TOO_SOON
        assert _slot(day, "09:30").reason == REASON_TOO_SOON
        assert _slot(day, "10:00").available
        assert _slot(day, "10:00").reason is None

    def test_one_second_past_the_boundary_is_too_soon(self, db):
        engine = AvailabilityService(db, clock=fixed_clock(datetime(2030, 1, 6, 10, 0, 1, tzinfo=pytz.UTC)))

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert not _slot(day, "10:00").available
        assert _slot(day, "10:00").reason == REASON_TOO_SOON
        assert _slot(day, "10:30").available

    def test_zero_advance_only_hides_past_slots(self, db):
        AppointmentPolicyService(db).upsert(ORG_ID, {"min_advance_booking_hours": 0})
        engine = AvailabilityService(db, clock=fixed_clock(datetime(2030, 1, 7, 13, 15, tzinfo=pytz.UTC)))

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert all(not s.available for s in day.slots if s.start_time.hour < 13)
        assert _slot(day, "13:00").reason == REASON_TOO_SOON
        assert _slot(day, "13:30").available


class TestCapacity:

    def test_booking_fills_overlapping_slots(self, engine, db, lisbon):
        _book(db, lisbon, MONDAY, "10:00")

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert _slot(day, "09:00").available
        assert _slot(day, "09:30").reason == REASON_FULLY_BOOKED
        assert _slot(day, "10:00").reason == REASON_FULLY_BOOKED
        assert _slot(day, "10:30").reason == REASON_FULLY_BOOKED
        assert _slot(day, "11:00").available

    def test_concurrent_visits(self, engine, db, lisbon):
        AppointmentPolicyService(db).upsert(ORG_ID, {"max_concurrent_visits": 2})
        _book(db, lisbon, MONDAY, "10:00")

        assert _slot(engine.get_day_slots(ORG_ID, MONDAY), "10:00").available

        _book(db, lisbon, MONDAY, "10:00")

        assert _slot(engine.get_day_slots(ORG_ID, MONDAY), "10:00").reason == REASON_FULLY_BOOKED

    def test_cancelled_bookings_are_ignored(self, engine, db, lisbon):
        _book(db, lisbon, MONDAY, "10:00", status=BookingStatus.CANCELLED)
        _book(db, lisbon, MONDAY, "14:00", status=BookingStatus.PENDING)

        assert all(slot.available for slot in engine.get_day_slots(ORG_ID, MONDAY).slots)

    def test_bookings_on_other_days_are_ignored(self, engine, db, lisbon):
        _book(db, lisbon, MONDAY + timedelta(days=1), "10:00")

        assert _slot(engine.get_day_slots(ORG_ID, MONDAY), "10:00").available

    def test_caller_supplied_bookings(self, engine, lisbon):
        start = lisbon.localize(datetime(2030, 1, 7, 15, 0))
        bookings = [SimpleNamespace(
            scheduled_start_time=start,
            scheduled_end_time=start + timedelta(hours=1),
            status=BookingStatus.CONFIRMED,
        )]

        day = engine.get_day_slots(ORG_ID, MONDAY, bookings=bookings)

        assert _slot(day, "15:00").reason == REASON_FULLY_BOOKED
        assert _slot(day, "10:00").available

    def test_too_soon_wins_over_fully_booked(self, db, lisbon):
        _book(db, lisbon, MONDAY, "09:00")
        engine = AvailabilityService(db, clock=fixed_clock(datetime(2030, 1, 6, 10, 0, tzinfo=pytz.UTC)))

        assert _slot(engine.get_day_slots(ORG_ID, MONDAY), "09:00").reason == REASON_TOO_SOON


class TestBlockedExceptions:

    def _block(self, db, start, end, **extra):
        AvailabilityExceptionService(db, clock=fixed_clock()).create(ORG_ID, dict({
            "exception_type": ExceptionType.BLOCKED,
            "start_date": start,
            "end_date": end,
        }, **extra))

    def test_full_day_block(self, engine, db):
        self._block(db, MONDAY, MONDAY)

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert day.slots == []
        assert not day.schedule_summary.is_open
        assert day.schedule_summary.open_time == "09:00"

    def test_partial_block_closes_whole_day_by_default(self, engine, db):
        self._block(db, MONDAY, MONDAY, start_time="10:00", end_time="11:00")

        assert engine.get_day_slots(ORG_ID, MONDAY).slots == []

    def test_partial_block_marks_overlapping_slots(self, db, clock):
        self._block(db, MONDAY, MONDAY, start_time="10:00", end_time="11:00")
        engine = AvailabilityService(db, clock=clock, partial_day_blocks_whole_day=False)

        day = engine.get_day_slots(ORG_ID, MONDAY)

        assert _slot(day, "09:00").available
        assert _slot(day, "09:30").reason == REASON_BLOCKED
        assert _slot(day, "10:00").reason == REASON_BLOCKED
        assert _slot(day, "10:30").reason == REASON_BLOCKED
        assert _slot(day, "11:00").available
        assert day.schedule_summary.is_open

    def test_available_exception_does_not_open_closed_day(self, engine, db):
        AvailabilityExceptionService(db, clock=fixed_clock()).create(ORG_ID, {
            "exception_type": ExceptionType.AVAILABLE,
            "start_date": SUNDAY,
            "end_date": SUNDAY,
        })

        assert engine.get_day_slots(ORG_ID, SUNDAY).slots == []


class TestMonthDates:

    def test_january(self, engine):
        month = engine.get_month_dates(ORG_ID, 2030, 1)

        # every day from today (Jan 1) to Jan 31 except Sundays
        sundays = {date(2030, 1, d) for d in (6, 13, 20, 27)}
        expected = [date(2030, 1, d) for d in range(1, 32) if date(2030, 1, d) not in sundays]
        assert month.available_dates == expected

    def test_max_advance_days(self, engine, db):
        AppointmentPolicyService(db).upsert(ORG_ID, {"max_advance_booking_days": 10})

        dates = engine.get_month_dates(ORG_ID, 2030, 1).available_dates

        assert dates[0] == date(2030, 1, 1)
        assert dates[-1] == date(2030, 1, 11)
        assert len(dates) == 10

    def test_past_and_out_of_window_months(self, engine):
        assert engine.get_month_dates(ORG_ID, 2029, 12).available_dates == []
        assert engine.get_month_dates(ORG_ID, 2030, 3).available_dates == []

    def test_window_spanning_months(self, db):
        engine = AvailabilityService(db, clock=fixed_clock(datetime(2030, 1, 20, 12, 0, tzinfo=pytz.UTC)))

        dates = engine.get_month_dates(ORG_ID, 2030, 2).available_dates

        # window ends Feb 19
        assert dates[0] == date(2030, 2, 1)
        assert dates[-1] == date(2030, 2, 19)

    def test_blocked_range_is_skipped(self, engine, db):
        AvailabilityExceptionService(db, clock=fixed_clock()).create(ORG_ID, {
            "exception_type": ExceptionType.BLOCKED,
            "start_date": date(2030, 1, 14),
            "end_date": date(2030, 1, 16),
        })

        dates = engine.get_month_dates(ORG_ID, 2030, 1).available_dates

        assert len(dates) == 24
        assert date(2030, 1, 15) not in dates
        assert date(2030, 1, 17) in dates

    def test_partial_block_keeps_date_when_not_whole_day(self, db, clock):
        AvailabilityExceptionService(db, clock=clock).create(ORG_ID, {
            "exception_type": ExceptionType.BLOCKED,
            "start_date": MONDAY,
            "end_date": MONDAY,
            "start_time": "10:00",
            "end_time": "11:00",
        })

        whole_day = AvailabilityService(db, clock=clock)
        partial = AvailabilityService(db, clock=clock, partial_day_blocks_whole_day=False)

        assert MONDAY not in whole_day.get_month_dates(ORG_ID, 2030, 1).available_dates
        assert MONDAY in partial.get_month_dates(ORG_ID, 2030, 1).available_dates

    def test_fully_booked_day_is_still_listed(self, engine, db, lisbon):
        AppointmentPolicyService(db).upsert(ORG_ID, {"visit_duration_minutes": 240, "slot_interval_minutes": 240})
        _book(db, lisbon, SATURDAY, "09:00", minutes=240)

        assert all(not s.available for s in engine.get_day_slots(ORG_ID, SATURDAY).slots)
        assert SATURDAY in engine.get_month_dates(ORG_ID, 2030, 1).available_dates

    @pytest.mark.parametrize("year, month, field", [
        (2030, 0, "month"),
        (2030, 13, "month"),
        (0, 1, "year"),
    ])
    def test_invalid_month(self, engine, year, month, field):
        with pytest.raises(ValidationError) as exc_info:
            engine.get_month_dates(ORG_ID, year, month)

        assert exc_info.value.field == field

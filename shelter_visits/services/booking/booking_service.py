# shelter_visits/services/booking/booking_service.py
"""
Confirmed visit bookings.

The availability engine only reads confirmed bookings from here. Creating a
booking re-runs the slot computation while the organization's policy row is
locked, so two visitors racing for the last seat of a slot cannot both win.
"""
import logging
import uuid
from datetime import datetime
from typing import Callable, List, Optional, Union

import pytz
from sqlalchemy.orm import Session

from shelter_visits.core.errors import NotFoundError, SlotUnavailableError
from shelter_visits.models.booking import BookingStatus, VisitBooking
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService
from shelter_visits.utils.time_utils import as_utc, get_timezone

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class BookingService:
    """Booking store used by the availability engine and the booking write path"""

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or utc_now
        self.policies = AppointmentPolicyService(db)

    def find_confirmed_overlapping(self, org_id: str, start: datetime, end: datetime) -> List[VisitBooking]:
        """Confirmed bookings whose [start, end) overlaps the given window"""
        return self.db.query(VisitBooking).filter(
            VisitBooking.org_id == org_id,
            VisitBooking.status == BookingStatus.CONFIRMED,
            VisitBooking.scheduled_start_time < as_utc(end),
            VisitBooking.scheduled_end_time > as_utc(start)
        ).order_by(VisitBooking.scheduled_start_time).all()

    def get(self, org_id: str, booking_id: Union[str, uuid.UUID]) -> VisitBooking:
        try:
            booking_uuid = booking_id if isinstance(booking_id, uuid.UUID) else uuid.UUID(str(booking_id))
        except ValueError:
            raise NotFoundError(f"Booking with ID {booking_id} not found")

        booking = self.db.query(VisitBooking).filter_by(id=booking_uuid, org_id=org_id).first()
        if booking is None:
            raise NotFoundError(f"Booking with ID {booking_id} not found")
        return booking

    def create_confirmed(
            self,
            org_id: str,
            start_time: datetime,
            visitor_name: str,
            visitor_email: str,
            visitor_phone: Optional[str] = None,
            pet_id: Optional[str] = None,
            notes: Optional[str] = None
    ) -> VisitBooking:
        """
        Book the slot starting at `start_time`.

        A naive `start_time` is read as wall-clock time in the organization's
        timezone. Raises SlotUnavailableError when the start is not a
        generated slot or the slot is no longer available.
        """
        from shelter_visits.services.availability.availability_service import AvailabilityService

        # Materialize defaults first: seeding commits and would release the lock
        OperatingHoursService(self.db).ensure_defaults(org_id)
        policy = self.policies.lock(org_id)

        tz = get_timezone(policy.timezone)
        if start_time.tzinfo is None:
            start_time = tz.localize(start_time)
        local_date = start_time.astimezone(tz).date()

        engine = AvailabilityService(self.db, clock=self.clock)
        day = engine.get_day_slots(org_id, local_date)

        slot = next((s for s in day.slots if s.start_time == start_time), None)
        if slot is None:
            self.db.rollback()
            raise SlotUnavailableError("The requested time slot does not exist")
        if not slot.available:
            self.db.rollback()
            raise SlotUnavailableError(
                f"The requested time slot is not available. Reason: {slot.reason or 'Unknown'}"
            )

        booking = VisitBooking(
            org_id=org_id,
            pet_id=pet_id,
            visitor_name=visitor_name,
            visitor_email=visitor_email,
            visitor_phone=visitor_phone,
            notes=notes,
            scheduled_start_time=as_utc(slot.start_time),
            scheduled_end_time=as_utc(slot.end_time),
            status=BookingStatus.CONFIRMED,
        )
        self.db.add(booking)
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Confirmed booking {booking.id} for org {org_id} at {slot.start_time.isoformat()}")
        return booking

    def cancel(self, org_id: str, booking_id: Union[str, uuid.UUID]) -> VisitBooking:
        booking = self.get(org_id, booking_id)
        booking.status = BookingStatus.CANCELLED
        booking.cancelled_at = self.clock()
        self.db.commit()
        self.db.refresh(booking)

        logger.info(f"Cancelled booking {booking.id} for org {org_id}")
        return booking

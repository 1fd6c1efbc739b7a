"""
Public Availability Routes
Unauthenticated endpoints adopters use to find and book a visit slot
"""
import logging
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from shelter_visits.api.dependencies import (
    get_availability_service,
    get_booking_service,
    get_exception_service,
    get_operating_hours_service,
    get_policy_service,
)
from shelter_visits.schemas.availability import (
    BookingCreateRequest,
    BookingResponse,
    DaySlotsResponse,
    MonthDatesResponse,
)
from shelter_visits.schemas.schedule import (
    AppointmentPolicyResponse,
    ExceptionResponse,
    OperatingHoursResponse,
)
from shelter_visits.services.availability.availability_service import AvailabilityService
from shelter_visits.services.booking.booking_service import BookingService
from shelter_visits.services.exceptions.availability_exception_service import AvailabilityExceptionService
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["public-availability"])

NO_CACHE = "no-cache, no-store, must-revalidate"


# ============================================================================
# Slots and Dates
# ============================================================================

@router.get("/{org_id}/available-slots", response_model=DaySlotsResponse)
async def get_available_slots(
        org_id: str,
        response: Response,
        target_date: date = Query(..., alias="date", description="YYYY-MM-DD"),
        service: AvailabilityService = Depends(get_availability_service)
):
    """
    Bookable slots for one date.
    Every slot is listed; unavailable ones carry a reason.
    """
    day = service.get_day_slots(org_id, target_date)

    response.headers["Cache-Control"] = NO_CACHE
    return DaySlotsResponse.from_day(day)


@router.get("/{org_id}/available-dates", response_model=MonthDatesResponse)
async def get_available_dates(
        org_id: str,
        response: Response,
        year: int = Query(...),
        month: int = Query(...),
        service: AvailabilityService = Depends(get_availability_service)
):
    """
    Dates of a month with opening hours inside the booking window.

    Slot capacity is not checked here: a listed date can still turn out to
    be fully booked when its slots are requested.
    """
    month_dates = service.get_month_dates(org_id, year, month)

    response.headers["Cache-Control"] = NO_CACHE
    return MonthDatesResponse.from_month(month_dates)


# ============================================================================
# Schedule Info
# ============================================================================

@router.get("/{org_id}/operating-hours", response_model=List[OperatingHoursResponse])
async def get_operating_hours(
        org_id: str,
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    return service.get_week(org_id)


@router.get("/{org_id}/appointment-policy", response_model=AppointmentPolicyResponse)
async def get_appointment_policy(
        org_id: str,
        service: AppointmentPolicyService = Depends(get_policy_service)
):
    return service.get(org_id)


@router.get("/{org_id}/exceptions", response_model=List[ExceptionResponse])
async def get_active_exceptions(
        org_id: str,
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    """Upcoming and ongoing closures (past ones are hidden)"""
    return service.find_active(org_id)


# ============================================================================
# Booking
# ============================================================================

@router.post(
    "/{org_id}/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_booking(
        org_id: str,
        request: BookingCreateRequest,
        service: BookingService = Depends(get_booking_service)
):
    """
    Book a visit.
    The slot is re-checked at commit time; 409 when it was taken meanwhile.
    """
    return service.create_confirmed(
        org_id=org_id,
        start_time=request.start_time,
        visitor_name=request.visitor_name,
        visitor_email=request.visitor_email,
        visitor_phone=request.visitor_phone,
        pet_id=request.pet_id,
        notes=request.notes,
    )

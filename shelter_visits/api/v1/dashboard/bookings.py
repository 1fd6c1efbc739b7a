"""
Visit Bookings Dashboard Routes
"""
import logging

from fastapi import APIRouter, Depends

from shelter_visits.api.dependencies import get_booking_service, get_current_org_id
from shelter_visits.schemas.availability import BookingResponse
from shelter_visits.services.booking.booking_service import BookingService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-bookings"])


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
        booking_id: str,
        org_id: str = Depends(get_current_org_id),
        service: BookingService = Depends(get_booking_service)
):
    return service.get(org_id, booking_id)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def cancel_booking(
        booking_id: str,
        org_id: str = Depends(get_current_org_id),
        service: BookingService = Depends(get_booking_service)
):
    """Cancel a visit; its slot becomes bookable again"""
    return service.cancel(org_id, booking_id)

"""
Operating Hours Dashboard Routes
Owner-authenticated management of the weekly schedule
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Path, status

from shelter_visits.api.dependencies import get_current_org_id, get_operating_hours_service
from shelter_visits.schemas.schedule import (
    BulkOperatingHoursRequest,
    OperatingHoursRequest,
    OperatingHoursResponse,
    OperatingHoursUpdateRequest,
)
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-operating-hours"])


@router.get("", response_model=List[OperatingHoursResponse])
async def list_operating_hours(
        org_id: str = Depends(get_current_org_id),
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    """Weekly schedule; the default week is created on first access"""
    return service.get_week(org_id)


@router.post("/bulk", response_model=List[OperatingHoursResponse])
async def bulk_set_operating_hours(
        request: BulkOperatingHoursRequest,
        org_id: str = Depends(get_current_org_id),
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    """Replace the whole week. Days left out of the request become closed."""
    specs = [item.model_dump() for item in request.operating_hours]
    return service.bulk_set_week(org_id, specs)


@router.put("/{day_of_week}", response_model=OperatingHoursResponse)
async def upsert_operating_hours(
        request: OperatingHoursRequest,
        day_of_week: int = Path(..., ge=0, le=6, description="0=Sunday ... 6=Saturday"),
        org_id: str = Depends(get_current_org_id),
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    return service.upsert(org_id, day_of_week, request.model_dump())


@router.patch("/{day_of_week}", response_model=OperatingHoursResponse)
async def update_operating_hours(
        request: OperatingHoursUpdateRequest,
        day_of_week: int = Path(..., ge=0, le=6, description="0=Sunday ... 6=Saturday"),
        org_id: str = Depends(get_current_org_id),
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    """Change only the sent fields; the merged day is revalidated"""
    return service.update(org_id, day_of_week, request.model_dump(exclude_unset=True))


@router.delete("/{day_of_week}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_operating_hours(
        day_of_week: int = Path(..., ge=0, le=6, description="0=Sunday ... 6=Saturday"),
        org_id: str = Depends(get_current_org_id),
        service: OperatingHoursService = Depends(get_operating_hours_service)
):
    service.delete_day(org_id, day_of_week)

"""
Availability Exceptions Dashboard Routes
Closures, holidays and special openings
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status

from shelter_visits.api.dependencies import get_current_org_id, get_exception_service
from shelter_visits.schemas.schedule import (
    ExceptionCreateRequest,
    ExceptionResponse,
    ExceptionUpdateRequest,
    HolidaySeedResponse,
    PurgeExpiredResponse,
)
from shelter_visits.services.exceptions.availability_exception_service import AvailabilityExceptionService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-exceptions"])


# ============================================================================
# Reads
# ============================================================================

@router.get("", response_model=List[ExceptionResponse])
async def list_exceptions(
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    return service.find_all(org_id)


@router.get("/active", response_model=List[ExceptionResponse])
async def list_active_exceptions(
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    return service.find_active(org_id)


# ============================================================================
# Bulk operations
# ============================================================================

@router.post("/holidays/{year}", response_model=HolidaySeedResponse, status_code=status.HTTP_201_CREATED)
async def seed_holidays(
        year: int,
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    """Block every national holiday of `year`; dates already covered are skipped"""
    created = service.seed_holidays(org_id, year)
    return HolidaySeedResponse(
        year=year,
        created=len(created),
        exceptions=[ExceptionResponse.model_validate(e) for e in created],
    )


@router.delete("/expired", response_model=PurgeExpiredResponse)
async def purge_expired_exceptions(
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    return PurgeExpiredResponse(deleted=service.purge_expired(org_id))


# ============================================================================
# Single exception
# ============================================================================

@router.post("", response_model=ExceptionResponse, status_code=status.HTTP_201_CREATED)
async def create_exception(
        request: ExceptionCreateRequest,
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    """409 when the date range overlaps an existing exception"""
    return service.create(org_id, request.model_dump())


@router.put("/{exception_id}", response_model=ExceptionResponse)
async def update_exception(
        exception_id: str,
        request: ExceptionUpdateRequest,
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    return service.update(org_id, exception_id, request.model_dump(exclude_unset=True))


@router.delete("/{exception_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_exception(
        exception_id: str,
        org_id: str = Depends(get_current_org_id),
        service: AvailabilityExceptionService = Depends(get_exception_service)
):
    service.delete(org_id, exception_id)

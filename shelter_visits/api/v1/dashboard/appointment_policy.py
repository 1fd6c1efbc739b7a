"""
Appointment Policy Dashboard Routes
"""
import logging

from fastapi import APIRouter, Depends

from shelter_visits.api.dependencies import get_current_org_id, get_policy_service
from shelter_visits.schemas.schedule import AppointmentPolicyResponse, AppointmentPolicyUpdateRequest
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService

logger = logging.getLogger(__name__)
router = APIRouter(tags=["dashboard-appointment-policy"])


@router.get("", response_model=AppointmentPolicyResponse)
async def get_appointment_policy(
        org_id: str = Depends(get_current_org_id),
        service: AppointmentPolicyService = Depends(get_policy_service)
):
    return service.get(org_id)


@router.put("", response_model=AppointmentPolicyResponse)
async def update_appointment_policy(
        request: AppointmentPolicyUpdateRequest,
        org_id: str = Depends(get_current_org_id),
        service: AppointmentPolicyService = Depends(get_policy_service)
):
    """
    Update the policy.
    Only send what you want to change; omitted fields keep their value.
    """
    updates = request.model_dump(exclude_unset=True, exclude_none=True)
    return service.upsert(org_id, updates)

"""
API v1 router setup
Organized into: public (no auth) and dashboard (organization owner JWT) routes
"""
from fastapi import APIRouter

from shelter_visits.api.v1.dashboard import appointment_policy, bookings, exceptions, operating_hours
from shelter_visits.api.v1.public import availability

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (No authentication required)
# ============================================================================
api_v1_router.include_router(
    availability.router,
    prefix="/organizations",
    tags=["Public"]
)

# ============================================================================
# DASHBOARD ROUTES (JWT authentication required)
# ============================================================================
api_v1_router.include_router(
    operating_hours.router,
    prefix="/dashboard/operating-hours",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    appointment_policy.router,
    prefix="/dashboard/appointment-policy",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    exceptions.router,
    prefix="/dashboard/exceptions",
    tags=["Dashboard"]
)

api_v1_router.include_router(
    bookings.router,
    prefix="/dashboard/bookings",
    tags=["Dashboard"]
)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "authentication": {
            "public": "No authentication required",
            "dashboard": "JWT Bearer token required (organization owner)",
        }
    }

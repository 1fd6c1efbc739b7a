# ============================================================================
# FILE: shelter_visits/api/dependencies.py
# Authentication and service dependencies
# ============================================================================
from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from shelter_visits.config.database import get_db
from shelter_visits.config.settings import settings
from shelter_visits.services.availability.availability_service import AvailabilityService, utc_now
from shelter_visits.services.booking.booking_service import BookingService
from shelter_visits.services.exceptions.availability_exception_service import AvailabilityExceptionService
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService
from shelter_visits.services.schedule.operating_hours_service import OperatingHoursService

# ============================================================================
# Security Schemes
# ============================================================================

# Organization owner tokens are issued by the identity service
jwt_security = HTTPBearer(
    scheme_name="JWT Bearer Token",
    description="Enter the organization owner's JWT access token"
)


# ============================================================================
# JWT Token Functions
# ============================================================================

def verify_access_token(token: str) -> dict:
    """
    Verify and decode a JWT access token.

    Raises:
        HTTPException: If token is invalid, expired or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Could not validate credentials: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return payload


# ============================================================================
# Authentication Dependencies
# ============================================================================

async def get_current_org_id(
        credentials: HTTPAuthorizationCredentials = Depends(jwt_security)
) -> str:
    """
    Organization the caller owns, taken from the token subject.

    Usage in routes:
        @router.get("/operating-hours")
        async def list_hours(org_id: str = Depends(get_current_org_id)):
            ...

    Raises:
        HTTPException 401: If the token is invalid or carries no subject
    """
    payload = verify_access_token(credentials.credentials)

    org_id: Optional[str] = payload.get("sub")
    if not org_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return str(org_id)


# ============================================================================
# Service Dependencies
# ============================================================================

def get_clock() -> Callable[[], datetime]:
    """Current-time source; overridden in tests"""
    return utc_now


def get_operating_hours_service(db: Session = Depends(get_db)) -> OperatingHoursService:
    return OperatingHoursService(db)


def get_policy_service(db: Session = Depends(get_db)) -> AppointmentPolicyService:
    return AppointmentPolicyService(db)


def get_exception_service(
        db: Session = Depends(get_db),
        clock: Callable[[], datetime] = Depends(get_clock)
) -> AvailabilityExceptionService:
    return AvailabilityExceptionService(db, clock=clock)


def get_availability_service(
        db: Session = Depends(get_db),
        clock: Callable[[], datetime] = Depends(get_clock)
) -> AvailabilityService:
    return AvailabilityService(db, clock=clock)


def get_booking_service(
        db: Session = Depends(get_db),
        clock: Callable[[], datetime] = Depends(get_clock)
) -> BookingService:
    return BookingService(db, clock=clock)

"""
Pydantic schemas for operating hours, appointment policy and exceptions
"""
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# ============================================================================
# Operating Hours
# ============================================================================

class OperatingHoursRequest(CamelModel):
    """Full replacement of one weekday"""
    is_open: bool = True
    open_time: Optional[str] = Field(None, description="HH:mm, e.g. 09:00")
    close_time: Optional[str] = Field(None, description="HH:mm, e.g. 18:00")
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


class OperatingHoursUpdateRequest(CamelModel):
    """
    Partial update of one weekday.
    Only send what you want to change; the merged day is revalidated.
    """
    is_open: Optional[bool] = None
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


class BulkOperatingHoursItem(OperatingHoursRequest):
    day_of_week: int = Field(..., ge=0, le=6, description="0=Sunday ... 6=Saturday")


class BulkOperatingHoursRequest(CamelModel):
    operating_hours: List[BulkOperatingHoursItem] = Field(..., min_length=1)


class OperatingHoursResponse(CamelModel):
    day_of_week: int
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


# ============================================================================
# Appointment Policy
# ============================================================================

class AppointmentPolicyUpdateRequest(CamelModel):
    """All fields optional; unspecified fields keep their stored value"""
    visit_duration_minutes: Optional[int] = None
    slot_interval_minutes: Optional[int] = None
    max_concurrent_visits: Optional[int] = None
    min_advance_booking_hours: Optional[int] = None
    max_advance_booking_days: Optional[int] = None
    allow_weekend_bookings: Optional[bool] = None
    timezone: Optional[str] = None


class AppointmentPolicyResponse(CamelModel):
    visit_duration_minutes: int
    slot_interval_minutes: int
    max_concurrent_visits: int
    min_advance_booking_hours: int
    max_advance_booking_days: int
    allow_weekend_bookings: bool
    timezone: str
    updated_at: Optional[datetime] = None


# ============================================================================
# Availability Exceptions
# ============================================================================

class ExceptionCreateRequest(CamelModel):
    exception_type: str = Field(..., description="blocked or available")
    start_date: date
    end_date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=255)


class ExceptionUpdateRequest(CamelModel):
    exception_type: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = Field(None, max_length=255)


class ExceptionResponse(CamelModel):
    id: UUID
    exception_type: str
    start_date: date
    end_date: date
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    reason: Optional[str] = None
    is_full_day: bool
    created_at: Optional[datetime] = None


class HolidaySeedResponse(CamelModel):
    year: int
    created: int
    exceptions: List[ExceptionResponse]


class PurgeExpiredResponse(CamelModel):
    deleted: int

"""
Pydantic schemas for slot and date availability, and visit bookings
"""
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from shelter_visits.schemas.schedule import CamelModel
from shelter_visits.services.availability.records import DayAvailability, MonthAvailability


# ============================================================================
# Availability
# ============================================================================

class SlotResponse(CamelModel):
    start_time: datetime
    end_time: datetime
    available: bool
    reason: Optional[str] = None


class ScheduleSummaryResponse(CamelModel):
    is_open: bool
    open_time: Optional[str] = None
    close_time: Optional[str] = None
    lunch_start: Optional[str] = None
    lunch_end: Optional[str] = None


class DaySlotsResponse(CamelModel):
    date: date
    slots: List[SlotResponse]
    schedule_summary: ScheduleSummaryResponse

    @classmethod
    def from_day(cls, day: DayAvailability) -> "DaySlotsResponse":
        summary = day.schedule_summary
        return cls(
            date=day.date,
            slots=[
                SlotResponse(
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    available=bool(slot.available),
                    reason=slot.reason,
                )
                for slot in day.slots
            ],
            schedule_summary=ScheduleSummaryResponse(
                is_open=summary.is_open,
                open_time=summary.open_time,
                close_time=summary.close_time,
                lunch_start=summary.lunch_start,
                lunch_end=summary.lunch_end,
            ),
        )


class MonthDatesResponse(CamelModel):
    year: int
    month: int
    available_dates: List[date]

    @classmethod
    def from_month(cls, month: MonthAvailability) -> "MonthDatesResponse":
        return cls(year=month.year, month=month.month, available_dates=list(month.available_dates))


# ============================================================================
# Bookings
# ============================================================================

class BookingCreateRequest(CamelModel):
    """
    Request a visit.
    `startTime` must be one of the slot starts returned by available-slots;
    a value without an offset is read in the organization's timezone.
    """
    start_time: datetime
    visitor_name: str = Field(..., min_length=1, max_length=200)
    visitor_email: EmailStr
    visitor_phone: Optional[str] = Field(None, max_length=20)
    pet_id: Optional[str] = Field(None, max_length=64)
    notes: Optional[str] = None

    @field_validator("visitor_email")
    @classmethod
    def lowercase_email(cls, v):
        return v.lower()


class BookingResponse(CamelModel):
    id: UUID
    org_id: str
    pet_id: Optional[str] = None
    visitor_name: str
    visitor_email: str
    visitor_phone: Optional[str] = None
    notes: Optional[str] = None
    scheduled_start_time: datetime
    scheduled_end_time: datetime
    status: str
    cancelled_at: Optional[datetime] = None

# shelter_visits/models/__init__.py
from .base import Base
from .operating_hours import OperatingHours
from .appointment_policy import AppointmentPolicy
from .availability_exception import AvailabilityException, ExceptionType
from .booking import VisitBooking, BookingStatus

__all__ = [
    "Base",
    "OperatingHours",
    "AppointmentPolicy",
    "AvailabilityException",
    "ExceptionType",
    "VisitBooking",
    "BookingStatus",
]

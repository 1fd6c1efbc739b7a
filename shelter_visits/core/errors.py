# shelter_visits/core/errors.py
"""
Scheduling error kinds.

Services raise these; the HTTP layer maps them to status codes in main.py.
All of them are ValueErrors so callers that only know the generic
"bad input" convention keep working.
"""
from typing import Optional


class SchedulingError(ValueError):
    """Base class for per-request scheduling failures"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message}


class ValidationError(SchedulingError):
    """Bad time format, inverted range, non-positive duration..."""

    status_code = 400

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {"detail": self.message, "field": self.field}


class ConflictError(SchedulingError):
    """An exception range collides with an existing one for the organization"""

    status_code = 409

    def __init__(self, message: str, conflicting_id: Optional[str] = None):
        super().__init__(message)
        self.conflicting_id = conflicting_id

    def to_dict(self) -> dict:
        return {"detail": self.message, "conflictingId": self.conflicting_id}


class NotFoundError(SchedulingError):
    """Update/delete targeted a row that does not exist for the organization"""

    status_code = 404


class SlotUnavailableError(SchedulingError):
    """Booking commit lost the race for a slot, or the slot never existed"""

    status_code = 409

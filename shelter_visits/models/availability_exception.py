# ===== shelter_visits/models/availability_exception.py =====
from sqlalchemy import Column, String, Date, DateTime, Index, Uuid
from sqlalchemy.sql import func
from shelter_visits.models.base import Base
import uuid


class ExceptionType:
    BLOCKED = "blocked"
    AVAILABLE = "available"

    ALL = (BLOCKED, AVAILABLE)


class AvailabilityException(Base):
    """Date-ranged overrides (holidays, closures, special openings)"""
    __tablename__ = "availability_exceptions"
    __table_args__ = (
        Index("ix_availability_exceptions_org_range", "org_id", "start_date", "end_date"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(String(64), nullable=False)

    exception_type = Column(String(20), nullable=False)  # blocked, available
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=True)  # HH:MM, optional sub-range
    end_time = Column(String(5), nullable=True)
    reason = Column(String(255), nullable=True)  # "Holiday", "Vacation", etc.

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_full_day(self) -> bool:
        return not (self.start_time and self.end_time)

    def __repr__(self):
        return (
            f"<AvailabilityException(org_id={self.org_id}, type={self.exception_type}, "
            f"{self.start_date}..{self.end_date})>"
        )

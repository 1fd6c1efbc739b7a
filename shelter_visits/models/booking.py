# ===== shelter_visits/models/booking.py =====
from sqlalchemy import Column, String, Text, DateTime, Index, Uuid
from sqlalchemy.sql import func
from shelter_visits.models.base import Base
import uuid


class BookingStatus:
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class VisitBooking(Base):
    """Adopter visit to an organization; only confirmed rows occupy capacity"""
    __tablename__ = "visit_bookings"
    __table_args__ = (
        Index("ix_visit_bookings_org_window", "org_id", "scheduled_start_time", "scheduled_end_time"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(String(64), nullable=False)
    pet_id = Column(String(64), nullable=True)

    # Visitor info
    visitor_name = Column(String(200), nullable=False)
    visitor_email = Column(String(254), nullable=False)
    visitor_phone = Column(String(20), nullable=True)
    notes = Column(Text, nullable=True)

    # Stored in UTC
    scheduled_start_time = Column(DateTime(timezone=True), nullable=False)
    scheduled_end_time = Column(DateTime(timezone=True), nullable=False)

    status = Column(String(20), nullable=False, default=BookingStatus.CONFIRMED)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<VisitBooking(org_id={self.org_id}, start={self.scheduled_start_time}, status={self.status})>"

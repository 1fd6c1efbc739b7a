# ===== shelter_visits/models/appointment_policy.py =====
from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.sql import func
from shelter_visits.models.base import Base


class AppointmentPolicy(Base):
    """Per-organization visit policy (one row per organization)"""
    __tablename__ = "appointment_policies"

    id = Column(Integer, primary_key=True)
    org_id = Column(String(64), nullable=False, unique=True)

    visit_duration_minutes = Column(Integer, nullable=False, default=60)
    slot_interval_minutes = Column(Integer, nullable=False, default=30)
    max_concurrent_visits = Column(Integer, nullable=False, default=1)
    min_advance_booking_hours = Column(Integer, nullable=False, default=24)
    max_advance_booking_days = Column(Integer, nullable=False, default=30)
    allow_weekend_bookings = Column(Boolean, nullable=False, default=True)
    timezone = Column(String(50), nullable=False, default="UTC")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<AppointmentPolicy(org_id={self.org_id}, duration={self.visit_duration_minutes})>"

# ===== shelter_visits/models/operating_hours.py =====
from sqlalchemy import Column, String, Integer, Boolean, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from shelter_visits.models.base import Base


class OperatingHours(Base):
    """Weekly opening hours of an organization, one row per weekday"""
    __tablename__ = "operating_hours"
    __table_args__ = (
        UniqueConstraint("org_id", "day_of_week", name="uq_operating_hours_org_day"),
    )

    id = Column(Integer, primary_key=True)
    org_id = Column(String(64), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0=Sunday, 6=Saturday

    is_open = Column(Boolean, nullable=False, default=True)
    open_time = Column(String(5), nullable=True)  # HH:MM format
    close_time = Column(String(5), nullable=True)  # HH:MM format
    lunch_start = Column(String(5), nullable=True)
    lunch_end = Column(String(5), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<OperatingHours(org_id={self.org_id}, day={self.day_of_week}, open={self.is_open})>"

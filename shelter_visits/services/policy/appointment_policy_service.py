# shelter_visits/services/policy/appointment_policy_service.py
"""Service for the per-organization appointment policy"""
import logging
from typing import Any, Dict

import pytz
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shelter_visits.config.settings import get_settings
from shelter_visits.models.appointment_policy import AppointmentPolicy
from shelter_visits.services.availability.defaults import default_policy
from shelter_visits.services.availability.records import PolicyRecord
from shelter_visits.services.availability.validation import merge_record, validate_policy
from shelter_visits.utils.time_utils import get_timezone

logger = logging.getLogger(__name__)


class AppointmentPolicyService:
    """Policy store. Reads never fail: defaults are materialized on first access."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, org_id: str) -> AppointmentPolicy:
        policy = self._find(org_id)
        if policy is not None:
            return policy

        record = default_policy(get_settings().DEFAULT_TIMEZONE)
        policy = self._new_row(org_id, record)
        self.db.add(policy)

        try:
            self.db.commit()
        except IntegrityError:
            # Concurrent first access created it already
            self.db.rollback()
            return self._find(org_id)

        self.db.refresh(policy)
        logger.info(f"Created default appointment policy for org {org_id}")
        return policy

    def get_record(self, org_id: str) -> PolicyRecord:
        return PolicyRecord.from_model(self.get(org_id))

    def timezone(self, org_id: str) -> pytz.BaseTzInfo:
        return get_timezone(self.get(org_id).timezone)

    def upsert(self, org_id: str, partial: Dict[str, Any]) -> AppointmentPolicy:
        """
        Merge `partial` into the stored policy (or the defaults) and validate
        the merged policy as a whole before saving.
        """
        policy = self.get(org_id)
        record = validate_policy(merge_record(PolicyRecord.from_model(policy), partial))

        policy.visit_duration_minutes = record.visit_duration_minutes
        policy.slot_interval_minutes = record.slot_interval_minutes
        policy.max_concurrent_visits = record.max_concurrent_visits
        policy.min_advance_booking_hours = record.min_advance_booking_hours
        policy.max_advance_booking_days = record.max_advance_booking_days
        policy.allow_weekend_bookings = record.allow_weekend_bookings
        policy.timezone = record.timezone

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Error saving appointment policy for org {org_id}: {e}")
            raise

        self.db.refresh(policy)
        logger.info(f"Updated appointment policy for org {org_id}: {sorted(partial)}")
        return policy

    def lock(self, org_id: str) -> AppointmentPolicy:
        """
        Lock the organization's policy row for the rest of the transaction.
        Writers of the exception set and booking commits serialize on it.
        """
        self.get(org_id)
        return self.db.query(AppointmentPolicy).filter_by(
            org_id=org_id
        ).with_for_update().one()

    def _find(self, org_id: str):
        return self.db.query(AppointmentPolicy).filter_by(org_id=org_id).first()

    @staticmethod
    def _new_row(org_id: str, record: PolicyRecord) -> AppointmentPolicy:
        return AppointmentPolicy(
            org_id=org_id,
            visit_duration_minutes=record.visit_duration_minutes,
            slot_interval_minutes=record.slot_interval_minutes,
            max_concurrent_visits=record.max_concurrent_visits,
            min_advance_booking_hours=record.min_advance_booking_hours,
            max_advance_booking_days=record.max_advance_booking_days,
            allow_weekend_bookings=record.allow_weekend_bookings,
            timezone=record.timezone,
        )

# shelter_visits/services/exceptions/availability_exception_service.py
"""Service for date-ranged availability exceptions (closures, holidays, openings)"""
import logging
import uuid
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Union

import pytz
from sqlalchemy.orm import Session

from shelter_visits.core.errors import ConflictError, NotFoundError, ValidationError
from shelter_visits.models.availability_exception import AvailabilityException, ExceptionType
from shelter_visits.services.availability.defaults import national_holidays
from shelter_visits.services.availability.records import ExceptionRecord
from shelter_visits.services.availability.validation import merge_record, validate_exception
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("exception_type", "start_date", "end_date")


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class AvailabilityExceptionService:
    """
    Exception store.

    No two exceptions of the same organization may have intersecting date
    ranges. The check runs on create and update while holding the
    organization's policy row lock, so concurrent writers cannot both pass it.
    """

    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.clock = clock or utc_now
        self.policies = AppointmentPolicyService(db)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def find_all(self, org_id: str) -> List[AvailabilityException]:
        return self.db.query(AvailabilityException).filter_by(
            org_id=org_id
        ).order_by(AvailabilityException.start_date).all()

    def find_active(self, org_id: str) -> List[AvailabilityException]:
        """Exceptions ending today or later, in the organization's timezone"""
        today = self._today(org_id)
        return self.db.query(AvailabilityException).filter(
            AvailabilityException.org_id == org_id,
            AvailabilityException.end_date >= today
        ).order_by(AvailabilityException.start_date).all()

    def find_in_range(self, org_id: str, start_date: date, end_date: date) -> List[AvailabilityException]:
        """Exceptions whose [start_date, end_date] intersects the given range"""
        return self.db.query(AvailabilityException).filter(
            AvailabilityException.org_id == org_id,
            AvailabilityException.start_date <= end_date,
            AvailabilityException.end_date >= start_date
        ).order_by(AvailabilityException.start_date).all()

    def find_covering(self, org_id: str, target_date: date) -> List[AvailabilityException]:
        return self.find_in_range(org_id, target_date, target_date)

    def get(self, org_id: str, exception_id: Union[str, uuid.UUID]) -> AvailabilityException:
        exception_uuid = self._parse_id(exception_id)
        exception = None
        if exception_uuid is not None:
            exception = self.db.query(AvailabilityException).filter_by(
                id=exception_uuid,
                org_id=org_id
            ).first()

        if exception is None:
            raise NotFoundError(f"Exception with ID {exception_id} not found")
        return exception

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def create(self, org_id: str, spec: Dict[str, Any]) -> AvailabilityException:
        for field in REQUIRED_FIELDS:
            if spec.get(field) in (None, ""):
                raise ValidationError(field, f"{field} is required")

        record = validate_exception(ExceptionRecord(
            exception_type=spec["exception_type"],
            start_date=spec["start_date"],
            end_date=spec["end_date"],
            start_time=spec.get("start_time"),
            end_time=spec.get("end_time"),
            reason=spec.get("reason"),
        ))

        self.policies.lock(org_id)
        try:
            self._ensure_no_overlap(org_id, record)
        except ConflictError:
            self.db.rollback()
            raise

        exception = AvailabilityException(org_id=org_id)
        self._apply(exception, record)
        self.db.add(exception)
        self.db.commit()
        self.db.refresh(exception)

        logger.info(
            f"Created {record.exception_type} exception for org {org_id}: "
            f"{record.start_date}..{record.end_date}"
        )
        return exception

    def update(
            self,
            org_id: str,
            exception_id: Union[str, uuid.UUID],
            partial: Dict[str, Any]
    ) -> AvailabilityException:
        exception = self.get(org_id, exception_id)
        record = validate_exception(merge_record(ExceptionRecord.from_model(exception), partial))

        self.policies.lock(org_id)
        try:
            self._ensure_no_overlap(org_id, record, exclude_id=exception.id)
        except ConflictError:
            self.db.rollback()
            raise

        self._apply(exception, record)
        self.db.commit()
        self.db.refresh(exception)
        logger.info(f"Updated exception {exception.id} for org {org_id}")
        return exception

    def delete(self, org_id: str, exception_id: Union[str, uuid.UUID]) -> None:
        exception = self.get(org_id, exception_id)
        self.db.delete(exception)
        self.db.commit()
        logger.info(f"Deleted exception {exception_id} for org {org_id}")

    def purge_expired(self, org_id: str) -> int:
        """Delete every exception that ended before today; returns the count"""
        today = self._today(org_id)
        count = self.db.query(AvailabilityException).filter(
            AvailabilityException.org_id == org_id,
            AvailabilityException.end_date < today
        ).delete(synchronize_session=False)
        self.db.commit()

        logger.info(f"Purged {count} expired exceptions for org {org_id}")
        return count

    def seed_holidays(self, org_id: str, year: int) -> List[AvailabilityException]:
        """
        Block every fixed national holiday of `year`.
        Dates that already have an exception are skipped, so running it twice
        creates nothing the second time.
        """
        if not 1 <= year <= 9999:
            raise ValidationError("year", f"Invalid year: {year}")

        created = []
        for holiday_date, name in national_holidays(year):
            try:
                created.append(self.create(org_id, {
                    "exception_type": ExceptionType.BLOCKED,
                    "start_date": holiday_date,
                    "end_date": holiday_date,
                    "reason": name,
                }))
            except ConflictError as e:
                logger.info(f"Skipping holiday {holiday_date} for org {org_id}: {e}")

        logger.info(f"Seeded {len(created)} holidays for org {org_id} in {year}")
        return created

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_no_overlap(
            self,
            org_id: str,
            record: ExceptionRecord,
            exclude_id: Optional[uuid.UUID] = None
    ) -> None:
        query = self.db.query(AvailabilityException).filter(
            AvailabilityException.org_id == org_id,
            AvailabilityException.start_date <= record.end_date,
            AvailabilityException.end_date >= record.start_date
        )
        if exclude_id is not None:
            query = query.filter(AvailabilityException.id != exclude_id)

        existing = query.order_by(AvailabilityException.start_date).first()
        if existing is not None:
            raise ConflictError(
                f"This period overlaps with an existing exception: "
                f"{existing.reason or 'No reason provided'}",
                conflicting_id=str(existing.id)
            )

    def _today(self, org_id: str) -> date:
        return self.clock().astimezone(self.policies.timezone(org_id)).date()

    @staticmethod
    def _apply(exception: AvailabilityException, record: ExceptionRecord) -> None:
        exception.exception_type = record.exception_type
        exception.start_date = record.start_date
        exception.end_date = record.end_date
        exception.start_time = record.start_time
        exception.end_time = record.end_time
        exception.reason = record.reason

    @staticmethod
    def _parse_id(exception_id: Union[str, uuid.UUID]) -> Optional[uuid.UUID]:
        if isinstance(exception_id, uuid.UUID):
            return exception_id
        try:
            return uuid.UUID(str(exception_id))
        except ValueError:
            return None

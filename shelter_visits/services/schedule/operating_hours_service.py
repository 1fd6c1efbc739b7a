# shelter_visits/services/schedule/operating_hours_service.py
"""Service for managing an organization's weekly operating hours"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shelter_visits.core.errors import NotFoundError, ValidationError
from shelter_visits.models.operating_hours import OperatingHours
from shelter_visits.services.availability.defaults import default_week
from shelter_visits.services.availability.records import HoursRecord
from shelter_visits.services.availability.validation import (
    merge_record,
    validate_day_of_week,
    validate_hours,
)

logger = logging.getLogger(__name__)


class OperatingHoursService:
    """Schedule store: one row per (organization, weekday)"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, org_id: str, day_of_week: int) -> Optional[OperatingHours]:
        """Hours for one weekday, or None when that day has no row (closed)"""
        validate_day_of_week(day_of_week)
        self.ensure_defaults(org_id)
        return self.db.query(OperatingHours).filter_by(
            org_id=org_id,
            day_of_week=day_of_week
        ).first()

    def get_week(self, org_id: str) -> List[OperatingHours]:
        self.ensure_defaults(org_id)
        return self.db.query(OperatingHours).filter_by(
            org_id=org_id
        ).order_by(OperatingHours.day_of_week).all()

    def ensure_defaults(self, org_id: str) -> bool:
        """
        Seed the default week when the organization has no rows at all.
        Returns True when rows were created by this call.
        """
        exists = self.db.query(OperatingHours.id).filter_by(org_id=org_id).first()
        if exists:
            return False

        for record in default_week():
            self.db.add(self._new_row(org_id, record))

        try:
            self.db.commit()
        except IntegrityError:
            # Another request seeded the same organization first
            self.db.rollback()
            logger.info(f"Default hours for org {org_id} already seeded concurrently")
            return False

        logger.info(f"Seeded default operating hours for org {org_id}")
        return True

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, org_id: str, day_of_week: int, spec: Dict[str, Any]) -> OperatingHours:
        """Create or fully replace the hours for one weekday"""
        record = validate_hours(self._record_from_spec(day_of_week, spec))
        self.ensure_defaults(org_id)

        row = self.db.query(OperatingHours).filter_by(
            org_id=org_id,
            day_of_week=record.day_of_week
        ).first()

        if row is None:
            row = self._new_row(org_id, record)
            self.db.add(row)
        else:
            self._apply(row, record)

        self._commit()
        self.db.refresh(row)
        logger.info(f"Upserted operating hours for org {org_id}, day {record.day_of_week}")
        return row

    def update(self, org_id: str, day_of_week: int, partial: Dict[str, Any]) -> OperatingHours:
        """Merge a partial change into an existing day and revalidate the result"""
        validate_day_of_week(day_of_week)
        self.ensure_defaults(org_id)
        row = self.db.query(OperatingHours).filter_by(
            org_id=org_id,
            day_of_week=day_of_week
        ).first()

        if row is None:
            raise NotFoundError(f"Operating hours for day {day_of_week} not found")

        partial = {k: v for k, v in partial.items() if k != "day_of_week"}
        record = validate_hours(merge_record(HoursRecord.from_model(row), partial))
        self._apply(row, record)

        self._commit()
        self.db.refresh(row)
        return row

    def bulk_set_week(self, org_id: str, specs: Iterable[Dict[str, Any]]) -> List[OperatingHours]:
        """
        Replace all of an organization's hours.
        Every entry is validated before anything is deleted.
        """
        records = []
        seen_days = set()
        for spec in specs:
            record = validate_hours(self._record_from_spec(spec.get("day_of_week"), spec))
            if record.day_of_week in seen_days:
                raise ValidationError("day_of_week", f"Day {record.day_of_week} is listed more than once")
            seen_days.add(record.day_of_week)
            records.append(record)

        if not records:
            raise ValidationError("operating_hours", "At least one day is required")

        self.db.query(OperatingHours).filter_by(org_id=org_id).delete()
        # Deletes must reach the database before the inserts hit the unique key
        self.db.flush()
        rows = [self._new_row(org_id, record) for record in records]
        self.db.add_all(rows)
        self._commit()

        logger.info(f"Replaced weekly schedule for org {org_id} ({len(rows)} days)")
        return sorted(rows, key=lambda r: r.day_of_week)

    def delete_day(self, org_id: str, day_of_week: int) -> None:
        validate_day_of_week(day_of_week)
        self.ensure_defaults(org_id)
        deleted = self.db.query(OperatingHours).filter_by(
            org_id=org_id,
            day_of_week=day_of_week
        ).delete()

        if deleted == 0:
            self.db.rollback()
            raise NotFoundError(f"Operating hours for day {day_of_week} not found")

        self.db.commit()
        logger.info(f"Deleted operating hours for org {org_id}, day {day_of_week}")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _record_from_spec(day_of_week: Any, spec: Dict[str, Any]) -> HoursRecord:
        if day_of_week is None:
            raise ValidationError("day_of_week", "day_of_week is required")
        return HoursRecord(
            day_of_week=day_of_week,
            is_open=spec.get("is_open", True),
            open_time=spec.get("open_time"),
            close_time=spec.get("close_time"),
            lunch_start=spec.get("lunch_start"),
            lunch_end=spec.get("lunch_end"),
        )

    @staticmethod
    def _new_row(org_id: str, record: HoursRecord) -> OperatingHours:
        return OperatingHours(
            org_id=org_id,
            day_of_week=record.day_of_week,
            is_open=record.is_open,
            open_time=record.open_time,
            close_time=record.close_time,
            lunch_start=record.lunch_start,
            lunch_end=record.lunch_end,
        )

    @staticmethod
    def _apply(row: OperatingHours, record: HoursRecord) -> None:
        row.is_open = record.is_open
        row.open_time = record.open_time
        row.close_time = record.close_time
        row.lunch_start = record.lunch_start
        row.lunch_end = record.lunch_end

    def _commit(self) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.error(f"Error saving operating hours: {e}")
            raise

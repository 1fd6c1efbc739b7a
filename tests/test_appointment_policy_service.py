"""Tests for the per-organization appointment policy store."""
import pytest

from shelter_visits.core.errors import ValidationError
from shelter_visits.models import AppointmentPolicy
from shelter_visits.services.policy.appointment_policy_service import AppointmentPolicyService

from conftest import ORG_ID


@pytest.fixture
def service(db):
    return AppointmentPolicyService(db)


class TestDefaults:

    def test_defaults_materialized_on_first_read(self, service, db):
        policy = service.get(ORG_ID)

        assert policy.visit_duration_minutes == 60
        assert policy.slot_interval_minutes == 30
        assert policy.max_concurrent_visits == 1
        assert policy.min_advance_booking_hours == 24
        assert policy.max_advance_booking_days == 30
        assert policy.allow_weekend_bookings is True
        assert policy.timezone == "Europe/Lisbon"
        assert db.query(AppointmentPolicy).count() == 1

    def test_second_read_reuses_row(self, service, db):
        first = service.get(ORG_ID)
        second = service.get(ORG_ID)

        assert first.id == second.id
        assert db.query(AppointmentPolicy).count() == 1

    def test_timezone(self, service):
        assert service.timezone(ORG_ID).zone == "Europe/Lisbon"


class TestUpsert:

    def test_partial_update_keeps_other_fields(self, service):
        policy = service.upsert(ORG_ID, {"visit_duration_minutes": 30, "max_concurrent_visits": 3})

        assert policy.visit_duration_minutes == 30
        assert policy.max_concurrent_visits == 3
        assert policy.slot_interval_minutes == 30
        assert policy.max_advance_booking_days == 30

    def test_change_timezone(self, service):
        assert service.upsert(ORG_ID, {"timezone": "America/Sao_Paulo"}).timezone == "America/Sao_Paulo"

    @pytest.mark.parametrize("partial, field", [
        ({"visit_duration_minutes": 10}, "visit_duration_minutes"),
        ({"slot_interval_minutes": 0}, "slot_interval_minutes"),
        ({"max_concurrent_visits": 0}, "max_concurrent_visits"),
        ({"min_advance_booking_hours": -1}, "min_advance_booking_hours"),
        ({"max_advance_booking_days": 0}, "max_advance_booking_days"),
        ({"visit_duration_minutes": "60"}, "visit_duration_minutes"),
        ({"max_concurrent_visits": True}, "max_concurrent_visits"),
        ({"allow_weekend_bookings": "yes"}, "allow_weekend_bookings"),
        ({"timezone": "Mars/Olympus_Mons"}, "timezone"),
        ({"buffer_minutes": 10}, "buffer_minutes"),
    ])
    def test_rejects_invalid_policy(self, service, partial, field):
        with pytest.raises(ValidationError) as exc_info:
            service.upsert(ORG_ID, partial)

        assert exc_info.value.field == field

    def test_failed_update_leaves_policy_untouched(self, service):
        service.upsert(ORG_ID, {"visit_duration_minutes": 45})

        with pytest.raises(ValidationError):
            service.upsert(ORG_ID, {"visit_duration_minutes": 45, "slot_interval_minutes": 5})

        policy = service.get(ORG_ID)
        assert policy.visit_duration_minutes == 45
        assert policy.slot_interval_minutes == 30

    def test_min_advance_zero_allowed(self, service):
        assert service.upsert(ORG_ID, {"min_advance_booking_hours": 0}).min_advance_booking_hours == 0


class TestLock:

    def test_lock_returns_policy_row(self, service):
        policy = service.lock(ORG_ID)
        assert policy.org_id == ORG_ID

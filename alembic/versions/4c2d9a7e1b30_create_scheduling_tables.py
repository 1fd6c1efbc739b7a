"""create scheduling tables

Revision ID: 4c2d9a7e1b30
Revises:
Create Date: 2026-10-17 10:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '4c2d9a7e1b30'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    # 1. Weekly operating hours
    op.create_table(
        'operating_hours',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('org_id', sa.String(64), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('is_open', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('open_time', sa.String(5), nullable=True),
        sa.Column('close_time', sa.String(5), nullable=True),
        sa.Column('lunch_start', sa.String(5), nullable=True),
        sa.Column('lunch_end', sa.String(5), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.UniqueConstraint('org_id', 'day_of_week', name='uq_operating_hours_org_day'),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_operating_hours_day_of_week')
    )
    op.create_index('ix_operating_hours_org_id', 'operating_hours', ['org_id'])

    # 2. Appointment policy (one row per organization, also the per-org write lock)
    op.create_table(
        'appointment_policies',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('org_id', sa.String(64), nullable=False, unique=True),
        sa.Column('visit_duration_minutes', sa.Integer, nullable=False, server_default='60'),
        sa.Column('slot_interval_minutes', sa.Integer, nullable=False, server_default='30'),
        sa.Column('max_concurrent_visits', sa.Integer, nullable=False, server_default='1'),
        sa.Column('min_advance_booking_hours', sa.Integer, nullable=False, server_default='24'),
        sa.Column('max_advance_booking_days', sa.Integer, nullable=False, server_default='30'),
        sa.Column('allow_weekend_bookings', sa.Boolean, nullable=False, server_default=sa.text('true')),
        sa.Column('timezone', sa.String(50), nullable=False, server_default='UTC'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'))
    )

    # 3. Availability exceptions
    op.create_table(
        'availability_exceptions',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', sa.String(64), nullable=False),
        sa.Column('exception_type', sa.String(20), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('start_time', sa.String(5), nullable=True),
        sa.Column('end_time', sa.String(5), nullable=True),
        sa.Column('reason', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.CheckConstraint("exception_type IN ('blocked', 'available')", name='ck_availability_exceptions_type'),
        sa.CheckConstraint('start_date <= end_date', name='ck_availability_exceptions_range')
    )
    op.create_index(
        'ix_availability_exceptions_org_range',
        'availability_exceptions',
        ['org_id', 'start_date', 'end_date']
    )

    # 4. Visit bookings
    op.create_table(
        'visit_bookings',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()')),
        sa.Column('org_id', sa.String(64), nullable=False),
        sa.Column('pet_id', sa.String(64), nullable=True),
        sa.Column('visitor_name', sa.String(200), nullable=False),
        sa.Column('visitor_email', sa.String(254), nullable=False),
        sa.Column('visitor_phone', sa.String(20), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('scheduled_start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('scheduled_end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='confirmed'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()')),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True)
    )
    op.create_index(
        'ix_visit_bookings_org_window',
        'visit_bookings',
        ['org_id', 'scheduled_start_time', 'scheduled_end_time']
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_visit_bookings_org_window', table_name='visit_bookings')
    op.drop_table('visit_bookings')

    op.drop_index('ix_availability_exceptions_org_range', table_name='availability_exceptions')
    op.drop_table('availability_exceptions')

    op.drop_table('appointment_policies')

    op.drop_index('ix_operating_hours_org_id', table_name='operating_hours')
    op.drop_table('operating_hours')

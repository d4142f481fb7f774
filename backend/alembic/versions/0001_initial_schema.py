"""initial booking schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('type', sa.Text, nullable=False),
        sa.Column('timezone', sa.Text, nullable=False, server_default='UTC'),
        sa.Column('slot_interval', sa.Integer, nullable=False, server_default='30'),
        sa.Column('max_booking_horizon_days', sa.Integer, nullable=False, server_default='30'),
        sa.Column('allow_same_day', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('same_day_cutoff_minutes', sa.Integer, nullable=False, server_default='0'),
        sa.Column('notes_enabled', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('sms_enabled', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint("type IN ('restaurant', 'spa')", name='ck_businesses_type'),
        sa.CheckConstraint('slot_interval IN (15, 30)', name='ck_businesses_slot_interval'),
    )

    op.create_table(
        'business_hours',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('open_time', sa.Text, nullable=False),
        sa.Column('close_time', sa.Text, nullable=False),
        sa.Column('is_closed', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.UniqueConstraint('business_id', 'day_of_week'),
        sa.CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_business_hours_day'),
    )

    op.create_table(
        'restaurant_configs',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('seating_duration_minutes', sa.Integer, nullable=False, server_default='90'),
        sa.Column('buffer_minutes', sa.Integer, nullable=False, server_default='0'),
        sa.Column('max_party_size', sa.Integer, nullable=False, server_default='12'),
    )

    op.create_table(
        'tables',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('capacity', sa.Integer, nullable=False),
        sa.Column('zone', sa.Text),
        sa.Column('tags', sa.Text, nullable=False, server_default='[]'),
        sa.Column('notes', sa.Text),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint('capacity >= 1', name='ck_tables_capacity'),
    )

    op.create_table(
        'services',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('duration_minutes', sa.Integer, nullable=False),
        sa.Column('buffer_minutes', sa.Integer, nullable=False, server_default='0'),
        sa.Column('requires_room', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        'staff',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('email', sa.Text),
        sa.Column('phone', sa.Text),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        'staff_services',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('staff_id', sa.Integer, sa.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False),
        sa.Column('service_id', sa.Integer, sa.ForeignKey('services.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('staff_id', 'service_id'),
    )

    op.create_table(
        'staff_schedules',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('staff_id', sa.Integer, sa.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False),
        sa.Column('day_of_week', sa.Integer, nullable=False),
        sa.Column('start_time', sa.Text, nullable=False),
        sa.Column('end_time', sa.Text, nullable=False),
        sa.Column('is_available', sa.Boolean, nullable=False, server_default=sa.true()),
    )

    op.create_table(
        'staff_schedule_exceptions',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('staff_id', sa.Integer, sa.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Text),
        sa.Column('end_time', sa.Text),
        sa.Column('is_available', sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column('reason', sa.Text),
    )

    op.create_table(
        'rooms',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.Text, nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )

    op.create_table(
        'bookings',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('reference', sa.Text, nullable=False, unique=True),
        sa.Column('customer_name', sa.Text, nullable=False),
        sa.Column('customer_phone', sa.Text, nullable=False),
        sa.Column('booking_date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Text, nullable=False),
        sa.Column('end_time', sa.Text),
        sa.Column('party_size', sa.Integer),
        sa.Column('service_id', sa.Integer, sa.ForeignKey('services.id')),
        sa.Column('notes', sa.Text),
        sa.Column('status', sa.Text, nullable=False, server_default='confirmed'),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.Column('updated_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
        sa.CheckConstraint('(party_size IS NULL) <> (service_id IS NULL)', name='ck_bookings_party_or_service'),
        sa.CheckConstraint("status IN ('confirmed', 'cancelled', 'no_show')", name='ck_bookings_status'),
    )
    op.create_index('idx_bookings_business_date', 'bookings', ['business_id', 'booking_date'])
    op.create_index('idx_bookings_phone', 'bookings', ['business_id', 'customer_phone'])

    op.create_table(
        'booking_assignments',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('booking_id', sa.Integer, sa.ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('resource_type', sa.Text, nullable=False),
        sa.Column('resource_id', sa.Integer, nullable=False),
        sa.CheckConstraint("resource_type IN ('table', 'staff', 'room')", name='ck_booking_assignments_type'),
    )
    op.create_index('idx_booking_assignments_resource', 'booking_assignments', ['resource_type', 'resource_id'])

    op.create_table(
        'slot_holds',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Text, nullable=False),
        sa.Column('end_time', sa.Text, nullable=False),
        sa.Column('resource_type', sa.Text, nullable=False),
        sa.Column('resource_id', sa.Integer, nullable=False),
        sa.Column('expires_at', sa.DateTime, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )
    op.create_index('ix_slot_holds_expires_at', 'slot_holds', ['expires_at'])

    op.create_table(
        'slot_blocks',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('business_id', sa.Integer, sa.ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('start_time', sa.Text, nullable=False),
        sa.Column('end_time', sa.Text, nullable=False),
        sa.Column('resource_type', sa.Text),
        sa.Column('resource_id', sa.Integer),
        sa.Column('reason', sa.Text),
        sa.Column('created_at', sa.DateTime, nullable=False, server_default=sa.func.current_timestamp()),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('slot_blocks')
    op.drop_index('ix_slot_holds_expires_at', table_name='slot_holds')
    op.drop_table('slot_holds')
    op.drop_index('idx_booking_assignments_resource', table_name='booking_assignments')
    op.drop_table('booking_assignments')
    op.drop_index('idx_bookings_phone', table_name='bookings')
    op.drop_index('idx_bookings_business_date', table_name='bookings')
    op.drop_table('bookings')
    op.drop_table('rooms')
    op.drop_table('staff_schedule_exceptions')
    op.drop_table('staff_schedules')
    op.drop_table('staff_services')
    op.drop_table('staff')
    op.drop_table('services')
    op.drop_table('tables')
    op.drop_table('restaurant_configs')
    op.drop_table('business_hours')
    op.drop_table('businesses')

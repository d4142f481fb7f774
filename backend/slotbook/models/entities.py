from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship

from ..errors import ValidationError

Base = declarative_base()
metadata = Base.metadata

BUSINESS_TYPES = ("restaurant", "spa")
RESOURCE_TYPES = ("table", "staff", "room")
BOOKING_STATUSES = ("confirmed", "cancelled", "no_show")


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every DateTime column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Businesses(Base):
    __tablename__ = 'businesses'
    __table_args__ = (
        CheckConstraint("type IN ('restaurant', 'spa')", name='ck_businesses_type'),
        CheckConstraint('slot_interval IN (15, 30)', name='ck_businesses_slot_interval'),
    )

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    type = Column(Text, nullable=False)
    timezone = Column(Text, nullable=False, default='UTC')
    slot_interval = Column(Integer, nullable=False, default=30)
    max_booking_horizon_days = Column(Integer, nullable=False, default=30)
    allow_same_day = Column(Boolean, nullable=False, default=True)
    same_day_cutoff_minutes = Column(Integer, nullable=False, default=0)
    notes_enabled = Column(Boolean, nullable=False, default=True)
    sms_enabled = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    hours = relationship('BusinessHours', back_populates='business', order_by='BusinessHours.day_of_week')
    restaurant_config = relationship('RestaurantConfigs', back_populates='business', uselist=False)


class BusinessHours(Base):
    __tablename__ = 'business_hours'
    __table_args__ = (
        UniqueConstraint('business_id', 'day_of_week'),
        CheckConstraint('day_of_week BETWEEN 0 AND 6', name='ck_business_hours_day'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    open_time = Column(Text, nullable=False)
    close_time = Column(Text, nullable=False)
    is_closed = Column(Boolean, nullable=False, default=False)

    business = relationship('Businesses', back_populates='hours')


class RestaurantConfigs(Base):
    __tablename__ = 'restaurant_configs'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False, unique=True)
    seating_duration_minutes = Column(Integer, nullable=False, default=90)
    buffer_minutes = Column(Integer, nullable=False, default=0)
    max_party_size = Column(Integer, nullable=False, default=12)

    business = relationship('Businesses', back_populates='restaurant_config')


class DiningTables(Base):
    __tablename__ = 'tables'
    __table_args__ = (
        CheckConstraint('capacity >= 1', name='ck_tables_capacity'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    capacity = Column(Integer, nullable=False)
    zone = Column(Text)
    tags = Column(Text, nullable=False, default='[]')
    notes = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Services(Base):
    __tablename__ = 'services'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    buffer_minutes = Column(Integer, nullable=False, default=0)
    requires_room = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Staff(Base):
    __tablename__ = 'staff'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    email = Column(Text)
    phone = Column(Text)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    schedules = relationship('StaffSchedules', back_populates='staff')
    exceptions = relationship('StaffScheduleExceptions', back_populates='staff')


class StaffServices(Base):
    __tablename__ = 'staff_services'
    __table_args__ = (
        UniqueConstraint('staff_id', 'service_id'),
    )

    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)


class StaffSchedules(Base):
    __tablename__ = 'staff_schedules'

    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Integer, nullable=False)  # 0 = Sunday
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)

    staff = relationship('Staff', back_populates='schedules')


class StaffScheduleExceptions(Base):
    __tablename__ = 'staff_schedule_exceptions'

    id = Column(Integer, primary_key=True)
    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    # start_time/end_time NULL with is_available = false means a full day off
    start_time = Column(Text)
    end_time = Column(Text)
    is_available = Column(Boolean, nullable=False, default=False)
    reason = Column(Text)

    staff = relationship('Staff', back_populates='exceptions')


class Rooms(Base):
    __tablename__ = 'rooms'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Bookings(Base):
    __tablename__ = 'bookings'
    __table_args__ = (
        CheckConstraint(
            '(party_size IS NULL) <> (service_id IS NULL)',
            name='ck_bookings_party_or_service',
        ),
        CheckConstraint(
            "status IN ('confirmed', 'cancelled', 'no_show')",
            name='ck_bookings_status',
        ),
        Index('idx_bookings_business_date', 'business_id', 'booking_date'),
        Index('idx_bookings_phone', 'business_id', 'customer_phone'),
    )

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    reference = Column(Text, nullable=False, unique=True)
    customer_name = Column(Text, nullable=False)
    customer_phone = Column(Text, nullable=False)
    booking_date = Column(Date, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text)
    party_size = Column(Integer)
    service_id = Column(ForeignKey('services.id'))
    notes = Column(Text)
    status = Column(Text, nullable=False, default='confirmed')
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    assignments = relationship(
        'BookingAssignments',
        back_populates='booking',
        cascade='all, delete-orphan',
        order_by='BookingAssignments.id',
    )
    service = relationship('Services')

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if (self.party_size is None) == (self.service_id is None):
            raise ValidationError("Exactly one of party_size or service_id must be set")


class BookingAssignments(Base):
    __tablename__ = 'booking_assignments'
    __table_args__ = (
        CheckConstraint(
            "resource_type IN ('table', 'staff', 'room')",
            name='ck_booking_assignments_type',
        ),
        Index('idx_booking_assignments_resource', 'resource_type', 'resource_id'),
    )

    id = Column(Integer, primary_key=True)
    booking_id = Column(ForeignKey('bookings.id', ondelete='CASCADE'), nullable=False)
    resource_type = Column(Text, nullable=False)
    resource_id = Column(Integer, nullable=False)

    booking = relationship('Bookings', back_populates='assignments')


class SlotHolds(Base):
    __tablename__ = 'slot_holds'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    resource_type = Column(Text, nullable=False)
    resource_id = Column(Integer, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class SlotBlocks(Base):
    __tablename__ = 'slot_blocks'

    id = Column(Integer, primary_key=True)
    business_id = Column(ForeignKey('businesses.id', ondelete='CASCADE'), nullable=False)
    date = Column(Date, nullable=False)
    start_time = Column(Text, nullable=False)
    end_time = Column(Text, nullable=False)
    # resource_id NULL = global block for every resource of the business
    resource_type = Column(Text)
    resource_id = Column(Integer)
    reason = Column(Text)
    created_at = Column(DateTime, nullable=False, default=utcnow)

# backend/slotbook/services/store.py
"""
Persistence gateway for the booking engine.

Wraps a SQLAlchemy Session with the handful of queries the availability
and commit services need. Multi-row writes go through transaction(), which
commits on success and rolls back everything on failure; any SQLAlchemy
error leaves this module as StoreError.
"""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from functools import wraps
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from ..errors import StoreError
from ..models import (
    BookingAssignments,
    Bookings,
    BusinessHours,
    Businesses,
    DiningTables,
    RestaurantConfigs,
    Rooms,
    Services,
    SlotBlocks,
    SlotHolds,
    Staff,
    StaffScheduleExceptions,
    StaffSchedules,
    StaffServices,
)

logger = logging.getLogger(__name__)


def _guarded(method):
    """Translate SQLAlchemy failures of a read into StoreError."""

    @wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Store read failed in {method.__name__}: {exc}")
            raise StoreError(f"Storage failure: {method.__name__}") from exc

    return wrapper


class Store:
    """Row-level access to businesses, inventory, bookings, holds and blocks."""

    def __init__(self, db: Session):
        self.db = db
        self._in_transaction = False

    # ── Transactions ─────────────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        """
        All-or-nothing unit of work.

        Nested calls join the outermost transaction.
        """
        if self._in_transaction:
            yield self
            return

        self._in_transaction = True
        try:
            yield self
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Store transaction rolled back: {exc}")
            raise StoreError("Storage failure") from exc
        except Exception:
            self.db.rollback()
            raise
        finally:
            self._in_transaction = False

    # ── Businesses ───────────────────────────────────────────────────────

    @_guarded
    def get_business(self, business_id: int) -> Optional[Businesses]:
        return self.db.get(Businesses, business_id)

    @_guarded
    def get_business_hours(self, business_id: int, day_of_week: int) -> Optional[BusinessHours]:
        return (
            self.db.query(BusinessHours)
            .filter(
                BusinessHours.business_id == business_id,
                BusinessHours.day_of_week == day_of_week,
            )
            .first()
        )

    @_guarded
    def list_business_hours(self, business_id: int) -> list[BusinessHours]:
        return (
            self.db.query(BusinessHours)
            .filter(BusinessHours.business_id == business_id)
            .order_by(BusinessHours.day_of_week)
            .all()
        )

    def replace_business_hours(self, business_id: int, rows: list[dict]) -> list[BusinessHours]:
        with self.transaction():
            for row in self.list_business_hours(business_id):
                self.db.delete(row)
            # Old rows must be gone before the unique (business, day) rows go in
            self.db.flush()
            hours = [BusinessHours(business_id=business_id, **row) for row in rows]
            self.db.add_all(hours)
            self.db.flush()
        return hours

    @_guarded
    def get_restaurant_config(self, business_id: int) -> Optional[RestaurantConfigs]:
        return (
            self.db.query(RestaurantConfigs)
            .filter(RestaurantConfigs.business_id == business_id)
            .first()
        )

    # ── Inventory ────────────────────────────────────────────────────────

    @_guarded
    def list_active_tables(self, business_id: int) -> list[DiningTables]:
        """Active tables, smallest capacity first."""
        return (
            self.db.query(DiningTables)
            .filter(
                DiningTables.business_id == business_id,
                DiningTables.is_active.is_(True),
            )
            .order_by(DiningTables.capacity, DiningTables.id)
            .all()
        )

    @_guarded
    def get_active_service(self, business_id: int, service_id: int) -> Optional[Services]:
        return (
            self.db.query(Services)
            .filter(
                Services.id == service_id,
                Services.business_id == business_id,
                Services.is_active.is_(True),
            )
            .first()
        )

    @_guarded
    def list_active_services(self, business_id: int) -> list[Services]:
        return (
            self.db.query(Services)
            .filter(Services.business_id == business_id, Services.is_active.is_(True))
            .order_by(Services.id)
            .all()
        )

    @_guarded
    def get_service(self, service_id: int) -> Optional[Services]:
        return self.db.get(Services, service_id)

    @_guarded
    def list_qualified_staff(
        self,
        business_id: int,
        service_id: int,
        staff_id: Optional[int] = None,
    ) -> list[Staff]:
        """Active staff able to perform service_id, optionally narrowed to one member."""
        query = (
            self.db.query(Staff)
            .join(StaffServices, StaffServices.staff_id == Staff.id)
            .filter(
                Staff.business_id == business_id,
                Staff.is_active.is_(True),
                StaffServices.service_id == service_id,
            )
        )
        if staff_id is not None:
            query = query.filter(Staff.id == staff_id)
        return query.order_by(Staff.id).all()

    @_guarded
    def list_active_staff(self, business_id: int) -> list[Staff]:
        return (
            self.db.query(Staff)
            .filter(Staff.business_id == business_id, Staff.is_active.is_(True))
            .order_by(Staff.id)
            .all()
        )

    @_guarded
    def list_active_rooms(self, business_id: int) -> list[Rooms]:
        return (
            self.db.query(Rooms)
            .filter(Rooms.business_id == business_id, Rooms.is_active.is_(True))
            .order_by(Rooms.id)
            .all()
        )

    @_guarded
    def list_staff_schedules(self, staff_id: int, day_of_week: int) -> list[StaffSchedules]:
        return (
            self.db.query(StaffSchedules)
            .filter(
                StaffSchedules.staff_id == staff_id,
                StaffSchedules.day_of_week == day_of_week,
                StaffSchedules.is_available.is_(True),
            )
            .order_by(StaffSchedules.start_time)
            .all()
        )

    @_guarded
    def list_staff_exceptions(self, staff_id: int, on_date: date) -> list[StaffScheduleExceptions]:
        return (
            self.db.query(StaffScheduleExceptions)
            .filter(
                StaffScheduleExceptions.staff_id == staff_id,
                StaffScheduleExceptions.date == on_date,
            )
            .all()
        )

    # ── Occupancy ────────────────────────────────────────────────────────

    @_guarded
    def booked_intervals(
        self,
        business_id: int,
        on_date: date,
        resource_type: str,
        resource_ids: list[int],
        exclude_booking_id: Optional[int] = None,
    ) -> list[tuple[int, str, Optional[str]]]:
        """(resource_id, start_time, end_time) of confirmed bookings holding any of resource_ids."""
        if not resource_ids:
            return []

        query = (
            self.db.query(
                BookingAssignments.resource_id,
                Bookings.start_time,
                Bookings.end_time,
            )
            .join(Bookings, BookingAssignments.booking_id == Bookings.id)
            .filter(
                Bookings.business_id == business_id,
                Bookings.booking_date == on_date,
                Bookings.status == "confirmed",
                BookingAssignments.resource_type == resource_type,
                BookingAssignments.resource_id.in_(resource_ids),
            )
        )
        if exclude_booking_id is not None:
            query = query.filter(Bookings.id != exclude_booking_id)
        return [tuple(row) for row in query.all()]

    @_guarded
    def active_holds(
        self,
        business_id: int,
        on_date: date,
        resource_type: str,
        resource_ids: list[int],
        now: datetime,
    ) -> list[SlotHolds]:
        if not resource_ids:
            return []

        return (
            self.db.query(SlotHolds)
            .filter(
                SlotHolds.business_id == business_id,
                SlotHolds.date == on_date,
                SlotHolds.resource_type == resource_type,
                SlotHolds.resource_id.in_(resource_ids),
                SlotHolds.expires_at > now,
            )
            .all()
        )

    @_guarded
    def list_blocks(self, business_id: int, on_date: Optional[date] = None) -> list[SlotBlocks]:
        query = self.db.query(SlotBlocks).filter(SlotBlocks.business_id == business_id)
        if on_date is not None:
            query = query.filter(SlotBlocks.date == on_date)
        return query.order_by(SlotBlocks.date, SlotBlocks.start_time, SlotBlocks.id).all()

    def add_block(self, business_id: int, **fields) -> SlotBlocks:
        block = SlotBlocks(business_id=business_id, **fields)
        with self.transaction():
            self.db.add(block)
            self.db.flush()
        return block

    def delete_block(self, business_id: int, block_id: int) -> bool:
        with self.transaction():
            deleted = (
                self.db.query(SlotBlocks)
                .filter(SlotBlocks.id == block_id, SlotBlocks.business_id == business_id)
                .delete(synchronize_session=False)
            )
        return deleted > 0

    # ── Holds ────────────────────────────────────────────────────────────

    def add_holds(self, holds: list[SlotHolds]) -> list[int]:
        """Insert every hold or none of them."""
        with self.transaction():
            self.db.add_all(holds)
            self.db.flush()
            ids = [hold.id for hold in holds]
        return ids

    def delete_holds(self, hold_ids: Iterable[int]) -> int:
        hold_ids = list(hold_ids)
        if not hold_ids:
            return 0
        with self.transaction():
            deleted = (
                self.db.query(SlotHolds)
                .filter(SlotHolds.id.in_(hold_ids))
                .delete(synchronize_session=False)
            )
        return deleted

    def delete_expired_holds(self, now: datetime) -> int:
        with self.transaction():
            deleted = (
                self.db.query(SlotHolds)
                .filter(SlotHolds.expires_at <= now)
                .delete(synchronize_session=False)
            )
        return deleted

    # ── Bookings ─────────────────────────────────────────────────────────

    @_guarded
    def get_booking(self, booking_id: int) -> Optional[Bookings]:
        return (
            self.db.query(Bookings)
            .options(selectinload(Bookings.assignments))
            .filter(Bookings.id == booking_id)
            .first()
        )

    @_guarded
    def get_booking_by_reference(self, reference: str) -> Optional[Bookings]:
        return (
            self.db.query(Bookings)
            .options(selectinload(Bookings.assignments))
            .filter(Bookings.reference == reference)
            .first()
        )

    @_guarded
    def reference_exists(self, reference: str) -> bool:
        return (
            self.db.query(Bookings.id).filter(Bookings.reference == reference).first()
            is not None
        )

    @_guarded
    def bookings_by_phone(self, business_id: int, phone: str, from_date: date) -> list[Bookings]:
        """Upcoming confirmed bookings of one customer."""
        return (
            self.db.query(Bookings)
            .options(selectinload(Bookings.assignments))
            .filter(
                Bookings.business_id == business_id,
                Bookings.customer_phone == phone,
                Bookings.booking_date >= from_date,
                Bookings.status == "confirmed",
            )
            .order_by(Bookings.booking_date, Bookings.start_time)
            .all()
        )

    @_guarded
    def list_bookings(
        self,
        business_id: int,
        on_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[Bookings]:
        query = (
            self.db.query(Bookings)
            .options(selectinload(Bookings.assignments))
            .filter(Bookings.business_id == business_id)
        )
        if on_date is not None:
            query = query.filter(Bookings.booking_date == on_date)
        if status is not None:
            query = query.filter(Bookings.status == status)
        return query.order_by(Bookings.booking_date, Bookings.start_time, Bookings.id).all()

    def add_booking(self, resources: list, **fields) -> Bookings:
        """Insert a booking together with one assignment per resource."""
        with self.transaction():
            booking = Bookings(**fields)
            booking.assignments = self._build_assignments(resources)
            self.db.add(booking)
            self.db.flush()
        self.db.refresh(booking)
        return booking

    def update_booking(self, booking: Bookings, resources: Optional[list] = None, **fields) -> Bookings:
        """Update columns in place; when resources is given, replace every assignment."""
        with self.transaction():
            for key, value in fields.items():
                setattr(booking, key, value)
            if resources is not None:
                # delete-orphan removes the previous assignments
                booking.assignments = self._build_assignments(resources)
            self.db.flush()
        self.db.refresh(booking)
        return booking

    def update_assignment(self, assignment: BookingAssignments, resource_id: int) -> BookingAssignments:
        with self.transaction():
            assignment.resource_id = resource_id
            self.db.flush()
        return assignment

    def delete_booking(self, booking_id: int) -> None:
        """Compensating cleanup for a booking whose commit could not be completed."""
        with self.transaction():
            booking = self.db.get(Bookings, booking_id)
            if booking is not None:
                self.db.delete(booking)

    @staticmethod
    def _build_assignments(resources: list) -> list[BookingAssignments]:
        return [
            BookingAssignments(resource_type=resource.type, resource_id=resource.id)
            for resource in resources
        ]

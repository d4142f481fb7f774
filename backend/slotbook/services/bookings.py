# backend/slotbook/services/bookings.py
"""
Booking commit service.

create:  recompute availability → take hold → write booking + assignments
         → release hold → notify
modify:  re-validate the new slot and replace assignments (notes-only
         patches skip re-validation)
cancel / mark_no_show / reassign: status and assignment transitions

Status model: confirmed → cancelled, confirmed → no_show. Both targets
are terminal.

Concurrency note: the hold is an advisory lease. Two requests that read
occupancy before either has written its hold can both pass the
availability check; the window between the read and the hold insert is
not closed here. The booking row and its assignments are written in one
transaction, so no caller ever sees a booking without its assignments.
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ..errors import (
    BookingNotFound,
    BusinessNotFound,
    InvalidStateError,
    SlotUnavailableError,
    StoreError,
    ValidationError,
)
from ..models import Bookings, Businesses, utcnow
from ..schemas.bookings import BookingCreate, BookingUpdate
from .holds import HoldManager
from .notifier import Notifier
from .reference import generate_booking_reference
from .slots.availability import AvailabilityService
from .slots.generator import Slot
from .store import Store

logger = logging.getLogger(__name__)

REFERENCE_ATTEMPTS = 5
RESCHEDULE_FIELDS = ("date", "start_time", "party_size", "service_id")


class BookingCommitService:
    def __init__(
        self,
        store: Store,
        availability: AvailabilityService,
        holds: HoldManager,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = utcnow,
        reference_factory: Callable[[], str] = generate_booking_reference,
    ):
        self.store = store
        self.availability = availability
        self.holds = holds
        self.notifier = notifier or Notifier()
        self.clock = clock
        self.reference_factory = reference_factory

    # ── Create ───────────────────────────────────────────────────────────

    def create(self, business_id: int, request: BookingCreate) -> Bookings:
        business = self.store.get_business(business_id)
        if not business:
            raise BusinessNotFound(f"Business {business_id} not found")

        self._check_discriminator(business, request.party_size, request.service_id)

        # Full day, no time-range narrowing
        slot = self._find_slot(
            self.availability.slots_for(
                business,
                request.date,
                party_size=request.party_size,
                service_id=request.service_id,
                staff_id=request.staff_id,
            ),
            request.start_time,
        )
        if slot is None:
            logger.warning(
                f"Slot unavailable: business={business_id} date={request.date} time={request.start_time}"
            )
            raise SlotUnavailableError("Selected time slot is no longer available")

        hold_ids = self.holds.create_hold(
            business.id, request.date, slot.start_time, slot.end_time, slot.resources
        )

        try:
            now = self.clock()
            booking = self.store.add_booking(
                slot.resources,
                business_id=business.id,
                reference=self._new_reference(),
                customer_name=request.customer_name,
                customer_phone=request.customer_phone,
                booking_date=request.date,
                start_time=slot.start_time,
                end_time=slot.end_time,
                party_size=request.party_size if business.type == "restaurant" else None,
                service_id=request.service_id if business.type == "spa" else None,
                notes=request.notes or None,
                status="confirmed",
                created_at=now,
                updated_at=now,
            )
        except Exception:
            self._release_after_failure(hold_ids)
            raise

        try:
            self.holds.release_holds(hold_ids)
        except StoreError:
            logger.warning(f"Hold release failed, rolling back booking {booking.id}")
            self.store.delete_booking(booking.id)
            raise

        logger.info(
            f"Booking created: id={booking.id} ref={booking.reference} business={business.id} "
            f"date={booking.booking_date} {booking.start_time}-{booking.end_time} "
            f"resources={[(r.type, r.id) for r in slot.resources]}"
        )

        if business.sms_enabled:
            service = self.store.get_service(booking.service_id) if booking.service_id else None
            self._notify("notify_created", booking, business, service)

        return booking

    # ── Modify ───────────────────────────────────────────────────────────

    def modify(self, booking_id: int, patch: BookingUpdate) -> Bookings:
        booking = self._get_confirmed(booking_id, "Cannot modify a cancelled or no-show booking")
        business = self._get_business(booking.business_id)

        changes = {
            name: getattr(patch, name)
            for name in patch.model_fields_set
            if getattr(patch, name) is not None or name == "notes"
        }

        if not any(name in changes for name in RESCHEDULE_FIELDS):
            fields = {"updated_at": self.clock()}
            if "notes" in changes:
                fields["notes"] = changes["notes"]
            booking = self.store.update_booking(booking, **fields)
            logger.info(f"Booking notes updated: id={booking.id}")
            return booking

        new_date: date = changes.get("date", booking.booking_date)
        new_time: str = changes.get("start_time", booking.start_time)
        party_size = changes.get("party_size", booking.party_size)
        service_id = changes.get("service_id", booking.service_id)
        self._check_discriminator(business, party_size, service_id)

        slot = self._find_slot(
            self.availability.slots_for(
                business,
                new_date,
                party_size=party_size,
                service_id=service_id,
                exclude_booking_id=booking.id,
            ),
            new_time,
        )
        if slot is None:
            logger.warning(f"Slot unavailable for modification: booking={booking.id} {new_date} {new_time}")
            raise SlotUnavailableError("Selected time slot is not available")

        fields = {
            "booking_date": new_date,
            "start_time": slot.start_time,
            "end_time": slot.end_time,
            "party_size": party_size if business.type == "restaurant" else None,
            "service_id": service_id if business.type == "spa" else None,
            "updated_at": self.clock(),
        }
        if "notes" in changes:
            fields["notes"] = changes["notes"]

        booking = self.store.update_booking(booking, resources=slot.resources, **fields)
        logger.info(
            f"Booking modified: id={booking.id} date={booking.booking_date} "
            f"{booking.start_time}-{booking.end_time}"
        )

        if business.sms_enabled:
            self._notify("notify_modified", booking, business)

        return booking

    # ── Status transitions ───────────────────────────────────────────────

    def cancel(self, booking_id: int) -> Bookings:
        booking = self._get_confirmed(booking_id, "Booking is already cancelled or marked as no-show")
        booking = self.store.update_booking(booking, status="cancelled", updated_at=self.clock())
        logger.info(f"Booking cancelled: id={booking.id} ref={booking.reference}")

        business = self.store.get_business(booking.business_id)
        if business and business.sms_enabled:
            self._notify("notify_cancelled", booking, business)

        return booking

    def mark_no_show(self, booking_id: int) -> Bookings:
        # No status precondition: a cancelled booking can still be marked no-show.
        booking = self._get_booking(booking_id)
        if booking.status != "confirmed":
            logger.warning(f"Marking {booking.status} booking {booking.id} as no-show")

        booking = self.store.update_booking(booking, status="no_show", updated_at=self.clock())
        logger.info(f"Booking marked no-show: id={booking.id}")
        return booking

    def reassign(self, booking_id: int, resource_type: str, new_resource_id: int) -> Bookings:
        """
        Manager override: point the assignment of resource_type at another resource.

        The new resource is not checked for conflicts.
        """
        booking = self._get_confirmed(booking_id, "Booking not found or not confirmed")

        assignment = next(
            (a for a in booking.assignments if a.resource_type == resource_type),
            None,
        )
        if assignment is None:
            raise ValidationError("No assignment found for this resource type")

        old_resource_id = assignment.resource_id
        with self.store.transaction():
            self.store.update_assignment(assignment, new_resource_id)
            booking = self.store.update_booking(booking, updated_at=self.clock())
        logger.info(
            f"Booking reassigned: id={booking.id} {resource_type} {old_resource_id} → {new_resource_id}"
        )
        return booking

    # ── Lookups ──────────────────────────────────────────────────────────

    def get_booking_by_id(self, booking_id: int) -> Optional[Bookings]:
        return self.store.get_booking(booking_id)

    def get_booking_by_reference(self, reference: str) -> Optional[Bookings]:
        return self.store.get_booking_by_reference(reference)

    def get_bookings_by_phone(self, business_id: int, phone: str, today: date) -> list[Bookings]:
        return self.store.bookings_by_phone(business_id, phone, today)

    def list_bookings(
        self,
        business_id: int,
        target_date: Optional[date] = None,
        status: Optional[str] = None,
    ) -> list[Bookings]:
        return self.store.list_bookings(business_id, target_date, status)

    # ── Helpers ──────────────────────────────────────────────────────────

    @staticmethod
    def _find_slot(slots: list[Slot], start_time: str) -> Optional[Slot]:
        return next((s for s in slots if s.start_time == start_time), None)

    @staticmethod
    def _check_discriminator(
        business: Businesses,
        party_size: Optional[int],
        service_id: Optional[int],
    ) -> None:
        if business.type == "restaurant" and not party_size:
            raise ValidationError("Party size is required for restaurant bookings")
        if business.type == "spa" and not service_id:
            raise ValidationError("Service ID is required for spa bookings")

    def _get_business(self, business_id: int) -> Businesses:
        business = self.store.get_business(business_id)
        if not business:
            raise BusinessNotFound(f"Business {business_id} not found")
        return business

    def _get_booking(self, booking_id: int) -> Bookings:
        booking = self.store.get_booking(booking_id)
        if not booking:
            raise BookingNotFound(f"Booking {booking_id} not found")
        return booking

    def _get_confirmed(self, booking_id: int, message: str) -> Bookings:
        booking = self._get_booking(booking_id)
        if booking.status != "confirmed":
            raise InvalidStateError(message)
        return booking

    def _new_reference(self) -> str:
        for _ in range(REFERENCE_ATTEMPTS):
            reference = self.reference_factory()
            if not self.store.reference_exists(reference):
                return reference
        raise StoreError("Could not generate a unique booking reference")

    def _release_after_failure(self, hold_ids: list[int]) -> None:
        try:
            self.holds.release_holds(hold_ids)
        except Exception:
            # The first error wins; the lease expires on its own.
            logger.exception(f"Failed to release holds {hold_ids} after booking failure")

    def _notify(self, method: str, *args) -> None:
        """Fire-and-forget: a notification failure never fails the booking."""
        try:
            getattr(self.notifier, method)(*args)
        except Exception:
            logger.exception(f"Notification {method} failed for booking {args[0].id}")

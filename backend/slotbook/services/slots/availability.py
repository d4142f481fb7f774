# backend/slotbook/services/slots/availability.py
"""
Availability for a business day.

Wires inventory → occupancy → generator → allocator for the two business
archetypes:
- restaurant: party_size, slot length = seating duration + buffer
- spa: service (+ optional staff preference), slot length = service duration + buffer
"""

import logging
from datetime import date, datetime
from typing import Callable, Optional

from ...errors import BusinessNotFound, ValidationError
from ...models import Businesses, utcnow
from ..store import Store
from .allocator import StaffAllocator, TableAllocator, staff_windows_for_date
from .generator import Slot, SlotGenerator
from .inventory import ResourceInventoryResolver
from .occupancy import OccupancyLedger

logger = logging.getLogger(__name__)

DEFAULT_SEATING_DURATION = 90


class AvailabilityService:
    def __init__(
        self,
        store: Store,
        clock: Callable[[], datetime] = utcnow,
        default_seating_duration: int = DEFAULT_SEATING_DURATION,
        default_buffer: int = 0,
    ):
        self.store = store
        self.clock = clock
        self.default_seating_duration = default_seating_duration
        self.default_buffer = default_buffer
        self.resolver = ResourceInventoryResolver(store)
        self.generator = SlotGenerator(store)

    def get_business(self, business_id: int) -> Businesses:
        business = self.store.get_business(business_id)
        if not business:
            raise BusinessNotFound(f"Business {business_id} not found")
        return business

    def get_availability(
        self,
        business_id: int,
        target_date: date,
        party_size: Optional[int] = None,
        service_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        time_range: Optional[tuple[str, str]] = None,
    ) -> list[Slot]:
        business = self.get_business(business_id)
        return self.slots_for(
            business,
            target_date,
            party_size=party_size,
            service_id=service_id,
            staff_id=staff_id,
            time_range=time_range,
        )

    def slots_for(
        self,
        business: Businesses,
        target_date: date,
        party_size: Optional[int] = None,
        service_id: Optional[int] = None,
        staff_id: Optional[int] = None,
        time_range: Optional[tuple[str, str]] = None,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Slot]:
        """Dispatch on business type; the matching discriminator is required."""
        if business.type == "restaurant":
            if not party_size:
                raise ValidationError("party_size is required for restaurant bookings")
            return self.restaurant_slots(
                business, target_date, party_size, time_range, exclude_booking_id
            )

        if not service_id:
            raise ValidationError("service_id is required for spa bookings")
        return self.spa_slots(
            business, target_date, service_id, staff_id, time_range, exclude_booking_id
        )

    def seating_duration(self, business: Businesses) -> int:
        """Seating duration + buffer from the restaurant config, or the defaults."""
        config = self.store.get_restaurant_config(business.id)
        if config:
            return config.seating_duration_minutes + (config.buffer_minutes or 0)
        return self.default_seating_duration + self.default_buffer

    def restaurant_slots(
        self,
        business: Businesses,
        target_date: date,
        party_size: int,
        time_range: Optional[tuple[str, str]] = None,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Slot]:
        if self.generator.opening_window(business, target_date, time_range) is None:
            return []

        inventory = self.resolver.for_party(business, party_size)
        if inventory.is_empty:
            return []

        duration = self.seating_duration(business)
        ledger = OccupancyLedger.load(
            self.store,
            business.id,
            target_date,
            "table",
            [t.id for t in inventory.pool],
            now=self.clock(),
            fallback_duration=duration,
            exclude_booking_id=exclude_booking_id,
        )
        allocator = TableAllocator(inventory, ledger)

        slots = self.generator.generate(business, target_date, duration, allocator.allocate, time_range)
        logger.debug(
            f"Restaurant availability: business={business.id} date={target_date} "
            f"party_size={party_size} slots={len(slots)}"
        )
        return slots

    def spa_slots(
        self,
        business: Businesses,
        target_date: date,
        service_id: int,
        staff_id: Optional[int] = None,
        time_range: Optional[tuple[str, str]] = None,
        exclude_booking_id: Optional[int] = None,
    ) -> list[Slot]:
        if self.generator.opening_window(business, target_date, time_range) is None:
            return []

        inventory = self.resolver.for_service(business, service_id, staff_id)
        if inventory.is_empty:
            return []

        service = inventory.service
        duration = service.duration_minutes + (service.buffer_minutes or 0)
        now = self.clock()

        staff_ledger = OccupancyLedger.load(
            self.store,
            business.id,
            target_date,
            "staff",
            [s.id for s in inventory.staff],
            now=now,
            fallback_duration=duration,
            exclude_booking_id=exclude_booking_id,
        )

        room_ledger = None
        if service.requires_room:
            room_ledger = OccupancyLedger.load(
                self.store,
                business.id,
                target_date,
                "room",
                [r.id for r in inventory.rooms],
                now=now,
                fallback_duration=duration,
                exclude_booking_id=exclude_booking_id,
            )

        staff_windows = {
            member.id: staff_windows_for_date(self.store, member.id, target_date)
            for member in inventory.staff
        }
        allocator = StaffAllocator(inventory, staff_ledger, room_ledger, staff_windows)

        slots = self.generator.generate(business, target_date, duration, allocator.allocate, time_range)
        logger.debug(
            f"Spa availability: business={business.id} date={target_date} "
            f"service={service_id} staff={staff_id} slots={len(slots)}"
        )
        return slots

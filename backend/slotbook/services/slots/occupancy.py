# backend/slotbook/services/slots/occupancy.py
"""
Occupancy of one resource type for one business day.

Three sources count as occupied:
✓ confirmed bookings assigned to the resource
✓ holds whose lease has not expired (expires_at > now)
✓ blocks, global (resource_id NULL) or scoped to the resource

Everything is loaded once per query; is_available() then answers from
memory for every (resource, candidate slot) pair.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..store import Store
from .timemath import overlaps, to_minutes


@dataclass(frozen=True)
class Occupancy:
    resource_id: Optional[int]
    start: int
    end: int


@dataclass
class OccupancyLedger:
    bookings: list[Occupancy] = field(default_factory=list)
    holds: list[Occupancy] = field(default_factory=list)
    global_blocks: list[Occupancy] = field(default_factory=list)
    resource_blocks: list[Occupancy] = field(default_factory=list)

    @classmethod
    def load(
        cls,
        store: Store,
        business_id: int,
        on_date: date,
        resource_type: str,
        resource_ids: list[int],
        now: datetime,
        fallback_duration: int = 0,
        exclude_booking_id: Optional[int] = None,
    ) -> "OccupancyLedger":
        """
        Load bookings, live holds and blocks for resource_ids on on_date.

        A booking without end_time occupies start_time + fallback_duration.
        exclude_booking_id leaves one booking out (used when moving it).
        """
        bookings = []
        for resource_id, start_time, end_time in store.booked_intervals(
            business_id, on_date, resource_type, resource_ids, exclude_booking_id
        ):
            start = to_minutes(start_time)
            end = to_minutes(end_time) if end_time else start + fallback_duration
            bookings.append(Occupancy(resource_id, start, end))

        holds = [
            Occupancy(h.resource_id, to_minutes(h.start_time), to_minutes(h.end_time))
            for h in store.active_holds(business_id, on_date, resource_type, resource_ids, now)
        ]

        wanted = set(resource_ids)
        global_blocks = []
        resource_blocks = []
        for block in store.list_blocks(business_id, on_date):
            entry = Occupancy(block.resource_id, to_minutes(block.start_time), to_minutes(block.end_time))
            if block.resource_id is None:
                global_blocks.append(entry)
            elif block.resource_type == resource_type and block.resource_id in wanted:
                resource_blocks.append(entry)

        return cls(
            bookings=bookings,
            holds=holds,
            global_blocks=global_blocks,
            resource_blocks=resource_blocks,
        )

    def is_available(self, resource_id: int, slot_start, slot_end) -> bool:
        start, end = to_minutes(slot_start), to_minutes(slot_end)

        for block in self.global_blocks:
            if overlaps(start, end, block.start, block.end):
                return False

        for source in (self.resource_blocks, self.bookings, self.holds):
            for entry in source:
                if entry.resource_id == resource_id and overlaps(start, end, entry.start, entry.end):
                    return False

        return True

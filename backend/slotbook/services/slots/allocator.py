# backend/slotbook/services/slots/allocator.py
"""
Resource selection for a single candidate window.

Policy is first-fit, not best-fit:

Restaurant
  1. The first free table (smallest capacity) that seats the party alone.
  2. Otherwise the first pair of free tables in one zone whose capacities
     add up to the party size. Zones in discovery order, pairs (i, j), i < j,
     in table order. Never three tables, never across zones.

Spa
  The first qualified staff member who works the whole window on that date
  and is free; when the service needs a room, the first free room too.
"""

from datetime import date
from typing import Optional

from ..store import Store
from .generator import day_of_week
from .inventory import ResourceRef, StaffInventory, TableInventory
from .occupancy import OccupancyLedger
from .timemath import fits_within, subtract_window, to_minutes


class TableAllocator:
    def __init__(self, inventory: TableInventory, ledger: OccupancyLedger):
        self.inventory = inventory
        self.ledger = ledger

    def allocate(self, start: int, end: int) -> Optional[list[ResourceRef]]:
        party_size = self.inventory.party_size

        for table in self.inventory.suitable:
            if self.ledger.is_available(table.id, start, end):
                return [ResourceRef("table", table.id, table.name)]

        free = [t for t in self.inventory.pool if self.ledger.is_available(t.id, start, end)]

        zones: dict = {}
        for table in free:
            zones.setdefault(table.zone, []).append(table)

        for zone_tables in zones.values():
            for i in range(len(zone_tables)):
                for j in range(i + 1, len(zone_tables)):
                    first, second = zone_tables[i], zone_tables[j]
                    if first.capacity + second.capacity >= party_size:
                        return [
                            ResourceRef("table", first.id, first.name),
                            ResourceRef("table", second.id, second.name),
                        ]
        return None


def staff_windows_for_date(store: Store, staff_id: int, target_date: date) -> list[tuple[int, int]]:
    """
    Working windows of one staff member on target_date, in minutes.

    Exceptions for the date win over the weekly schedule:
    - a full-day-off exception (no times, not available) → no windows
    - available exception windows replace the weekly schedule
    - unavailable exception windows are cut out of whatever applies
    """
    exceptions = store.list_staff_exceptions(staff_id, target_date)

    if any(not e.is_available and not e.start_time for e in exceptions):
        return []

    available = [e for e in exceptions if e.is_available and e.start_time and e.end_time]
    if available:
        windows = [(to_minutes(e.start_time), to_minutes(e.end_time)) for e in available]
    else:
        windows = [
            (to_minutes(s.start_time), to_minutes(s.end_time))
            for s in store.list_staff_schedules(staff_id, day_of_week(target_date))
        ]

    for e in exceptions:
        if not e.is_available and e.start_time and e.end_time:
            windows = subtract_window(windows, to_minutes(e.start_time), to_minutes(e.end_time))

    return windows


class StaffAllocator:
    def __init__(
        self,
        inventory: StaffInventory,
        staff_ledger: OccupancyLedger,
        room_ledger: Optional[OccupancyLedger],
        staff_windows: dict[int, list[tuple[int, int]]],
    ):
        self.inventory = inventory
        self.staff_ledger = staff_ledger
        self.room_ledger = room_ledger
        self.staff_windows = staff_windows

    def allocate(self, start: int, end: int) -> Optional[list[ResourceRef]]:
        requires_room = self.inventory.service.requires_room

        for member in self.inventory.staff:
            windows = self.staff_windows.get(member.id, [])
            if not any(fits_within(start, end, w_start, w_end) for w_start, w_end in windows):
                continue

            if not self.staff_ledger.is_available(member.id, start, end):
                continue

            resources = [ResourceRef("staff", member.id, member.name)]

            if requires_room:
                room = self._free_room(start, end)
                if room is None:
                    continue
                resources.append(ResourceRef("room", room.id, room.name))

            return resources
        return None

    def _free_room(self, start: int, end: int):
        if self.room_ledger is None:
            return None
        for room in self.inventory.rooms:
            if self.room_ledger.is_available(room.id, start, end):
                return room
        return None

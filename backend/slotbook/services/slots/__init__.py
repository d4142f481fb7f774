# backend/slotbook/services/slots/__init__.py
"""
Slot availability module.

inventory → occupancy → generator → allocator, assembled by AvailabilityService.
"""

from .allocator import StaffAllocator, TableAllocator, staff_windows_for_date
from .availability import AvailabilityService
from .generator import Slot, SlotGenerator, candidate_windows, day_of_week
from .inventory import ResourceInventoryResolver, ResourceRef, StaffInventory, TableInventory
from .occupancy import Occupancy, OccupancyLedger
from .timemath import overlaps, to_hhmm, to_minutes

__all__ = [
    "AvailabilityService",
    "Occupancy",
    "OccupancyLedger",
    "ResourceInventoryResolver",
    "ResourceRef",
    "Slot",
    "SlotGenerator",
    "StaffAllocator",
    "StaffInventory",
    "TableAllocator",
    "TableInventory",
    "candidate_windows",
    "day_of_week",
    "overlaps",
    "staff_windows_for_date",
    "to_hhmm",
    "to_minutes",
]

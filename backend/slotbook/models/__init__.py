from .entities import (
    Base,
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
    metadata,
    utcnow,
)

__all__ = [
    "Base",
    "BookingAssignments",
    "Bookings",
    "BusinessHours",
    "Businesses",
    "DiningTables",
    "RestaurantConfigs",
    "Rooms",
    "Services",
    "SlotBlocks",
    "SlotHolds",
    "Staff",
    "StaffScheduleExceptions",
    "StaffSchedules",
    "StaffServices",
    "metadata",
    "utcnow",
]

# backend/slotbook/services/slots/inventory.py
"""
Candidate resources for an availability request.

Restaurant: active tables, smallest capacity first. `suitable` holds the
tables that seat the party alone; `pool` holds every active table, which
the allocator needs for table joining.

Spa: active staff qualified for the service (narrowed to the preferred
member when one is given), plus active rooms when the service needs one.

An empty inventory is not an error, it simply yields no slots.
"""

from dataclasses import dataclass, field
from typing import Optional

from ...errors import ServiceNotFound
from ...models import Businesses, DiningTables, Rooms, Services, Staff
from ..store import Store


@dataclass(frozen=True)
class ResourceRef:
    """A resource as it appears in a slot and in a booking assignment."""
    type: str  # "table" / "staff" / "room"
    id: int
    name: str

    def to_dict(self) -> dict:
        return {"type": self.type, "id": self.id, "name": self.name}


@dataclass
class TableInventory:
    party_size: int
    suitable: list[DiningTables] = field(default_factory=list)
    pool: list[DiningTables] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.pool


@dataclass
class StaffInventory:
    service: Services
    staff: list[Staff] = field(default_factory=list)
    rooms: list[Rooms] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        if not self.staff:
            return True
        return self.service.requires_room and not self.rooms


class ResourceInventoryResolver:
    def __init__(self, store: Store):
        self.store = store

    def for_party(self, business: Businesses, party_size: int) -> TableInventory:
        tables = self.store.list_active_tables(business.id)
        return TableInventory(
            party_size=party_size,
            suitable=[t for t in tables if t.capacity >= party_size],
            pool=tables,
        )

    def for_service(
        self,
        business: Businesses,
        service_id: int,
        staff_id: Optional[int] = None,
    ) -> StaffInventory:
        service = self.store.get_active_service(business.id, service_id)
        if not service:
            raise ServiceNotFound(f"Service {service_id} not found")

        staff = self.store.list_qualified_staff(business.id, service_id, staff_id)
        rooms = self.store.list_active_rooms(business.id) if service.requires_room else []
        return StaffInventory(service=service, staff=staff, rooms=rooms)

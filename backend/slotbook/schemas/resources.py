# backend/slotbook/schemas/resources.py

from typing import Optional

from pydantic import BaseModel

from .hours import BusinessHoursItem


class ResourceRead(BaseModel):
    id: int
    name: str
    is_active: bool

    # tables only
    capacity: Optional[int] = None
    zone: Optional[str] = None

    model_config = {"from_attributes": True}


class ResourceListResponse(BaseModel):
    type: str
    resources: list[ResourceRead]


class CatalogBusiness(BaseModel):
    id: int
    name: str
    type: str
    timezone: str
    max_booking_horizon_days: int
    allow_same_day: bool
    notes_enabled: bool

    model_config = {"from_attributes": True}


class CatalogService(BaseModel):
    id: int
    name: str
    duration_minutes: int

    model_config = {"from_attributes": True}


class CatalogStaff(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class CatalogTable(BaseModel):
    id: int
    name: str
    capacity: int
    zone: Optional[str] = None

    model_config = {"from_attributes": True}


class CatalogRestaurantConfig(BaseModel):
    seating_duration_minutes: int
    max_party_size: int

    model_config = {"from_attributes": True}


class CatalogResponse(BaseModel):
    business: CatalogBusiness
    hours: list[BusinessHoursItem]

    # spa
    services: Optional[list[CatalogService]] = None
    staff: Optional[list[CatalogStaff]] = None

    # restaurant
    tables: Optional[list[CatalogTable]] = None
    restaurant_config: Optional[CatalogRestaurantConfig] = None

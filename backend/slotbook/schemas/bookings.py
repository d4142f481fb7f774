# backend/slotbook/schemas/bookings.py

import re
from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")

DateType = date

ResourceType = Literal["table", "staff", "room"]


def _validate_time(v: Optional[str]) -> Optional[str]:
    if v is not None and not TIME_PATTERN.match(v):
        raise ValueError("Time must be in HH:MM format")
    return v


class BookingCreate(BaseModel):
    date: date
    start_time: str = Field(description="Time in HH:MM format")
    customer_name: str = Field(min_length=1)
    customer_phone: str = Field(min_length=1)

    party_size: Optional[int] = Field(None, gt=0)   # restaurant
    service_id: Optional[int] = None                 # spa
    staff_id: Optional[int] = None                   # spa, optional preference

    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: str) -> str:
        return _validate_time(v)


class BookingUpdate(BaseModel):
    date: Optional[DateType] = None
    start_time: Optional[str] = None
    party_size: Optional[int] = Field(None, gt=0)
    service_id: Optional[int] = None
    notes: Optional[str] = None

    @field_validator("start_time")
    @classmethod
    def validate_start_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_time(v)


class BookingReassign(BaseModel):
    resource_type: Optional[ResourceType] = None
    resource_id: int


class AssignmentRead(BaseModel):
    id: int
    resource_type: str
    resource_id: int

    model_config = {"from_attributes": True}


class BookingRead(BaseModel):
    id: int
    business_id: int
    reference: str

    customer_name: str
    customer_phone: str

    booking_date: date
    start_time: str
    end_time: Optional[str] = None

    party_size: Optional[int] = None
    service_id: Optional[int] = None
    notes: Optional[str] = None
    status: str

    assignments: list[AssignmentRead] = []

    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    booking: BookingRead


class BookingListResponse(BaseModel):
    bookings: list[BookingRead]

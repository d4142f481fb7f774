# backend/slotbook/schemas/availability.py
"""
Pydantic schemas for the availability API.
"""

from pydantic import BaseModel


class SlotResource(BaseModel):
    """Resource that would serve a slot."""
    type: str  # "table" / "staff" / "room"
    id: int
    name: str

    model_config = {"from_attributes": True}


class SlotRead(BaseModel):
    """A bookable window and its assignment."""
    start_time: str  # "HH:MM"
    end_time: str    # "HH:MM"
    resources: list[SlotResource]

    model_config = {"from_attributes": True}


class AvailabilityResponse(BaseModel):
    slots: list[SlotRead]

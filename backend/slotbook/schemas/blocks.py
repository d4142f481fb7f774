# backend/slotbook/schemas/blocks.py

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, field_validator, model_validator

from ..errors import InvalidTimeFormat
from ..services.slots.timemath import to_minutes


class SlotBlockCreate(BaseModel):
    date: date
    start_time: str
    end_time: str

    # Both empty = global block
    resource_type: Optional[Literal["table", "staff", "room"]] = None
    resource_id: Optional[int] = None

    reason: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        try:
            to_minutes(v)
        except InvalidTimeFormat as exc:
            raise ValueError(exc.message)
        return v

    @model_validator(mode="after")
    def check_window(self):
        if to_minutes(self.start_time) >= to_minutes(self.end_time):
            raise ValueError("start_time must be before end_time")
        if self.resource_id is not None and self.resource_type is None:
            raise ValueError("resource_type is required when resource_id is set")
        return self


class SlotBlockRead(BaseModel):
    id: int
    business_id: int

    date: date
    start_time: str
    end_time: str

    resource_type: Optional[str] = None
    resource_id: Optional[int] = None
    reason: Optional[str] = None

    created_at: datetime

    model_config = {"from_attributes": True}


class SlotBlockResponse(BaseModel):
    block: SlotBlockRead


class SlotBlockListResponse(BaseModel):
    blocks: list[SlotBlockRead]

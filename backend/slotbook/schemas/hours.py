# backend/slotbook/schemas/hours.py

from pydantic import BaseModel, Field, field_validator, model_validator

from ..errors import InvalidTimeFormat
from ..services.slots.timemath import to_minutes


class BusinessHoursItem(BaseModel):
    day_of_week: int = Field(ge=0, le=6, description="0 = Sunday")
    open_time: str
    close_time: str
    is_closed: bool = False

    model_config = {"from_attributes": True}

    @field_validator("open_time", "close_time")
    @classmethod
    def validate_time(cls, v: str) -> str:
        try:
            to_minutes(v)
        except InvalidTimeFormat as exc:
            raise ValueError(exc.message)
        return v

    @model_validator(mode="after")
    def check_order(self):
        if not self.is_closed and to_minutes(self.open_time) >= to_minutes(self.close_time):
            raise ValueError("open_time must be before close_time")
        return self


class BusinessHoursReplace(BaseModel):
    hours: list[BusinessHoursItem]

    @field_validator("hours")
    @classmethod
    def unique_days(cls, v: list[BusinessHoursItem]) -> list[BusinessHoursItem]:
        days = [item.day_of_week for item in v]
        if len(days) != len(set(days)):
            raise ValueError("day_of_week must be unique")
        return v


class BusinessHoursResponse(BaseModel):
    hours: list[BusinessHoursItem]

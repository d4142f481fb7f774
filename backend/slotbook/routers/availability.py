# backend/slotbook/routers/availability.py
"""
Availability API.

GET /{business_id}/availability - bookable slots for a day
"""

from datetime import date

from fastapi import APIRouter, Depends, Query

from ..errors import ValidationError
from ..models import utcnow
from ..schemas.availability import AvailabilityResponse
from ..services.booking_window import apply_same_day_cutoff, check_booking_date, check_party_size
from ..services.slots.availability import AvailabilityService
from ..dependencies import get_availability_service

router = APIRouter(tags=["availability"])


@router.get("/{business_id}/availability", response_model=AvailabilityResponse)
def get_availability(
    business_id: int,
    target_date: date = Query(..., alias="date"),
    party_size: int | None = Query(None, gt=0),
    service_id: int | None = None,
    staff_id: int | None = None,
    time_start: str | None = None,
    time_end: str | None = None,
    availability: AvailabilityService = Depends(get_availability_service),
):
    """Slots for a restaurant party (party_size) or a spa service (service_id)."""
    business = availability.get_business(business_id)
    now = utcnow()
    check_booking_date(business, target_date, now)
    check_party_size(business, availability.store.get_restaurant_config(business.id), party_size)

    if (time_start is None) != (time_end is None):
        raise ValidationError("time_start and time_end must be given together")
    time_range = (time_start, time_end) if time_start and time_end else None

    slots = availability.slots_for(
        business,
        target_date,
        party_size=party_size,
        service_id=service_id,
        staff_id=staff_id,
        time_range=time_range,
    )
    slots = apply_same_day_cutoff(business, target_date, slots, now)

    return {"slots": [slot.to_dict() for slot in slots]}

# backend/slotbook/services/booking_window.py
"""
Booking window rules applied at the request boundary.

- no dates in the past (business timezone)
- no dates beyond max_booking_horizon_days
- same-day only when allow_same_day; then slots must start at least
  same_day_cutoff_minutes from now
- restaurant parties no larger than max_party_size
"""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..errors import ValidationError
from ..models import Businesses, RestaurantConfigs
from .slots.generator import Slot
from .slots.timemath import to_minutes


def business_now(business: Businesses, now_utc: datetime) -> datetime:
    """Local wall-clock time of the business for a naive UTC timestamp."""
    try:
        tz = ZoneInfo(business.timezone or "UTC")
    except ZoneInfoNotFoundError:
        tz = timezone.utc
    return now_utc.replace(tzinfo=timezone.utc).astimezone(tz)


def check_booking_date(business: Businesses, target_date: date, now_utc: datetime) -> None:
    today = business_now(business, now_utc).date()
    horizon = business.max_booking_horizon_days or 30

    if target_date < today:
        raise ValidationError("Date cannot be in the past")
    if target_date > today + timedelta(days=horizon):
        raise ValidationError(f"Date cannot be more than {horizon} days ahead")
    if target_date == today and not business.allow_same_day:
        raise ValidationError("Same-day bookings are not allowed")


def earliest_start(business: Businesses, target_date: date, now_utc: datetime) -> int | None:
    """First bookable minute on target_date, or None when the cutoff does not apply."""
    local_now = business_now(business, now_utc)
    if target_date != local_now.date():
        return None
    return local_now.hour * 60 + local_now.minute + (business.same_day_cutoff_minutes or 0)


def apply_same_day_cutoff(
    business: Businesses,
    target_date: date,
    slots: list[Slot],
    now_utc: datetime,
) -> list[Slot]:
    earliest = earliest_start(business, target_date, now_utc)
    if earliest is None:
        return slots
    return [s for s in slots if to_minutes(s.start_time) >= earliest]


def check_start_time(business: Businesses, target_date: date, start_time: str, now_utc: datetime) -> None:
    earliest = earliest_start(business, target_date, now_utc)
    if earliest is not None and to_minutes(start_time) < earliest:
        raise ValidationError("Selected time is too close to now")


def check_party_size(business: Businesses, config: RestaurantConfigs | None, party_size: int | None) -> None:
    if business.type != "restaurant" or not party_size or config is None:
        return
    if party_size > config.max_party_size:
        raise ValidationError(f"Party size cannot exceed {config.max_party_size}")

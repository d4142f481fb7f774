# backend/slotbook/routers/bookings.py
"""
Customer-facing booking endpoints, plus the manager no-show / reassign actions.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_booking_service, get_store
from ..errors import BookingNotFound, BusinessNotFound, ValidationError
from ..models import utcnow
from ..schemas.bookings import (
    BookingCreate,
    BookingListResponse,
    BookingReassign,
    BookingResponse,
    BookingUpdate,
)
from ..services.booking_window import business_now, check_booking_date, check_party_size, check_start_time
from ..services.bookings import BookingCommitService
from ..services.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def _get_business(store: Store, business_id: int):
    business = store.get_business(business_id)
    if not business:
        raise BusinessNotFound("Business not found")
    return business


def _get_owned_booking(service: BookingCommitService, business_id: int, booking_id: int):
    booking = service.get_booking_by_id(booking_id)
    if not booking or booking.business_id != business_id:
        raise BookingNotFound("Booking not found")
    return booking


@router.post(
    "/{business_id}/bookings",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_booking(
    business_id: int,
    data: BookingCreate,
    store: Store = Depends(get_store),
    service: BookingCommitService = Depends(get_booking_service),
):
    business = _get_business(store, business_id)
    now = utcnow()
    check_booking_date(business, data.date, now)
    check_start_time(business, data.date, data.start_time, now)
    check_party_size(business, store.get_restaurant_config(business.id), data.party_size)

    booking = service.create(business_id, data)
    return {"booking": booking}


@router.get("/{business_id}/bookings", response_model=BookingListResponse)
def list_customer_bookings(
    business_id: int,
    phone: Optional[str] = Query(None, min_length=1),
    reference: Optional[str] = Query(None, min_length=1),
    store: Store = Depends(get_store),
    service: BookingCommitService = Depends(get_booking_service),
):
    """Upcoming confirmed bookings of one customer, or the booking with a given reference."""
    business = _get_business(store, business_id)
    if reference:
        booking = service.get_booking_by_reference(reference.strip().upper())
        if not booking or booking.business_id != business_id:
            return {"bookings": []}
        return {"bookings": [booking]}
    if not phone:
        raise ValidationError("phone or reference is required")

    today = business_now(business, utcnow()).date()
    return {"bookings": service.get_bookings_by_phone(business_id, phone, today)}


@router.get("/{business_id}/bookings/{booking_id}", response_model=BookingResponse)
def get_booking(
    business_id: int,
    booking_id: int,
    service: BookingCommitService = Depends(get_booking_service),
):
    return {"booking": _get_owned_booking(service, business_id, booking_id)}


@router.patch("/{business_id}/bookings/{booking_id}", response_model=BookingResponse)
def modify_booking(
    business_id: int,
    booking_id: int,
    data: BookingUpdate,
    store: Store = Depends(get_store),
    service: BookingCommitService = Depends(get_booking_service),
):
    business = _get_business(store, business_id)
    current = _get_owned_booking(service, business_id, booking_id)
    now = utcnow()

    if data.date is not None:
        check_booking_date(business, data.date, now)
    if data.date is not None or data.start_time is not None:
        check_start_time(
            business,
            data.date or current.booking_date,
            data.start_time or current.start_time,
            now,
        )
    check_party_size(business, store.get_restaurant_config(business.id), data.party_size)

    booking = service.modify(booking_id, data)
    return {"booking": booking}


@router.post("/{business_id}/bookings/{booking_id}/cancel", response_model=BookingResponse)
def cancel_booking(
    business_id: int,
    booking_id: int,
    service: BookingCommitService = Depends(get_booking_service),
):
    _get_owned_booking(service, business_id, booking_id)
    return {"booking": service.cancel(booking_id)}


@router.post("/{business_id}/bookings/{booking_id}/no-show", response_model=BookingResponse)
def mark_no_show(
    business_id: int,
    booking_id: int,
    service: BookingCommitService = Depends(get_booking_service),
):
    """Manager only."""
    _get_owned_booking(service, business_id, booking_id)
    return {"booking": service.mark_no_show(booking_id)}


@router.post("/{business_id}/bookings/{booking_id}/reassign", response_model=BookingResponse)
def reassign_booking(
    business_id: int,
    booking_id: int,
    data: BookingReassign,
    store: Store = Depends(get_store),
    service: BookingCommitService = Depends(get_booking_service),
):
    """Manager only: move an assignment to another resource without conflict checks."""
    business = _get_business(store, business_id)
    _get_owned_booking(service, business_id, booking_id)

    resource_type = data.resource_type or ("table" if business.type == "restaurant" else "staff")
    booking = service.reassign(booking_id, resource_type, data.resource_id)
    return {"booking": booking}

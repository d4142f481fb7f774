# backend/slotbook/routers/manager.py
"""
Manager endpoints: bookings overview, slot blocks, business hours.
"""

import logging
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from ..dependencies import get_booking_service, get_store
from ..errors import BusinessNotFound, NotFoundError
from ..schemas.blocks import SlotBlockCreate, SlotBlockListResponse, SlotBlockResponse
from ..schemas.bookings import BookingListResponse
from ..schemas.hours import BusinessHoursReplace, BusinessHoursResponse
from ..services.bookings import BookingCommitService
from ..services.store import Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/manager", tags=["manager"])


def _require_business(store: Store, business_id: int):
    business = store.get_business(business_id)
    if not business:
        raise BusinessNotFound("Business not found")
    return business


@router.get("/{business_id}/bookings", response_model=BookingListResponse)
def list_bookings(
    business_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    booking_status: Optional[Literal["confirmed", "cancelled", "no_show"]] = Query(None, alias="status"),
    store: Store = Depends(get_store),
    service: BookingCommitService = Depends(get_booking_service),
):
    _require_business(store, business_id)
    return {"bookings": service.list_bookings(business_id, target_date, booking_status)}


# ── Slot blocks ──────────────────────────────────────────────────────────


@router.get("/{business_id}/blocks", response_model=SlotBlockListResponse)
def list_blocks(
    business_id: int,
    target_date: Optional[date] = Query(None, alias="date"),
    store: Store = Depends(get_store),
):
    _require_business(store, business_id)
    return {"blocks": store.list_blocks(business_id, target_date)}


@router.post(
    "/{business_id}/blocks",
    response_model=SlotBlockResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_block(
    business_id: int,
    data: SlotBlockCreate,
    store: Store = Depends(get_store),
):
    _require_business(store, business_id)
    block = store.add_block(business_id, **data.model_dump())
    logger.info(
        f"Slot block created: id={block.id} business={business_id} date={block.date} "
        f"{block.start_time}-{block.end_time} resource={block.resource_type}:{block.resource_id}"
    )
    return {"block": block}


@router.delete("/{business_id}/blocks/{block_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_block(
    business_id: int,
    block_id: int,
    store: Store = Depends(get_store),
):
    if not store.delete_block(business_id, block_id):
        raise NotFoundError("Block not found")
    logger.info(f"Slot block deleted: id={block_id} business={business_id}")


# ── Business hours ───────────────────────────────────────────────────────


@router.get("/{business_id}/hours", response_model=BusinessHoursResponse)
def get_hours(business_id: int, store: Store = Depends(get_store)):
    _require_business(store, business_id)
    return {"hours": store.list_business_hours(business_id)}


@router.put("/{business_id}/hours", response_model=BusinessHoursResponse)
def replace_hours(
    business_id: int,
    data: BusinessHoursReplace,
    store: Store = Depends(get_store),
):
    """Replace the whole weekly schedule."""
    _require_business(store, business_id)
    hours = store.replace_business_hours(
        business_id, [item.model_dump() for item in data.hours]
    )
    return {"hours": hours}

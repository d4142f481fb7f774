# backend/slotbook/services/holds.py
"""
Short-lived holds on the resources behind a selected slot.

A hold is an advisory lease, not a lock: readers count it as occupancy
only while expires_at > now. Expired holds are ignored and eventually
purged (see hold_cleanup).
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Iterable

from ..models import SlotHolds, utcnow
from .slots.inventory import ResourceRef
from .store import Store

logger = logging.getLogger(__name__)

HOLD_TTL_MINUTES = 5


class HoldManager:
    def __init__(
        self,
        store: Store,
        ttl_minutes: int = HOLD_TTL_MINUTES,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.ttl = timedelta(minutes=ttl_minutes)
        self.clock = clock

    def create_hold(
        self,
        business_id: int,
        target_date: date,
        start_time: str,
        end_time: str,
        resources: list[ResourceRef],
    ) -> list[int]:
        """
        Hold every resource of an assignment for the lease period.

        All rows are written in one transaction: a failure leaves no hold behind.
        """
        expires_at = self.clock() + self.ttl
        holds = [
            SlotHolds(
                business_id=business_id,
                date=target_date,
                start_time=start_time,
                end_time=end_time,
                resource_type=resource.type,
                resource_id=resource.id,
                expires_at=expires_at,
            )
            for resource in resources
        ]
        hold_ids = self.store.add_holds(holds)
        logger.info(
            f"Holds created: business={business_id} date={target_date} "
            f"{start_time}-{end_time} ids={hold_ids}"
        )
        return hold_ids

    def release_holds(self, hold_ids: Iterable[int]) -> int:
        """Delete holds. Already expired or deleted ids are not an error."""
        hold_ids = list(hold_ids)
        deleted = self.store.delete_holds(hold_ids)
        logger.info(f"Holds released: ids={hold_ids} deleted={deleted}")
        return deleted

    def purge_expired(self) -> int:
        deleted = self.store.delete_expired_holds(self.clock())
        if deleted:
            logger.info(f"Expired holds purged: {deleted}")
        return deleted

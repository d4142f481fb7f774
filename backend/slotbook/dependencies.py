# backend/slotbook/dependencies.py
"""FastAPI dependencies assembling the booking engine per request."""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import settings
from .database import get_db
from .services.bookings import BookingCommitService
from .services.holds import HoldManager
from .services.notifier import LoggingNotifier, Notifier, QueueNotifier
from .services.slots.availability import AvailabilityService
from .services.store import Store


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


@lru_cache
def get_notifier() -> Notifier:
    """Notifier selected by settings.notifications_backend (singleton)."""
    backend = settings.notifications_backend
    if backend == "queue":
        from .redis_client import redis_client
        return QueueNotifier(
            redis_client,
            queue=settings.notifications_queue,
            frontend_url=settings.frontend_url,
        )
    if backend == "log":
        return LoggingNotifier(frontend_url=settings.frontend_url)
    return Notifier(frontend_url=settings.frontend_url)


def get_availability_service(store: Store = Depends(get_store)) -> AvailabilityService:
    return AvailabilityService(
        store,
        default_seating_duration=settings.default_seating_duration_minutes,
        default_buffer=settings.default_buffer_minutes,
    )


def get_booking_service(
    store: Store = Depends(get_store),
    availability: AvailabilityService = Depends(get_availability_service),
    notifier: Notifier = Depends(get_notifier),
) -> BookingCommitService:
    holds = HoldManager(store, ttl_minutes=settings.hold_ttl_minutes)
    return BookingCommitService(store, availability, holds, notifier)

"""
backend/slotbook/services/notifier.py

Customer notifications for booking lifecycle events.

QueueNotifier pushes SMS events to a Redis list (`events:p2p` by default)
for an out-of-process sender. LoggingNotifier only logs the text and is
meant for development. Callers treat every notifier as fire-and-forget.
"""

import json
import logging
import time
from typing import Optional

from redis import Redis

from ..models import Bookings, Businesses, Services

logger = logging.getLogger(__name__)


# ── Message texts ────────────────────────────────────────────────────────


def format_created(
    booking: Bookings,
    business: Businesses,
    service: Optional[Services] = None,
    frontend_url: str = "",
) -> str:
    manage_link = f"{frontend_url}/manage/{booking.id}"
    when = f"{booking.booking_date.isoformat()} {booking.start_time}"

    if business.type == "restaurant":
        return (
            f"Booking confirmed at {business.name}: {when} for {booking.party_size} guests. "
            f"Ref: {booking.reference}. Manage: {manage_link}"
        )

    service_name = service.name if service else "your service"
    return (
        f"Appointment confirmed at {business.name}: {service_name} on {when}. "
        f"Ref: {booking.reference}. Manage: {manage_link}"
    )


def format_modified(booking: Bookings, business: Businesses) -> str:
    return (
        f"Booking updated at {business.name}: "
        f"{booking.booking_date.isoformat()} {booking.start_time}. Ref: {booking.reference}"
    )


def format_cancelled(booking: Bookings, business: Businesses) -> str:
    return (
        f"Booking cancelled at {business.name}: "
        f"{booking.booking_date.isoformat()} {booking.start_time}. Ref: {booking.reference}"
    )


# ── Notifiers ────────────────────────────────────────────────────────────


class Notifier:
    """Booking notification hooks. The base class sends nothing."""

    def __init__(self, frontend_url: str = ""):
        self.frontend_url = frontend_url

    def notify_created(
        self,
        booking: Bookings,
        business: Businesses,
        service: Optional[Services] = None,
    ) -> None:
        self.send("booking_created", booking, format_created(booking, business, service, self.frontend_url))

    def notify_modified(self, booking: Bookings, business: Businesses) -> None:
        self.send("booking_modified", booking, format_modified(booking, business))

    def notify_cancelled(self, booking: Bookings, business: Businesses) -> None:
        self.send("booking_cancelled", booking, format_cancelled(booking, business))

    def send(self, event_type: str, booking: Bookings, text: str) -> None:
        pass


NullNotifier = Notifier


class LoggingNotifier(Notifier):
    """Development stub: the SMS text goes to the log."""

    def send(self, event_type: str, booking: Bookings, text: str) -> None:
        logger.info(f"[SMS STUB] {event_type} to={booking.customer_phone}: {text}")


class QueueNotifier(Notifier):
    """Pushes SMS events to a Redis list consumed by the delivery worker."""

    def __init__(self, redis: Redis, queue: str = "events:p2p", frontend_url: str = ""):
        super().__init__(frontend_url)
        self.redis = redis
        self.queue = queue

    def send(self, event_type: str, booking: Bookings, text: str) -> None:
        event = {
            "type": event_type,
            "channel": "sms",
            "booking_id": booking.id,
            "business_id": booking.business_id,
            "to": booking.customer_phone,
            "text": text,
            "ts": int(time.time()),
        }
        self.redis.rpush(self.queue, json.dumps(event))
        logger.info(f"Event emitted: {event_type} → {self.queue}")

"""
Expired hold cleanup.

Readers already ignore holds past expires_at; this loop only keeps the
slot_holds table small.

Runs as an asyncio task in the app lifespan.
Uses the synchronous DB session (via asyncio.to_thread).
"""

import asyncio
import logging

from ..database import SessionLocal
from .holds import HoldManager
from .store import Store

logger = logging.getLogger(__name__)


async def hold_cleanup_loop(interval_seconds: int) -> None:
    """Periodically delete holds whose lease has run out."""
    logger.info("hold_cleanup_loop started")

    try:
        while True:
            try:
                await asyncio.to_thread(purge_expired_holds)
            except asyncio.CancelledError:
                logger.info("hold_cleanup_loop cancelled")
                raise
            except Exception:
                logger.exception("hold_cleanup_loop error")

            await asyncio.sleep(interval_seconds)
    except asyncio.CancelledError:
        pass


def purge_expired_holds() -> int:
    """Delete expired holds (synchronous)."""
    db = SessionLocal()
    try:
        return HoldManager(Store(db)).purge_expired()
    finally:
        db.close()

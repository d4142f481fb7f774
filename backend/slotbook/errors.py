# backend/slotbook/errors.py
"""
Error taxonomy for the booking engine.

Every error carries the HTTP status the request layer answers with;
the message is what ends up in the {"error": ...} response body.
"""


class BookingError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str | None = None):
        self.message = message or self.__class__.__doc__ or "Booking error"
        super().__init__(self.message)


class ValidationError(BookingError):
    """Invalid request"""

    status_code = 400


class InvalidTimeFormat(ValidationError):
    """Time must be in HH:MM format"""


class NotFoundError(BookingError):
    """Not found"""

    status_code = 404


class BusinessNotFound(NotFoundError):
    """Business not found"""


class ServiceNotFound(NotFoundError):
    """Service not found"""


class BookingNotFound(NotFoundError):
    """Booking not found"""


class SlotUnavailableError(BookingError):
    """Selected time slot is no longer available"""

    status_code = 400


class InvalidStateError(BookingError):
    """Booking is already cancelled or marked as no-show"""

    status_code = 400


class StoreError(BookingError):
    """Storage failure"""

    status_code = 500

import secrets
import string

REFERENCE_PREFIX = "BK-"
REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 8


def generate_booking_reference() -> str:
    """Short human-readable booking code, e.g. "BK-7Q2M9XKD"."""
    code = "".join(secrets.choice(REFERENCE_ALPHABET) for _ in range(REFERENCE_LENGTH))
    return f"{REFERENCE_PREFIX}{code}"

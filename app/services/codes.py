import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_uppercase

CUSTOMER_BOOKING_PREFIX = "PA"
WALK_IN_BOOKING_PREFIX = "WI"
JOB_CARD_PREFIX = "JC"
BILL_PREFIX = "BILL"


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_code(prefix: str) -> str:
    """PREFIX-<base36 epoch millis>-<4 random chars>, e.g. JC-LZ3K9Q1A-7QX2."""
    stamp = _base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(4))
    return f"{prefix}-{stamp}-{suffix}"

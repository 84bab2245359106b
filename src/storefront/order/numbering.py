"""Human-readable order numbers: ``GAY-<6 clock digits>-<4 base36 chars>``."""

import random
import re
import string
import time

ORDER_NUMBER_PREFIX = "GAY"
ORDER_NUMBER_ATTEMPTS = 5
ORDER_NUMBER_PATTERN = re.compile(r"^GAY-\d{6}-[0-9A-Z]{4}$")

_BASE36_UPPER = string.digits + string.ascii_uppercase


def generate_order_number(now_ms: int | None = None) -> str:
    """Build one candidate. Uniqueness is the caller's job."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    clock = str(now_ms)[-6:].zfill(6)
    suffix = "".join(random.choices(_BASE36_UPPER, k=4))
    return f"{ORDER_NUMBER_PREFIX}-{clock}-{suffix}"


def is_valid_order_number(value: str) -> bool:
    return bool(ORDER_NUMBER_PATTERN.match(value or ""))

"""Employee business-key generation."""
import re
import secrets
import time
from typing import Callable, Optional

BASE36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
EMPLOYEE_ID_PREFIX = "EMP-"
GENERATED_EMPLOYEE_ID_PATTERN = re.compile(r"^EMP-[A-Z0-9]{8}$")


def to_base36(value: int) -> str:
    """
    Encode a non-negative integer in uppercase base 36.

    Examples:
        >>> to_base36(0)
        '0'
        >>> to_base36(1295)
        'ZZ'
    """
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(BASE36_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_employee_id(now_ms: Optional[Callable[[], int]] = None) -> str:
    """
    Build an employee ID of the form EMP-<4 time chars><4 random chars>.

    The time part is the last four base-36 digits of the epoch milliseconds,
    the random part four random base-36 characters. Unique enough for a
    single organisation but not guaranteed: callers must still handle the
    unique constraint rejecting it.
    """
    millis = now_ms() if now_ms is not None else time.time_ns() // 1_000_000
    time_part = to_base36(millis)[-4:].rjust(4, "0")
    random_part = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return f"{EMPLOYEE_ID_PREFIX}{time_part}{random_part}"

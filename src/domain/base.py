"""Domain Base Definitions

Shared table base class and identifier generation.
"""

import secrets
import time
from sqlmodel import SQLModel

_BASE36_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"
_RANDOM_LENGTH = 8


class BaseModel(SQLModel):
    """Base class for all persisted tables"""
    pass


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_id(prefix: str = "inv") -> str:
    """
    Generate an opaque identifier

    Format: {prefix}_{millis base36}{8 random base36 chars}
    (e.g., inv_lx2k9f0a3b7c1d9e)

    Args:
        prefix: Short label identifying the entity kind

    Returns:
        Identifier string
    """
    millis = time.time_ns() // 1_000_000
    random_part = "".join(secrets.choice(_BASE36_ALPHABET) for _ in range(_RANDOM_LENGTH))
    return f"{prefix}_{_to_base36(millis)}{random_part}"

"""
Validation Utilities
====================

Strict hex validation for key material, record segments and stored digests.
"""

from __future__ import annotations

import re
from typing import Final, Optional


_LOWER_HEX: Final[re.Pattern[str]] = re.compile(r"[0-9a-f]*")
_ANY_HEX: Final[re.Pattern[str]] = re.compile(r"[0-9a-fA-F]*")


class ValidationError(ValueError):
    """Raised when validation fails."""
    pass


def is_hex(value: object, lowercase_only: bool = True) -> bool:
    """Return True if value is an even-length hex string."""
    if not isinstance(value, str) or len(value) % 2:
        return False
    pattern = _LOWER_HEX if lowercase_only else _ANY_HEX
    return pattern.fullmatch(value) is not None


def validate_hex(
    value: object,
    length: Optional[int] = None,
    field_name: str = "value",
    lowercase_only: bool = True,
) -> bytes:
    """
    Validate a hex string and decode it.

    Args:
        value: The candidate hex text
        length: Required decoded length in bytes (None for any length)
        field_name: Name of the field for error messages
        lowercase_only: Reject A-F when True

    Returns:
        The decoded bytes

    Raises:
        ValidationError: If the value is not acceptable hex
    """
    if not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")

    if not value:
        raise ValidationError(f"{field_name} cannot be empty")

    if not is_hex(value, lowercase_only=lowercase_only):
        raise ValidationError(f"{field_name} must be hex encoded")

    decoded = bytes.fromhex(value)

    if length is not None and len(decoded) != length:
        raise ValidationError(
            f"{field_name} must encode exactly {length} bytes"
        )

    return decoded

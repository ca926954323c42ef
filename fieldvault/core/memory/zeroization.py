"""
Memory Zeroization Utilities
============================

Best-effort wiping of mutable buffers that held secrets.

Python may keep copies of immutable bytes/str objects; only bytearray
buffers owned by the caller can be wiped.
"""

from __future__ import annotations

import ctypes
from contextlib import contextmanager
from typing import Iterator


def secure_zero(data: bytearray) -> None:
    """
    Securely zero a byte buffer.

    Args:
        data: Mutable byte buffer to zero
    """
    if len(data) == 0:
        return

    addr = ctypes.addressof((ctypes.c_char * len(data)).from_buffer(data))
    ctypes.memset(addr, 0, len(data))


@contextmanager
def ZeroizeContext(*buffers: bytearray) -> Iterator[None]:
    """
    Context manager that zeroizes buffers on exit.

    Always zeroizes, whether exit is normal or exceptional.

    Usage:
        secret = bytearray(password.encode("utf-8"))

        with ZeroizeContext(secret):
            derived = kdf.derive(bytes(secret))
        # secret is now zeroed
    """
    try:
        yield
    finally:
        for buf in buffers:
            secure_zero(buf)

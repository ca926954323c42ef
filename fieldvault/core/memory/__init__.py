"""
FieldVault Memory Hygiene
=========================

Explicit zeroization of secret-bearing buffers.

WARNING:
- Python's memory model doesn't guarantee secure erasure
- These are best-effort mitigations
"""

from fieldvault.core.memory.zeroization import secure_zero, ZeroizeContext

__all__ = ["secure_zero", "ZeroizeContext"]

"""
Secure Random Generation
========================

Tokens, passwords, salts and nonces drawn from the OS CSPRNG.

Security Properties:
    - Every call reads fresh bytes from the secrets module
    - No state is retained between calls
    - Failure of the random source is fatal (GenerationError)

Password characters are picked with ``byte % len(charset)``. For charsets
whose length does not divide 256 this slightly favours the first
``256 % len(charset)`` characters. Output compatibility with passwords issued
by earlier deployments depends on this mapping.
"""

from __future__ import annotations

import secrets

from fieldvault.core.errors import GenerationError
from fieldvault.security.constants import (
    DEFAULT_PASSWORD_LENGTH,
    DEFAULT_TOKEN_BYTES,
    NONCE_LENGTH_BYTES,
    PASSWORD_CHARSET,
    SALT_LENGTH_BYTES,
)


def random_bytes(n: int) -> bytes:
    """
    Return ``n`` cryptographically secure random bytes.

    Raises:
        ValueError: If n is not a non-negative integer
        GenerationError: If the OS random source fails
    """
    if not isinstance(n, int) or isinstance(n, bool) or n < 0:
        raise ValueError("Byte count must be a non-negative integer")

    try:
        return secrets.token_bytes(n)
    except (OSError, NotImplementedError) as exc:
        raise GenerationError("Secure random source unavailable") from exc


def random_token(length: int = DEFAULT_TOKEN_BYTES) -> str:
    """Return ``length`` random bytes as a lowercase hex string."""
    return random_bytes(length).hex()


def random_password(
    length: int = DEFAULT_PASSWORD_LENGTH,
    charset: str = PASSWORD_CHARSET,
) -> str:
    """
    Generate a password of ``length`` characters from ``charset``.

    One random byte is consumed per character and mapped by modulo.
    """
    if not charset:
        raise ValueError("Charset cannot be empty")
    if len(charset) > 256:
        raise ValueError("Charset cannot exceed 256 characters")

    size = len(charset)
    return "".join(charset[b % size] for b in random_bytes(length))


def random_salt(length: int = SALT_LENGTH_BYTES) -> bytes:
    return random_bytes(length)


def random_nonce() -> bytes:
    # never cache: a repeated nonce under one key breaks GCM
    return random_bytes(NONCE_LENGTH_BYTES)

"""
Key Derivation Functions
========================

Implements:
    - PBKDF2-HMAC-SHA512 for credential digests
    - scrypt for the built-in development key
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from fieldvault.security.constants import (
    KDF_ITERATIONS,
    KDF_OUTPUT_BYTES,
    KEY_LENGTH_BYTES,
    SCRYPT_N,
    SCRYPT_P,
    SCRYPT_R,
)


def derive_key_pbkdf2(
    secret: bytes,
    salt: bytes,
    length: int = KDF_OUTPUT_BYTES,
    iterations: int = KDF_ITERATIONS,
) -> bytes:
    """
    Derive a digest from a secret using PBKDF2-HMAC-SHA512.

    Args:
        secret: Encoded secret
        salt: Salt bytes exactly as they enter the KDF
        length: Output length
        iterations: Iteration count

    Returns:
        Derived bytes
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA512(),
        length=length,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(secret)


def derive_key_scrypt(
    passphrase: bytes,
    salt: bytes,
    length: int = KEY_LENGTH_BYTES,
) -> bytes:
    """
    Derive a key from a passphrase using scrypt (N=2^14, r=8, p=1).

    Args:
        passphrase: Passphrase bytes
        salt: Salt bytes
        length: Output key length

    Returns:
        Derived key bytes
    """
    kdf = Scrypt(
        salt=salt,
        length=length,
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
    )
    return kdf.derive(passphrase)

"""
FieldVault Cryptographic Core
=============================

Provides authenticated field encryption under a single process key.

Architecture:
    1. KeyProvider: resolves the AES-256 key once
    2. AesGcmCipher: AES-256-GCM with a fresh 128-bit nonce per record
    3. random: OS CSPRNG tokens, passwords, salts and nonces

Security Properties:
    - All encryption is authenticated (AEAD)
    - Tag verified before plaintext is released
    - Secure RNG for all random values

WARNING: This module handles sensitive cryptographic material.
         Incorrect usage can compromise security.
"""

from fieldvault.core.crypto.aes_gcm import AesGcmCipher, EncryptedRecord
from fieldvault.core.crypto.key_provider import (
    KeyProvider,
    KeySource,
    SymmetricKey,
    get_default_key_provider,
    reset_default_key_provider,
)
from fieldvault.core.crypto.random import (
    random_bytes,
    random_token,
    random_password,
    random_salt,
    random_nonce,
)

__all__ = [
    "AesGcmCipher",
    "EncryptedRecord",
    "KeyProvider",
    "KeySource",
    "SymmetricKey",
    "get_default_key_provider",
    "reset_default_key_provider",
    "random_bytes",
    "random_token",
    "random_password",
    "random_salt",
    "random_nonce",
]

"""
FieldVault Credential Module
============================

Provides one-way credential hashing with:
- PBKDF2-HMAC-SHA512 key derivation
- Per-digest random salt
- Constant-time verification
"""

from fieldvault.core.auth.credential_hasher import (
    CredentialDigest,
    CredentialHasher,
)

__all__ = [
    "CredentialDigest",
    "CredentialHasher",
]

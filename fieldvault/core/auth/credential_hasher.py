"""
PBKDF2 Credential Hashing
=========================

One-way digests for verification-only secrets (passwords, PINs, API
secrets).

Parameters:
- PBKDF2-HMAC-SHA512
- 10,000 iterations
- 64-byte output
- 64-byte random salt per digest

The salt is mixed into the KDF in its hex text form, the same text that is
persisted next to the hash. verify_hex() feeds the stored text through
unchanged, so digests written by earlier deployments verify as stored.

hash() and verify() never raise for bad input: a secret that cannot be
encoded hashes to None, and a malformed or missing digest, an unencodable
candidate and a wrong candidate all verify as False.
"""

from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional

from fieldvault.core.crypto.kdf import derive_key_pbkdf2
from fieldvault.core.crypto.random import random_salt
from fieldvault.core.memory import ZeroizeContext
from fieldvault.security.constants import (
    KDF_ITERATIONS,
    KDF_OUTPUT_BYTES,
    KEY_DERIVATION_FUNCTION,
    SALT_LENGTH_BYTES,
)
from fieldvault.utils.validators import ValidationError, validate_hex

_log = logging.getLogger("fieldvault.hasher")


@dataclass(frozen=True, slots=True)
class CredentialDigest:
    """
    Immutable hash/salt pair.

    Both values are required to verify a candidate. Persist them as two
    hex strings (hash_hex, salt_hex).
    """

    hash: bytes = field(repr=False)
    salt: bytes = field(repr=False)

    @property
    def hash_hex(self) -> str:
        return self.hash.hex()

    @property
    def salt_hex(self) -> str:
        return self.salt.hex()

    @classmethod
    def from_hex(cls, hash_hex: str, salt_hex: str) -> CredentialDigest:
        """
        Rebuild a digest from its stored hex values.

        Raises:
            ValidationError: If either value is not hex
        """
        return cls(
            hash=validate_hex(hash_hex, field_name="hash", lowercase_only=False),
            salt=validate_hex(salt_hex, field_name="salt", lowercase_only=False),
        )

    def __repr__(self) -> str:
        """Safe representation without exposing hash."""
        return f"CredentialDigest(hash_len={len(self.hash)}, salt_len={len(self.salt)})"


class CredentialHasher:
    """
    PBKDF2-HMAC-SHA512 credential hasher.

    Usage:
        hasher = CredentialHasher()

        digest = hasher.hash("Tr0ub4dor&3")
        store(digest.hash_hex, digest.salt_hex)

        ok = hasher.verify(candidate, CredentialDigest.from_hex(h, s))
    """

    __slots__ = ("_salt_source",)

    def __init__(self, salt_source: Optional[Callable[[int], bytes]] = None) -> None:
        """
        Args:
            salt_source: Callable returning n random bytes (defaults to the OS CSPRNG)
        """
        self._salt_source = salt_source or random_salt

    @property
    def parameters(self) -> dict[str, object]:
        """Get hashing parameters."""
        return {
            "algorithm": KEY_DERIVATION_FUNCTION,
            "iterations": KDF_ITERATIONS,
            "hash_length": KDF_OUTPUT_BYTES,
            "salt_length": SALT_LENGTH_BYTES,
        }

    @staticmethod
    def _derive(secret: str, salt_text: str) -> bytes:
        """
        Run the KDF over the UTF-8 secret and the salt's hex text.

        Raises:
            UnicodeEncodeError: If the secret is not encodable (lone surrogates)
        """
        secret_bytes = bytearray(secret.encode("utf-8"))
        with ZeroizeContext(secret_bytes):
            return derive_key_pbkdf2(bytes(secret_bytes), salt_text.encode("ascii"))

    def hash(self, secret: str, salt: Optional[bytes] = None) -> Optional[CredentialDigest]:
        """
        Hash a secret.

        Args:
            secret: The secret to hash
            salt: Explicit salt for deterministic re-hashing (random 64 bytes
                if omitted or empty)

        Returns:
            CredentialDigest, or None when there is no hashable secret
        """
        if not secret or not isinstance(secret, str):
            return None

        if not salt:
            salt = self._salt_source(SALT_LENGTH_BYTES)
        salt = bytes(salt)

        try:
            derived = self._derive(secret, salt.hex())
        except UnicodeEncodeError:
            _log.debug("Credential is not encodable as UTF-8; not hashed")
            return None

        return CredentialDigest(hash=derived, salt=salt)

    def _matches(self, candidate: str, stored_hash: bytes, salt_text: str) -> bool:
        try:
            computed = self._derive(candidate, salt_text)
        except UnicodeEncodeError:
            _log.debug("Candidate is not encodable as UTF-8")
            return False

        matched = hmac.compare_digest(computed, stored_hash)
        if not matched:
            _log.debug("Credential verification failed")
        return matched

    def verify(self, candidate: str, digest: Optional[CredentialDigest]) -> bool:
        """
        Check a candidate against a stored digest.

        Returns:
            True if the candidate matches, False otherwise (including any
            missing or unencodable input)
        """
        if not candidate or not isinstance(candidate, str):
            return False
        if digest is None or not digest.hash or not digest.salt:
            return False

        return self._matches(candidate, digest.hash, digest.salt_hex)

    def verify_hex(
        self,
        candidate: str,
        hash_hex: Optional[str],
        salt_hex: Optional[str],
    ) -> bool:
        """
        Verify against stored hex values. Malformed values return False.

        The stored salt text enters the KDF exactly as stored, whatever its
        letter case.
        """
        if not candidate or not isinstance(candidate, str):
            return False
        if not hash_hex or not salt_hex:
            return False

        try:
            digest = CredentialDigest.from_hex(hash_hex, salt_hex)
        except ValidationError:
            _log.debug("Stored credential digest is not valid hex")
            return False

        return self._matches(candidate, digest.hash, salt_hex)


"""
Field Protection Operations
===========================

String-level contracts used by persistence code:

    encrypt_field / decrypt_field       sensitive column values
    hash_credential / verify_credential verification-only secrets
    generate_token / generate_password  random values for callers

Field values are UTF-8 text. None and "" both mean "no value" and are
stored as NULL rather than as ciphertext.
"""

from __future__ import annotations

import threading
from typing import Optional, Tuple

from fieldvault.core.auth.credential_hasher import CredentialHasher
from fieldvault.core.crypto.aes_gcm import AesGcmCipher
from fieldvault.core.crypto.key_provider import KeyProvider, get_default_key_provider
from fieldvault.core.crypto.random import random_password, random_token
from fieldvault.core.errors import EncryptionError
from fieldvault.security.constants import DEFAULT_PASSWORD_LENGTH, DEFAULT_TOKEN_BYTES
from fieldvault.utils.validators import validate_hex


class FieldProtector:
    """
    Encrypts field values and hashes credentials for the storage layer.

    Usage:
        protector = FieldProtector.from_key_provider(KeyProvider.from_environment())

        row.card_number = protector.encrypt_field(card_number)
        card_number = protector.decrypt_field(row.card_number)

        row.pin_hash, row.pin_salt = protector.hash_credential(pin)
        ok = protector.verify_credential(pin, row.pin_hash, row.pin_salt)
    """

    __slots__ = ("_cipher", "_hasher")

    def __init__(self, cipher: AesGcmCipher, hasher: Optional[CredentialHasher] = None) -> None:
        self._cipher = cipher
        self._hasher = hasher or CredentialHasher()

    @classmethod
    def from_key_provider(cls, key_provider: KeyProvider) -> FieldProtector:
        return cls(AesGcmCipher(key_provider), CredentialHasher())

    @property
    def cipher(self) -> AesGcmCipher:
        return self._cipher

    @property
    def hasher(self) -> CredentialHasher:
        return self._hasher

    def encrypt_field(self, value: Optional[str]) -> Optional[str]:
        """
        Encrypt a text value for storage.

        Returns:
            Record string, or None when there is no value
        """
        if not value:
            return None
        return self._cipher.encrypt_to_string(value.encode("utf-8"))

    def decrypt_field(self, stored: Optional[str]) -> Optional[str]:
        """
        Decrypt a stored record string.

        Raises:
            EncryptionError: If the record is malformed, fails authentication,
                or does not hold UTF-8 text
        """
        if not stored:
            return None

        plaintext = self._cipher.decrypt_from_string(stored)

        try:
            return plaintext.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise EncryptionError.malformed("Decrypted field is not UTF-8 text") from exc

    def hash_credential(
        self,
        secret: Optional[str],
        salt_hex: Optional[str] = None,
    ) -> Optional[Tuple[str, str]]:
        """
        Hash a credential for storage.

        Args:
            secret: Credential to hash
            salt_hex: Stored salt to re-hash with (random when omitted)

        Returns:
            (hash_hex, salt_hex), or None when there is no secret

        Raises:
            ValidationError: If salt_hex is given but is not lowercase hex
        """
        salt = validate_hex(salt_hex, field_name="salt") if salt_hex else None
        digest = self._hasher.hash(secret, salt)
        if digest is None:
            return None
        return digest.hash_hex, digest.salt_hex

    def verify_credential(
        self,
        candidate: Optional[str],
        hash_hex: Optional[str],
        salt_hex: Optional[str],
    ) -> bool:
        """Check a candidate against stored hex values. Never raises."""
        return self._hasher.verify_hex(candidate, hash_hex, salt_hex)

    @staticmethod
    def generate_token(length: int = DEFAULT_TOKEN_BYTES) -> str:
        return random_token(length)

    @staticmethod
    def generate_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
        return random_password(length)


_default_protector: Optional[FieldProtector] = None
_default_lock = threading.Lock()


def _get_protector() -> FieldProtector:
    """Get or create the protector bound to the default key provider."""
    global _default_protector
    with _default_lock:
        if _default_protector is None:
            _default_protector = FieldProtector.from_key_provider(get_default_key_provider())
        return _default_protector


def reset_default_protector() -> None:
    """Drop the default protector. Use only for testing."""
    global _default_protector
    with _default_lock:
        _default_protector = None


def encrypt_field(value: Optional[str]) -> Optional[str]:
    """Encrypt a text value with the process key."""
    return _get_protector().encrypt_field(value)


def decrypt_field(stored: Optional[str]) -> Optional[str]:
    """Decrypt a stored record string with the process key."""
    return _get_protector().decrypt_field(stored)


def hash_credential(
    secret: Optional[str],
    salt_hex: Optional[str] = None,
) -> Optional[Tuple[str, str]]:
    """Hash a credential into a (hash_hex, salt_hex) pair."""
    return _get_protector().hash_credential(secret, salt_hex)


def verify_credential(
    candidate: Optional[str],
    hash_hex: Optional[str],
    salt_hex: Optional[str],
) -> bool:
    """Verify a candidate against a stored (hash_hex, salt_hex) pair."""
    return _get_protector().verify_credential(candidate, hash_hex, salt_hex)


def generate_token(length: int = DEFAULT_TOKEN_BYTES) -> str:
    return random_token(length)


def generate_password(length: int = DEFAULT_PASSWORD_LENGTH) -> str:
    return random_password(length)


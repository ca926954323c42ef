"""
AES-256-GCM Field Encryption
============================

Authenticated encryption of individual field values under the process key.

Security Properties:
    - 256-bit key from the KeyProvider
    - 128-bit random nonce per encryption (never reused)
    - 128-bit authentication tag
    - No associated data
    - Tag verified before any plaintext is returned (fail-closed)

Record Format:
    <nonce hex>:<tag hex>:<ciphertext hex>

    nonce and tag are exactly 32 lowercase hex characters; the ciphertext
    is an even-length run of lowercase hex (empty for empty plaintext).
    Records written by earlier deployments use the same layout, so the
    format must not change.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Final, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from fieldvault.core.crypto.key_provider import KeyProvider
from fieldvault.core.crypto.random import random_nonce
from fieldvault.core.errors import EncryptionError
from fieldvault.security.constants import (
    NONCE_LENGTH_BYTES,
    RECORD_SEPARATOR,
    TAG_LENGTH_BYTES,
)

_log = logging.getLogger("fieldvault.cipher")

_RECORD_PATTERN: Final[re.Pattern[str]] = re.compile(
    rf"(?P<nonce>[0-9a-f]{{{NONCE_LENGTH_BYTES * 2}}})"
    rf"{re.escape(RECORD_SEPARATOR)}"
    rf"(?P<tag>[0-9a-f]{{{TAG_LENGTH_BYTES * 2}}})"
    rf"{re.escape(RECORD_SEPARATOR)}"
    r"(?P<ciphertext>(?:[0-9a-f]{2})*)"
)


@dataclass(frozen=True, slots=True)
class EncryptedRecord:
    """
    Immutable encrypted field value.

    Attributes:
        nonce: 16-byte nonce used for this encryption
        tag: 16-byte GCM authentication tag
        ciphertext: Encrypted bytes (same length as the plaintext)
    """

    nonce: bytes
    tag: bytes
    ciphertext: bytes

    def __post_init__(self) -> None:
        if len(self.nonce) != NONCE_LENGTH_BYTES:
            raise EncryptionError.malformed(
                f"Nonce must be exactly {NONCE_LENGTH_BYTES} bytes"
            )
        if len(self.tag) != TAG_LENGTH_BYTES:
            raise EncryptionError.malformed(
                f"Tag must be exactly {TAG_LENGTH_BYTES} bytes"
            )

    def to_string(self) -> str:
        """Serialize to the three-segment hex storage format."""
        return RECORD_SEPARATOR.join(
            (self.nonce.hex(), self.tag.hex(), self.ciphertext.hex())
        )

    @classmethod
    def parse(cls, text: str) -> EncryptedRecord:
        """
        Parse a stored record.

        Raises:
            EncryptionError: MALFORMED_RECORD on any deviation from the format
        """
        if not isinstance(text, str):
            raise EncryptionError.malformed("Encrypted record must be a string")

        segments = text.split(RECORD_SEPARATOR)
        if len(segments) != 3:
            raise EncryptionError.malformed(
                f"Encrypted record must have 3 segments, got {len(segments)}"
            )

        match = _RECORD_PATTERN.fullmatch(text)
        if match is None:
            raise EncryptionError.malformed("Encrypted record is not valid hex segments")

        return cls(
            nonce=bytes.fromhex(match["nonce"]),
            tag=bytes.fromhex(match["tag"]),
            ciphertext=bytes.fromhex(match["ciphertext"]),
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"EncryptedRecord(ciphertext_len={len(self.ciphertext)})"


class AesGcmCipher:
    """
    AES-256-GCM cipher bound to a KeyProvider.

    Usage:
        cipher = AesGcmCipher(KeyProvider.from_environment())

        record = cipher.encrypt(b"4155-1234-5678-9999")
        stored = record.to_string()

        plaintext = cipher.decrypt(stored)

    None in, None out: an absent value is never turned into ciphertext.
    """

    __slots__ = ("_key_provider",)

    def __init__(self, key_provider: KeyProvider) -> None:
        self._key_provider = key_provider

    @property
    def key_provider(self) -> KeyProvider:
        return self._key_provider

    def encrypt(self, plaintext: Optional[bytes]) -> Optional[EncryptedRecord]:
        """
        Encrypt plaintext under the provider key.

        Args:
            plaintext: Data to encrypt (b"" is a value; None is "no value")

        Returns:
            EncryptedRecord, or None for None input

        Raises:
            EncryptionError: CIPHER_FAILURE if the primitive fails
            TypeError: If plaintext is not bytes-like
            GenerationError: If no nonce can be generated
        """
        if plaintext is None:
            return None
        if not isinstance(plaintext, (bytes, bytearray, memoryview)):
            raise TypeError("Plaintext must be bytes-like")

        nonce = random_nonce()
        key = self._key_provider.get_key()

        try:
            sealed = AESGCM(key.material).encrypt(nonce, bytes(plaintext), None)
        except (ValueError, OverflowError, MemoryError) as exc:
            _log.error("Field encryption failed: %s", type(exc).__name__)
            raise EncryptionError("Failed to encrypt data") from exc

        # AESGCM appends the tag to the ciphertext
        return EncryptedRecord(
            nonce=nonce,
            tag=sealed[-TAG_LENGTH_BYTES:],
            ciphertext=sealed[:-TAG_LENGTH_BYTES],
        )

    def decrypt(
        self,
        record: Union[EncryptedRecord, str, None],
    ) -> Optional[bytes]:
        """
        Verify and decrypt a record.

        Args:
            record: EncryptedRecord, its stored string form, or None

        Returns:
            Plaintext bytes, or None for None input

        Raises:
            EncryptionError: MALFORMED_RECORD if the record cannot be parsed,
                AUTHENTICATION_FAILED if the tag does not verify
        """
        if record is None:
            return None

        if isinstance(record, str):
            record = EncryptedRecord.parse(record)

        key = self._key_provider.get_key()

        try:
            return AESGCM(key.material).decrypt(
                record.nonce, record.ciphertext + record.tag, None
            )
        except InvalidTag as exc:
            _log.warning("Field decryption rejected: authentication tag mismatch")
            raise EncryptionError.authentication_failed() from exc
        except (ValueError, OverflowError, MemoryError) as exc:
            _log.error("Field decryption failed: %s", type(exc).__name__)
            raise EncryptionError("Failed to decrypt data") from exc

    def encrypt_to_string(self, plaintext: Optional[bytes]) -> Optional[str]:
        """Encrypt and serialize in one step."""
        record = self.encrypt(plaintext)
        return record.to_string() if record is not None else None

    def decrypt_from_string(self, stored: Optional[str]) -> Optional[bytes]:
        """Parse and decrypt a stored record string."""
        if stored is None:
            return None
        return self.decrypt(EncryptedRecord.parse(stored))

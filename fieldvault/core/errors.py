"""
Error Taxonomy
==============

Exceptions and warnings raised by the data protection core.

Messages never contain key material, plaintext or credential values.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class FieldVaultError(Exception):
    """Base class for all FieldVault errors."""
    pass


class ConfigurationError(FieldVaultError):
    """Raised when key material or settings are missing or invalid."""
    pass


class EncryptionErrorKind(Enum):
    """Reason an encrypt or decrypt call failed."""
    MALFORMED_RECORD = "malformed_record"
    AUTHENTICATION_FAILED = "authentication_failed"
    CIPHER_FAILURE = "cipher_failure"


class EncryptionError(FieldVaultError):
    """
    Raised when a field value cannot be encrypted or decrypted.

    Callers must treat any kind as "cannot use this data". Retrying with the
    same input reproduces the same failure.
    """

    def __init__(
        self,
        message: str,
        kind: EncryptionErrorKind = EncryptionErrorKind.CIPHER_FAILURE,
    ) -> None:
        super().__init__(message)
        self.kind = kind

    @classmethod
    def malformed(cls, message: str) -> EncryptionError:
        return cls(message, EncryptionErrorKind.MALFORMED_RECORD)

    @classmethod
    def authentication_failed(cls, message: Optional[str] = None) -> EncryptionError:
        return cls(
            message or "Authentication tag mismatch",
            EncryptionErrorKind.AUTHENTICATION_FAILED,
        )

    @property
    def is_malformed(self) -> bool:
        return self.kind is EncryptionErrorKind.MALFORMED_RECORD

    @property
    def is_authentication_failure(self) -> bool:
        return self.kind is EncryptionErrorKind.AUTHENTICATION_FAILED

    def __repr__(self) -> str:
        return f"EncryptionError(kind={self.kind.value}, message={str(self)!r})"


class GenerationError(FieldVaultError):
    """Raised when the secure random source is unavailable. Treat as fatal."""
    pass


class SecurityWarning(UserWarning):
    """Warning for security-related configuration issues."""
    pass


class InsecureKeyWarning(SecurityWarning):
    """Emitted when field encryption runs on the built-in development key."""
    pass

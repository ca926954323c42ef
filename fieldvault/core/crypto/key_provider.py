"""
Field Encryption Key Provider
=============================

Resolves the AES-256 field key once and hands the same immutable value to
every caller for the lifetime of the provider.

Key Sources:
    CONFIGURED        64 hex characters from configuration (ENCRYPTION_KEY)
    INSECURE_DEFAULT  scrypt-derived development key, used only when no key
                      is configured and the environment permits it

The insecure variant is announced with an InsecureKeyWarning and a WARNING
record on the "fieldvault.keys" logger. Production refuses it.

WARNING:
    - The key is never logged, serialized or shown in repr()
    - There is no runtime rotation API
"""

from __future__ import annotations

import logging
import os
import threading
import warnings
from dataclasses import dataclass, field
from enum import Enum
from typing import Mapping, Optional

from fieldvault.core.config import FieldVaultConfig
from fieldvault.core.crypto.kdf import derive_key_scrypt
from fieldvault.core.errors import ConfigurationError, InsecureKeyWarning
from fieldvault.security.constants import (
    INSECURE_DEFAULT_PASSPHRASE,
    INSECURE_DEFAULT_SALT,
    KEY_ENV_VAR,
    KEY_LENGTH_BYTES,
)
from fieldvault.utils.validators import ValidationError, validate_hex

_log = logging.getLogger("fieldvault.keys")


class KeySource(Enum):
    """Where the active field key came from."""
    CONFIGURED = "configured"
    INSECURE_DEFAULT = "insecure_default"


@dataclass(frozen=True, slots=True)
class SymmetricKey:
    """
    Immutable 256-bit field encryption key.

    Attributes:
        material: The 32 raw key bytes
        source: How the key was obtained
    """

    material: bytes = field(repr=False)
    source: KeySource

    def __post_init__(self) -> None:
        if len(self.material) != KEY_LENGTH_BYTES:
            raise ConfigurationError(f"Key must be exactly {KEY_LENGTH_BYTES} bytes")

    @property
    def is_insecure(self) -> bool:
        return self.source is KeySource.INSECURE_DEFAULT

    def __repr__(self) -> str:
        """Safe representation without exposing key material."""
        return f"SymmetricKey(source={self.source.value})"


def _derive_insecure_default() -> bytes:
    return derive_key_scrypt(INSECURE_DEFAULT_PASSPHRASE, INSECURE_DEFAULT_SALT)


class KeyProvider:
    """
    Loads the field key once and returns it on every get_key() call.

    Usage:
        provider = KeyProvider.from_environment()
        cipher = AesGcmCipher(provider)

        # Tests
        provider = KeyProvider("00" * 32)
    """

    __slots__ = ("_key",)

    def __init__(
        self,
        key_hex: Optional[str] = None,
        *,
        allow_insecure_default: bool = True,
    ) -> None:
        """
        Resolve the key.

        Args:
            key_hex: 64 hex characters, or None/"" when not configured
            allow_insecure_default: Permit the development key when key_hex is absent

        Raises:
            ConfigurationError: If key_hex is invalid, or absent and the
                insecure default is not permitted
        """
        if key_hex is not None and not isinstance(key_hex, str):
            raise ConfigurationError("Encryption key must be a hex string")

        key_hex = key_hex.strip() if key_hex else ""

        if key_hex:
            self._key = self._parse_configured(key_hex)
            _log.debug("Field encryption key loaded from configuration")
            return

        if not allow_insecure_default:
            raise ConfigurationError(
                f"{KEY_ENV_VAR} is not set and the insecure default key is not permitted"
            )

        self._key = SymmetricKey(_derive_insecure_default(), KeySource.INSECURE_DEFAULT)
        _log.warning(
            "%s not set; using the built-in default field key. "
            "This is NOT secure for production.",
            KEY_ENV_VAR,
        )
        warnings.warn(
            f"{KEY_ENV_VAR} is not configured; field encryption is using an "
            "insecure default key",
            InsecureKeyWarning,
            stacklevel=2,
        )

    @staticmethod
    def _parse_configured(key_hex: str) -> SymmetricKey:
        try:
            material = validate_hex(
                key_hex,
                length=KEY_LENGTH_BYTES,
                field_name=KEY_ENV_VAR,
                lowercase_only=False,
            )
        except ValidationError as exc:
            raise ConfigurationError(
                f"{KEY_ENV_VAR} must be {KEY_LENGTH_BYTES * 2} hex characters"
            ) from exc
        return SymmetricKey(material, KeySource.CONFIGURED)

    @classmethod
    def from_environment(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        var_name: str = KEY_ENV_VAR,
        config: Optional[FieldVaultConfig] = None,
    ) -> KeyProvider:
        """
        Build a provider from the process environment.

        Args:
            environ: Mapping to read instead of os.environ
            var_name: Variable holding the hex key
            config: Configuration deciding whether the insecure default is allowed
        """
        source = os.environ if environ is None else environ
        config = config or FieldVaultConfig.get_instance()
        return cls(
            source.get(var_name),
            allow_insecure_default=config.crypto.insecure_default_permitted,
        )

    def get_key(self) -> SymmetricKey:
        """Return the process key. Same object on every call."""
        return self._key

    @property
    def source(self) -> KeySource:
        return self._key.source

    @property
    def is_insecure(self) -> bool:
        return self._key.is_insecure

    def __repr__(self) -> str:
        return f"KeyProvider(source={self._key.source.value})"


_default_provider: Optional[KeyProvider] = None
_default_lock = threading.Lock()


def get_default_key_provider() -> KeyProvider:
    """Get or create the process-wide provider built from the environment."""
    global _default_provider
    with _default_lock:
        if _default_provider is None:
            _default_provider = KeyProvider.from_environment()
        return _default_provider


def reset_default_key_provider() -> None:
    """Drop the process-wide provider. Use only for testing."""
    global _default_provider
    with _default_lock:
        _default_provider = None

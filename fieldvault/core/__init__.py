"""
Core module - Contains configuration, logging, errors and base components.
"""

from fieldvault.core.config import FieldVaultConfig
from fieldvault.core.errors import (
    FieldVaultError,
    ConfigurationError,
    EncryptionError,
    EncryptionErrorKind,
    GenerationError,
    SecurityWarning,
    InsecureKeyWarning,
)
from fieldvault.core.logging import get_secure_logger, SecureLogFilter

__all__ = [
    "FieldVaultConfig",
    "FieldVaultError",
    "ConfigurationError",
    "EncryptionError",
    "EncryptionErrorKind",
    "GenerationError",
    "SecurityWarning",
    "InsecureKeyWarning",
    "get_secure_logger",
    "SecureLogFilter",
]

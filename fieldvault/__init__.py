"""
FieldVault - At-Rest Data Protection
====================================

This package provides authenticated encryption of sensitive field values,
one-way credential hashing and secure random generation for a
persistence layer.

Security Notice:
- No secrets are logged
- Fail-closed design pattern
- The insecure development key is announced and refused in production
"""

from fieldvault.core.config import FieldVaultConfig
from fieldvault.core.logging import configure_logging, get_secure_logger
from fieldvault.core.field_ops import (
    FieldProtector,
    encrypt_field,
    decrypt_field,
    hash_credential,
    verify_credential,
    generate_token,
    generate_password,
)

__version__ = "0.1.0"

__all__ = [
    "FieldVaultConfig",
    "configure_logging",
    "get_secure_logger",
    "FieldProtector",
    "encrypt_field",
    "decrypt_field",
    "hash_credential",
    "verify_credential",
    "generate_token",
    "generate_password",
    "__version__",
]

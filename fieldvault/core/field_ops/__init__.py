"""
FieldVault Field Operations Module
==================================

The two contracts persistence code relies on:
- encrypt/decrypt a field value before persistence
- hash/verify a credential
"""

from fieldvault.core.field_ops.protector import (
    FieldProtector,
    encrypt_field,
    decrypt_field,
    hash_credential,
    verify_credential,
    generate_token,
    generate_password,
    reset_default_protector,
)

__all__ = [
    "FieldProtector",
    "encrypt_field",
    "decrypt_field",
    "hash_credential",
    "verify_credential",
    "generate_token",
    "generate_password",
    "reset_default_protector",
]

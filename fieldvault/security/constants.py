"""
Security Constants
==================

Defines the cryptographic parameters shared by the field cipher, the
credential hasher and the random generator.

These values are part of the at-rest storage format. Changing any of them
makes previously stored records or digests unreadable.
"""

from typing import Final

# Field Encryption (AES-256-GCM)
ENCRYPTION_ALGORITHM: Final[str] = "AES-256-GCM"
KEY_LENGTH_BYTES: Final[int] = 32  # 256 bits
NONCE_LENGTH_BYTES: Final[int] = 16  # 128 bits, as written by existing records
TAG_LENGTH_BYTES: Final[int] = 16  # 128 bits
RECORD_SEPARATOR: Final[str] = ":"

# Key Configuration
KEY_ENV_VAR: Final[str] = "ENCRYPTION_KEY"
INSECURE_DEFAULT_PASSPHRASE: Final[bytes] = b"default-key-change-in-production"
INSECURE_DEFAULT_SALT: Final[bytes] = b"salt"
SCRYPT_N: Final[int] = 2 ** 14
SCRYPT_R: Final[int] = 8
SCRYPT_P: Final[int] = 1

# Credential Hashing (PBKDF2-HMAC-SHA512)
KEY_DERIVATION_FUNCTION: Final[str] = "PBKDF2-SHA512"
KDF_ITERATIONS: Final[int] = 10_000
KDF_OUTPUT_BYTES: Final[int] = 64  # 512 bits
SALT_LENGTH_BYTES: Final[int] = 64

# Random Generation
DEFAULT_TOKEN_BYTES: Final[int] = 32
DEFAULT_PASSWORD_LENGTH: Final[int] = 16
PASSWORD_CHARSET: Final[str] = (
    "abcdefghijklmnopqrstuvwxyz"
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    "0123456789"
    "!@#$%^&*"
)

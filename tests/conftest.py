import os

import pytest

from fieldvault.core.auth import CredentialHasher
from fieldvault.core.config import FieldVaultConfig
from fieldvault.core.crypto import AesGcmCipher, KeyProvider, reset_default_key_provider
from fieldvault.core.field_ops import FieldProtector, reset_default_protector

TEST_KEY_HEX = "000102030405060708090a0b0c0d0e0f101112131415161718191a1b1c1d1e1f"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Every test starts without a configured key, without FIELDVAULT_*
    overrides and without cached singletons.
    """
    monkeypatch.delenv("ENCRYPTION_KEY", raising=False)
    for name in list(os.environ):
        if name.startswith("FIELDVAULT_"):
            monkeypatch.delenv(name, raising=False)

    FieldVaultConfig.reset_instance()
    reset_default_key_provider()
    reset_default_protector()
    yield
    FieldVaultConfig.reset_instance()
    reset_default_key_provider()
    reset_default_protector()


@pytest.fixture
def key_provider():
    return KeyProvider(TEST_KEY_HEX)


@pytest.fixture
def cipher(key_provider):
    return AesGcmCipher(key_provider)


@pytest.fixture
def hasher():
    return CredentialHasher()


@pytest.fixture
def protector(cipher, hasher):
    return FieldProtector(cipher, hasher)

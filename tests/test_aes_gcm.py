import pytest

from fieldvault.core.crypto import AesGcmCipher, EncryptedRecord, KeyProvider
from fieldvault.core.errors import EncryptionError, EncryptionErrorKind, InsecureKeyWarning

# Produced by the previous Node.js service (aes-256-gcm, 16-byte IV) under TEST_KEY_HEX
LEGACY_CARD_RECORD = (
    "a0a1a2a3a4a5a6a7a8a9aaabacadaeaf:"
    "86bc75b0743ff31905ac35bfef38e737:"
    "1e92168935fcff45f7b32a87da2ca0a9bb7c7a"
)
# Same service running without ENCRYPTION_KEY
LEGACY_DEFAULT_KEY_RECORD = (
    "07070707070707070707070707070707:"
    "3b481e2ded21791b6ca5f6f9ca1f2c91:"
    "6356ab7598eebfc258081c9f7623"
)


def _flip_bit(data: bytes, bit: int) -> bytes:
    buf = bytearray(data)
    buf[bit // 8] ^= 1 << (bit % 8)
    return bytes(buf)


@pytest.mark.parametrize(
    "plaintext",
    [
        b"",
        b"x",
        b"4155-1234-5678-9999",
        "Grüße, 東京".encode("utf-8"),
        bytes(range(256)),
        b"\x00" * (1024 * 1024),
    ],
)
def test_round_trip(cipher, plaintext):
    assert cipher.decrypt(cipher.encrypt(plaintext)) == plaintext


def test_card_number_scenario(cipher):
    stored = cipher.encrypt_to_string("4155-1234-5678-9999".encode("utf-8"))
    assert cipher.decrypt_from_string(stored).decode("utf-8") == "4155-1234-5678-9999"


def test_none_in_none_out(cipher):
    assert cipher.encrypt(None) is None
    assert cipher.decrypt(None) is None
    assert cipher.encrypt_to_string(None) is None
    assert cipher.decrypt_from_string(None) is None


@pytest.mark.parametrize("plaintext", [5, "text", [1, 2]])
def test_encrypt_requires_bytes(cipher, plaintext):
    with pytest.raises(TypeError):
        cipher.encrypt(plaintext)


def test_record_layout(cipher):
    record = cipher.encrypt(b"hello")
    assert len(record.nonce) == 16
    assert len(record.tag) == 16
    assert len(record.ciphertext) == 5

    nonce_hex, tag_hex, ct_hex = record.to_string().split(":")
    assert len(nonce_hex) == 32
    assert len(tag_hex) == 32
    assert len(ct_hex) == 10
    assert str(record) == record.to_string()


def test_empty_plaintext_has_empty_ciphertext_segment(cipher):
    stored = cipher.encrypt_to_string(b"")
    assert stored.endswith(":")
    assert cipher.decrypt(stored) == b""


def test_nonce_is_fresh_every_call(cipher):
    nonces = {cipher.encrypt(b"same plaintext").nonce for _ in range(10_000)}
    assert len(nonces) == 10_000


def test_same_plaintext_gives_different_records(cipher):
    assert cipher.encrypt_to_string(b"abc") != cipher.encrypt_to_string(b"abc")


def test_decrypt_accepts_string_form(cipher):
    stored = cipher.encrypt(b"payload").to_string()
    assert cipher.decrypt(stored) == b"payload"


def test_decrypt_is_deterministic(cipher):
    stored = cipher.encrypt_to_string(b"payload")
    assert cipher.decrypt(stored) == cipher.decrypt(stored)


def test_legacy_record_decrypts(cipher):
    assert cipher.decrypt(LEGACY_CARD_RECORD) == b"4155-1234-5678-9999"


def test_legacy_default_key_record_decrypts():
    with pytest.warns(InsecureKeyWarning):
        provider = KeyProvider(None)
    assert AesGcmCipher(provider).decrypt(LEGACY_DEFAULT_KEY_RECORD) == b"dev-only value"


def test_every_ciphertext_bit_flip_is_detected(cipher):
    record = cipher.encrypt(b"4155-1234-5678-9999")
    for bit in range(len(record.ciphertext) * 8):
        tampered = EncryptedRecord(record.nonce, record.tag, _flip_bit(record.ciphertext, bit))
        with pytest.raises(EncryptionError) as exc_info:
            cipher.decrypt(tampered)
        assert exc_info.value.kind is EncryptionErrorKind.AUTHENTICATION_FAILED


def test_every_tag_bit_flip_is_detected(cipher):
    record = cipher.encrypt(b"4155-1234-5678-9999")
    for bit in range(len(record.tag) * 8):
        tampered = EncryptedRecord(record.nonce, _flip_bit(record.tag, bit), record.ciphertext)
        with pytest.raises(EncryptionError) as exc_info:
            cipher.decrypt(tampered)
        assert exc_info.value.is_authentication_failure


def test_nonce_tampering_is_detected(cipher):
    record = cipher.encrypt(b"secret")
    tampered = EncryptedRecord(_flip_bit(record.nonce, 0), record.tag, record.ciphertext)
    with pytest.raises(EncryptionError) as exc_info:
        cipher.decrypt(tampered)
    assert exc_info.value.is_authentication_failure


def test_truncated_ciphertext_is_detected(cipher):
    record = cipher.encrypt(b"secret value")
    tampered = EncryptedRecord(record.nonce, record.tag, record.ciphertext[:-1])
    with pytest.raises(EncryptionError) as exc_info:
        cipher.decrypt(tampered)
    assert exc_info.value.is_authentication_failure


def test_wrong_key_fails_authentication(cipher):
    stored = cipher.encrypt_to_string(b"secret")
    other = AesGcmCipher(KeyProvider("ff" * 32))
    with pytest.raises(EncryptionError) as exc_info:
        other.decrypt(stored)
    assert exc_info.value.is_authentication_failure


@pytest.mark.parametrize(
    "stored",
    [
        "",
        "abc",
        "00" * 16 + ":" + "00" * 16,
        "00" * 16 + ":" + "00" * 16 + ":00:00",
        "00" * 15 + ":" + "00" * 16 + ":00",
        "00" * 16 + ":" + "00" * 17 + ":00",
        "AA" * 16 + ":" + "00" * 16 + ":00",
        "00" * 16 + ":" + "00" * 16 + ":0",
        "00" * 16 + ":" + "00" * 16 + ":zz",
        " " + "00" * 16 + ":" + "00" * 16 + ":00",
        "00" * 16 + ":" + "00" * 16 + ":00\n",
        "0x" + "00" * 15 + ":" + "00" * 16 + ":00",
    ],
)
def test_malformed_records_rejected(cipher, stored):
    with pytest.raises(EncryptionError) as exc_info:
        cipher.decrypt(stored)
    assert exc_info.value.kind is EncryptionErrorKind.MALFORMED_RECORD


def test_parse_rejects_non_string():
    with pytest.raises(EncryptionError) as exc_info:
        EncryptedRecord.parse(b"00:00:00")
    assert exc_info.value.is_malformed


def test_record_constructor_validates_sizes():
    with pytest.raises(EncryptionError):
        EncryptedRecord(b"\x00" * 12, b"\x00" * 16, b"")
    with pytest.raises(EncryptionError):
        EncryptedRecord(b"\x00" * 16, b"\x00" * 8, b"")


def test_parse_then_serialize_is_stable():
    assert EncryptedRecord.parse(LEGACY_CARD_RECORD).to_string() == LEGACY_CARD_RECORD


def test_record_repr_hides_contents(cipher):
    record = cipher.encrypt(b"4155-1234-5678-9999")
    assert record.ciphertext.hex() not in repr(record)


def test_cipher_failure_wrapped(cipher, monkeypatch):
    from fieldvault.core.crypto import aes_gcm

    class ExhaustedAESGCM:
        def __init__(self, key):
            pass

        def encrypt(self, nonce, data, aad):
            raise MemoryError()

    monkeypatch.setattr(aes_gcm, "AESGCM", ExhaustedAESGCM)

    with pytest.raises(EncryptionError) as exc_info:
        cipher.encrypt(b"data")
    assert exc_info.value.kind is EncryptionErrorKind.CIPHER_FAILURE

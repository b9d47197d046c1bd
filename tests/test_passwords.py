import pytest
from argon2.exceptions import InvalidHashError

from authgate.auth.passwords import hash_password, verify_password


def test_hash_verifies_against_its_plaintext(hasher):
    digest = hash_password("secret1", hasher)
    assert digest != "secret1"
    assert "secret1" not in digest
    assert verify_password(digest, "secret1", hasher)


def test_other_plaintext_does_not_verify(hasher):
    digest = hash_password("secret1", hasher)
    assert not verify_password(digest, "secret2", hasher)
    assert not verify_password(digest, "", hasher)


def test_hash_is_salted_per_call(hasher):
    a = hash_password("secret1", hasher)
    b = hash_password("secret1", hasher)
    assert a != b
    assert verify_password(a, "secret1", hasher)
    assert verify_password(b, "secret1", hasher)


def test_empty_password_is_rejected(hasher):
    with pytest.raises(ValueError):
        hash_password("", hasher)


def test_malformed_digest_raises(hasher):
    with pytest.raises(InvalidHashError):
        verify_password("not-an-argon2-hash", "secret1", hasher)


def test_default_hasher_round_trip():
    assert verify_password(hash_password("pw"), "pw")

"""Tests for password hashing."""

from macrolens.services.passwords import hash_password, verify_password


def test_hash_is_salted() -> None:
    assert hash_password("p", iterations=1000) != hash_password("p", iterations=1000)


def test_verify_roundtrip_and_mismatch() -> None:
    stored = hash_password("correct horse", iterations=1000)

    assert verify_password("correct horse", stored)
    assert not verify_password("wrong", stored)


def test_verify_rejects_malformed_hashes() -> None:
    assert not verify_password("p", "p")
    assert not verify_password("p", "md5$1$abc$def")
    assert not verify_password("p", "pbkdf2_sha256$many$abc$def")
    assert not verify_password("p", "pbkdf2_nope$1000$abc$def")

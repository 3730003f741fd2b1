"""Salted password hashing (PBKDF2-SHA256)."""

import base64
import hashlib
import hmac
import os

_PBKDF2_ALG = "sha256"
_PBKDF2_ITERATIONS = 200_000
_SALT_BYTES = 16


def hash_password(password: str, iterations: int = _PBKDF2_ITERATIONS) -> str:
    """Return a self-describing salted hash for the password."""
    salt = os.urandom(_SALT_BYTES)
    digest = hashlib.pbkdf2_hmac(
        _PBKDF2_ALG, password.encode("utf-8"), salt, iterations
    )
    return f"pbkdf2_{_PBKDF2_ALG}${iterations}${_b64encode(salt)}${_b64encode(digest)}"


def verify_password(password: str, password_hash: str) -> bool:
    """Return True when the password matches the stored hash."""
    try:
        scheme, iterations_raw, salt_b64, digest_b64 = password_hash.split("$", 3)
        if not scheme.startswith("pbkdf2_"):
            return False
        algorithm = scheme.split("_", 1)[1]
        salt = _b64decode(salt_b64)
        expected = _b64decode(digest_b64)
        actual = hashlib.pbkdf2_hmac(
            algorithm, password.encode("utf-8"), salt, int(iterations_raw)
        )
    except ValueError:
        return False
    return hmac.compare_digest(actual, expected)


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + padding).encode("ascii"))

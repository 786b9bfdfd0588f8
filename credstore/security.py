"""Password hashing helpers for the credential store."""
from __future__ import annotations

import hmac

from passlib.context import CryptContext

_pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return _pwd_context.hash(password)


def is_password_hash(value: str) -> bool:
    """Return ``True`` when ``value`` looks like a hash produced by :func:`hash_password`."""

    return _pwd_context.identify(value, required=False) is not None


def verify_password(password: str, stored: str) -> bool:
    """Check ``password`` against a stored credential.

    Hashed values are verified through passlib; anything else is treated as a
    plain-text password and compared in constant time.
    """

    if is_password_hash(stored):
        try:
            return _pwd_context.verify(password, stored)
        except ValueError:
            return False
    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


__all__ = ["hash_password", "is_password_hash", "verify_password"]

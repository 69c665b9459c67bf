"""
services/password_hasher.py — Salted HMAC-SHA512 password hashing.

The salt is a fresh 128-byte random key per call; the stored hash is
HMAC-SHA512(key=salt, msg=utf8(password)). Both are stored as raw bytes on
the user row. Verification recomputes the digest with the stored salt and
compares in constant time.

Pure functions: no Flask, no DB.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets

SALT_BYTES = 128


def _digest(password: str, salt: bytes) -> bytes:
    return hmac.new(salt, password.encode("utf-8"), hashlib.sha512).digest()


def hash_password(password: str) -> tuple[bytes, bytes]:
    """Returns (password_hash, password_salt) for a plaintext password."""
    salt = secrets.token_bytes(SALT_BYTES)
    return _digest(password, salt), salt


def verify_password(password: str, password_hash: bytes, password_salt: bytes) -> bool:
    """True iff `password` hashes to `password_hash` under `password_salt`."""
    return hmac.compare_digest(_digest(password, password_salt), bytes(password_hash))

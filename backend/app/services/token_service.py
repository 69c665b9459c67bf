"""
services/token_service.py — Session and refresh token issuance.

Token design:
  - Session token: JWT signed with JWT_SECRET_KEY (HS512 by default).
    Claims: sub (user id as str), name (username), iat, nbf, exp.
    TTL = JWT_ACCESS_TOKEN_EXPIRES (10 min). Stateless: nothing is stored
    server-side and there is no revocation list.
  - Refresh token: base64 of 64 random bytes, stored on the user row.
    TTL = JWT_REFRESH_TOKEN_EXPIRES (24 h). One live value per user;
    bind_refresh_token() overwrites the previous one.

current_app.config is read for the secret, algorithm and TTLs only. A
missing secret raises ConfigurationError instead of signing with a default.
"""

from __future__ import annotations

import base64
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app

from backend.app.errors import ConfigurationError

REFRESH_TOKEN_BYTES = 64
VERIFICATION_TOKEN_BYTES = 64

_DEFAULT_ACCESS_TTL = timedelta(minutes=10)
_DEFAULT_REFRESH_TTL = timedelta(hours=24)


@dataclass(frozen=True)
class IssuedRefreshToken:
    token: str
    created_at: datetime
    expires_at: datetime


def _signing_secret() -> str:
    secret = current_app.config.get("JWT_SECRET_KEY")
    if not secret:
        raise ConfigurationError("JWT_SECRET_KEY is not configured.")
    return secret


def _algorithm() -> str:
    return current_app.config.get("JWT_ALGORITHM", "HS512")


def issue_session_token(user_id: int, username: str) -> str:
    """Creates a signed session token for the given identity."""
    secret = _signing_secret()
    now = datetime.now(timezone.utc)
    ttl = current_app.config.get("JWT_ACCESS_TOKEN_EXPIRES", _DEFAULT_ACCESS_TTL)
    payload = {
        "sub": str(user_id),
        "name": username,
        "iat": now,
        "nbf": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, secret, algorithm=_algorithm())


def decode_session_token(token: str) -> dict:
    """
    Verifies signature, nbf and exp and returns the claims.

    Raises jwt.ExpiredSignatureError / jwt.InvalidTokenError on failure;
    the auth middleware maps those to TOKEN_EXPIRED / TOKEN_INVALID.
    """
    return jwt.decode(
        token,
        _signing_secret(),
        algorithms=[_algorithm()],
        options={"require": ["sub", "exp"]},
    )


def issue_refresh_token() -> IssuedRefreshToken:
    created_at = datetime.now(timezone.utc)
    ttl = current_app.config.get("JWT_REFRESH_TOKEN_EXPIRES", _DEFAULT_REFRESH_TTL)
    token = base64.b64encode(secrets.token_bytes(REFRESH_TOKEN_BYTES)).decode("ascii")
    return IssuedRefreshToken(
        token=token,
        created_at=created_at,
        expires_at=created_at + ttl,
    )


def bind_refresh_token(user, issued: IssuedRefreshToken) -> None:
    """Replaces the user's stored refresh token and expiry with `issued`."""
    user.refresh_token = issued.token
    user.refresh_token_expires_at = issued.expires_at


def create_verification_token() -> str:
    return secrets.token_hex(VERIFICATION_TOKEN_BYTES).upper()

"""
middleware/auth_middleware.py — Bearer session-token authentication.

The @require_auth decorator:
  1. Reads the Authorization header (expected: "Bearer <token>")
  2. Verifies the JWT signature, nbf and exp via token_service
  3. Attaches user_id (int) and username to flask.g for the request
  4. Raises AppError (401) if any step fails

This middleware authenticates only. Ownership checks (e.g. only the owner
may delete an album) live in the service layer and are reported there.

Error codes:
  TOKEN_MISSING  (401) — no Authorization header
  TOKEN_INVALID  (401) — malformed header, bad signature, or bad claims
  TOKEN_EXPIRED  (401) — valid token whose exp is in the past
"""

from __future__ import annotations

import functools
from typing import Callable

import jwt
from flask import g, request

from backend.app.errors import AppError, ErrorCode
from backend.app.services import token_service


def require_auth(f: Callable) -> Callable:
    """
    Route decorator that enforces session-token authentication.

    Usage:
        @albums_bp.route("", methods=["POST"])
        @require_auth
        def add_album():
            user_id = g.user_id  # always an int when this runs
            ...
    """
    @functools.wraps(f)
    def decorated(*args, **kwargs):
        _authenticate_request()
        return f(*args, **kwargs)

    return decorated


def _authenticate_request() -> None:
    """
    Performs the full bearer-token check and sets flask.g.user_id / g.username.

    Separated from the decorator wrapper so tests can call it directly
    inside a test request context.
    """
    auth_header = request.headers.get("Authorization", "")

    if not auth_header:
        raise AppError(
            ErrorCode.TOKEN_MISSING,
            "Authentication required. Provide a Bearer token in the Authorization header.",
            401,
        )

    parts = auth_header.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "Authorization header must be in the format: Bearer <token>.",
            401,
        )

    try:
        payload = token_service.decode_session_token(parts[1])
    except jwt.ExpiredSignatureError:
        raise AppError(
            ErrorCode.TOKEN_EXPIRED,
            "The session token has expired. Use POST /Auth/RefreshToken to obtain a new one.",
            401,
        )
    except jwt.InvalidTokenError:
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "The session token is invalid or has been tampered with.",
            401,
        )

    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AppError(
            ErrorCode.TOKEN_INVALID,
            "The 'sub' claim in the session token is not a valid user ID.",
            401,
        )

    g.user_id = user_id
    g.username = payload.get("name")

"""
schemas/auth_schema.py — Marshmallow schemas for authentication endpoints.

Validation responsibility:
  - This file: field presence, types, lengths, formats.
  - services/auth_service.py: EMAIL_IN_USE / USERNAME_IN_USE (need a DB
    lookup), credential checks, token checks.

Request bodies use the client's camelCase keys (displayName); loaded dicts
use snake_case.

IMPORTANT: All schemas inherit from marshmallow.Schema directly.
           Do NOT use ma.Schema. See extensions.py.
"""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate


def _validate_utf8(value: str) -> None:
    """JSON can carry lone surrogates (U+D800 to U+DFFF); they cannot be hashed or stored."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise ValidationError("Value contains characters that are not valid UTF-8.")


class RegisterSchema(Schema):
    """
    POST /Auth/Register

    Field rules:
      email       : valid email format, max 255
      username    : 3–50 chars, letters, digits and underscore only
      password    : required, non-empty, max 128
      displayName : optional, max 100
      bio         : optional, max 1000
    """

    email = fields.Email(
        required=True,
        validate=[validate.Length(max=255), _validate_utf8],
    )

    username = fields.Str(
        required=True,
        validate=[
            validate.Length(
                min=3,
                max=50,
                error="Username must be between 3 and 50 characters.",
            ),
            validate.Regexp(
                r"^[a-zA-Z0-9_]+$",
                error="Username may only contain letters, numbers, and underscores.",
            ),
        ],
    )

    password = fields.Str(
        required=True,
        load_only=True,
        validate=[
            validate.Length(
                min=1,
                max=128,
                error="Password must be between 1 and 128 characters.",
            ),
            _validate_utf8,
        ],
    )

    display_name = fields.Str(
        data_key="displayName",
        load_default=None,
        allow_none=True,
        validate=[validate.Length(max=100), _validate_utf8],
    )

    bio = fields.Str(
        load_default=None,
        allow_none=True,
        validate=[validate.Length(max=1000), _validate_utf8],
    )


class LoginSchema(Schema):
    """
    POST /Auth/Login

    Credential correctness is checked in auth_service.py, which reports
    USER_NOT_FOUND, WRONG_PASSWORD or NOT_VERIFIED in that order.
    """

    email = fields.Str(required=True, validate=_validate_utf8)
    password = fields.Str(required=True, load_only=True, validate=_validate_utf8)


class VerifySchema(Schema):
    """POST /Auth/Verify — the verification token sent to the user."""

    token = fields.Str(required=True, validate=[validate.Length(min=1), _validate_utf8])

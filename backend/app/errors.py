"""
errors.py — AppError, ConfigurationError and the error code registry.

Two failure channels exist:
  - Business failures (email in use, wrong password, album not found, ...)
    are REPORTED: services return ServiceResponse.fail(code, message).
    Nothing is raised. See app/responses.py.
  - Transport failures (missing/invalid bearer token, schema validation)
    RAISE AppError. The global handler in app/__init__.py converts it to the
    response envelope.

ConfigurationError is the only fatal condition a service raises. It means
the deployment is broken (e.g. no JWT signing secret), not that the input
was bad, and ends up in the generic 500 handler.
"""

from __future__ import annotations


class AppError(Exception):

    def __init__(
            self,
            code: str,
            message: str,
            http_status: int,
            field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code        = code
        self.message     = message
        self.http_status = http_status
        self.field       = field  # which request field caused the error

    def to_dict(self) -> dict:
        payload = {
            "success":       False,
            "returnMessage": self.message,
            "data":          None,
            "code":          self.code,
        }
        if self.field is not None:
            payload["field"] = self.field
        return payload

    def __repr__(self) -> str:
        return (
            f"AppError(code={self.code!r}, "
            f"http_status={self.http_status}, "
            f"message={self.message!r})"
        )


class ConfigurationError(RuntimeError):
    """A required setting (signing secret, image-host credentials) is missing."""


# ── Error Code Registry ────────────────────────────────────────────────────
#
# These are the string values sent in the `code` field of a failed
# envelope. Do not rename them once published.
# ──────────────────────────────────────────────────────────────────────────

class ErrorCode:

    # ── Schema / Input Errors (400) ────────────────────────────────────────
    MISSING_FIELD            = "MISSING_FIELD"
    INVALID_FIELD            = "INVALID_FIELD"
    PHOTO_REQUIRED           = "PHOTO_REQUIRED"
    CANNOT_FOLLOW_SELF       = "CANNOT_FOLLOW_SELF"

    # ── Conflict Errors (409) ──────────────────────────────────────────────
    EMAIL_IN_USE             = "EMAIL_IN_USE"
    USERNAME_IN_USE          = "USERNAME_IN_USE"

    # ── Not Found Errors (404) ─────────────────────────────────────────────
    USER_NOT_FOUND           = "USER_NOT_FOUND"
    ALBUM_NOT_FOUND          = "ALBUM_NOT_FOUND"

    # ── Auth Errors ────────────────────────────────────────────────────────
    # Login precedence is USER_NOT_FOUND → WRONG_PASSWORD → NOT_VERIFIED.
    WRONG_PASSWORD           = "WRONG_PASSWORD"            # 401
    NOT_VERIFIED             = "NOT_VERIFIED"              # 403
    INVALID_TOKEN            = "INVALID_TOKEN"             # 400, verification token
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"  # 401, refresh token
    TOKEN_MISSING            = "TOKEN_MISSING"             # 401, bearer
    TOKEN_INVALID            = "TOKEN_INVALID"             # 401, bearer
    TOKEN_EXPIRED            = "TOKEN_EXPIRED"             # 401, bearer
    FORBIDDEN                = "FORBIDDEN"                 # 403, not the owner

    # ── System Errors (500) ────────────────────────────────────────────────
    CONFIGURATION_ERROR      = "CONFIGURATION_ERROR"
    INTERNAL_ERROR           = "INTERNAL_ERROR"


# HTTP status chosen by the transport layer for each reported failure.
# Codes missing from this table fall back to 400.
ERROR_STATUS: dict[str, int] = {
    ErrorCode.MISSING_FIELD:            400,
    ErrorCode.INVALID_FIELD:            400,
    ErrorCode.PHOTO_REQUIRED:           400,
    ErrorCode.CANNOT_FOLLOW_SELF:       400,
    ErrorCode.INVALID_TOKEN:            400,
    ErrorCode.EMAIL_IN_USE:             409,
    ErrorCode.USERNAME_IN_USE:          409,
    ErrorCode.USER_NOT_FOUND:           404,
    ErrorCode.ALBUM_NOT_FOUND:          404,
    ErrorCode.WRONG_PASSWORD:           401,
    ErrorCode.INVALID_OR_EXPIRED_TOKEN: 401,
    ErrorCode.TOKEN_MISSING:            401,
    ErrorCode.TOKEN_INVALID:            401,
    ErrorCode.TOKEN_EXPIRED:            401,
    ErrorCode.NOT_VERIFIED:             403,
    ErrorCode.FORBIDDEN:                403,
    ErrorCode.CONFIGURATION_ERROR:      500,
    ErrorCode.INTERNAL_ERROR:           500,
}


def http_status_for(code: str | None) -> int:
    return ERROR_STATUS.get(code, 400)

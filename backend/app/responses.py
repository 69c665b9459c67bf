"""
responses.py — ServiceResponse and the uniform response envelope.

Every service function returns a ServiceResponse. Every HTTP response body
is the envelope produced by ServiceResponse.to_dict():

    {"success": true,  "returnMessage": "...", "data": <T>}
    {"success": false, "returnMessage": "...", "data": null, "code": "EMAIL_IN_USE"}

Services never pick HTTP status codes; envelope_response() maps the failure
code through errors.http_status_for().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from flask import jsonify

from backend.app.errors import http_status_for

if TYPE_CHECKING:  # pragma: no cover
    from backend.app.services.token_service import IssuedRefreshToken

T = TypeVar("T")


@dataclass
class ServiceResponse(Generic[T]):
    data: T | None = None
    success: bool = True
    return_message: str = ""
    code: str | None = None

    # Set by login/refresh. Routes turn it into the HTTP-only cookie; it is
    # never serialised into the JSON body.
    refresh_token: IssuedRefreshToken | None = field(default=None, repr=False)

    @classmethod
    def ok(cls, data: Any = None, message: str = "") -> "ServiceResponse":
        return cls(data=data, success=True, return_message=message)

    @classmethod
    def fail(cls, code: str, message: str) -> "ServiceResponse":
        return cls(data=None, success=False, return_message=message, code=code)

    def to_dict(self) -> dict:
        payload = {
            "success":       self.success,
            "returnMessage": self.return_message,
            "data":          self.data,
        }
        if not self.success:
            payload["code"] = self.code
        return payload


def envelope_response(result: ServiceResponse, success_status: int = 200):
    """Returns a (response, status) tuple for a ServiceResponse."""
    status = success_status if result.success else http_status_for(result.code)
    return jsonify(result.to_dict()), status

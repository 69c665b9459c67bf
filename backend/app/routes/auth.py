"""
routes/auth.py — Authentication route handlers.

Each handler:
  - Parses the request body and validates it with a schema
    (ValidationError → 400 via the global handler)
  - Calls exactly ONE service function
  - Commits the DB session
  - Returns the envelope {"success", "returnMessage", "data"}

The refresh token only ever travels in the HTTP-only cookie named by
REFRESH_TOKEN_COOKIE_NAME; it is never put in a JSON body.

Endpoints (url_prefix=/Auth):
  POST   /Auth/Register        → 201
  POST   /Auth/Login           → 200, sets refresh cookie
  POST   /Auth/Verify          → 200
  POST   /Auth/RefreshToken    → 200, resets refresh cookie
  POST   /Auth/Logout          → 200, deletes refresh cookie
  GET    /Auth/GetCurrentUser  → 200
"""

from __future__ import annotations

from flask import Blueprint, current_app, g, request

from backend.app.extensions import db
from backend.app.middleware.auth_middleware import require_auth
from backend.app.responses import ServiceResponse, envelope_response
from backend.app.schemas.auth_schema import LoginSchema, RegisterSchema, VerifySchema
from backend.app.services import auth_service

auth_bp = Blueprint("auth", __name__)


def _json_body() -> dict:
    return request.get_json(force=True, silent=True) or {}


def _cookie_name() -> str:
    return current_app.config.get("REFRESH_TOKEN_COOKIE_NAME", "refreshToken")


def _respond_with_cookie(result: ServiceResponse):
    """Envelope response that also sets the refresh cookie when one was issued."""
    response, status = envelope_response(result)
    issued = result.refresh_token
    if issued is not None:
        response.set_cookie(
            _cookie_name(),
            issued.token,
            expires=issued.expires_at,
            httponly=True,
            secure=current_app.config.get("REFRESH_TOKEN_COOKIE_SECURE", False),
            samesite=current_app.config.get("REFRESH_TOKEN_COOKIE_SAMESITE", "Lax"),
        )
    return response, status


@auth_bp.route("/Register", methods=["POST"])
def register():
    """POST /Auth/Register — Create an unverified account; data = new user id."""
    data = RegisterSchema().load(_json_body())
    result = auth_service.register_user(
        email=data["email"],
        username=data["username"],
        password=data["password"],
        display_name=data["display_name"],
        bio=data["bio"],
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result, success_status=201)


@auth_bp.route("/Login", methods=["POST"])
def login():
    """POST /Auth/Login — data = session token; refresh token goes in the cookie."""
    data = LoginSchema().load(_json_body())
    result = auth_service.login_user(
        email=data["email"],
        password=data["password"],
        session=db.session,
    )
    db.session.commit()
    return _respond_with_cookie(result)


@auth_bp.route("/Verify", methods=["POST"])
def verify():
    """POST /Auth/Verify — Consume the email verification token."""
    data = VerifySchema().load(_json_body())
    result = auth_service.verify_user(
        verification_token=data["token"],
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)


@auth_bp.route("/RefreshToken", methods=["POST"])
def refresh_token():
    """POST /Auth/RefreshToken — Exchange the refresh cookie for a new session token."""
    result = auth_service.refresh_session(
        raw_refresh_token=request.cookies.get(_cookie_name()),
        session=db.session,
    )
    db.session.commit()
    return _respond_with_cookie(result)


@auth_bp.route("/Logout", methods=["POST"])
@require_auth
def logout():
    """POST /Auth/Logout — Forget the stored refresh token and drop the cookie."""
    result = auth_service.logout_user(user_id=g.user_id, session=db.session)
    db.session.commit()
    response, status = envelope_response(result)
    response.delete_cookie(_cookie_name(), httponly=True)
    return response, status


@auth_bp.route("/GetCurrentUser", methods=["GET"])
@require_auth
def get_current_user():
    """GET /Auth/GetCurrentUser — The signed-in user's transfer object."""
    result = auth_service.get_current_user(user_id=g.user_id, session=db.session)
    return envelope_response(result)

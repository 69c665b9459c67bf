"""
routes/profiles.py — Profile, follow and profile-photo route handlers.

Endpoints (url_prefix=/api/Profile):
  GET    /api/Profile/<username>            → 200
  POST   /api/Profile/Follow/<user_id>      → 200  (auth; toggles)
  GET    /api/Profile/<user_id>/Followers   → 200
  GET    /api/Profile/<user_id>/Following   → 200
  PUT    /api/Profile/Photo                 → 200  (auth; multipart "file")
"""

from __future__ import annotations

from flask import Blueprint, g, request

from backend.app.extensions import db
from backend.app.middleware.auth_middleware import require_auth
from backend.app.responses import envelope_response
from backend.app.services import profile_service

profiles_bp = Blueprint("profiles", __name__)


@profiles_bp.route("/<string:username>", methods=["GET"])
def get_profile(username: str):
    return envelope_response(profile_service.get_profile(username, session=db.session))


@profiles_bp.route("/Follow/<int:user_id>", methods=["POST"])
@require_auth
def toggle_follow(user_id: int):
    result = profile_service.toggle_follow(
        follower_id=g.user_id,
        target_id=user_id,
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)


@profiles_bp.route("/<int:user_id>/Followers", methods=["GET"])
def get_followers(user_id: int):
    return envelope_response(profile_service.get_followers(user_id, session=db.session))


@profiles_bp.route("/<int:user_id>/Following", methods=["GET"])
def get_followings(user_id: int):
    return envelope_response(profile_service.get_followings(user_id, session=db.session))


@profiles_bp.route("/Photo", methods=["PUT"])
@require_auth
def set_photo():
    result = profile_service.set_profile_photo(
        user_id=g.user_id,
        file=request.files.get("file"),
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)

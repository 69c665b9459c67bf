"""
routes/albums.py — Album and like route handlers.

Endpoints (url_prefix=/api/Album):
  GET    /api/Album/GetAll            → 200
  GET    /api/Album/<id>              → 200
  GET    /api/Album/User/<user_id>    → 200
  POST   /api/Album                   → 201  (auth; multipart form + "file")
  PUT    /api/Album/<id>              → 200  (auth; owner only)
  DELETE /api/Album/<id>              → 200  (auth; owner only)
  POST   /api/Album/<id>/Like         → 200  (auth; toggles)
  GET    /api/Album/<id>/Likes        → 200
"""

from __future__ import annotations

from flask import Blueprint, g, request

from backend.app.extensions import db
from backend.app.middleware.auth_middleware import require_auth
from backend.app.responses import envelope_response
from backend.app.schemas.album_schema import AddAlbumSchema, UpdateAlbumSchema
from backend.app.services import album_service

albums_bp = Blueprint("albums", __name__)


@albums_bp.route("/GetAll", methods=["GET"])
def get_all():
    return envelope_response(album_service.get_all_albums(session=db.session))


@albums_bp.route("/<int:album_id>", methods=["GET"])
def get_album(album_id: int):
    return envelope_response(album_service.get_album(album_id, session=db.session))


@albums_bp.route("/User/<int:user_id>", methods=["GET"])
def get_user_albums(user_id: int):
    return envelope_response(album_service.get_user_albums(user_id, session=db.session))


@albums_bp.route("", methods=["POST"])
@require_auth
def add_album():
    """POST /api/Album — Upload cover art and create the album."""
    fields = AddAlbumSchema().load(request.form.to_dict())
    result = album_service.add_album(
        user_id=g.user_id,
        fields=fields,
        file=request.files.get("file"),
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result, success_status=201)


@albums_bp.route("/<int:album_id>", methods=["PUT"])
@require_auth
def update_album(album_id: int):
    fields = UpdateAlbumSchema().load(request.get_json(force=True, silent=True) or {})
    result = album_service.update_album(
        user_id=g.user_id,
        album_id=album_id,
        fields=fields,
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)


@albums_bp.route("/<int:album_id>", methods=["DELETE"])
@require_auth
def delete_album(album_id: int):
    result = album_service.delete_album(
        user_id=g.user_id,
        album_id=album_id,
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)


@albums_bp.route("/<int:album_id>/Like", methods=["POST"])
@require_auth
def toggle_like(album_id: int):
    result = album_service.toggle_like(
        user_id=g.user_id,
        album_id=album_id,
        session=db.session,
    )
    db.session.commit()
    return envelope_response(result)


@albums_bp.route("/<int:album_id>/Likes", methods=["GET"])
def get_likes(album_id: int):
    return envelope_response(album_service.get_album_likes(album_id, session=db.session))

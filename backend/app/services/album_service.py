"""
services/album_service.py — Album CRUD and likes.

Authorization rules:
  - Anyone may read albums and their likes.
  - Any signed-in user may add an album and like/unlike any album.
  - Only the owner may update or delete an album (FORBIDDEN otherwise).

Layer rules:
  - No flask.request / flask.g. Routes pass user_id and the uploaded file.
  - Commits are the route's responsibility — only flush here.
  - Business failures are reported via ServiceResponse.fail, never raised.
    Image-host errors from photo_service propagate unchanged.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.errors import ErrorCode
from backend.app.models.album import Album
from backend.app.models.album_like import AlbumLike
from backend.app.responses import ServiceResponse
from backend.app.schemas.album_schema import AlbumLikeSchema, AlbumSchema
from backend.app.services import photo_service

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _album_not_found(album_id: int) -> ServiceResponse:
    return ServiceResponse.fail(
        ErrorCode.ALBUM_NOT_FOUND,
        f"Album {album_id} not found.",
    )


def _not_owner(album_id: int) -> ServiceResponse:
    return ServiceResponse.fail(
        ErrorCode.FORBIDDEN,
        f"You do not own album {album_id}.",
    )


# ── Public service functions ───────────────────────────────────────────────

def get_all_albums(session: Session) -> ServiceResponse:
    albums = session.execute(select(Album).order_by(Album.id)).scalars().all()
    return ServiceResponse.ok(AlbumSchema(many=True).dump(albums))


def get_album(album_id: int, session: Session) -> ServiceResponse:
    album = session.get(Album, album_id)
    if album is None:
        return _album_not_found(album_id)
    return ServiceResponse.ok(AlbumSchema().dump(album))


def get_user_albums(user_id: int, session: Session) -> ServiceResponse:
    albums = session.execute(
        select(Album).where(Album.user_id == user_id).order_by(Album.id)
    ).scalars().all()
    return ServiceResponse.ok(AlbumSchema(many=True).dump(albums))


def add_album(user_id: int, fields: dict, file, session: Session) -> ServiceResponse:
    """
    Uploads the album art and stores a new album owned by user_id.

    `fields` is the output of AddAlbumSchema().load(...).

    Reports:
      PHOTO_REQUIRED — no file, or the image host returned no public id.
    """
    upload = photo_service.add_photo(file)
    if not upload or not upload.get("public_id"):
        return ServiceResponse.fail(
            ErrorCode.PHOTO_REQUIRED,
            "An album cover image is required.",
        )

    album = Album(
        user_id=user_id,
        photo_url=upload.get("secure_url") or upload.get("url"),
        public_id=upload["public_id"],
        **fields,
    )
    session.add(album)
    session.flush()

    logger.info("User id=%s added album id=%s", user_id, album.id)
    return ServiceResponse.ok(AlbumSchema().dump(album), "Album added.")


def update_album(user_id: int, album_id: int, fields: dict, session: Session) -> ServiceResponse:
    """
    Applies a partial update. `fields` is the output of UpdateAlbumSchema().load(...).

    Reports:
      ALBUM_NOT_FOUND, FORBIDDEN (caller is not the owner)
    """
    album = session.get(Album, album_id)
    if album is None:
        return _album_not_found(album_id)
    if album.user_id != user_id:
        return _not_owner(album_id)

    for name, value in fields.items():
        setattr(album, name, value)
    session.flush()

    return ServiceResponse.ok(AlbumSchema().dump(album), "Album updated.")


def delete_album(user_id: int, album_id: int, session: Session) -> ServiceResponse:
    """
    Deletes the hosted cover image, then the album row (likes cascade).

    Reports:
      ALBUM_NOT_FOUND, FORBIDDEN (caller is not the owner)
    """
    album = session.get(Album, album_id)
    if album is None:
        return _album_not_found(album_id)
    if album.user_id != user_id:
        return _not_owner(album_id)

    photo_service.delete_photo(album.public_id)
    session.delete(album)
    session.flush()

    logger.info("User id=%s deleted album id=%s", user_id, album_id)
    return ServiceResponse.ok(None, "Album deleted.")


def toggle_like(user_id: int, album_id: int, session: Session) -> ServiceResponse:
    """
    Likes the album if user_id has not liked it yet, unlikes it otherwise.

    Reports:
      ALBUM_NOT_FOUND

    Returns: {"liked": bool, "likesCount": int}
    """
    album = session.get(Album, album_id)
    if album is None:
        return _album_not_found(album_id)

    existing = session.execute(
        select(AlbumLike).where(
            AlbumLike.user_id == user_id,
            AlbumLike.album_id == album_id,
        )
    ).scalar_one_or_none()

    if existing is None:
        album.likes.append(AlbumLike(user_id=user_id, album_id=album_id))
        liked = True
    else:
        album.likes.remove(existing)
        liked = False
    session.flush()

    return ServiceResponse.ok(
        {"liked": liked, "likesCount": len(album.likes)},
        "Album liked." if liked else "Album unliked.",
    )


def get_album_likes(album_id: int, session: Session) -> ServiceResponse:
    album = session.get(Album, album_id)
    if album is None:
        return _album_not_found(album_id)
    return ServiceResponse.ok(AlbumLikeSchema(many=True).dump(album.likes))

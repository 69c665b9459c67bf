"""
schemas/album_schema.py — Album input validation and transfer objects.

Input schemas (load):
  AddAlbumSchema    : POST /api/Album (multipart form fields; file handled by the route)
  UpdateAlbumSchema : PUT  /api/Album/<id> (JSON, every field optional)

Output schemas (dump, mapping layer):
  AlbumSchema       : Album → GetAlbumDTO, with owner name and like count
  AlbumLikeSchema   : AlbumLike → AlbumLikesDTO, with the liking user nested

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate

from backend.app.schemas.profile_schema import UserSchema


def _validate_non_empty_after_trim(value: str) -> None:
    if not value.strip():
        raise ValidationError("This field must not be blank or contain only whitespace.")


def _validate_year(value: str) -> None:
    if len(value) != 4 or not value.isdigit():
        raise ValidationError("yearReleased must be a four-digit year.")


class AddAlbumSchema(Schema):
    """
    POST /api/Album

    albumRating is an integer 0–10. Form values arrive as strings;
    fields.Int converts them.
    """

    album_name = fields.Str(
        required=True,
        data_key="albumName",
        validate=[validate.Length(min=1, max=200), _validate_non_empty_after_trim],
    )
    artist_name = fields.Str(
        required=True,
        data_key="artistName",
        validate=[validate.Length(min=1, max=200), _validate_non_empty_after_trim],
    )
    album_genre = fields.Str(
        required=True,
        data_key="albumGenre",
        validate=[validate.Length(min=1, max=100), _validate_non_empty_after_trim],
    )
    album_description = fields.Str(
        data_key="albumDescription",
        load_default="",
        validate=validate.Length(max=5000),
    )
    year_released = fields.Str(
        required=True,
        data_key="yearReleased",
        validate=_validate_year,
    )
    album_rating = fields.Int(
        data_key="albumRating",
        load_default=0,
        validate=validate.Range(min=0, max=10),
    )


class UpdateAlbumSchema(AddAlbumSchema):
    """PUT /api/Album/<id> — same rules, nothing required, no defaults."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("partial", True)
        super().__init__(*args, **kwargs)

    album_description = fields.Str(
        data_key="albumDescription",
        validate=validate.Length(max=5000),
    )
    album_rating = fields.Int(
        data_key="albumRating",
        validate=validate.Range(min=0, max=10),
    )


class AlbumSchema(Schema):
    id = fields.Int()
    album_name = fields.Str(data_key="albumName")
    artist_name = fields.Str(data_key="artistName")
    album_genre = fields.Str(data_key="albumGenre")
    album_description = fields.Str(data_key="albumDescription")
    year_released = fields.Str(data_key="yearReleased")
    album_rating = fields.Int(data_key="albumRating")
    photo_url = fields.Str(data_key="photoUrl")
    public_id = fields.Str(data_key="publicId")
    user_id = fields.Int(data_key="userId")
    user_name = fields.Method("get_user_name", data_key="userName")
    likes_count = fields.Method("get_likes_count", data_key="likesCount")
    created_at = fields.DateTime(data_key="createdAt")

    def get_user_name(self, album) -> str | None:
        user = getattr(album, "user", None)
        return user.username if user is not None else None

    def get_likes_count(self, album) -> int:
        likes = getattr(album, "likes", None)
        return len(likes) if likes is not None else 0


class AlbumLikeSchema(Schema):
    id = fields.Int()
    album_id = fields.Int(data_key="albumId")
    created_at = fields.DateTime(data_key="createdAt")
    user = fields.Nested(UserSchema)

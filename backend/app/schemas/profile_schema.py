"""
schemas/profile_schema.py — User transfer objects (mapping layer).

Dump-only schemas that project ORM User / UserFollowing rows to the
camelCase shapes the client reads. No DB access and no side effects.

followersCount / followingCount are recomputed from the relationship
collections on every dump; nothing is cached on the row. A missing
collection counts as 0.

IMPORTANT: Inherits from marshmallow.Schema directly — never ma.Schema.
"""

from __future__ import annotations

from marshmallow import Schema, fields, pre_dump


def _count(collection) -> int:
    return len(collection) if collection is not None else 0


class UserSchema(Schema):
    """User → UserDTO."""

    id = fields.Int()
    username = fields.Str(data_key="userName")
    display_name = fields.Str(data_key="displayName", allow_none=True)
    image_url = fields.Str(data_key="imageUrl", allow_none=True)
    image_id = fields.Str(data_key="imageId", allow_none=True)
    followers_count = fields.Method("get_followers_count", data_key="followersCount")
    following_count = fields.Method("get_following_count", data_key="followingCount")

    def get_followers_count(self, user) -> int:
        return _count(getattr(user, "followers", None))

    def get_following_count(self, user) -> int:
        return _count(getattr(user, "followings", None))


class CurrentUserSchema(UserSchema):
    """User → the signed-in user's own view (adds email and verification state)."""

    email = fields.Str()
    verified = fields.Method("get_verified")
    created_at = fields.DateTime(data_key="createdAt")

    def get_verified(self, user) -> bool:
        return getattr(user, "verified_at", None) is not None


class ProfileSchema(UserSchema):
    """User → ProfileDTO: public profile page with the user's albums."""

    bio = fields.Str(allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    albums = fields.Method("get_albums")

    def get_albums(self, user) -> list:
        # Imported here: album_schema nests UserSchema.
        from backend.app.schemas.album_schema import AlbumSchema

        return AlbumSchema(many=True).dump(getattr(user, "albums", None) or [])


class FollowerSchema(UserSchema):
    """UserFollowing → UserDTO of the follower (who follows)."""

    @pre_dump
    def _follower_side(self, row, **kwargs):
        return row.follower


class FollowingSchema(UserSchema):
    """UserFollowing → UserDTO of the followed user."""

    @pre_dump
    def _following_side(self, row, **kwargs):
        return row.following

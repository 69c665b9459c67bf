"""
services/profile_service.py — Public profiles, follows and profile photos.

Follow semantics:
  toggle_follow(A, B) creates the row (follower=A, following=B) when absent
  and removes it when present. A user cannot follow themself.

Layer rules:
  - No Flask request state. Commits are the route's job.
  - Business failures are reported via ServiceResponse.fail, never raised.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from backend.app.errors import ErrorCode
from backend.app.models.user import User, normalize_identifier
from backend.app.models.user_following import UserFollowing
from backend.app.responses import ServiceResponse
from backend.app.schemas.profile_schema import (
    FollowerSchema,
    FollowingSchema,
    ProfileSchema,
    UserSchema,
)
from backend.app.services import photo_service

logger = logging.getLogger(__name__)


def _user_not_found(ref) -> ServiceResponse:
    return ServiceResponse.fail(ErrorCode.USER_NOT_FOUND, f"User {ref} not found.")


def get_profile(username: str, session: Session) -> ServiceResponse:
    """Looks a user up by username (case-insensitive) and returns ProfileDTO."""
    user = session.execute(
        select(User).where(User.username_normalized == normalize_identifier(username))
    ).scalar_one_or_none()
    if user is None:
        return _user_not_found(username)
    return ServiceResponse.ok(ProfileSchema().dump(user))


def toggle_follow(follower_id: int, target_id: int, session: Session) -> ServiceResponse:
    """
    Reports:
      CANNOT_FOLLOW_SELF — follower_id == target_id
      USER_NOT_FOUND     — target does not exist, or the follower was deleted
                           after their session token was issued

    Returns: {"following": bool, "followersCount": int}
    """
    if follower_id == target_id:
        return ServiceResponse.fail(ErrorCode.CANNOT_FOLLOW_SELF, "You cannot follow yourself.")

    target = session.get(User, target_id)
    if target is None:
        return _user_not_found(target_id)

    if session.get(User, follower_id) is None:
        return _user_not_found(follower_id)

    existing = session.execute(
        select(UserFollowing).where(
            UserFollowing.follower_id == follower_id,
            UserFollowing.following_id == target_id,
        )
    ).scalar_one_or_none()

    if existing is None:
        target.followers.append(
            UserFollowing(follower_id=follower_id, following_id=target_id)
        )
        following = True
    else:
        target.followers.remove(existing)
        following = False
    session.flush()

    logger.info(
        "User id=%s %s user id=%s",
        follower_id,
        "followed" if following else "unfollowed",
        target_id,
    )
    return ServiceResponse.ok(
        {"following": following, "followersCount": len(target.followers)},
        "Followed." if following else "Unfollowed.",
    )


def get_followers(user_id: int, session: Session) -> ServiceResponse:
    """Users who follow user_id."""
    user = session.get(User, user_id)
    if user is None:
        return _user_not_found(user_id)
    return ServiceResponse.ok(FollowerSchema(many=True).dump(user.followers))


def get_followings(user_id: int, session: Session) -> ServiceResponse:
    """Users that user_id follows."""
    user = session.get(User, user_id)
    if user is None:
        return _user_not_found(user_id)
    return ServiceResponse.ok(FollowingSchema(many=True).dump(user.followings))


def set_profile_photo(user_id: int, file, session: Session) -> ServiceResponse:
    """
    Uploads a new profile photo and deletes the previous hosted image.

    Reports:
      USER_NOT_FOUND, PHOTO_REQUIRED
    """
    user = session.get(User, user_id)
    if user is None:
        return _user_not_found(user_id)

    upload = photo_service.add_photo(file)
    if not upload or not upload.get("public_id"):
        return ServiceResponse.fail(ErrorCode.PHOTO_REQUIRED, "A profile image is required.")

    previous_id = user.image_id
    user.image_url = upload.get("secure_url") or upload.get("url")
    user.image_id = upload["public_id"]
    session.flush()

    if previous_id:
        photo_service.delete_photo(previous_id)

    return ServiceResponse.ok(UserSchema().dump(user), "Profile photo updated.")

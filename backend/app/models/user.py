"""
models/user.py — User table definition (the credential store).

No business logic. No imports from services or routes.

Email and username are unique case-insensitively. The comparison happens in
Python: normalize_identifier() casefolds the value into email_normalized /
username_normalized, which carry plain UNIQUE constraints. SQL lower() is
not used because SQLite folds ASCII only and Postgres folds by collation.
auth_service checks first so the caller normally gets EMAIL_IN_USE /
USERNAME_IN_USE; a racing duplicate is caught from the IntegrityError.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, LargeBinary, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


def normalize_identifier(value: str) -> str:
    """Case-folded form of an email or username, used for uniqueness."""
    return value.casefold()


class User(db.Model):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False)

    # normalize_identifier(email); casefolding can lengthen the value.
    email_normalized: Mapped[str] = mapped_column(String(1024), nullable=False, unique=True)

    username: Mapped[str] = mapped_column(String(50), nullable=False)

    username_normalized: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)

    # HMAC-SHA512 digest and its 128-byte key. See services/password_hasher.py.
    password_hash: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    password_salt: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)

    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Profile photo on the image host.
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    image_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # Verified iff verified_at is set.
    verified_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # Cleared once consumed by /Auth/Verify.
    verification_token: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
        index=True,
    )

    # Single live refresh token per user; overwritten on every login/refresh.
    refresh_token: Mapped[str | None] = mapped_column(
        String(128),
        nullable=True,
        index=True,
    )

    refresh_token_expires_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    # ── Relationships ──────────────────────────────────────────────────────

    albums: Mapped[list["Album"]] = relationship(  # noqa: F821
        "Album",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Album.id",
    )

    likes: Mapped[list["AlbumLike"]] = relationship(  # noqa: F821
        "AlbumLike",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    # Rows where someone follows this user.
    followers: Mapped[list["UserFollowing"]] = relationship(  # noqa: F821
        "UserFollowing",
        back_populates="following",
        foreign_keys="[UserFollowing.following_id]",
        cascade="all, delete-orphan",
        order_by="UserFollowing.id",
    )

    # Rows where this user follows someone.
    followings: Mapped[list["UserFollowing"]] = relationship(  # noqa: F821
        "UserFollowing",
        back_populates="follower",
        foreign_keys="[UserFollowing.follower_id]",
        cascade="all, delete-orphan",
        order_by="UserFollowing.id",
    )

    @property
    def is_verified(self) -> bool:
        return self.verified_at is not None

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User id={self.id} username={self.username!r}>"


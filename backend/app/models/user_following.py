"""
models/user_following.py — UserFollowing self-referential junction table.

No business logic. No imports from services or routes.

Row (follower_id=A, following_id=B) means "A follows B":
  - it appears in A.followings
  - it appears in B.followers
UNIQUE(follower_id, following_id); self-follows are rejected by the DB
CHECK and, before that, by profile_service (CANNOT_FOLLOW_SELF).
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


class UserFollowing(db.Model):
    __tablename__ = "user_followings"

    __table_args__ = (
        UniqueConstraint(
            "follower_id",
            "following_id",
            name="uq_user_followings_pair",
        ),
        CheckConstraint(
            "follower_id <> following_id",
            name="ck_user_followings_not_self",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    follower_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    following_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    follower: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="followings",
        foreign_keys=[follower_id],
    )

    following: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="followers",
        foreign_keys=[following_id],
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<UserFollowing id={self.id} "
            f"follower_id={self.follower_id} "
            f"following_id={self.following_id}>"
        )

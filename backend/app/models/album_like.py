"""
models/album_like.py — AlbumLike junction table definition.

No business logic. No imports from services or routes.

A user likes an album at most once: UNIQUE(user_id, album_id).
Both FKs cascade — a like disappears with its user or its album.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


class AlbumLike(db.Model):
    __tablename__ = "album_likes"

    __table_args__ = (
        UniqueConstraint("user_id", "album_id", name="uq_album_likes_user_album"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    album_id: Mapped[int] = mapped_column(
        ForeignKey("albums.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    # ── Relationships ──────────────────────────────────────────────────────

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="likes",
    )

    album: Mapped["Album"] = relationship(  # noqa: F821
        "Album",
        back_populates="likes",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return (
            f"<AlbumLike id={self.id} "
            f"user_id={self.user_id} "
            f"album_id={self.album_id}>"
        )

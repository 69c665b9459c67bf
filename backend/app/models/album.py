"""
models/album.py — Album table definition.

No business logic. No imports from services or routes.

FK policy: user_id ON DELETE CASCADE — albums belong to their owner.
photo_url / public_id come verbatim from the image host's upload result;
public_id is what photo_service.delete_photo() needs.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.extensions import db


class Album(db.Model):
    __tablename__ = "albums"

    __table_args__ = (
        CheckConstraint(
            "album_rating >= 0 AND album_rating <= 10",
            name="ck_albums_rating_range",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    album_name: Mapped[str] = mapped_column(String(200), nullable=False)
    artist_name: Mapped[str] = mapped_column(String(200), nullable=False)
    album_genre: Mapped[str] = mapped_column(String(100), nullable=False)
    album_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    year_released: Mapped[str] = mapped_column(String(4), nullable=False)
    album_rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    photo_url: Mapped[str] = mapped_column(String(500), nullable=False)
    public_id: Mapped[str] = mapped_column(String(255), nullable=False)

    user_id: Mapped[int] = mapped_column(
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

    user: Mapped["User"] = relationship(  # noqa: F821
        "User",
        back_populates="albums",
    )

    likes: Mapped[list["AlbumLike"]] = relationship(  # noqa: F821
        "AlbumLike",
        back_populates="album",
        cascade="all, delete-orphan",
        order_by="AlbumLike.id",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Album id={self.id} album_name={self.album_name!r}>"

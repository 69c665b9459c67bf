"""
tests/unit/conftest.py — Shared setup for the DB-free unit tests.

Models reference each other by name ("Album", "UserFollowing", ...), so every
model module must be imported before the first mapper is configured. The app
factory does this inside create_app(); unit tests never build an app, so the
imports happen here instead.
"""

from backend.app.models import (  # noqa: F401
    album,
    album_like,
    user,
    user_following,
)

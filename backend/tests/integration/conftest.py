"""
tests/integration/conftest.py — Fixtures for all integration tests.

Design:
  - The app is created once per session with create_app("testing"), which
    points at in-memory SQLite unless TEST_DATABASE_URL is set.
  - All tables are created once via db.create_all() at session start.
  - Between tests, all rows are deleted child-tables-first so tests are
    isolated.
  - Cloudinary is never contacted: the `photo_host` fixture patches the SDK
    upload/destroy calls used by photo_service.

Request helpers (register, verify, login, ...) live in helpers.py as plain
functions so tests can call them with arbitrary arguments.
"""

from __future__ import annotations

import itertools
from unittest.mock import patch

import pytest

from backend.app import create_app
from backend.app.extensions import db as _db


# ═══════════════════════════════════════════════════════════════════════════
# Session-scoped app fixture
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="session")
def app():
    """Creates the Flask app in 'testing' mode and all tables, once."""
    flask_app = create_app("testing")

    with flask_app.app_context():
        _db.create_all()

    yield flask_app

    with flask_app.app_context():
        _db.drop_all()


# ═══════════════════════════════════════════════════════════════════════════
# Function-scoped test isolation
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(autouse=True)
def clean_tables(app):
    """Deletes all rows after every test, children before parents."""
    yield

    with app.app_context():
        _db.session.rollback()  # discard any uncommitted state from a failed test
        for table in reversed(_db.metadata.sorted_tables):
            _db.session.execute(table.delete())
        _db.session.commit()


# ═══════════════════════════════════════════════════════════════════════════
# Client / collaborator fixtures
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def client(app):
    """Flask test client. Each test gets a fresh client and cookie jar."""
    return app.test_client()


@pytest.fixture
def photo_host():
    """
    Patches the Cloudinary SDK. Each upload returns a distinct public_id.

    Yields (upload_mock, destroy_mock).
    """
    counter = itertools.count(1)

    def _fake_upload(file, **kwargs):
        n = next(counter)
        return {
            "public_id": f"albums/cover{n}",
            "secure_url": f"https://res.cloudinary.com/test-cloud/image/upload/albums/cover{n}.jpg",
        }

    with patch("cloudinary.uploader.upload", side_effect=_fake_upload) as upload, \
            patch("cloudinary.uploader.destroy", return_value={"result": "ok"}) as destroy:
        yield upload, destroy

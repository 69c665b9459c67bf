"""
tests/integration/helpers.py — Request helpers shared by the integration tests.

Plain functions, not fixtures, so they can be called with any arguments:
  - register(client, ...)            → new user id
  - verification_token_for(app, id)  → the stored verification token
  - verify(client, token)            → HTTP response
  - register_verified(client, app, ...) → new user id, already verified
  - login(client, email, password)   → session token (refresh cookie is set)
  - auth_headers(token)              → {"Authorization": "Bearer <token>"}
  - add_album(client, token, ...)    → HTTP response
"""

from __future__ import annotations

import io

from backend.app.extensions import db
from backend.app.models.user import User


def register(
    client,
    username: str = "alice",
    email: str | None = None,
    password: str = "Password1",
) -> int:
    if email is None:
        email = f"{username}@test.com"
    resp = client.post(
        "/Auth/Register",
        json={"email": email, "username": username, "password": password},
    )
    assert resp.status_code == 201, f"register failed: {resp.get_json()}"
    return resp.get_json()["data"]


def verification_token_for(app, user_id: int) -> str | None:
    with app.app_context():
        return db.session.get(User, user_id).verification_token


def verify(client, token: str):
    return client.post("/Auth/Verify", json={"token": token})


def register_verified(
    client,
    app,
    username: str = "alice",
    email: str | None = None,
    password: str = "Password1",
) -> int:
    user_id = register(client, username, email, password)
    resp = verify(client, verification_token_for(app, user_id))
    assert resp.status_code == 200, f"verify failed: {resp.get_json()}"
    return user_id


def login(client, email: str, password: str = "Password1") -> str:
    resp = client.post("/Auth/Login", json={"email": email, "password": password})
    assert resp.status_code == 200, f"login failed: {resp.get_json()}"
    return resp.get_json()["data"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def add_album(
    client,
    token: str,
    album_name: str = "Blue Train",
    artist_name: str = "John Coltrane",
    with_file: bool = True,
):
    data = {
        "albumName": album_name,
        "artistName": artist_name,
        "albumGenre": "Jazz",
        "albumDescription": "Hard bop.",
        "yearReleased": "1958",
        "albumRating": "9",
    }
    if with_file:
        data["file"] = (io.BytesIO(b"\x89PNG fake image bytes"), "cover.png")
    return client.post(
        "/api/Album",
        data=data,
        headers=auth_headers(token),
        content_type="multipart/form-data",
    )

"""
Unit tests for session, refresh and verification token issuance.

A bare Flask app supplies current_app.config; no database is involved.
"""

from __future__ import annotations

import base64
import string
from datetime import timedelta
from types import SimpleNamespace

import jwt
import pytest
from flask import Flask

from backend.app.errors import ConfigurationError
from backend.app.services import token_service

_SECRET = "unit-test-secret-" + "y" * 64


@pytest.fixture()
def app_ctx():
    app = Flask(__name__)
    app.config.update(
        JWT_SECRET_KEY=_SECRET,
        JWT_ALGORITHM="HS512",
        JWT_ACCESS_TOKEN_EXPIRES=timedelta(minutes=10),
        JWT_REFRESH_TOKEN_EXPIRES=timedelta(hours=24),
    )
    with app.app_context():
        yield app


class TestSessionToken:

    def test_claims_carry_identity_and_ten_minute_lifetime(self, app_ctx):
        token = token_service.issue_session_token(7, "alice")
        claims = jwt.decode(token, _SECRET, algorithms=["HS512"])

        assert claims["sub"] == "7"
        assert claims["name"] == "alice"
        assert claims["exp"] - claims["iat"] == 600
        assert claims["nbf"] == claims["iat"]

    def test_header_uses_hs512(self, app_ctx):
        token = token_service.issue_session_token(7, "alice")
        assert jwt.get_unverified_header(token)["alg"] == "HS512"

    def test_decode_round_trips_claims(self, app_ctx):
        token = token_service.issue_session_token(3, "bob")
        assert token_service.decode_session_token(token)["name"] == "bob"

    def test_decode_rejects_other_secret(self, app_ctx):
        forged = jwt.encode({"sub": "7", "exp": 9999999999}, "another-secret-" + "z" * 64,
                            algorithm="HS512")
        with pytest.raises(jwt.InvalidSignatureError):
            token_service.decode_session_token(forged)

    def test_decode_rejects_expired_token(self, app_ctx):
        app_ctx.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(seconds=-1)
        token = token_service.issue_session_token(7, "alice")
        with pytest.raises(jwt.ExpiredSignatureError):
            token_service.decode_session_token(token)

    def test_decode_requires_subject(self, app_ctx):
        token = jwt.encode({"name": "alice", "exp": 9999999999}, _SECRET, algorithm="HS512")
        with pytest.raises(jwt.MissingRequiredClaimError):
            token_service.decode_session_token(token)

    def test_missing_secret_raises_configuration_error(self, app_ctx):
        app_ctx.config["JWT_SECRET_KEY"] = None
        with pytest.raises(ConfigurationError):
            token_service.issue_session_token(7, "alice")


class TestRefreshToken:

    def test_is_base64_of_64_random_bytes(self, app_ctx):
        issued = token_service.issue_refresh_token()
        assert len(base64.b64decode(issued.token)) == token_service.REFRESH_TOKEN_BYTES == 64

    def test_expires_24_hours_after_creation(self, app_ctx):
        issued = token_service.issue_refresh_token()
        assert issued.expires_at - issued.created_at == timedelta(hours=24)
        assert issued.created_at.tzinfo is not None

    def test_tokens_are_unique(self, app_ctx):
        assert token_service.issue_refresh_token().token != token_service.issue_refresh_token().token

    def test_bind_overwrites_previous_value(self, app_ctx):
        user = SimpleNamespace(refresh_token="old", refresh_token_expires_at=None)
        issued = token_service.issue_refresh_token()

        token_service.bind_refresh_token(user, issued)

        assert user.refresh_token == issued.token
        assert user.refresh_token_expires_at == issued.expires_at


def test_verification_token_is_uppercase_hex_of_64_bytes():
    token = token_service.create_verification_token()
    assert len(token) == 128
    assert set(token) <= set(string.hexdigits.upper())

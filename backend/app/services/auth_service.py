"""
services/auth_service.py — Authentication business logic.

Responsibilities:
  - Registration (password hashing, verification token)
  - Email verification
  - Login (session token + refresh-token rotation)
  - Refresh-token exchange (compare-and-swap rotation)
  - Current-user lookup and logout

Layer rules:
  - No imports from routes or schemas except the mapping schemas.
  - No use of flask.request, flask.g, or HTTP status codes.
  - Commits are the route's job; services only flush.

Failure reporting:
  Every business failure is RETURNED as ServiceResponse.fail(code, message).
  Only ConfigurationError (missing JWT secret) is raised.

Refresh tokens:
  - One live value per user, stored on the user row, overwritten on every
    successful login or refresh.
  - Valid iff present, equal to the presented value, and expires_at > now.
    A token expiring exactly now is expired.
  - Rotation is an UPDATE ... WHERE refresh_token = <presented value>. If two
    requests race with the same token, only the first UPDATE matches a row;
    the loser reports INVALID_OR_EXPIRED_TOKEN.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.errors import ErrorCode
from backend.app.models.user import User, normalize_identifier
from backend.app.responses import ServiceResponse
from backend.app.schemas.profile_schema import CurrentUserSchema
from backend.app.services import token_service
from backend.app.services.password_hasher import hash_password, verify_password

logger = logging.getLogger(__name__)


# ── Private helpers ────────────────────────────────────────────────────────

def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    """Some backends (SQLite) hand back naive datetimes; they are stored as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _find_by_email(email: str, session: Session) -> User | None:
    return session.execute(
        select(User).where(User.email_normalized == normalize_identifier(email))
    ).scalar_one_or_none()


def email_exists(email: str, session: Session) -> bool:
    """Case-insensitive email lookup."""
    return _find_by_email(email, session) is not None


def username_exists(username: str, session: Session) -> bool:
    """Case-insensitive username lookup."""
    return session.execute(
        select(User.id).where(User.username_normalized == normalize_identifier(username))
    ).first() is not None


def _duplicate_identity(email: str, username: str, session: Session) -> ServiceResponse | None:
    if email_exists(email, session):
        return ServiceResponse.fail(ErrorCode.EMAIL_IN_USE, "Email already used.")
    if username_exists(username, session):
        return ServiceResponse.fail(ErrorCode.USERNAME_IN_USE, "Username already taken.")
    return None


# ── Public service functions ───────────────────────────────────────────────

def register_user(
        email: str,
        username: str,
        password: str,
        session: Session,
        display_name: str | None = None,
        bio: str | None = None,
) -> ServiceResponse:
    """
    Creates an unverified user with a fresh verification token.

    Reports:
      EMAIL_IN_USE    — email already registered (case-insensitive)
      USERNAME_IN_USE — username already taken (case-insensitive)

    A concurrent registration that slips past the checks trips the unique
    constraints on flush; the savepoint is rolled back and the same codes
    are reported.

    Returns: ServiceResponse with data = new user id.
    """
    duplicate = _duplicate_identity(email, username, session)
    if duplicate is not None:
        return duplicate

    password_hash, password_salt = hash_password(password)

    user = User(
        email=email,
        email_normalized=normalize_identifier(email),
        username=username,
        username_normalized=normalize_identifier(username),
        password_hash=password_hash,
        password_salt=password_salt,
        display_name=display_name,
        bio=bio,
        created_at=_utcnow(),
        verification_token=token_service.create_verification_token(),
    )
    try:
        with session.begin_nested():
            session.add(user)
            session.flush()  # populate user.id
    except IntegrityError:
        logger.warning("Concurrent registration for username=%s", username)
        duplicate = _duplicate_identity(email, username, session)
        if duplicate is not None:
            return duplicate
        raise

    logger.info("Registered user id=%s username=%s", user.id, user.username)
    return ServiceResponse.ok(user.id, "User registered.")


def login_user(email: str, password: str, session: Session) -> ServiceResponse:
    """
    Checks credentials and issues a session token plus a rotated refresh token.

    Precedence (each check short-circuits):
      USER_NOT_FOUND → WRONG_PASSWORD → NOT_VERIFIED
    An unverified user with a wrong password always sees WRONG_PASSWORD.

    Returns: ServiceResponse with data = session token and
             refresh_token = the IssuedRefreshToken for the cookie.
    """
    user = _find_by_email(email, session)

    if user is None:
        return ServiceResponse.fail(ErrorCode.USER_NOT_FOUND, "User not found.")

    if not verify_password(password, user.password_hash, user.password_salt):
        return ServiceResponse.fail(ErrorCode.WRONG_PASSWORD, "Wrong password.")

    if user.verified_at is None:
        return ServiceResponse.fail(ErrorCode.NOT_VERIFIED, "User not yet verified.")

    session_token = token_service.issue_session_token(user.id, user.username)
    issued = token_service.issue_refresh_token()
    token_service.bind_refresh_token(user, issued)
    session.flush()

    logger.info("User id=%s logged in", user.id)
    result = ServiceResponse.ok(session_token, "Login successful.")
    result.refresh_token = issued
    return result


def verify_user(verification_token: str, session: Session) -> ServiceResponse:
    """
    Consumes a verification token and marks its user verified.

    The token is cleared on success, so it cannot be used twice.

    Reports:
      INVALID_TOKEN — no user holds this token.
    """
    if not verification_token:
        return ServiceResponse.fail(ErrorCode.INVALID_TOKEN, "Invalid token.")

    user = session.execute(
        select(User).where(User.verification_token == verification_token)
    ).scalar_one_or_none()

    if user is None:
        return ServiceResponse.fail(ErrorCode.INVALID_TOKEN, "Invalid token.")

    user.verified_at = _utcnow()
    user.verification_token = None
    session.flush()

    logger.info("User id=%s verified", user.id)
    return ServiceResponse.ok(None, "User verified.")


def refresh_session(raw_refresh_token: str | None, session: Session) -> ServiceResponse:
    """
    Exchanges a refresh token for a new session token and rotates it.

    Reports:
      INVALID_OR_EXPIRED_TOKEN — missing, unknown, expired (expires_at <= now),
                                 or rotated concurrently by another request.

    Returns: ServiceResponse with data = session token and
             refresh_token = the new IssuedRefreshToken.
    """
    invalid = ServiceResponse.fail(
        ErrorCode.INVALID_OR_EXPIRED_TOKEN,
        "Invalid refresh token.",
    )

    if not raw_refresh_token:
        return invalid

    user = session.execute(
        select(User).where(User.refresh_token == raw_refresh_token)
    ).scalar_one_or_none()

    if user is None or user.refresh_token_expires_at is None:
        return invalid

    if _as_utc(user.refresh_token_expires_at) <= _utcnow():
        return invalid

    session_token = token_service.issue_session_token(user.id, user.username)
    issued = token_service.issue_refresh_token()

    swapped = session.execute(
        update(User)
        .where(User.id == user.id, User.refresh_token == raw_refresh_token)
        .values(
            refresh_token=issued.token,
            refresh_token_expires_at=issued.expires_at,
        )
    )
    if swapped.rowcount != 1:
        logger.warning("Refresh token for user id=%s was rotated concurrently", user.id)
        return invalid

    result = ServiceResponse.ok(session_token, "Refresh token valid.")
    result.refresh_token = issued
    return result


def logout_user(user_id: int, session: Session) -> ServiceResponse:
    """Drops the user's stored refresh token so it can no longer be exchanged."""
    user = session.get(User, user_id)
    if user is not None:
        user.refresh_token = None
        user.refresh_token_expires_at = None
        session.flush()
    return ServiceResponse.ok(None, "Logged out.")


def get_current_user(user_id: int, session: Session) -> ServiceResponse:
    """
    Returns the signed-in user's transfer object.

    Reports:
      USER_NOT_FOUND — the id in the session token no longer exists
                       (user deleted after the token was issued).
    """
    user = session.get(User, user_id)
    if user is None:
        return ServiceResponse.fail(ErrorCode.USER_NOT_FOUND, f"User {user_id} not found.")
    return ServiceResponse.ok(CurrentUserSchema().dump(user))

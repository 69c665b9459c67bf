"""
Unit tests for album_service and profile_service branches: ownership checks,
missing rows, and the image-host interplay. Sessions are MagicMocks and the
photo service is patched.
"""

from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

from backend.app.errors import ErrorCode
from backend.app.services import album_service, profile_service


def _session_get(row):
    session = MagicMock()
    session.get.return_value = row
    return session


# ═══════════════════════════════════════════════════════════════════════════
# album_service
# ═══════════════════════════════════════════════════════════════════════════

def test_add_album_without_upload_reports_photo_required():
    session = MagicMock()
    with patch.object(album_service.photo_service, "add_photo", return_value={}):
        result = album_service.add_album(1, {"album_name": "x"}, None, session)

    assert result.code == ErrorCode.PHOTO_REQUIRED
    session.add.assert_not_called()


def test_add_album_upload_without_public_id_reports_photo_required():
    session = MagicMock()
    with patch.object(album_service.photo_service, "add_photo",
                      return_value={"secure_url": "https://img.example/x.jpg"}):
        result = album_service.add_album(1, {}, object(), session)

    assert result.code == ErrorCode.PHOTO_REQUIRED


def test_get_album_missing_reports_not_found():
    result = album_service.get_album(5, _session_get(None))
    assert result.code == ErrorCode.ALBUM_NOT_FOUND
    assert result.return_message == "Album 5 not found."


def test_update_album_by_non_owner_is_forbidden():
    album = SimpleNamespace(id=5, user_id=1, album_rating=9)

    result = album_service.update_album(2, 5, {"album_rating": 0}, _session_get(album))

    assert result.code == ErrorCode.FORBIDDEN
    assert album.album_rating == 9


def test_delete_album_by_non_owner_keeps_hosted_image():
    album = SimpleNamespace(id=5, user_id=1, public_id="albums/x")
    session = _session_get(album)

    with patch.object(album_service.photo_service, "delete_photo") as delete_photo:
        result = album_service.delete_album(2, 5, session)

    assert result.code == ErrorCode.FORBIDDEN
    delete_photo.assert_not_called()
    session.delete.assert_not_called()


def test_delete_album_removes_image_then_row():
    album = SimpleNamespace(id=5, user_id=1, public_id="albums/x")
    session = _session_get(album)

    with patch.object(album_service.photo_service, "delete_photo") as delete_photo:
        result = album_service.delete_album(1, 5, session)

    assert result.success is True
    delete_photo.assert_called_once_with("albums/x")
    session.delete.assert_called_once_with(album)


def test_toggle_like_missing_album_reports_not_found():
    result = album_service.toggle_like(1, 99, _session_get(None))
    assert result.code == ErrorCode.ALBUM_NOT_FOUND


# ═══════════════════════════════════════════════════════════════════════════
# profile_service
# ═══════════════════════════════════════════════════════════════════════════

def test_follow_self_reports_cannot_follow_self():
    session = MagicMock()
    result = profile_service.toggle_follow(3, 3, session)

    assert result.code == ErrorCode.CANNOT_FOLLOW_SELF
    session.get.assert_not_called()


def test_follow_missing_user_reports_not_found():
    result = profile_service.toggle_follow(3, 4, _session_get(None))
    assert result.code == ErrorCode.USER_NOT_FOUND


def test_get_followers_missing_user_reports_not_found():
    assert profile_service.get_followers(9, _session_get(None)).code == ErrorCode.USER_NOT_FOUND


def test_get_followings_returns_empty_list():
    user = SimpleNamespace(id=1, followings=[])
    result = profile_service.get_followings(1, _session_get(user))
    assert result.success is True
    assert result.data == []


def test_set_profile_photo_first_upload_deletes_nothing():
    user = SimpleNamespace(id=1, username="alice", image_url=None, image_id=None)
    upload = {"public_id": "avatars/1", "secure_url": "https://img.example/1.jpg"}

    with patch.object(profile_service.photo_service, "add_photo", return_value=upload), \
         patch.object(profile_service.photo_service, "delete_photo") as delete_photo:
        result = profile_service.set_profile_photo(1, object(), _session_get(user))

    assert result.data["imageId"] == "avatars/1"
    assert result.data["imageUrl"] == "https://img.example/1.jpg"
    delete_photo.assert_not_called()


def test_set_profile_photo_failed_upload_keeps_previous_image():
    user = SimpleNamespace(id=1, username="alice", image_url="old-url", image_id="avatars/old")

    with patch.object(profile_service.photo_service, "add_photo", return_value={}), \
         patch.object(profile_service.photo_service, "delete_photo") as delete_photo:
        result = profile_service.set_profile_photo(1, None, _session_get(user))

    assert result.code == ErrorCode.PHOTO_REQUIRED
    assert user.image_id == "avatars/old"
    delete_photo.assert_not_called()


def test_follow_by_deleted_user_reports_not_found():
    target = SimpleNamespace(id=4, followers=[])
    session = MagicMock()
    session.get.side_effect = [target, None]

    result = profile_service.toggle_follow(3, 4, session)

    assert result.code == ErrorCode.USER_NOT_FOUND
    assert result.return_message == "User 3 not found."
    assert target.followers == []
    session.flush.assert_not_called()

"""
Unit tests for photo_service. The Cloudinary SDK calls are patched; nothing
leaves the process.
"""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from flask import Flask
from werkzeug.datastructures import FileStorage

from backend.app.errors import ConfigurationError
from backend.app.services import photo_service


@pytest.fixture()
def app_ctx():
    app = Flask(__name__)
    app.config.update(
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="key",
        CLOUDINARY_API_SECRET="secret",
    )
    with app.app_context():
        yield app


def _file(content: bytes = b"img", filename: str = "cover.png") -> FileStorage:
    return FileStorage(stream=io.BytesIO(content), filename=filename)


class TestAddPhoto:

    def test_none_returns_empty_without_upload(self, app_ctx):
        with patch("cloudinary.uploader.upload") as upload:
            assert photo_service.add_photo(None) == {}
        upload.assert_not_called()

    def test_zero_byte_file_returns_empty_without_upload(self, app_ctx):
        with patch("cloudinary.uploader.upload") as upload:
            assert photo_service.add_photo(_file(b"")) == {}
        upload.assert_not_called()

    def test_upload_passes_square_face_crop(self, app_ctx):
        result = {"public_id": "albums/x", "secure_url": "https://img.example/x.jpg"}
        with patch("cloudinary.uploader.upload", return_value=result) as upload:
            assert photo_service.add_photo(_file()) == result

        kwargs = upload.call_args.kwargs
        assert kwargs["filename"] == "cover.png"
        assert kwargs["transformation"] == [
            {"height": 500, "width": 500, "crop": "fill", "gravity": "face"},
        ]

    def test_sdk_errors_propagate(self, app_ctx):
        with patch("cloudinary.uploader.upload", side_effect=RuntimeError("host down")):
            with pytest.raises(RuntimeError):
                photo_service.add_photo(_file())

    def test_missing_credentials_raise_configuration_error(self, app_ctx):
        app_ctx.config["CLOUDINARY_API_SECRET"] = None
        with patch("cloudinary.uploader.upload") as upload:
            with pytest.raises(ConfigurationError):
                photo_service.add_photo(_file())
        upload.assert_not_called()


class TestDeletePhoto:

    def test_returns_sdk_result_unmodified(self, app_ctx):
        with patch("cloudinary.uploader.destroy", return_value={"result": "not found"}) as destroy:
            assert photo_service.delete_photo("albums/x") == {"result": "not found"}
        destroy.assert_called_once_with("albums/x")

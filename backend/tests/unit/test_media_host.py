"""
Unit tests for the media host module.

Tests filename sanitization, media kind derivation and the Cloudinary
host's retry behaviour. The Cloudinary SDK is patched; no network calls
are made.
"""

import asyncio
import io
import threading
from unittest.mock import patch

import cloudinary.exceptions
import pytest

from app.core.config import Settings
from app.core.errors import UploadError
from app.core.media_host import (
    CloudinaryMediaHost,
    StoredObject,
    media_kind_from_content_type,
    sanitize_filename,
)


class TestSanitizeFilename:
    """Tests for sanitize_filename function."""

    def test_simple_filename(self):
        assert sanitize_filename("photo.jpg") == "photo.jpg"

    def test_path_traversal_attack(self):
        assert sanitize_filename("../../../etc/passwd") == "passwd"
        assert sanitize_filename("foo/../../../bar.txt") == "bar.txt"

    def test_windows_client_path(self):
        assert sanitize_filename("C:\\Users\\guest\\IMG_0001.JPG") == "IMG_0001.JPG"

    def test_removes_problematic_characters(self):
        assert sanitize_filename("my<file>name.mp4") == "myfilename.mp4"
        assert sanitize_filename('file"with|bad?chars*.jpg') == "filewithbadchars.jpg"

    def test_removes_control_characters(self):
        assert sanitize_filename("clip\x00\x07.mov") == "clip.mov"

    def test_truncates_long_names(self):
        result = sanitize_filename("a" * 200 + ".png")

        assert result == "a" * 100 + ".png"

    def test_truncates_long_extensions(self):
        result = sanitize_filename("clip." + "x" * 300)

        assert result == "clip." + "x" * 15

    def test_empty_name_gets_random_stem(self):
        result = sanitize_filename("   .png")

        assert result.endswith(".png")
        assert len(result) == len("12345678.png")


class TestMediaKind:

    @pytest.mark.parametrize(
        "content_type,expected",
        [
            ("image/jpeg", "image"),
            ("image/png", "image"),
            ("IMAGE/HEIC", "image"),
            ("video/mp4", "video"),
            ("video/quicktime", "video"),
            ("application/octet-stream", "video"),
            ("", "video"),
            (None, "video"),
        ],
    )
    def test_kind(self, content_type, expected):
        assert media_kind_from_content_type(content_type) == expected


@pytest.fixture
def host_settings() -> Settings:
    return Settings(
        cloudinary_cloud_name="test-cloud",
        cloudinary_api_key="test-key",
        cloudinary_api_secret="test-secret",
        cloudinary_folder="eventdrop",
        storage_max_attempts=3,
        storage_retry_backoff_seconds=0,
        storage_timeout_seconds=5,
    )


@pytest.fixture
def host(host_settings: Settings) -> CloudinaryMediaHost:
    return CloudinaryMediaHost(host_settings)


UPLOAD_RESULT = {
    "secure_url": "https://res.cloudinary.com/test-cloud/image/upload/v1/eventdrop/p1/abc.png",
    "public_id": "eventdrop/p1/abc",
    "resource_type": "image",
}


class TestCloudinaryUpload:

    @pytest.mark.asyncio
    async def test_upload_maps_result(self, host: CloudinaryMediaHost):
        with patch("cloudinary.uploader.upload", return_value=UPLOAD_RESULT) as upload:
            stored = await host.upload(
                io.BytesIO(b"data"), folder="p1", filename="abc.png", content_type="image/png"
            )

        assert stored == StoredObject(
            url=UPLOAD_RESULT["secure_url"],
            storage_id="eventdrop/p1/abc",
            resource_type="image",
        )
        kwargs = upload.call_args.kwargs
        assert kwargs["folder"] == "eventdrop/p1"
        assert kwargs["resource_type"] == "auto"
        assert kwargs["filename"] == "abc.png"

    @pytest.mark.asyncio
    async def test_upload_retries_transient_errors(self, host: CloudinaryMediaHost):
        side_effect = [ConnectionError("reset"), cloudinary.exceptions.Error("502"), UPLOAD_RESULT]
        with patch("cloudinary.uploader.upload", side_effect=side_effect) as upload:
            stored = await host.upload(
                io.BytesIO(b"data"), folder="p1", filename="abc.png", content_type="image/png"
            )

        assert upload.call_count == 3
        assert stored.storage_id == "eventdrop/p1/abc"

    @pytest.mark.asyncio
    async def test_upload_gives_up_after_max_attempts(self, host: CloudinaryMediaHost):
        with patch("cloudinary.uploader.upload", side_effect=ConnectionError("down")) as upload:
            with pytest.raises(UploadError) as exc_info:
                await host.upload(
                    io.BytesIO(b"data"), folder="p1", filename="a.png", content_type="image/png"
                )

        assert upload.call_count == 3
        assert exc_info.value.status_code == 502
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_upload_does_not_retry_rejections(self, host: CloudinaryMediaHost):
        rejection = cloudinary.exceptions.BadRequest("Invalid image file")
        with patch("cloudinary.uploader.upload", side_effect=rejection) as upload:
            with pytest.raises(UploadError):
                await host.upload(
                    io.BytesIO(b"data"), folder="p1", filename="a.png", content_type="image/png"
                )

        assert upload.call_count == 1

    @pytest.mark.asyncio
    async def test_upload_rewinds_file_on_retry(self, host: CloudinaryMediaHost):
        seen = []

        def fake_upload(fileobj, **kwargs):
            seen.append(fileobj.read())
            if len(seen) == 1:
                raise ConnectionError("reset")
            return UPLOAD_RESULT

        with patch("cloudinary.uploader.upload", side_effect=fake_upload):
            await host.upload(
                io.BytesIO(b"payload"), folder="p1", filename="a.png", content_type="image/png"
            )

        assert seen == [b"payload", b"payload"]

    @pytest.mark.asyncio
    async def test_upload_timeout_is_not_retried(self, host_settings: Settings):
        host = CloudinaryMediaHost(host_settings.model_copy(update={"storage_timeout_seconds": 0.05}))
        release = threading.Event()
        reads = []

        def stalled_upload(fileobj, **kwargs):
            release.wait(timeout=5)
            reads.append(fileobj.read())
            return UPLOAD_RESULT

        with patch("cloudinary.uploader.upload", side_effect=stalled_upload) as upload:
            with pytest.raises(UploadError) as exc_info:
                await host.upload(
                    io.BytesIO(b"payload"), folder="p1", filename="a.png", content_type="image/png"
                )

            assert upload.call_count == 1
            assert exc_info.value.status_code == 502
            assert exc_info.value.details == {"timeout_seconds": 0.05}
            assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)

            # Let the abandoned call finish; nothing else touched the file
            release.set()
            for _ in range(100):
                if reads:
                    break
                await asyncio.sleep(0.01)

        assert reads == [b"payload"]


class TestCloudinaryDelete:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("outcome", ["ok", "not found"])
    async def test_delete_accepts_ok_and_missing(self, host: CloudinaryMediaHost, outcome: str):
        with patch("cloudinary.uploader.destroy", return_value={"result": outcome}) as destroy:
            await host.delete("eventdrop/p1/abc", "video")

        destroy.assert_called_once()
        assert destroy.call_args.args == ("eventdrop/p1/abc",)
        assert destroy.call_args.kwargs["resource_type"] == "video"

    @pytest.mark.asyncio
    async def test_delete_unexpected_result(self, host: CloudinaryMediaHost):
        with patch("cloudinary.uploader.destroy", return_value={"result": "error"}):
            with pytest.raises(UploadError) as exc_info:
                await host.delete("eventdrop/p1/abc", "image")

        assert exc_info.value.details == {"result": "error"}

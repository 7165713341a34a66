"""
Tests for asset publishing and the Google Drive storage backend

The Drive service object is a MagicMock; no Google API calls are made.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from google.auth.exceptions import RefreshError
from googleapiclient.errors import HttpError

from video_engine.config import ProviderSettings
from video_engine.core import PublishError
from video_engine.services.infrastructure.publishing import (
    GoogleDriveStorage,
    PublishedAsset,
    ShareableLink,
    StoragePublisher,
    create_asset_publisher,
    guess_mime_type,
    read_source,
)


def _drive_service(file_id="file-1"):
    service = MagicMock()
    service.files.return_value.create.return_value.execute.return_value = {"id": file_id}
    service.files.return_value.get.return_value.execute.return_value = {
        "webViewLink": f"https://drive.google.com/file/d/{file_id}/view"
    }
    return service


class TestHelpers:

    def test_guess_mime_type(self):
        assert guess_mime_type("VideoEngine_1.mp4") == "video/mp4"
        assert guess_mime_type("blob") == "application/octet-stream"

    @pytest.mark.asyncio
    async def test_read_source_local_file(self, tmp_path):
        path = tmp_path / "clip.mp4"
        path.write_bytes(b"video")

        assert await read_source(str(path)) == b"video"
        assert await read_source(path.as_uri()) == b"video"

    @pytest.mark.asyncio
    async def test_read_source_http(self):
        transport = httpx.MockTransport(lambda r: httpx.Response(200, content=b"remote"))

        assert await read_source("https://cdn.test/clip.mp4", transport=transport) == b"remote"

    @pytest.mark.asyncio
    async def test_read_source_missing_file(self, tmp_path):
        with pytest.raises(PublishError):
            await read_source(str(tmp_path / "nope.mp4"))


class TestGoogleDriveStorage:

    def test_requires_credentials_or_service(self):
        with pytest.raises(ValueError):
            GoogleDriveStorage()

    @pytest.mark.asyncio
    async def test_upload_creates_file(self):
        service = _drive_service()
        storage = GoogleDriveStorage(service=service)

        file_id = await storage.upload(b"video-bytes", "VideoEngine_job_1.mp4")

        assert file_id == "file-1"
        kwargs = service.files.return_value.create.call_args.kwargs
        assert kwargs["body"] == {"name": "VideoEngine_job_1.mp4"}
        assert kwargs["fields"] == "id"
        assert kwargs["media_body"].mimetype() == "video/mp4"

    @pytest.mark.asyncio
    async def test_shareable_link_grants_public_read(self):
        service = _drive_service("abc")
        storage = GoogleDriveStorage(service=service)

        link = await storage.create_shareable_link("abc")

        service.permissions.return_value.create.assert_called_once_with(
            fileId="abc", body={"role": "reader", "type": "anyone"}
        )
        assert link == ShareableLink(
            view_link="https://drive.google.com/file/d/abc/view",
            download_link="https://drive.google.com/uc?export=download&id=abc",
        )

    @pytest.mark.asyncio
    async def test_http_error_becomes_publish_error(self):
        service = _drive_service()
        service.files.return_value.create.return_value.execute.side_effect = HttpError(
            MagicMock(status=403, reason="Forbidden"), b"forbidden"
        )
        storage = GoogleDriveStorage(service=service)

        with pytest.raises(PublishError):
            await storage.upload(b"video", "x.mp4")

    @pytest.mark.asyncio
    async def test_auth_error_becomes_publish_error(self):
        service = _drive_service()
        service.permissions.return_value.create.return_value.execute.side_effect = RefreshError("expired")
        storage = GoogleDriveStorage(service=service)

        with pytest.raises(PublishError):
            await storage.create_shareable_link("file-1")


    @pytest.mark.asyncio
    async def test_share_without_view_link_becomes_publish_error(self):
        service = _drive_service()
        service.files.return_value.get.return_value.execute.return_value = {}
        storage = GoogleDriveStorage(service=service)

        with pytest.raises(PublishError, match="webViewLink"):
            await storage.create_shareable_link("file-1")

    @pytest.mark.asyncio
    async def test_upload_without_file_id_becomes_publish_error(self):
        service = _drive_service()
        service.files.return_value.create.return_value.execute.return_value = {"name": "x.mp4"}
        storage = GoogleDriveStorage(service=service)

        with pytest.raises(PublishError):
            await storage.upload(b"video", "x.mp4")


class TestStoragePublisher:

    @pytest.mark.asyncio
    async def test_publish_uploads_then_shares(self):
        storage = MagicMock()
        storage.upload = AsyncMock(return_value="file-9")
        storage.create_shareable_link = AsyncMock(return_value=ShareableLink("view", "download"))

        asset = await StoragePublisher(storage).publish("https://cdn/clip.mp4", "VideoEngine_x.mp4")

        storage.upload.assert_awaited_once_with("https://cdn/clip.mp4", "VideoEngine_x.mp4")
        storage.create_shareable_link.assert_awaited_once_with("file-9")
        assert asset == PublishedAsset(view_link="view", download_link="download", file_id="file-9")

    @pytest.mark.asyncio
    async def test_download_failure_becomes_publish_error(self):
        storage = MagicMock()
        storage.upload = AsyncMock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(PublishError):
            await StoragePublisher(storage).publish("https://cdn/clip.mp4", "x.mp4")


    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [KeyError("id"), ValueError("Invalid IPv6 URL"), httpx.InvalidURL("bad url")])
    async def test_unexpected_storage_error_becomes_publish_error(self, error):
        storage = MagicMock()
        storage.upload = AsyncMock(side_effect=error)

        with pytest.raises(PublishError):
            await StoragePublisher(storage).publish("http://[bad", "x.mp4")


class TestCreateAssetPublisher:

    def test_none_without_token_file(self):
        assert create_asset_publisher(ProviderSettings()) is None

    def test_drive_publisher_with_token_file(self):
        with patch(
            "video_engine.services.infrastructure.publishing.google_drive.Credentials.from_authorized_user_file",
        ) as mock_load:
            publisher = create_asset_publisher(ProviderSettings(drive_token_file="/secrets/token.json"))

        assert isinstance(publisher, StoragePublisher)
        assert isinstance(publisher.storage, GoogleDriveStorage)
        assert publisher.storage.token_file == "/secrets/token.json"
        mock_load.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_token_file_fails_at_publish_time(self, tmp_path):
        clip = tmp_path / "clip.mp4"
        clip.write_bytes(b"video")
        publisher = create_asset_publisher(ProviderSettings(drive_token_file=str(tmp_path / "absent.json")))

        with pytest.raises(PublishError, match="Could not load Drive token file"):
            await publisher.publish(str(clip), "VideoEngine_x.mp4")

    @pytest.mark.asyncio
    async def test_malformed_token_file_fails_at_publish_time(self, tmp_path):
        token = tmp_path / "token.json"
        token.write_text("not json")
        clip = tmp_path / "clip.mp4"
        clip.write_bytes(b"video")
        publisher = create_asset_publisher(ProviderSettings(drive_token_file=str(token)))

        with pytest.raises(PublishError):
            await publisher.publish(str(clip), "VideoEngine_x.mp4")

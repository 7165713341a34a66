"""
Google Drive storage backend

Uploads finished videos to Drive, opens them to anyone with the link, and
returns a viewer link plus a direct download link. Obtaining the OAuth token is
outside this module: it expects an authorized-user token file (or ready-made
credentials / Drive service object).
"""

import asyncio
import io
from typing import Any, Optional

from google.auth.exceptions import GoogleAuthError
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from video_engine.core import PublishError, get_logger

from .base import AssetSource, AssetStorage, ShareableLink, guess_mime_type, read_source

logger = get_logger(__name__, component="google_drive")

DRIVE_SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.metadata.readonly",
]
DIRECT_DOWNLOAD_URL = "https://drive.google.com/uc?export=download&id={file_id}"


class GoogleDriveStorage(AssetStorage):
    """Drive v3 implementation of :class:`AssetStorage`."""

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        service: Any = None,
        download_timeout: float = 120.0,
        token_file: Optional[str] = None,
    ):
        if credentials is None and service is None and not token_file:
            raise ValueError("GoogleDriveStorage needs credentials, a token file or a Drive service")
        self._credentials = credentials
        self._service = service
        self.token_file = token_file
        self.download_timeout = download_timeout

    @classmethod
    def from_token_file(cls, token_file: str, download_timeout: float = 120.0) -> "GoogleDriveStorage":
        """Storage that reads the token file on first use, not at construction."""
        return cls(token_file=token_file, download_timeout=download_timeout)

    def _load_credentials(self) -> Credentials:
        try:
            return Credentials.from_authorized_user_file(self.token_file, DRIVE_SCOPES)
        except (OSError, ValueError) as e:
            raise PublishError(f"Could not load Drive token file {self.token_file}: {e}") from e

    def _drive(self) -> Any:
        if self._service is None:
            if self._credentials is None:
                self._credentials = self._load_credentials()
            self._service = build("drive", "v3", credentials=self._credentials, cache_discovery=False)
        return self._service

    def _upload_sync(self, data: bytes, name: str) -> str:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=guess_mime_type(name), resumable=True)
        created = self._drive().files().create(
            body={"name": name},
            media_body=media,
            fields="id",
        ).execute()
        file_id = created.get("id") if isinstance(created, dict) else None
        if not file_id:
            raise PublishError(f"Drive did not return a file id for {name}")
        return file_id

    def _share_sync(self, file_id: str) -> ShareableLink:
        drive = self._drive()
        drive.permissions().create(
            fileId=file_id,
            body={"role": "reader", "type": "anyone"},
        ).execute()
        metadata = drive.files().get(fileId=file_id, fields="webViewLink").execute()
        view_link = metadata.get("webViewLink") if isinstance(metadata, dict) else None
        if not view_link:
            raise PublishError(f"Drive returned no webViewLink for {file_id}")
        return ShareableLink(
            view_link=view_link,
            download_link=DIRECT_DOWNLOAD_URL.format(file_id=file_id),
        )

    async def upload(self, source: AssetSource, name: str) -> str:
        data = await read_source(source, timeout=self.download_timeout)
        try:
            file_id = await asyncio.to_thread(self._upload_sync, data, name)
        except (HttpError, GoogleAuthError) as e:
            raise PublishError(f"Drive upload failed: {e}") from e
        logger.info("Uploaded to Google Drive", extra={"file_id": file_id, "size_bytes": len(data)})
        return file_id

    async def create_shareable_link(self, file_id: str) -> ShareableLink:
        try:
            return await asyncio.to_thread(self._share_sync, file_id)
        except (HttpError, GoogleAuthError) as e:
            raise PublishError(f"Drive sharing failed for {file_id}: {e}") from e

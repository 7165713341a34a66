"""
Asset publishing interfaces

The pipeline only knows ``AssetPublisher.publish``. ``StoragePublisher``
implements it on top of any object store that can upload a file and hand out a
shareable link.
"""

import mimetypes
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

import httpx

from video_engine.core import PublishError, get_logger

logger = get_logger(__name__, component="publisher")

AssetSource = Union[bytes, str]


@dataclass(frozen=True)
class ShareableLink:
    view_link: str
    download_link: str


@dataclass(frozen=True)
class PublishedAsset:
    view_link: str
    download_link: str
    file_id: Optional[str] = None


def guess_mime_type(name: str) -> str:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or "application/octet-stream"


async def read_source(source: AssetSource, timeout: float = 120.0,
                      transport: Optional[httpx.AsyncBaseTransport] = None) -> bytes:
    """Bytes for an upload: passed through, fetched over HTTP, or read from disk."""
    if isinstance(source, bytes):
        return source

    parsed = urlparse(source)
    if parsed.scheme in ("http", "https"):
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True, transport=transport) as client:
            response = await client.get(source)
            response.raise_for_status()
            return response.content

    path = Path(parsed.path if parsed.scheme == "file" else source)
    if not path.is_file():
        raise PublishError(f"Asset source not found: {source}")
    return path.read_bytes()


class AssetStorage(ABC):
    """Remote object store with shareable links."""

    @abstractmethod
    async def upload(self, source: AssetSource, name: str) -> str:
        """Upload ``source`` under ``name`` and return the store's file id."""
        pass

    @abstractmethod
    async def create_shareable_link(self, file_id: str) -> ShareableLink:
        pass


class AssetPublisher(ABC):
    """Publishes a finished artifact and returns where it can be viewed."""

    @abstractmethod
    async def publish(self, final_media_locator: str, suggested_name: str) -> PublishedAsset:
        """
        Raises:
            PublishError: The artifact could not be uploaded or shared
        """
        pass


class StoragePublisher(AssetPublisher):
    """Upload-then-share publisher over an :class:`AssetStorage`."""

    def __init__(self, storage: AssetStorage):
        self.storage = storage

    async def publish(self, final_media_locator: str, suggested_name: str) -> PublishedAsset:
        try:
            file_id = await self.storage.upload(final_media_locator, suggested_name)
            link = await self.storage.create_shareable_link(file_id)
        except PublishError:
            raise
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError, KeyError) as e:
            raise PublishError(f"Failed to publish {suggested_name}: {e}") from e

        logger.info("Published asset", extra={"file_id": file_id, "asset_name": suggested_name})
        return PublishedAsset(view_link=link.view_link, download_link=link.download_link, file_id=file_id)

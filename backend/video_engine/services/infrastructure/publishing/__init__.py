"""Publishing - upload finished artifacts and return shareable links."""

from typing import Optional

from video_engine.config import ProviderSettings

from .base import (
    AssetPublisher,
    AssetStorage,
    PublishedAsset,
    ShareableLink,
    StoragePublisher,
    guess_mime_type,
    read_source,
)
from .google_drive import GoogleDriveStorage, DRIVE_SCOPES, DIRECT_DOWNLOAD_URL


def create_asset_publisher(settings: ProviderSettings) -> Optional[AssetPublisher]:
    """Drive publisher when a token file is configured, otherwise None."""
    if not settings.drive_token_file:
        return None
    storage = GoogleDriveStorage.from_token_file(
        settings.drive_token_file,
        download_timeout=settings.publish_timeout_seconds,
    )
    return StoragePublisher(storage)


__all__ = [
    "AssetPublisher",
    "AssetStorage",
    "PublishedAsset",
    "ShareableLink",
    "StoragePublisher",
    "guess_mime_type",
    "read_source",
    "GoogleDriveStorage",
    "DRIVE_SCOPES",
    "DIRECT_DOWNLOAD_URL",
    "create_asset_publisher",
]

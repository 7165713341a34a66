"""
Provider and collaborator settings

Everything the pipeline needs to reach its external collaborators, read from
the environment once and passed around as a dataclass.
"""

import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..core.runtime import env_float, env_int


class VideoProviderType(str, Enum):
    """Supported generation backends"""
    GEMINI = "gemini"
    KLING = "kling"


DEFAULT_GEMINI_VIDEO_ENDPOINT = (
    "https://generativelanguage.googleapis.com/v1beta/models/gemini-1.5-flash-video:generateContent"
)
DEFAULT_KLING_API_BASE_URL = "https://app.klingai.com"


@dataclass(frozen=True)
class ProviderSettings:
    """Timeouts, credentials and endpoints for external collaborators."""
    provider: VideoProviderType = VideoProviderType.GEMINI
    gemini_api_key: Optional[str] = None
    gemini_endpoint: str = DEFAULT_GEMINI_VIDEO_ENDPOINT
    kling_access_key_id: Optional[str] = None
    kling_access_key_secret: Optional[str] = None
    kling_base_url: str = DEFAULT_KLING_API_BASE_URL
    kling_poll_interval_seconds: float = 5.0
    provider_timeout_seconds: float = 60.0
    frame_extraction_timeout_seconds: float = 30.0
    publish_timeout_seconds: float = 120.0
    reference_frame_offset_seconds: float = 1.0
    frame_rate: int = 30
    temperature: float = 0.7
    drive_token_file: Optional[str] = None

    @property
    def provider_configured(self) -> bool:
        if self.provider == VideoProviderType.KLING:
            return bool(self.kling_access_key_id and self.kling_access_key_secret)
        return bool(self.gemini_api_key)


def _provider_type(raw: Optional[str]) -> VideoProviderType:
    value = (raw or "").strip().lower()
    try:
        return VideoProviderType(value)
    except ValueError:
        return VideoProviderType.GEMINI


def load_provider_settings() -> ProviderSettings:
    """Build settings from the current environment."""
    return ProviderSettings(
        provider=_provider_type(os.getenv("VIDEO_PROVIDER")),
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_endpoint=os.getenv("GEMINI_VIDEO_ENDPOINT", DEFAULT_GEMINI_VIDEO_ENDPOINT),
        kling_access_key_id=os.getenv("KLING_API_KEY_ID") or None,
        kling_access_key_secret=os.getenv("KLING_API_KEY_SECRET") or None,
        kling_base_url=os.getenv("KLING_API_BASE_URL", DEFAULT_KLING_API_BASE_URL).rstrip("/"),
        kling_poll_interval_seconds=env_float("KLING_POLL_INTERVAL_SECONDS", 5.0, 0.1),
        provider_timeout_seconds=env_float("PROVIDER_TIMEOUT_SECONDS", 60.0, 1.0),
        frame_extraction_timeout_seconds=env_float("FRAME_EXTRACTION_TIMEOUT_SECONDS", 30.0, 1.0),
        publish_timeout_seconds=env_float("PUBLISH_TIMEOUT_SECONDS", 120.0, 1.0),
        reference_frame_offset_seconds=env_float("REFERENCE_FRAME_OFFSET_SECONDS", 1.0, 0.0),
        frame_rate=env_int("VIDEO_FRAME_RATE", 30, 1),
        temperature=env_float("PROVIDER_TEMPERATURE", 0.7, 0.0),
        drive_token_file=os.getenv("GOOGLE_DRIVE_TOKEN_FILE") or None,
    )

"""
Provider factory - pick the configured generation backend.
"""

from typing import Optional

from video_engine.config import ProviderSettings, VideoProviderType, load_provider_settings

from .base import VideoProvider
from .gemini_provider import GeminiVideoProvider
from .kling_provider import KlingVideoProvider


def create_video_provider(settings: Optional[ProviderSettings] = None) -> VideoProvider:
    settings = settings or load_provider_settings()
    if settings.provider == VideoProviderType.KLING:
        return KlingVideoProvider(settings)
    return GeminiVideoProvider(settings)

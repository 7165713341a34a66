"""Video generation providers."""

from .base import (
    VideoProvider,
    ProviderRequest,
    ProviderOutcome,
    GenerationSucceeded,
    ProviderUnavailable,
    ProviderTimeout,
    InvalidProviderResponse,
)
from .gemini_provider import GeminiVideoProvider
from .kling_provider import KlingVideoProvider, build_auth_token
from .factory import create_video_provider

__all__ = [
    "VideoProvider",
    "ProviderRequest",
    "ProviderOutcome",
    "GenerationSucceeded",
    "ProviderUnavailable",
    "ProviderTimeout",
    "InvalidProviderResponse",
    "GeminiVideoProvider",
    "KlingVideoProvider",
    "build_auth_token",
    "create_video_provider",
]

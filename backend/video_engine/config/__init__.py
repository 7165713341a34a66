"""
Application configuration and settings
"""

# Load environment variables from .env file
from dotenv import load_dotenv
load_dotenv()

from .constants import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    WORDS_PER_SECOND,
    REFERENCE_FRAME_HISTORY,
    FALLBACK_KEYWORD_LIMIT,
    RESOLUTIONS_BY_ASPECT_RATIO,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_STYLE,
    DEFAULT_CLIP_DURATION_SECONDS,
    DEFAULT_MAX_CLIPS,
    MAX_CLIP_DURATION_SECONDS,
)
from .providers import (
    ProviderSettings,
    VideoProviderType,
    load_provider_settings,
)

__all__ = [
    "API_TITLE",
    "API_DESCRIPTION",
    "API_VERSION",
    "CORS_ORIGINS",
    "WORDS_PER_SECOND",
    "REFERENCE_FRAME_HISTORY",
    "FALLBACK_KEYWORD_LIMIT",
    "RESOLUTIONS_BY_ASPECT_RATIO",
    "DEFAULT_ASPECT_RATIO",
    "DEFAULT_STYLE",
    "DEFAULT_CLIP_DURATION_SECONDS",
    "DEFAULT_MAX_CLIPS",
    "MAX_CLIP_DURATION_SECONDS",
    "ProviderSettings",
    "VideoProviderType",
    "load_provider_settings",
]

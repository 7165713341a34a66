"""
Constants configuration

API settings, CORS configuration and pipeline constants.
"""

from typing import Dict

# API settings
API_TITLE = "Video Engine API"
API_DESCRIPTION = "Turn a script into a sequence of generated, visually continuous video clips"
API_VERSION = "1.0.0"

# CORS origins
CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
]

# Average speaking rate used to size segments to a clip duration
WORDS_PER_SECOND = 2.5

# Reference frames kept per job for audit; only the newest seeds the next clip
REFERENCE_FRAME_HISTORY = 3

# Keywords considered when choosing a fallback category
FALLBACK_KEYWORD_LIMIT = 5

# Output resolution for every aspect ratio the pipeline can honour
RESOLUTIONS_BY_ASPECT_RATIO: Dict[str, str] = {
    "16:9": "1920x1080",
}

DEFAULT_ASPECT_RATIO = "16:9"
DEFAULT_STYLE = "cinematic"
DEFAULT_CLIP_DURATION_SECONDS = 4.0
DEFAULT_MAX_CLIPS = 15
MAX_CLIP_DURATION_SECONDS = 60.0

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
]

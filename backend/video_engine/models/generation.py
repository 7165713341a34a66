"""
API schemas for generation endpoints

Request/response models for submitting scripts, plus the explicit option set
every job is generated with.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

from ..config import (
    RESOLUTIONS_BY_ASPECT_RATIO,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_STYLE,
    DEFAULT_CLIP_DURATION_SECONDS,
    DEFAULT_MAX_CLIPS,
    MAX_CLIP_DURATION_SECONDS,
)


class GenerationOptions(BaseModel):
    """Every option a job recognizes. Unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    style: str = Field(default=DEFAULT_STYLE, min_length=1)
    clip_duration_seconds: float = Field(default=DEFAULT_CLIP_DURATION_SECONDS, gt=0, le=MAX_CLIP_DURATION_SECONDS)
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    max_clips: int = Field(default=DEFAULT_MAX_CLIPS, ge=1)
    enhance_prompt: bool = True  # Append extracted keywords to the provider prompt

    @field_validator("style")
    @classmethod
    def _strip_style(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("style must not be blank")
        return value

    @field_validator("aspect_ratio")
    @classmethod
    def _supported_aspect_ratio(cls, value: str) -> str:
        value = value.strip()
        if value not in RESOLUTIONS_BY_ASPECT_RATIO:
            supported = ", ".join(sorted(RESOLUTIONS_BY_ASPECT_RATIO))
            raise ValueError(f"Unsupported aspect ratio '{value}'. Supported: {supported}")
        return value

    @property
    def resolution(self) -> str:
        return RESOLUTIONS_BY_ASPECT_RATIO[self.aspect_ratio]


class GenerationRequest(BaseModel):
    """Request to turn a script into a clip sequence"""
    model_config = ConfigDict(extra="forbid")

    script: str = Field(min_length=1)
    options: GenerationOptions = Field(default_factory=GenerationOptions)


class GenerationResponse(BaseModel):
    """Response after a job has been accepted"""
    job_id: str
    status: str
    message: str


class KeywordRequest(BaseModel):
    """Request to inspect the keywords and fallback category of a text"""
    text: str
    max_keywords: int = Field(default=5, ge=1, le=50)


class KeywordResponse(BaseModel):
    keywords: List[str]
    category: str
    fallback_asset: Optional[str] = None

"""
Domain records for the generation pipeline.

Segments, clips and reference frames are immutable once created. A Job is
mutated only by the repository on behalf of the tracker that owns it; everyone
else works with copies.
"""

from dataclasses import dataclass, field
from datetime import datetime, UTC
from typing import Any, Dict, Optional, Tuple

from .generation import GenerationOptions
from .status import JobStatus


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class Segment:
    """A clip-sized chunk of script text. ``index`` fixes its clip position."""
    index: int
    text: str
    estimated_word_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "text": self.text,
            "estimated_word_count": self.estimated_word_count,
        }


@dataclass(frozen=True)
class ReferenceFrame:
    """Still image taken from a clip, used to seed the next generation call."""
    clip_index: int
    image_bytes: bytes = field(repr=False)
    mime_type: str = "image/jpeg"

    @property
    def size_bytes(self) -> int:
        return len(self.image_bytes)


@dataclass(frozen=True)
class Clip:
    """Video produced (or substituted) for exactly one segment."""
    index: int
    source_segment: Segment
    media_locator: str
    aspect_ratio: str
    is_fallback: bool = False
    thumbnail_locator: Optional[str] = None
    fallback_category: Optional[str] = None
    generated_at: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "segment": self.source_segment.to_dict(),
            "media_locator": self.media_locator,
            "thumbnail_locator": self.thumbnail_locator,
            "aspect_ratio": self.aspect_ratio,
            "is_fallback": self.is_fallback,
            "fallback_category": self.fallback_category,
            "generated_at": self.generated_at.isoformat(),
        }


@dataclass
class Job:
    """One end-to-end request to turn a script into a clip sequence."""
    id: str
    script: str
    options: GenerationOptions
    status: JobStatus = JobStatus.PENDING
    progress: int = 0
    message: str = "Job created"
    segments: Tuple[Segment, ...] = ()
    clips: Tuple[Clip, ...] = ()
    reference_frames: Tuple[ReferenceFrame, ...] = ()
    final_asset_locator: Optional[str] = None
    view_link: Optional[str] = None
    download_link: Optional[str] = None
    error: Optional[str] = None
    warnings: Tuple[str, ...] = ()
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None

    @property
    def fallback_clip_count(self) -> int:
        return sum(1 for clip in self.clips if clip.is_fallback)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status.value,
            "progress": self.progress,
            "message": self.message,
            "options": self.options.model_dump(),
            "total_segments": len(self.segments),
            "clips": [clip.to_dict() for clip in self.clips],
            "reference_frame_indices": [frame.clip_index for frame in self.reference_frames],
            "final_asset_locator": self.final_asset_locator,
            "view_link": self.view_link,
            "download_link": self.download_link,
            "error": self.error,
            "warnings": list(self.warnings),
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

"""
API schemas for job status endpoints
"""

from pydantic import BaseModel
from typing import List, Optional

from .domain import Clip, Job


class SegmentResponse(BaseModel):
    index: int
    text: str
    estimated_word_count: int


class ClipResponse(BaseModel):
    """A generated or substituted clip"""
    index: int
    segment: SegmentResponse
    media_locator: str
    thumbnail_locator: Optional[str] = None
    aspect_ratio: str
    is_fallback: bool
    fallback_category: Optional[str] = None
    generated_at: str

    @classmethod
    def from_clip(cls, clip: Clip) -> "ClipResponse":
        return cls(**clip.to_dict())


class JobResponse(BaseModel):
    """Snapshot of a job's state"""
    job_id: str
    status: str
    progress: int  # 0 to 100
    message: str
    total_segments: int = 0
    clips: List[ClipResponse] = []
    final_asset_locator: Optional[str] = None
    view_link: Optional[str] = None
    download_link: Optional[str] = None
    error: Optional[str] = None
    warnings: List[str] = []
    created_at: str
    completed_at: Optional[str] = None

    @classmethod
    def from_job(cls, job: Job) -> "JobResponse":
        return cls(
            job_id=job.id,
            status=job.status.value,
            progress=job.progress,
            message=job.message,
            total_segments=len(job.segments),
            clips=[ClipResponse.from_clip(clip) for clip in job.clips],
            final_asset_locator=job.final_asset_locator,
            view_link=job.view_link,
            download_link=job.download_link,
            error=job.error,
            warnings=list(job.warnings),
            created_at=job.created_at.isoformat(),
            completed_at=job.completed_at.isoformat() if job.completed_at else None,
        )


class JobSummary(BaseModel):
    """Compact job entry for listings"""
    job_id: str
    status: str
    progress: int
    created_at: str
    completed_at: Optional[str] = None
    final_asset_locator: Optional[str] = None
    view_link: Optional[str] = None
    download_link: Optional[str] = None

    @classmethod
    def from_job(cls, job: Job) -> "JobSummary":
        return cls(
            job_id=job.id,
            status=job.status.value,
            progress=job.progress,
            created_at=job.created_at.isoformat(),
            completed_at=job.completed_at.isoformat() if job.completed_at else None,
            final_asset_locator=job.final_asset_locator,
            view_link=job.view_link,
            download_link=job.download_link,
        )


class JobListResponse(BaseModel):
    jobs: List[JobSummary]
    total: int

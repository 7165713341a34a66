"""
Models - domain records and pydantic API schemas
"""

from .status import JobStatus, ALLOWED_TRANSITIONS
from .generation import (
    GenerationOptions,
    GenerationRequest,
    GenerationResponse,
    KeywordRequest,
    KeywordResponse,
)
from .domain import Segment, ReferenceFrame, Clip, Job, utc_now
from .jobs import SegmentResponse, ClipResponse, JobResponse, JobSummary, JobListResponse

__all__ = [
    "JobStatus",
    "ALLOWED_TRANSITIONS",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationResponse",
    "KeywordRequest",
    "KeywordResponse",
    "Segment",
    "ReferenceFrame",
    "Clip",
    "Job",
    "utc_now",
    "SegmentResponse",
    "ClipResponse",
    "JobResponse",
    "JobSummary",
    "JobListResponse",
]

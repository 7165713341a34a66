"""Orchestration - job lifecycle and pipeline sequencing."""

from video_engine.models import JobStatus

from .job_tracker import (
    JobTracker,
    NO_SEGMENTS_ERROR,
    build_job_tracker,
    coerce_options,
    get_job_tracker,
    progress_for,
    reset_job_tracker,
    shutdown_job_tracker,
)

__all__ = [
    "JobTracker",
    "JobStatus",
    "NO_SEGMENTS_ERROR",
    "build_job_tracker",
    "coerce_options",
    "get_job_tracker",
    "progress_for",
    "reset_job_tracker",
    "shutdown_job_tracker",
]

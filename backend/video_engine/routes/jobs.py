"""
Job status routes.

Read-only views over the job tracker. Unknown job ids raise JobNotFoundError,
which the application maps to 404.
"""

from fastapi import APIRouter, Depends

from ..models import JobListResponse, JobResponse, JobSummary
from ..services.infrastructure.orchestration import JobTracker, get_job_tracker

router = APIRouter(tags=["jobs"])


@router.get("/job/{job_id}", response_model=JobResponse)
async def get_job_status(job_id: str, tracker: JobTracker = Depends(get_job_tracker)):
    """
    Get the status of a video generation job.

    Args:
        job_id: Unique job identifier

    Returns:
        JobResponse with status, progress (0-100), clips so far and links

    Raises:
        JobNotFoundError: mapped to 404
    """
    return JobResponse.from_job(tracker.get_status(job_id))


@router.get("/jobs", response_model=JobListResponse)
async def list_jobs(tracker: JobTracker = Depends(get_job_tracker)):
    """List all jobs, most recently created first"""
    jobs = [JobSummary.from_job(job) for job in tracker.list()]
    return JobListResponse(jobs=jobs, total=len(jobs))

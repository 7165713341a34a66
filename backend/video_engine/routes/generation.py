"""
Video generation routes
"""

from fastapi import APIRouter, Depends

from ..models import GenerationRequest, GenerationResponse, KeywordRequest, KeywordResponse
from ..services.infrastructure.orchestration import JobTracker, get_job_tracker
from ..services.use_cases import KeywordInspectionUseCase, SubmitGenerationUseCase

router = APIRouter(tags=["generation"])


@router.post("/generate", response_model=GenerationResponse, status_code=202)
async def generate_video(request: GenerationRequest, tracker: JobTracker = Depends(get_job_tracker)):
    """
    Start a generation job for a script.

    The job runs in the background; poll ``GET /job/{job_id}`` for progress.
    Invalid options are rejected before any job is created.
    """
    use_case = SubmitGenerationUseCase(tracker)
    return await use_case.execute(request)


@router.post("/keywords", response_model=KeywordResponse)
async def inspect_keywords(request: KeywordRequest):
    """Keywords and stock-footage category the fallback would pick for ``text``"""
    return await KeywordInspectionUseCase().execute(request)

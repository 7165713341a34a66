"""
Generation use cases - submit scripts and inspect keyword matching.

Keeps HTTP routes thin: the routes build request models, these classes talk to
the job tracker and the keyword tables.
"""

from typing import Optional

from video_engine.config import DEFAULT_ASPECT_RATIO
from video_engine.core import get_logger
from video_engine.models import (
    GenerationRequest,
    GenerationResponse,
    KeywordRequest,
    KeywordResponse,
)
from video_engine.services.infrastructure.orchestration import JobTracker, get_job_tracker
from video_engine.services.pipeline.keywords import extract_keywords, fallback_asset_for, match_category

from .base import UseCase

logger = get_logger(__name__, component="generation_use_case")


class SubmitGenerationUseCase(UseCase[GenerationRequest, GenerationResponse]):
    """Accept a script and hand it to the job tracker."""

    def __init__(self, tracker: Optional[JobTracker] = None):
        self.tracker = tracker or get_job_tracker()

    async def execute(self, request: GenerationRequest) -> GenerationResponse:
        job_id = await self.tracker.submit(request.script, request.options)
        job = self.tracker.get_status(job_id)
        return GenerationResponse(
            job_id=job_id,
            status=job.status.value,
            message="Video generation started",
        )


class KeywordInspectionUseCase(UseCase[KeywordRequest, KeywordResponse]):
    """Show which keywords and stock category a piece of text maps to."""

    def __init__(self, aspect_ratio: str = DEFAULT_ASPECT_RATIO):
        self.aspect_ratio = aspect_ratio

    async def execute(self, request: KeywordRequest) -> KeywordResponse:
        keywords = extract_keywords(request.text, request.max_keywords)
        category = match_category(keywords)
        logger.debug("Keyword inspection", extra={"category": category, "keywords": keywords})
        return KeywordResponse(
            keywords=keywords,
            category=category,
            fallback_asset=fallback_asset_for(category, self.aspect_ratio),
        )

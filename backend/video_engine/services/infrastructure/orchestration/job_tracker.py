"""
Job Tracker - Own the lifecycle of generation jobs.

A job moves pending -> processing -> completed | failed. The tracker is the only
writer for the jobs it runs: every change goes through the repository as one
update, and at most one run task exists per job id.

Per job the steps are strictly sequential (segment, then for each segment
generate a clip and pull a reference frame for the next one, then publish).
Different jobs run concurrently as independent asyncio tasks.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Mapping, Optional, Set, Union

from pydantic import ValidationError as PydanticValidationError

from video_engine.config import REFERENCE_FRAME_HISTORY, ProviderSettings, load_provider_settings
from video_engine.core import (
    InfrastructureError,
    JobAlreadyRunningError,
    JobNotFoundError,
    LogTimer,
    ValidationError,
    VideoEngineError,
    get_logger,
    set_job_id,
)
from video_engine.models import (
    Clip,
    GenerationOptions,
    Job,
    JobStatus,
    ReferenceFrame,
    Segment,
    utc_now,
)
from video_engine.services.infrastructure.providers import create_video_provider
from video_engine.services.infrastructure.publishing import AssetPublisher, create_asset_publisher
from video_engine.services.infrastructure.storage import InMemoryJobRepository, JobRepository
from video_engine.services.pipeline.clip_generation import ClipGenerator
from video_engine.services.pipeline.reference_frames import ReferenceFrameExtractor
from video_engine.services.pipeline.script_segmentation import ScriptSegmenter

logger = get_logger(__name__, component="job_tracker")

NO_SEGMENTS_ERROR = "Script produced no segments"

OptionsInput = Union[GenerationOptions, Mapping[str, Any], None]


def progress_for(completed_clips: int, total_segments: int) -> int:
    """Whole-number percentage of clips produced so far."""
    if total_segments <= 0:
        return 0
    return min(100, (100 * completed_clips) // total_segments)


def coerce_options(options: OptionsInput) -> GenerationOptions:
    if options is None:
        return GenerationOptions()
    if isinstance(options, GenerationOptions):
        return options
    if not isinstance(options, Mapping):
        raise ValidationError(f"Options must be a mapping, got {type(options).__name__}")
    try:
        return GenerationOptions.model_validate(dict(options))
    except PydanticValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'options'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Invalid generation options: {details}") from e


class JobTracker:
    """Creates jobs, runs their pipelines and answers status queries."""

    def __init__(
        self,
        repository: JobRepository,
        segmenter: ScriptSegmenter,
        clip_generator: ClipGenerator,
        frame_extractor: ReferenceFrameExtractor,
        publisher: Optional[AssetPublisher] = None,
        settings: Optional[ProviderSettings] = None,
        reference_history: int = REFERENCE_FRAME_HISTORY,
    ):
        self.repository = repository
        self.segmenter = segmenter
        self.clip_generator = clip_generator
        self.frame_extractor = frame_extractor
        self.publisher = publisher
        self.settings = settings or ProviderSettings()
        self.reference_history = max(reference_history, 1)

        self._tasks: Dict[str, asyncio.Task] = {}
        self._active: Set[str] = set()

    # ------------------------------------------------------------------
    # Submission and queries
    # ------------------------------------------------------------------

    async def submit(self, script: str, options: OptionsInput = None) -> str:
        """
        Validate a request, create a pending job and schedule its run.

        Raises:
            ValidationError: ``script`` is not a string or the options are invalid.
                No job is created in that case.
        """
        if not isinstance(script, str):
            raise ValidationError("Script must be a string")
        job_options = coerce_options(options)

        job_id = str(uuid.uuid4())
        self.repository.create(Job(id=job_id, script=script, options=job_options))
        logger.info(
            "Job submitted",
            extra={"job_id": job_id, "script_chars": len(script), "max_clips": job_options.max_clips},
        )

        self.start(job_id)
        return job_id

    def start(self, job_id: str) -> asyncio.Task:
        """Schedule the run task for an existing job."""
        existing = self._tasks.get(job_id)
        if existing is not None and not existing.done():
            raise JobAlreadyRunningError(f"Job {job_id} is already running")
        if self.repository.get(job_id) is None:
            raise JobNotFoundError(job_id)

        task = asyncio.create_task(self.run(job_id), name=f"video-job-{job_id}")
        self._tasks[job_id] = task
        return task

    def get_status(self, job_id: str) -> Job:
        job = self.repository.get(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def list(self) -> List[Job]:
        return self.repository.list_all()

    async def wait(self, job_id: str) -> Job:
        """Wait for a job's run task to finish and return the final record."""
        task = self._tasks.get(job_id)
        if task is not None:
            await asyncio.shield(task)
        return self.get_status(job_id)

    @staticmethod
    def suggested_name(job_id: str) -> str:
        timestamp = utc_now().strftime("%Y%m%dT%H%M%SZ")
        return f"VideoEngine_{job_id}_{timestamp}.mp4"

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    async def run(self, job_id: str) -> None:
        """Run a job's pipeline to a terminal state."""
        if job_id in self._active:
            raise JobAlreadyRunningError(f"Job {job_id} is already running")
        self._active.add(job_id)
        set_job_id(job_id)

        try:
            await self._process(job_id)
        except asyncio.CancelledError:
            self._fail(job_id, "Job was cancelled")
            raise
        except Exception as e:
            logger.error("Job failed", extra={"job_id": job_id, "error": str(e)}, exc_info=True)
            self._fail(job_id, str(e) or type(e).__name__)
        finally:
            self._active.discard(job_id)

    async def _process(self, job_id: str) -> None:
        job = self.get_status(job_id)
        options = job.options

        segments = self.segmenter.segment(job.script, options.clip_duration_seconds)
        if not segments:
            logger.warning("Script produced no segments", extra={"job_id": job_id})
            self._fail(job_id, NO_SEGMENTS_ERROR)
            return

        if len(segments) > options.max_clips:
            logger.info(
                "Truncating segments to clip limit",
                extra={"job_id": job_id, "segments": len(segments), "max_clips": options.max_clips},
            )
            segments = segments[: options.max_clips]

        total = len(segments)
        self.repository.update(
            job_id,
            status=JobStatus.PROCESSING,
            segments=tuple(segments),
            message=f"Generating {total} clip{'s' if total != 1 else ''}",
        )

        with LogTimer(logger, f"Clip generation for job {job_id}"):
            clips = await self._generate_clips(job_id, segments, options)
        await self._finalize(job_id, clips)

    async def _generate_clips(
        self,
        job_id: str,
        segments: List[Segment],
        options: GenerationOptions,
    ) -> List[Clip]:
        clips: List[Clip] = []
        frames: List[ReferenceFrame] = []
        reference: Optional[ReferenceFrame] = None
        total = len(segments)

        for position, segment in enumerate(segments, start=1):
            clip = await self.clip_generator.generate(segment, options, reference)
            clips.append(clip)
            self.repository.update(
                job_id,
                clips=tuple(clips),
                progress=progress_for(len(clips), total),
                message=f"Generated clip {position}/{total}",
            )

            if position == total:
                break

            # The next clip is seeded only by this clip's frame, never an older one.
            reference = await self.frame_extractor.extract_frame(clip)
            if reference is not None:
                frames = (frames + [reference])[-self.reference_history:]
                self.repository.update(job_id, reference_frames=tuple(frames))

        return clips

    async def _finalize(self, job_id: str, clips: List[Clip]) -> None:
        final_locator = clips[-1].media_locator
        view_link: Optional[str] = None
        download_link: Optional[str] = None
        warnings: List[str] = []

        if self.publisher is not None:
            name = self.suggested_name(job_id)
            timeout = self.settings.publish_timeout_seconds
            try:
                asset = await asyncio.wait_for(self.publisher.publish(final_locator, name), timeout=timeout)
                view_link, download_link = asset.view_link, asset.download_link
                final_locator = asset.download_link or final_locator
            except asyncio.TimeoutError:
                warnings.append(f"Publishing timed out after {timeout:g}s; using last clip locator")
            except InfrastructureError as e:
                warnings.append(f"Publishing failed: {e}; using last clip locator")
            except Exception as e:
                logger.error("Publisher raised unexpectedly", extra={"job_id": job_id, "error": str(e)}, exc_info=True)
                warnings.append(f"Publishing failed: {type(e).__name__}: {e}; using last clip locator")

            if warnings:
                logger.warning("Publish failed, completing with last clip", extra={"job_id": job_id, "reason": warnings[-1]})

        current = self.get_status(job_id)
        fallbacks = sum(1 for clip in clips if clip.is_fallback)
        message = f"Generated {len(clips)} clip{'s' if len(clips) != 1 else ''}"
        if fallbacks:
            message += f" ({fallbacks} from stock footage)"

        self.repository.update(
            job_id,
            status=JobStatus.COMPLETED,
            progress=100,
            message=message,
            final_asset_locator=final_locator,
            view_link=view_link,
            download_link=download_link,
            warnings=current.warnings + tuple(warnings),
            completed_at=utc_now(),
        )
        logger.info(
            "Job completed",
            extra={"job_id": job_id, "clips": len(clips), "fallback_clips": fallbacks, "published": view_link is not None},
        )

    def _fail(self, job_id: str, error: str) -> None:
        try:
            self.repository.update(
                job_id,
                status=JobStatus.FAILED,
                message=f"Job failed: {error}",
                error=error,
                completed_at=utc_now(),
            )
        except VideoEngineError as e:
            # Job already terminal or gone; the original failure is what matters.
            logger.error("Could not mark job failed", extra={"job_id": job_id, "error": str(e)})

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Cancel running jobs and release the provider client."""
        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.clip_generator.provider.aclose()


_job_tracker_instance: Optional[JobTracker] = None


def build_job_tracker(settings: Optional[ProviderSettings] = None) -> JobTracker:
    """Wire a tracker from provider settings (env by default)."""
    settings = settings or load_provider_settings()
    return JobTracker(
        repository=InMemoryJobRepository(),
        segmenter=ScriptSegmenter(),
        clip_generator=ClipGenerator(create_video_provider(settings), settings),
        frame_extractor=ReferenceFrameExtractor.from_settings(settings),
        publisher=create_asset_publisher(settings),
        settings=settings,
    )


def get_job_tracker() -> JobTracker:
    """Get the shared JobTracker instance (singleton pattern)."""
    global _job_tracker_instance
    if _job_tracker_instance is None:
        _job_tracker_instance = build_job_tracker()
    return _job_tracker_instance


def reset_job_tracker() -> None:
    global _job_tracker_instance
    _job_tracker_instance = None


async def shutdown_job_tracker() -> None:
    """Close the shared tracker if one was built."""
    global _job_tracker_instance
    if _job_tracker_instance is not None:
        await _job_tracker_instance.aclose()
        _job_tracker_instance = None

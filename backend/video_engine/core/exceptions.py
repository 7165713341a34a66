"""
Core Exceptions
Standardized exception hierarchy for the video engine.
"""


class VideoEngineError(Exception):
    """Base exception for all application errors."""
    pass


class ValidationError(VideoEngineError):
    """Raised when a submission or option set is rejected before a job exists."""
    pass


class JobNotFoundError(VideoEngineError):
    """Raised when a job id is unknown to the repository."""

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} not found")
        self.job_id = job_id


class InvalidJobTransitionError(VideoEngineError):
    """Raised when a job is asked to leave a terminal state."""

    def __init__(self, job_id: str, current: str, requested: str):
        super().__init__(f"Job {job_id} cannot move from {current} to {requested}")
        self.job_id = job_id
        self.current = current
        self.requested = requested


class JobAlreadyRunningError(VideoEngineError):
    """Raised when a second run is started for a job that already has one."""
    pass


class PipelineError(VideoEngineError):
    """Base exception for generation pipeline errors."""
    pass


class InfrastructureError(VideoEngineError):
    """Base exception for external collaborators (provider, storage, ffmpeg)."""
    pass


class ProviderError(InfrastructureError):
    """The generation provider could not be reached or refused the request."""
    pass


class FrameExtractionError(InfrastructureError):
    """A still frame could not be pulled from a clip."""
    pass


class PublishError(InfrastructureError):
    """The finished artifact could not be uploaded or shared."""
    pass

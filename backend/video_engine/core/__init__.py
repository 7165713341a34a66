"""
Core Module - Cross-cutting concerns and shared infrastructure

Organization:
    - logging.py: Structured logging configuration and utilities
    - exceptions.py: Exception hierarchy shared by services and routes
    - runtime.py: Environment parsing and external tool checks

Usage:
    from video_engine.core import get_logger, ValidationError
"""

from .logging import (
    setup_logging,
    get_logger,
    set_request_id,
    set_job_id,
    clear_context,
    LogTimer,
)

from .exceptions import (
    VideoEngineError,
    ValidationError,
    JobNotFoundError,
    InvalidJobTransitionError,
    JobAlreadyRunningError,
    PipelineError,
    InfrastructureError,
    ProviderError,
    FrameExtractionError,
    PublishError,
)

from .runtime import (
    REQUIRED_MEDIA_TOOLS,
    parse_bool_env,
    env_int,
    env_float,
    missing_runtime_tools,
    runtime_tool_report,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "set_request_id",
    "set_job_id",
    "clear_context",
    "LogTimer",
    # Exceptions
    "VideoEngineError",
    "ValidationError",
    "JobNotFoundError",
    "InvalidJobTransitionError",
    "JobAlreadyRunningError",
    "PipelineError",
    "InfrastructureError",
    "ProviderError",
    "FrameExtractionError",
    "PublishError",
    # Runtime
    "REQUIRED_MEDIA_TOOLS",
    "parse_bool_env",
    "env_int",
    "env_float",
    "missing_runtime_tools",
    "runtime_tool_report",
]

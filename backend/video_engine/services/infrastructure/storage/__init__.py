"""Storage layer - job records."""

from .job_repository import JobRepository, InMemoryJobRepository, snapshot

__all__ = [
    "JobRepository",
    "InMemoryJobRepository",
    "snapshot",
]

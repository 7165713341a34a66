"""
Job repository - Abstract data access for jobs.

Implements the Repository pattern to decouple job storage from the pipeline.
This abstraction enables:
    - Easy testing with fake repositories
    - Swapping the in-memory store for a database without touching the tracker
    - One place that enforces the job state machine on every write

Callers never hold a live Job: ``get`` and ``list_all`` hand out copies, and
``update`` applies all requested field changes together under one lock, so a
reader sees either the whole step or none of it.

Classes:
    JobRepository: Abstract interface for job data access
    InMemoryJobRepository: Process-lifetime implementation
"""

import dataclasses
from abc import ABC, abstractmethod
from threading import RLock
from typing import Any, Dict, List, Optional

from video_engine.core import InvalidJobTransitionError, JobNotFoundError, PipelineError
from video_engine.models import Job, JobStatus, utc_now

_IMMUTABLE_FIELDS = {"id", "script", "options", "created_at"}
_JOB_FIELDS = {f.name for f in dataclasses.fields(Job)}


def snapshot(job: Job) -> Job:
    """Shallow copy; every field of a Job is itself immutable."""
    return dataclasses.replace(job)


class JobRepository(ABC):
    """
    Abstract repository for job data access.

    Defines the interface that all job repository implementations must follow.
    """

    @abstractmethod
    def create(self, job: Job) -> Job:
        """
        Store a new job.

        Args:
            job: Freshly built job record (status pending)

        Returns:
            Snapshot of the stored job
        """
        pass

    @abstractmethod
    def get(self, job_id: str) -> Optional[Job]:
        """
        Retrieve a job by ID.

        Returns:
            Snapshot of the job if found, None otherwise
        """
        pass

    @abstractmethod
    def update(self, job_id: str, **changes: Any) -> Job:
        """
        Apply ``changes`` to a job as one unit.

        Raises:
            JobNotFoundError: Unknown job id
            InvalidJobTransitionError: The job is terminal, or the status
                change is not allowed
            PipelineError: Progress would go backwards
        """
        pass

    @abstractmethod
    def list_all(self) -> List[Job]:
        """
        List all jobs, most recently created first.
        """
        pass


class InMemoryJobRepository(JobRepository):
    """Job store that lives for the process lifetime."""

    def __init__(self):
        self._jobs: Dict[str, Job] = {}
        self._order: Dict[str, int] = {}
        self._sequence = 0
        self._lock = RLock()

    def create(self, job: Job) -> Job:
        with self._lock:
            if job.id in self._jobs:
                raise PipelineError(f"Job {job.id} already exists")
            self._jobs[job.id] = snapshot(job)
            self._sequence += 1
            self._order[job.id] = self._sequence
            return snapshot(job)

    def get(self, job_id: str) -> Optional[Job]:
        with self._lock:
            job = self._jobs.get(job_id)
            return snapshot(job) if job else None

    def update(self, job_id: str, **changes: Any) -> Job:
        unknown = set(changes) - _JOB_FIELDS
        if unknown:
            raise ValueError(f"Unknown job fields: {', '.join(sorted(unknown))}")
        frozen = set(changes) & _IMMUTABLE_FIELDS
        if frozen:
            raise ValueError(f"Job fields cannot be changed: {', '.join(sorted(frozen))}")

        with self._lock:
            current = self._jobs.get(job_id)
            if current is None:
                raise JobNotFoundError(job_id)

            requested = changes.get("status", current.status)
            if current.status.is_terminal() or not current.status.can_transition_to(requested):
                raise InvalidJobTransitionError(job_id, current.status.value, requested.value)

            if "progress" in changes and changes["progress"] < current.progress:
                raise PipelineError(
                    f"Job {job_id} progress cannot go from {current.progress} to {changes['progress']}"
                )

            updated = dataclasses.replace(current, updated_at=utc_now(), **changes)
            self._jobs[job_id] = updated
            return snapshot(updated)

    def list_all(self) -> List[Job]:
        with self._lock:
            ordered = sorted(
                self._jobs.values(),
                key=lambda job: (job.created_at, self._order[job.id]),
                reverse=True,
            )
            return [snapshot(job) for job in ordered]

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

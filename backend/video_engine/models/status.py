"""
Job status constants and enumerations.

A job moves pending -> processing -> completed | failed and never leaves a
terminal state.
"""

from enum import Enum


class JobStatus(Enum):
    """Enumeration of all possible job statuses."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    def is_terminal(self) -> bool:
        """Check if this status is a terminal state (no further progress)."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Check whether the state machine allows moving to ``target``."""
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS = {
    JobStatus.PENDING: {JobStatus.PENDING, JobStatus.PROCESSING, JobStatus.FAILED},
    JobStatus.PROCESSING: {JobStatus.PROCESSING, JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


__all__ = [
    "JobStatus",
    "ALLOWED_TRANSITIONS",
]

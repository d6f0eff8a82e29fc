"""Scheduled job models for deferred motion re-evaluation.

Time-driven motion transitions are not executed by timers inside the
process. Instead a job is queued for the instant a deadline passes, and a
worker later drains due jobs. Delivery is at-least-once and may be late or
out of order; motion re-evaluation tolerates all three.

Job lifecycle:
    PENDING -> PROCESSING -> COMPLETED
                          -> PENDING (retry, attempts < MAX_ATTEMPTS)
                          -> FAILED (moved to the dead letter queue)

Every instant is supplied by the caller so the job queue runs on the same
clock as the motions it serves.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar
from uuid import UUID


class JobStatus(Enum):
    """Status of a scheduled job.

    Statuses:
        PENDING: Waiting for its execution time (or for a retry)
        PROCESSING: Claimed by a worker
        COMPLETED: Executed successfully
        FAILED: Out of attempts, dead-lettered
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True, eq=True)
class ScheduledJob:
    """A unit of deferred work.

    Attributes:
        id: Unique identifier for the job.
        job_type: Routes the job to a handler (e.g. ``motion_state_update``).
        payload: Handler-specific data, JSON-compatible.
        scheduled_for: Earliest instant the job may run.
        created_at: When the job was queued.
        attempts: Execution attempts so far.
        last_attempt_at: When the job was last claimed.
        status: Current job status.
    """

    id: UUID
    job_type: str
    payload: dict[str, Any]
    scheduled_for: datetime
    created_at: datetime
    attempts: int = field(default=0)
    last_attempt_at: datetime | None = field(default=None)
    status: JobStatus = field(default=JobStatus.PENDING)

    MAX_ATTEMPTS: ClassVar[int] = 3

    def __post_init__(self) -> None:
        """Validate scheduled job fields."""
        if not self.job_type:
            raise ValueError("job_type cannot be empty")
        if self.attempts < 0:
            raise ValueError("attempts cannot be negative")
        if self.scheduled_for.tzinfo is None:
            raise ValueError("scheduled_for must be timezone-aware (UTC)")

    def with_status(self, new_status: JobStatus) -> ScheduledJob:
        return replace(self, status=new_status)

    def with_attempt(self, at: datetime) -> ScheduledJob:
        """Claim the job: count an attempt and mark it PROCESSING."""
        return replace(
            self,
            attempts=self.attempts + 1,
            last_attempt_at=at,
            status=JobStatus.PROCESSING,
        )

    def is_due(self, now: datetime) -> bool:
        return self.status == JobStatus.PENDING and self.scheduled_for <= now

    def has_attempts_left(self) -> bool:
        return self.attempts < self.MAX_ATTEMPTS

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "job_type": self.job_type,
            "payload": self.payload,
            "scheduled_for": self.scheduled_for.isoformat(),
            "created_at": self.created_at.isoformat(),
            "attempts": self.attempts,
            "last_attempt_at": (
                self.last_attempt_at.isoformat() if self.last_attempt_at else None
            ),
            "status": self.status.value,
        }


@dataclass(frozen=True, eq=True)
class DeadLetterJob:
    """A job that exhausted its attempts.

    Attributes:
        id: Unique identifier for the dead letter entry.
        original_job_id: The job that failed.
        job_type: Copied from the job for independent querying.
        payload: Copied from the job for diagnosis.
        failure_reason: Error from the final attempt.
        failed_at: When the job was dead-lettered.
        attempts: Attempts made before giving up.
    """

    id: UUID
    original_job_id: UUID
    job_type: str
    payload: dict[str, Any]
    failure_reason: str
    failed_at: datetime
    attempts: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate dead letter job fields."""
        if not self.failure_reason:
            raise ValueError("failure_reason cannot be empty")

    @classmethod
    def from_failed_job(
        cls,
        dlq_id: UUID,
        job: ScheduledJob,
        failure_reason: str,
        failed_at: datetime,
    ) -> DeadLetterJob:
        return cls(
            id=dlq_id,
            original_job_id=job.id,
            job_type=job.job_type,
            payload=job.payload,
            failure_reason=failure_reason,
            failed_at=failed_at,
            attempts=job.attempts,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "original_job_id": str(self.original_job_id),
            "job_type": self.job_type,
            "payload": self.payload,
            "failure_reason": self.failure_reason,
            "failed_at": self.failed_at.isoformat(),
            "attempts": self.attempts,
        }

"""Job scheduler port for deferred work.

This module defines the abstract interface for the persistent job queue
that carries scheduled motion re-evaluations between processes.

Developer Golden Rules:
1. AT-LEAST-ONCE - A job may run more than once; handlers must be idempotent
2. FAIL LOUD - Scheduler raises on storage errors
3. BOUNDED RETRY - Failed jobs are retried, then dead-lettered
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from src.domain.models.scheduled_job import DeadLetterJob, ScheduledJob


class JobSchedulerProtocol(Protocol):
    """Protocol for job scheduling operations.

    Implementations may use a database table, a broker or in-memory storage.

    Methods:
        schedule: Queue a job for future execution
        get_pending_jobs: Get jobs due for execution
        claim_job: Take a due job for processing
        mark_completed: Mark a job as successfully completed
        mark_failed: Mark a job as failed (retry or dead letter)
        get_dlq_depth: Count dead-lettered jobs
        get_dlq_jobs: Page through dead-lettered jobs
        get_job: Look up a job by id
    """

    async def schedule(
        self,
        job_type: str,
        payload: dict[str, Any],
        run_at: datetime,
    ) -> UUID:
        """Queue a new job.

        Args:
            job_type: Routes the job to a handler.
            payload: JSON-compatible handler data.
            run_at: Earliest execution instant (UTC, timezone-aware).

        Returns:
            UUID of the queued job.

        Raises:
            ValueError: If run_at is not timezone-aware.
        """
        ...

    async def get_pending_jobs(self, limit: int = 10) -> list[ScheduledJob]:
        """Get pending jobs whose execution time has passed, oldest first."""
        ...

    async def claim_job(self, job_id: UUID) -> ScheduledJob | None:
        """Claim a due job, counting one attempt.

        Returns:
            The claimed job, or None if it is not due or already claimed.
        """
        ...

    async def mark_completed(self, job_id: UUID) -> None:
        """Mark a job as completed.

        Raises:
            KeyError: If the job doesn't exist.
        """
        ...

    async def mark_failed(
        self,
        job_id: UUID,
        reason: str,
    ) -> DeadLetterJob | None:
        """Mark a claimed job as failed.

        A job with attempts left goes back to PENDING for another try.
        Otherwise it is moved to the dead letter queue.

        Returns:
            The DeadLetterJob when dead-lettered, None when a retry is queued.

        Raises:
            KeyError: If the job doesn't exist.
        """
        ...

    async def get_dlq_depth(self) -> int:
        """Get count of jobs in the dead letter queue."""
        ...

    async def get_dlq_jobs(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[DeadLetterJob], int]:
        """Get a page of dead-lettered jobs and the total count."""
        ...

    async def get_job(self, job_id: UUID) -> ScheduledJob | None:
        """Get a job by ID, or None if unknown."""
        ...

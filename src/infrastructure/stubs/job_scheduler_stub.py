"""Job scheduler stub implementation.

This module provides an in-memory implementation of JobSchedulerProtocol
for development and testing. Due checks use the injected time authority,
so a test advancing a fake clock makes queued motion updates come due.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from src.application.ports.job_scheduler import JobSchedulerProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.domain.models.scheduled_job import (
    DeadLetterJob,
    JobStatus,
    ScheduledJob,
)
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority


class JobSchedulerStub(JobSchedulerProtocol):
    """In-memory stub implementation of JobSchedulerProtocol.

    NOT suitable for production use: jobs are lost with the process.

    Attributes:
        _time: Clock used for due checks and timestamps.
        _jobs: Job id to ScheduledJob (pending, processing and completed).
        _dlq: Dead letter entry id to DeadLetterJob.
        _completed_jobs: Completed job ids (for testing).
    """

    def __init__(self, time_authority: TimeAuthorityProtocol | None = None) -> None:
        self._time = time_authority or SystemTimeAuthority()
        self._jobs: dict[UUID, ScheduledJob] = {}
        self._dlq: dict[UUID, DeadLetterJob] = {}
        self._completed_jobs: set[UUID] = set()

    async def schedule(
        self,
        job_type: str,
        payload: dict[str, Any],
        run_at: datetime,
    ) -> UUID:
        """Queue a new job.

        Raises:
            ValueError: If run_at is not timezone-aware.
        """
        if run_at.tzinfo is None:
            raise ValueError("run_at must be timezone-aware (UTC)")

        job = ScheduledJob(
            id=uuid4(),
            job_type=job_type,
            payload=payload,
            scheduled_for=run_at,
            created_at=self._time.now(),
        )
        self._jobs[job.id] = job
        return job.id

    async def get_pending_jobs(self, limit: int = 10) -> list[ScheduledJob]:
        """Get due pending jobs ordered by scheduled_for (oldest first)."""
        now = self._time.now()
        pending = [job for job in self._jobs.values() if job.is_due(now)]
        pending.sort(key=lambda j: j.scheduled_for)
        return pending[:limit]

    async def claim_job(self, job_id: UUID) -> ScheduledJob | None:
        job = self._jobs.get(job_id)
        if job is None or not job.is_due(self._time.now()):
            return None

        claimed_job = job.with_attempt(self._time.now())
        self._jobs[job_id] = claimed_job
        return claimed_job

    async def mark_completed(self, job_id: UUID) -> None:
        job = self._jobs.get(job_id)
        if job is None:
            raise KeyError(f"Job not found: {job_id}")

        self._jobs[job_id] = job.with_status(JobStatus.COMPLETED)
        self._completed_jobs.add(job_id)

    async def mark_failed(
        self,
        job_id: UUID,
        reason: str,
    ) -> DeadLetterJob | None:
        """Return a failed job to PENDING, or dead-letter it when out of attempts.

        Raises:
            KeyError: If the job doesn't exist.
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise KeyError(f"Job not found: {job_id}")

        if job.has_attempts_left():
            self._jobs[job_id] = job.with_status(JobStatus.PENDING)
            return None

        dlq_job = DeadLetterJob.from_failed_job(
            uuid4(),
            job.with_status(JobStatus.FAILED),
            reason,
            failed_at=self._time.now(),
        )
        self._dlq[dlq_job.id] = dlq_job
        del self._jobs[job_id]
        return dlq_job

    async def get_dlq_depth(self) -> int:
        return len(self._dlq)

    async def get_dlq_jobs(
        self,
        limit: int = 100,
        offset: int = 0,
    ) -> tuple[list[DeadLetterJob], int]:
        """Get a page of dead-lettered jobs, newest first, and the total count."""
        dlq_list = sorted(self._dlq.values(), key=lambda j: j.failed_at, reverse=True)
        return dlq_list[offset : offset + limit], len(dlq_list)

    async def get_job(self, job_id: UUID) -> ScheduledJob | None:
        return self._jobs.get(job_id)

    # Testing helper methods

    def clear(self) -> None:
        """Clear all jobs and DLQ entries (for testing)."""
        self._jobs.clear()
        self._dlq.clear()
        self._completed_jobs.clear()

    def get_pending_count(self) -> int:
        """Count jobs still waiting to run, due or not (for testing)."""
        return sum(1 for job in self._jobs.values() if job.status == JobStatus.PENDING)

    def get_completed_jobs(self) -> set[UUID]:
        return self._completed_jobs.copy()

    def get_all_jobs(self) -> list[ScheduledJob]:
        return list(self._jobs.values())

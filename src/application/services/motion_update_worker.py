"""Motion update worker.

Drains due ``motion_state_update`` jobs from the job queue and hands each
to ``MotionLifecycleService.scheduled_reevaluate``. A failing job is
retried on a later poll and dead-lettered once it runs out of attempts.

Because re-evaluation is idempotent and guarded by ``expected_state``,
the worker never needs to deduplicate or cancel jobs.

Usage:
    worker = MotionUpdateWorker(job_scheduler, lifecycle_service)

    # One pass, e.g. from a cron-style trigger or a test
    await worker.process_pending()

    # Long-running loop
    stop = asyncio.Event()
    await worker.run(stop)
"""

from __future__ import annotations

import asyncio
from typing import Any
from uuid import UUID

import structlog

from src.application.ports.job_scheduler import JobSchedulerProtocol
from src.application.services.motion_lifecycle_service import MotionLifecycleService
from src.config.motion_config import DEFAULT_MOTION_CONFIG, MotionConfig
from src.domain.models.motion_state import MotionState
from src.domain.models.scheduled_job import ScheduledJob

logger = structlog.get_logger(__name__)

# Job type for scheduled motion re-evaluation (used by job queue)
MOTION_UPDATE_JOB_TYPE: str = "motion_state_update"


def motion_update_payload(motion_id: UUID, expected_state: MotionState) -> dict[str, Any]:
    """Build the job payload for a scheduled re-evaluation."""
    return {
        "motion_id": str(motion_id),
        "expected_state": expected_state.value,
    }


def parse_motion_update_payload(
    payload: dict[str, Any],
) -> tuple[UUID, MotionState | None]:
    """Read a job payload back.

    Raises:
        ValueError: If the payload is missing the motion id or malformed.
    """
    if "motion_id" not in payload:
        raise ValueError("motion_state_update payload has no motion_id")
    motion_id = UUID(payload["motion_id"])
    raw_state = payload.get("expected_state")
    return motion_id, MotionState(raw_state) if raw_state is not None else None


class MotionUpdateWorker:
    """Executes scheduled motion re-evaluations from the job queue.

    Attributes:
        _job_scheduler: Job queue to drain.
        _lifecycle_service: Service performing the re-evaluation.
        _config: Poll interval and batch size.
    """

    def __init__(
        self,
        job_scheduler: JobSchedulerProtocol,
        lifecycle_service: MotionLifecycleService,
        config: MotionConfig | None = None,
    ) -> None:
        self._job_scheduler = job_scheduler
        self._lifecycle_service = lifecycle_service
        self._config = config or DEFAULT_MOTION_CONFIG

    async def process_single_job(self, job_id: UUID) -> bool:
        """Claim and execute one job.

        Returns:
            True if the job ran successfully, False if it could not be
            claimed or it failed.
        """
        job = await self._job_scheduler.claim_job(job_id)
        if job is None:
            logger.debug("motion_update_job_not_claimed", job_id=str(job_id))
            return False

        log = logger.bind(
            job_id=str(job.id),
            job_type=job.job_type,
            attempt=job.attempts,
        )

        try:
            await self._execute(job)
        except Exception as e:
            reason = str(e) or type(e).__name__
            dead_letter = await self._job_scheduler.mark_failed(job.id, reason)
            if dead_letter is not None:
                log.error(
                    "motion_update_job_dead_lettered",
                    dlq_id=str(dead_letter.id),
                    error=reason,
                )
            else:
                log.warning("motion_update_job_failed_will_retry", error=reason)
            return False

        await self._job_scheduler.mark_completed(job.id)
        log.debug("motion_update_job_completed")
        return True

    async def _execute(self, job: ScheduledJob) -> None:
        if job.job_type != MOTION_UPDATE_JOB_TYPE:
            raise ValueError(f"Unsupported job type: {job.job_type}")
        motion_id, expected_state = parse_motion_update_payload(job.payload)
        await self._lifecycle_service.scheduled_reevaluate(motion_id, expected_state)

    async def process_pending(self) -> int:
        """Run every job that is due now, up to the batch size.

        Returns:
            Number of jobs that ran successfully.
        """
        jobs = await self._job_scheduler.get_pending_jobs(
            limit=self._config.worker_batch_size
        )
        succeeded = 0
        for job in jobs:
            if await self.process_single_job(job.id):
                succeeded += 1

        if jobs:
            logger.info(
                "motion_update_batch_processed",
                claimed=len(jobs),
                succeeded=succeeded,
            )
        return succeeded

    async def run(self, stop: asyncio.Event) -> None:
        """Poll the job queue until ``stop`` is set."""
        interval = self._config.worker_poll_interval.total_seconds()
        logger.info("motion_update_worker_started", poll_seconds=interval)

        while not stop.is_set():
            await self.process_pending()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue

        logger.info("motion_update_worker_stopped")

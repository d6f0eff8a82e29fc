"""Job-queue backed MotionUpdateSchedulerProtocol adapter.

Turns a re-evaluation request into a ``motion_state_update`` job that
MotionUpdateWorker picks up once it is due. Nothing is deduplicated or
cancelled: a stale or repeated job is a no-op when it runs.
"""

from __future__ import annotations

from datetime import timedelta
from uuid import UUID

import structlog

from src.application.ports.job_scheduler import JobSchedulerProtocol
from src.application.ports.motion_update_scheduler import (
    MotionUpdateSchedulerProtocol,
)
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.motion_update_worker import (
    MOTION_UPDATE_JOB_TYPE,
    motion_update_payload,
)
from src.domain.models.motion_state import MotionState

logger = structlog.get_logger(__name__)


class JobQueueMotionUpdateScheduler(MotionUpdateSchedulerProtocol):
    """Schedules motion re-evaluations as jobs on the job queue."""

    def __init__(
        self,
        job_scheduler: JobSchedulerProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        self._job_scheduler = job_scheduler
        self._time = time_authority

    async def schedule_after(
        self,
        motion_id: UUID,
        delay: timedelta,
        expected_state: MotionState,
    ) -> None:
        """Queue a job due ``delay`` from now.

        Raises:
            ValueError: If delay is negative.
        """
        if delay < timedelta(0):
            raise ValueError(f"delay cannot be negative, got {delay}")

        run_at = self._time.now() + delay
        job_id = await self._job_scheduler.schedule(
            job_type=MOTION_UPDATE_JOB_TYPE,
            payload=motion_update_payload(motion_id, expected_state),
            run_at=run_at,
        )
        logger.debug(
            "motion_update_scheduled",
            job_id=str(job_id),
            motion_id=str(motion_id),
            expected_state=expected_state.value,
            run_at=run_at.isoformat(),
        )

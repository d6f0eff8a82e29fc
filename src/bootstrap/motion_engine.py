"""Bootstrap wiring for the motion lifecycle engine.

Singletons are created lazily. Persistence, roster and job queue default
to in-memory stubs; notifications default to structured log entries.
Tests replace any dependency with the ``set_*`` functions and start over
with ``reset_motion_engine_dependencies``.
"""

from __future__ import annotations

import asyncio

import structlog

from src.application.ports.job_scheduler import JobSchedulerProtocol
from src.application.ports.motion_notifier import MotionNotifierProtocol
from src.application.ports.motion_repository import MotionRepositoryProtocol
from src.application.ports.motion_update_scheduler import (
    MotionUpdateSchedulerProtocol,
)
from src.application.ports.roster import RosterProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.application.services.motion_lifecycle_service import MotionLifecycleService
from src.application.services.motion_update_worker import MotionUpdateWorker
from src.config.motion_config import MotionConfig
from src.infrastructure.adapters.job_queue_motion_update_scheduler import (
    JobQueueMotionUpdateScheduler,
)
from src.infrastructure.adapters.logging_motion_notifier import LoggingMotionNotifier
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority
from src.infrastructure.observability.correlation import (
    generate_correlation_id,
    set_correlation_id,
)
from src.infrastructure.stubs.job_scheduler_stub import JobSchedulerStub
from src.infrastructure.stubs.motion_repository_stub import MotionRepositoryStub
from src.infrastructure.stubs.roster_stub import RosterStub

logger = structlog.get_logger(__name__)

_config: MotionConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_motion_repository: MotionRepositoryProtocol | None = None
_roster: RosterProtocol | None = None
_motion_notifier: MotionNotifierProtocol | None = None
_job_scheduler: JobSchedulerProtocol | None = None
_motion_update_scheduler: MotionUpdateSchedulerProtocol | None = None
_lifecycle_service: MotionLifecycleService | None = None
_update_worker: MotionUpdateWorker | None = None


def get_motion_config() -> MotionConfig:
    """Get motion configuration, read from the environment once."""
    global _config
    if _config is None:
        _config = MotionConfig.from_environment()
    return _config


def get_time_authority() -> TimeAuthorityProtocol:
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_motion_repository() -> MotionRepositoryProtocol:
    global _motion_repository
    if _motion_repository is None:
        _motion_repository = MotionRepositoryStub()
    return _motion_repository


def get_roster() -> RosterProtocol:
    global _roster
    if _roster is None:
        _roster = RosterStub()
    return _roster


def get_motion_notifier() -> MotionNotifierProtocol:
    global _motion_notifier
    if _motion_notifier is None:
        _motion_notifier = LoggingMotionNotifier()
    return _motion_notifier


def get_job_scheduler() -> JobSchedulerProtocol:
    global _job_scheduler
    if _job_scheduler is None:
        _job_scheduler = JobSchedulerStub(time_authority=get_time_authority())
    return _job_scheduler


def get_motion_update_scheduler() -> MotionUpdateSchedulerProtocol:
    global _motion_update_scheduler
    if _motion_update_scheduler is None:
        _motion_update_scheduler = JobQueueMotionUpdateScheduler(
            job_scheduler=get_job_scheduler(),
            time_authority=get_time_authority(),
        )
    return _motion_update_scheduler


def get_motion_lifecycle_service() -> MotionLifecycleService:
    """Get the lifecycle service wired to the current dependencies."""
    global _lifecycle_service
    if _lifecycle_service is None:
        _lifecycle_service = MotionLifecycleService(
            repository=get_motion_repository(),
            roster=get_roster(),
            notifier=get_motion_notifier(),
            update_scheduler=get_motion_update_scheduler(),
            time_authority=get_time_authority(),
            config=get_motion_config(),
        )
    return _lifecycle_service


def get_motion_update_worker() -> MotionUpdateWorker:
    global _update_worker
    if _update_worker is None:
        _update_worker = MotionUpdateWorker(
            job_scheduler=get_job_scheduler(),
            lifecycle_service=get_motion_lifecycle_service(),
            config=get_motion_config(),
        )
    return _update_worker


async def run_update_worker_pass() -> int:
    """Run one worker pass under a fresh correlation id.

    Returns:
        Number of jobs that ran successfully.
    """
    set_correlation_id(generate_correlation_id())
    return await get_motion_update_worker().process_pending()


async def run_update_worker(stop: asyncio.Event) -> None:
    """Run the update worker until ``stop`` is set."""
    logger.info("motion_engine_worker_starting")
    await get_motion_update_worker().run(stop)


def reset_motion_engine_dependencies() -> None:
    """Reset all singleton instances for testing."""
    global _config
    global _time_authority
    global _motion_repository
    global _roster
    global _motion_notifier
    global _job_scheduler
    global _motion_update_scheduler
    global _lifecycle_service
    global _update_worker

    _config = None
    _time_authority = None
    _motion_repository = None
    _roster = None
    _motion_notifier = None
    _job_scheduler = None
    _motion_update_scheduler = None
    _lifecycle_service = None
    _update_worker = None


def set_motion_config(config: MotionConfig) -> None:
    global _config
    _config = config


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom clock for testing."""
    global _time_authority
    _time_authority = time_authority


def set_motion_repository(repository: MotionRepositoryProtocol) -> None:
    global _motion_repository
    _motion_repository = repository


def set_roster(roster: RosterProtocol) -> None:
    global _roster
    _roster = roster


def set_motion_notifier(notifier: MotionNotifierProtocol) -> None:
    global _motion_notifier
    _motion_notifier = notifier

"""Infrastructure stubs for development and testing.

This module provides stub implementations of infrastructure ports
for use in development and testing environments.

Available stubs:
- MotionRepositoryStub: In-memory motion storage, copies on read and write
- RosterStub: Dated membership terms and conflict declarations
- MotionNotifierStub: Records notifications, can be told to fail
- MotionUpdateSchedulerStub: Records re-evaluation requests, can be told to fail
- JobSchedulerStub: In-memory job queue with retry and dead letter queue

WARNING: These stubs are NOT for production use.
"""

from src.infrastructure.stubs.job_scheduler_stub import JobSchedulerStub
from src.infrastructure.stubs.motion_notifier_stub import (
    MotionNotifierStub,
    NotificationDeliveryError,
    SentNotification,
)
from src.infrastructure.stubs.motion_repository_stub import MotionRepositoryStub
from src.infrastructure.stubs.motion_update_scheduler_stub import (
    MotionUpdateSchedulerStub,
    SchedulingError,
    UpdateRequest,
)
from src.infrastructure.stubs.roster_stub import RosterStub

__all__: list[str] = [
    "JobSchedulerStub",
    "MotionNotifierStub",
    "MotionRepositoryStub",
    "MotionUpdateSchedulerStub",
    "NotificationDeliveryError",
    "RosterStub",
    "SchedulingError",
    "SentNotification",
    "UpdateRequest",
]

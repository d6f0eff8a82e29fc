"""Application ports - Abstract interfaces for infrastructure adapters.

This module defines the contracts that infrastructure adapters must implement.
Ports enable dependency inversion and make the application layer testable.

Available ports:
- MotionRepositoryProtocol: Motion persistence
- RosterProtocol: Read-only membership lookups
- MotionNotifierProtocol: Notification trigger delivery
- MotionUpdateSchedulerProtocol: Deferred re-evaluation requests
- JobSchedulerProtocol: Persistent job queue with dead-lettering
- TimeAuthorityProtocol: Injected clock
"""

from src.application.ports.job_scheduler import JobSchedulerProtocol
from src.application.ports.motion_notifier import MotionNotifierProtocol
from src.application.ports.motion_repository import MotionRepositoryProtocol
from src.application.ports.motion_update_scheduler import (
    MotionUpdateSchedulerProtocol,
)
from src.application.ports.roster import RosterProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol

__all__: list[str] = [
    "JobSchedulerProtocol",
    "MotionNotifierProtocol",
    "MotionRepositoryProtocol",
    "MotionUpdateSchedulerProtocol",
    "RosterProtocol",
    "TimeAuthorityProtocol",
]

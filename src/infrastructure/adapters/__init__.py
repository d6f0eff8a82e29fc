"""Infrastructure adapters for the motion lifecycle engine.

Adapters implement the ports defined in the application layer,
providing concrete implementations for external services.
"""

from src.infrastructure.adapters.job_queue_motion_update_scheduler import (
    JobQueueMotionUpdateScheduler,
)
from src.infrastructure.adapters.logging_motion_notifier import LoggingMotionNotifier
from src.infrastructure.adapters.system_time_authority import SystemTimeAuthority

__all__: list[str] = [
    "JobQueueMotionUpdateScheduler",
    "LoggingMotionNotifier",
    "SystemTimeAuthority",
]

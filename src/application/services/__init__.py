"""Application services - Use case orchestration.

This module contains application services that orchestrate domain
operations and coordinate with infrastructure adapters.

Available services:
- MotionLifecycleService: Member actions and scheduled re-evaluation
- MotionUpdateWorker: Drains scheduled motion updates from the job queue
"""

from src.application.services.motion_lifecycle_service import MotionLifecycleService
from src.application.services.motion_update_worker import (
    MOTION_UPDATE_JOB_TYPE,
    MotionUpdateWorker,
    motion_update_payload,
    parse_motion_update_payload,
)

__all__: list[str] = [
    "MOTION_UPDATE_JOB_TYPE",
    "MotionLifecycleService",
    "MotionUpdateWorker",
    "motion_update_payload",
    "parse_motion_update_payload",
]

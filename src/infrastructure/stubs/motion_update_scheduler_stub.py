"""Motion update scheduler stub implementation.

Records re-evaluation requests instead of queueing jobs. Tests inspect
the requests and deliver them by hand, in any order and as often as they
like.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import UUID

from src.application.ports.motion_update_scheduler import (
    MotionUpdateSchedulerProtocol,
)
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.domain.models.motion_state import MotionState


class SchedulingError(Exception):
    """Raised by the stub when configured to fail."""


@dataclass(frozen=True)
class UpdateRequest:
    """A recorded re-evaluation request."""

    motion_id: UUID
    delay: timedelta
    expected_state: MotionState
    requested_at: datetime

    @property
    def due_at(self) -> datetime:
        return self.requested_at + self.delay


class MotionUpdateSchedulerStub(MotionUpdateSchedulerProtocol):
    """In-memory recorder of re-evaluation requests (testing only)."""

    def __init__(self, time_authority: TimeAuthorityProtocol, fail: bool = False) -> None:
        self._time = time_authority
        self._fail = fail
        self._requests: list[UpdateRequest] = []

    def set_failing(self, fail: bool) -> None:
        self._fail = fail

    async def schedule_after(
        self,
        motion_id: UUID,
        delay: timedelta,
        expected_state: MotionState,
    ) -> None:
        if self._fail:
            raise SchedulingError(f"Could not schedule update for motion {motion_id}")
        self._requests.append(
            UpdateRequest(motion_id, delay, expected_state, self._time.now())
        )

    # Testing helper methods

    def get_requests(self, motion_id: UUID | None = None) -> list[UpdateRequest]:
        if motion_id is None:
            return list(self._requests)
        return [r for r in self._requests if r.motion_id == motion_id]

    def get_delays(self, motion_id: UUID | None = None) -> list[timedelta]:
        return [r.delay for r in self.get_requests(motion_id)]

    def clear(self) -> None:
        self._requests.clear()

"""Motion update scheduler port - deferred re-evaluation requests.

After a motion enters a state, the lifecycle service asks for the motion
to be re-evaluated once each deadline of that state has passed. Delivery
may be late, duplicated or out of order. The re-evaluation entrypoint
checks ``expected_state`` and elapsed time itself, so stale or repeated
requests are harmless and no cancellation is needed.
"""

from __future__ import annotations

from datetime import timedelta
from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.motion_state import MotionState


@runtime_checkable
class MotionUpdateSchedulerProtocol(Protocol):
    """Protocol for requesting a scheduled motion re-evaluation."""

    async def schedule_after(
        self,
        motion_id: UUID,
        delay: timedelta,
        expected_state: MotionState,
    ) -> None:
        """Request a re-evaluation no earlier than ``delay`` from now.

        Args:
            motion_id: Motion to re-evaluate.
            delay: Minimum delay, never negative.
            expected_state: State the motion was in when the request was made.
        """
        ...

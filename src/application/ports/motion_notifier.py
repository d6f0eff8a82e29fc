"""Motion notifier port - outbound notification trigger points.

Each motion transition produces exactly one notification trigger. What is
sent, to whom and over which channel is decided by the implementation.
Delivery is fire-and-forget: the lifecycle service logs a failed
notification and moves on, it never retries and never rolls back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from src.domain.models.motion import Motion
    from src.domain.models.motion_state import MotionNotification


@runtime_checkable
class MotionNotifierProtocol(Protocol):
    """Protocol for delivering motion notifications."""

    async def notify(self, notification: MotionNotification, motion: Motion) -> None:
        """Deliver a notification about a motion.

        Args:
            notification: Which trigger fired.
            motion: The motion as saved after the transition.

        Raises:
            Exception: Any delivery failure. Callers isolate it.
        """
        ...

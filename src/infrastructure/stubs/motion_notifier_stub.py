"""Motion notifier stub implementation.

Records every notification it receives. Can be told to fail, to check
that a broken notification channel never blocks a transition.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from src.application.ports.motion_notifier import MotionNotifierProtocol
from src.domain.models.motion import Motion
from src.domain.models.motion_state import MotionNotification, MotionState


class NotificationDeliveryError(Exception):
    """Raised by the stub when configured to fail."""


@dataclass(frozen=True)
class SentNotification:
    """A notification as the stub received it."""

    notification: MotionNotification
    motion_id: UUID
    state: MotionState


class MotionNotifierStub(MotionNotifierProtocol):
    """In-memory notifier recording deliveries (testing only)."""

    def __init__(self, fail: bool = False) -> None:
        self._fail = fail
        self._sent: list[SentNotification] = []
        self._attempts = 0

    @classmethod
    def failing(cls) -> MotionNotifierStub:
        """Create a notifier whose every delivery raises."""
        return cls(fail=True)

    def set_failing(self, fail: bool) -> None:
        self._fail = fail

    async def notify(self, notification: MotionNotification, motion: Motion) -> None:
        self._attempts += 1
        if self._fail:
            raise NotificationDeliveryError(
                f"Delivery of {notification.value} for motion {motion.id} failed"
            )
        self._sent.append(SentNotification(notification, motion.id, motion.state))

    # Testing helper methods

    @property
    def attempts(self) -> int:
        return self._attempts

    def get_sent(self, motion_id: UUID | None = None) -> list[SentNotification]:
        if motion_id is None:
            return list(self._sent)
        return [s for s in self._sent if s.motion_id == motion_id]

    def get_notifications(self, motion_id: UUID | None = None) -> list[MotionNotification]:
        """Notification kinds sent, in order."""
        return [s.notification for s in self.get_sent(motion_id)]

    def clear(self) -> None:
        self._sent.clear()
        self._attempts = 0

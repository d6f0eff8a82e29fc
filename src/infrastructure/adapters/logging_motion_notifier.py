"""Logging MotionNotifierProtocol adapter.

Emits each notification trigger as a structured log entry. Stands in for
mail delivery, which lives outside the motion engine; a mail adapter would
take this one's place in the composition root.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from src.application.ports.motion_notifier import MotionNotifierProtocol

if TYPE_CHECKING:
    from src.domain.models.motion import Motion
    from src.domain.models.motion_state import MotionNotification

logger = structlog.get_logger(__name__)


class LoggingMotionNotifier(MotionNotifierProtocol):
    """Logs notification triggers with the motion summary."""

    async def notify(self, notification: MotionNotification, motion: Motion) -> None:
        logger.info(
            "motion_notification",
            notification=notification.value,
            **motion.to_dict(),
        )

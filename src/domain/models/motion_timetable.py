"""Motion timetable: the fixed deadlines of the motion lifecycle.

All deadlines are offsets from the moment a motion entered its current
state (for WAITING_SECOND that is the creation time).

Defaults:
- Seconding window: 48 hours, then the motion closes or moves on
- Discussion: 24 hours without a standing objection
- Objected discussion: 48 hours total when an objection stood at 24 hours
- Voting: 48 hours
- Seconds required to start discussion: 2
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

DEFAULT_SECOND_WINDOW = timedelta(hours=48)
DEFAULT_DISCUSSION_PERIOD = timedelta(hours=24)
DEFAULT_OBJECTED_DISCUSSION_PERIOD = timedelta(hours=48)
DEFAULT_VOTING_PERIOD = timedelta(hours=48)
DEFAULT_REQUIRED_SECONDS = 2


@dataclass(frozen=True, eq=True)
class MotionTimetable:
    """Deadlines and thresholds that drive scheduled transitions.

    Attributes:
        second_window: Time after creation to gather seconds.
        discussion_period: Discussion length with no standing objection.
        objected_discussion_period: Discussion length when an objection
            stood at the end of ``discussion_period``.
        voting_period: Voting length.
        required_seconds: Distinct seconds needed to start discussion.
    """

    second_window: timedelta = field(default=DEFAULT_SECOND_WINDOW)
    discussion_period: timedelta = field(default=DEFAULT_DISCUSSION_PERIOD)
    objected_discussion_period: timedelta = field(
        default=DEFAULT_OBJECTED_DISCUSSION_PERIOD
    )
    voting_period: timedelta = field(default=DEFAULT_VOTING_PERIOD)
    required_seconds: int = field(default=DEFAULT_REQUIRED_SECONDS)

    def __post_init__(self) -> None:
        """Validate timetable values."""
        for name in ("second_window", "discussion_period", "voting_period"):
            if getattr(self, name) <= timedelta(0):
                raise ValueError(f"{name} must be positive")
        if self.objected_discussion_period < self.discussion_period:
            raise ValueError(
                "objected_discussion_period cannot be shorter than discussion_period"
            )
        if self.required_seconds < 1:
            raise ValueError("required_seconds must be at least 1")


DEFAULT_MOTION_TIMETABLE = MotionTimetable()

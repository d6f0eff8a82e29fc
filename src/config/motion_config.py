"""Motion lifecycle configuration.

This module defines the deadlines and thresholds of the motion lifecycle
and the settings of the worker that drains scheduled motion updates, with
environment variable overrides for production tuning.

Environment Variables:
- MOTION_SECOND_WINDOW_HOURS: Time to gather seconds (default: 48, min: 1, max: 720)
- MOTION_DISCUSSION_HOURS: Unobjected discussion (default: 24, min: 1, max: 720)
- MOTION_OBJECTED_DISCUSSION_HOURS: Objected discussion (default: 48, min: 1, max: 720)
- MOTION_VOTING_HOURS: Voting period (default: 48, min: 1, max: 720)
- MOTION_REQUIRED_SECONDS: Seconds needed to start discussion (default: 2, min: 1, max: 10)
- MOTION_WORKER_POLL_SECONDS: Worker poll interval (default: 60, min: 1, max: 3600)
- MOTION_WORKER_BATCH_SIZE: Jobs claimed per poll (default: 10, min: 1, max: 100)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from src.domain.models.motion_timetable import MotionTimetable


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable, falling back to default when unset or invalid."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


# =============================================================================
# Lifecycle deadlines
# =============================================================================

DEFAULT_SECOND_WINDOW_HOURS = 48
DEFAULT_DISCUSSION_HOURS = 24
DEFAULT_OBJECTED_DISCUSSION_HOURS = 48
DEFAULT_VOTING_HOURS = 48

MIN_PERIOD_HOURS = 1
# 30 days
MAX_PERIOD_HOURS = 720

# =============================================================================
# Seconding threshold
# =============================================================================

DEFAULT_REQUIRED_SECONDS = 2
MIN_REQUIRED_SECONDS = 1
MAX_REQUIRED_SECONDS = 10

# =============================================================================
# Update worker
# =============================================================================

DEFAULT_WORKER_POLL_SECONDS = 60
MIN_WORKER_POLL_SECONDS = 1
MAX_WORKER_POLL_SECONDS = 3600

DEFAULT_WORKER_BATCH_SIZE = 10
MIN_WORKER_BATCH_SIZE = 1
MAX_WORKER_BATCH_SIZE = 100


@dataclass(frozen=True)
class MotionConfig:
    """Configuration for motion deadlines and the update worker.

    Attributes:
        second_window_hours: Hours after creation to gather seconds.
        discussion_hours: Discussion length when no objection stands.
        objected_discussion_hours: Discussion length when an objection
            stood at the end of ``discussion_hours``. Never shorter than it.
        voting_hours: Voting length.
        required_seconds: Seconds that start discussion of a normal motion.
        worker_poll_seconds: Sleep between worker polls.
        worker_batch_size: Maximum jobs the worker claims per poll.
    """

    second_window_hours: int = DEFAULT_SECOND_WINDOW_HOURS
    discussion_hours: int = DEFAULT_DISCUSSION_HOURS
    objected_discussion_hours: int = DEFAULT_OBJECTED_DISCUSSION_HOURS
    voting_hours: int = DEFAULT_VOTING_HOURS
    required_seconds: int = DEFAULT_REQUIRED_SECONDS
    worker_poll_seconds: int = DEFAULT_WORKER_POLL_SECONDS
    worker_batch_size: int = DEFAULT_WORKER_BATCH_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in (
            "second_window_hours",
            "discussion_hours",
            "objected_discussion_hours",
            "voting_hours",
        ):
            value = getattr(self, name)
            if not MIN_PERIOD_HOURS <= value <= MAX_PERIOD_HOURS:
                raise ValueError(
                    f"{name} must be between {MIN_PERIOD_HOURS} "
                    f"and {MAX_PERIOD_HOURS}, got {value}"
                )
        if self.objected_discussion_hours < self.discussion_hours:
            raise ValueError(
                "objected_discussion_hours cannot be shorter than discussion_hours, "
                f"got {self.objected_discussion_hours} < {self.discussion_hours}"
            )
        if not MIN_REQUIRED_SECONDS <= self.required_seconds <= MAX_REQUIRED_SECONDS:
            raise ValueError(
                f"required_seconds must be between {MIN_REQUIRED_SECONDS} "
                f"and {MAX_REQUIRED_SECONDS}, got {self.required_seconds}"
            )
        if (
            not MIN_WORKER_POLL_SECONDS
            <= self.worker_poll_seconds
            <= MAX_WORKER_POLL_SECONDS
        ):
            raise ValueError(
                f"worker_poll_seconds must be between {MIN_WORKER_POLL_SECONDS} "
                f"and {MAX_WORKER_POLL_SECONDS}, got {self.worker_poll_seconds}"
            )
        if not MIN_WORKER_BATCH_SIZE <= self.worker_batch_size <= MAX_WORKER_BATCH_SIZE:
            raise ValueError(
                f"worker_batch_size must be between {MIN_WORKER_BATCH_SIZE} "
                f"and {MAX_WORKER_BATCH_SIZE}, got {self.worker_batch_size}"
            )

    @property
    def timetable(self) -> MotionTimetable:
        """Get the domain timetable for these deadlines."""
        return MotionTimetable(
            second_window=timedelta(hours=self.second_window_hours),
            discussion_period=timedelta(hours=self.discussion_hours),
            objected_discussion_period=timedelta(hours=self.objected_discussion_hours),
            voting_period=timedelta(hours=self.voting_hours),
            required_seconds=self.required_seconds,
        )

    @property
    def worker_poll_interval(self) -> timedelta:
        return timedelta(seconds=self.worker_poll_seconds)

    @classmethod
    def from_environment(cls) -> MotionConfig:
        """Create config from environment variables with defaults.

        Out-of-range values are clamped to the nearest bound. The objected
        discussion is raised to the plain discussion length if shorter.
        """

        def hours(key: str, default: int) -> int:
            return _clamp(_get_int_env(key, default), MIN_PERIOD_HOURS, MAX_PERIOD_HOURS)

        discussion = hours("MOTION_DISCUSSION_HOURS", DEFAULT_DISCUSSION_HOURS)
        objected = max(
            hours("MOTION_OBJECTED_DISCUSSION_HOURS", DEFAULT_OBJECTED_DISCUSSION_HOURS),
            discussion,
        )

        return cls(
            second_window_hours=hours(
                "MOTION_SECOND_WINDOW_HOURS", DEFAULT_SECOND_WINDOW_HOURS
            ),
            discussion_hours=discussion,
            objected_discussion_hours=objected,
            voting_hours=hours("MOTION_VOTING_HOURS", DEFAULT_VOTING_HOURS),
            required_seconds=_clamp(
                _get_int_env("MOTION_REQUIRED_SECONDS", DEFAULT_REQUIRED_SECONDS),
                MIN_REQUIRED_SECONDS,
                MAX_REQUIRED_SECONDS,
            ),
            worker_poll_seconds=_clamp(
                _get_int_env("MOTION_WORKER_POLL_SECONDS", DEFAULT_WORKER_POLL_SECONDS),
                MIN_WORKER_POLL_SECONDS,
                MAX_WORKER_POLL_SECONDS,
            ),
            worker_batch_size=_clamp(
                _get_int_env("MOTION_WORKER_BATCH_SIZE", DEFAULT_WORKER_BATCH_SIZE),
                MIN_WORKER_BATCH_SIZE,
                MAX_WORKER_BATCH_SIZE,
            ),
        )


# Pre-defined configurations for common use cases

# Default production config
DEFAULT_MOTION_CONFIG = MotionConfig()

# Testing config: production deadlines, fast worker polling
TEST_MOTION_CONFIG = MotionConfig(
    worker_poll_seconds=MIN_WORKER_POLL_SECONDS,
    worker_batch_size=MAX_WORKER_BATCH_SIZE,
)

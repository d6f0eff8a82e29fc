"""Domain models for the motion lifecycle.

Contains the Motion aggregate, its ledger entries and the value objects
describing states, timetables and memberships. Models contain no
infrastructure dependencies.
"""

from src.domain.models.membership import Member, Membership
from src.domain.models.motion import ActionOutcome, Motion, MotionTransition
from src.domain.models.motion_event import MotionEvent, MotionEventKind, MotionLedger
from src.domain.models.motion_state import (
    MotionAction,
    MotionNotification,
    MotionState,
)
from src.domain.models.motion_timetable import DEFAULT_MOTION_TIMETABLE, MotionTimetable

__all__: list[str] = [
    "DEFAULT_MOTION_TIMETABLE",
    "ActionOutcome",
    "Member",
    "Membership",
    "Motion",
    "MotionAction",
    "MotionEvent",
    "MotionEventKind",
    "MotionLedger",
    "MotionNotification",
    "MotionState",
    "MotionTimetable",
    "MotionTransition",
]

"""Domain errors for the motion lifecycle.

Provides specific exception classes for different failure scenarios.
All exceptions inherit from AssemblyError.
"""

from src.domain.errors.motion import (
    ActionNotPermittedInStateError,
    CreatorCannotSecondError,
    DuplicateActionError,
    MemberInactiveError,
    MotionActionError,
    MotionNotFoundError,
    ObjectionNotFoundError,
)
from src.domain.errors.state_transition import InvalidStateTransitionError

__all__: list[str] = [
    "ActionNotPermittedInStateError",
    "CreatorCannotSecondError",
    "DuplicateActionError",
    "InvalidStateTransitionError",
    "MemberInactiveError",
    "MotionActionError",
    "MotionNotFoundError",
    "ObjectionNotFoundError",
]

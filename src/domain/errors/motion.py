"""Motion action errors.

This module provides exception classes for rejected member actions on a
motion. Every rejection is all-or-nothing: when one of these errors is
raised, no ledger event was appended and the motion state is unchanged.

Error kinds:
- DuplicateActionError: member already holds this kind of event
- CreatorCannotSecondError: the creator tried to second their own motion
- MemberInactiveError: member has no active membership at action time
- ActionNotPermittedInStateError: the current state denies the action
- ObjectionNotFoundError: withdrawal without a standing objection
- MotionNotFoundError: no motion with the requested id
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from uuid import UUID

from src.domain.exceptions import AssemblyError

if TYPE_CHECKING:
    from src.domain.models.motion_state import MotionAction, MotionState


class MotionActionError(AssemblyError):
    """Base error for a rejected member action.

    Expected, recoverable-by-caller condition. Callers surface it as a
    typed rejection, never as a crash.

    Attributes:
        motion_id: The motion the action targeted.
        member_id: The acting member.
        action: The attempted action.
    """

    def __init__(
        self,
        motion_id: UUID,
        member_id: UUID,
        action: MotionAction,
        message: str,
    ) -> None:
        self.motion_id = motion_id
        self.member_id = member_id
        self.action = action
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the rejection for logs and callers."""
        return {
            "error": type(self).__name__,
            "motion_id": str(self.motion_id),
            "member_id": str(self.member_id),
            "action": self.action.value,
            "detail": str(self),
        }


class DuplicateActionError(MotionActionError):
    """Raised when a member repeats a non-comment action on a motion.

    At most one event of each non-comment kind exists per (motion, member),
    and a member holds at most one vote regardless of its value.
    """

    def __init__(self, motion_id: UUID, member_id: UUID, action: MotionAction) -> None:
        super().__init__(
            motion_id,
            member_id,
            action,
            f"Member {member_id} already performed '{action.value}' "
            f"on motion {motion_id}",
        )


class CreatorCannotSecondError(MotionActionError):
    """Raised when a motion's creator attempts to second it."""

    def __init__(self, motion_id: UUID, member_id: UUID, action: MotionAction) -> None:
        super().__init__(
            motion_id,
            member_id,
            action,
            f"Member {member_id} cannot second motion {motion_id} that they created",
        )


class MemberInactiveError(MotionActionError):
    """Raised when the acting member has no active membership."""

    def __init__(self, motion_id: UUID, member_id: UUID, action: MotionAction) -> None:
        super().__init__(
            motion_id,
            member_id,
            action,
            f"Member {member_id} has no active membership",
        )


class ActionNotPermittedInStateError(MotionActionError):
    """Raised when the motion's current state denies the action.

    Attributes:
        state: The state the motion was in when the action was rejected.
    """

    def __init__(
        self,
        motion_id: UUID,
        member_id: UUID,
        action: MotionAction,
        state: MotionState,
    ) -> None:
        self.state = state
        super().__init__(
            motion_id,
            member_id,
            action,
            f"Action '{action.value}' is not permitted on motion {motion_id} "
            f"in state '{state.value}'",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["state"] = self.state.value
        return result


class ObjectionNotFoundError(MotionActionError):
    """Raised when a member withdraws an objection they never raised."""

    def __init__(self, motion_id: UUID, member_id: UUID, action: MotionAction) -> None:
        super().__init__(
            motion_id,
            member_id,
            action,
            f"Member {member_id} has no objection on motion {motion_id} to withdraw",
        )


class MotionNotFoundError(AssemblyError):
    """Raised when no motion exists for the requested id.

    Attributes:
        motion_id: The id that was not found.
    """

    def __init__(self, motion_id: UUID) -> None:
        self.motion_id = motion_id
        super().__init__(f"Motion {motion_id} not found")

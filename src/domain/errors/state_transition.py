"""State transition errors for the motion state machine.

These errors signal internal consistency violations. They do not occur
through normal operation and indicate a programming error.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from src.domain.exceptions import AssemblyError

if TYPE_CHECKING:
    from src.domain.models.motion_state import MotionState


class InvalidStateTransitionError(AssemblyError):
    """Raised when a transition outside the transition matrix is attempted.

    Also raised when a state has no registered policy.

    Attributes:
        from_state: Current state of the motion.
        to_state: Attempted target state (None when the state itself is unknown).
        allowed_transitions: Valid target states from the current state.
    """

    def __init__(
        self,
        from_state: MotionState | object,
        to_state: MotionState | None = None,
        allowed_transitions: list[MotionState] | None = None,
    ) -> None:
        """Initialize invalid state transition error.

        Args:
            from_state: Current motion state.
            to_state: Attempted invalid target state.
            allowed_transitions: Valid states from current state (optional).
        """
        self.from_state = from_state
        self.to_state = to_state
        self.allowed_transitions = allowed_transitions or []

        from_label = getattr(from_state, "value", repr(from_state))
        if to_state is None:
            message = f"Unknown motion state: {from_label}"
        else:
            allowed_str = (
                f" Valid transitions: {sorted(s.value for s in self.allowed_transitions)}"
                if self.allowed_transitions
                else ""
            )
            message = (
                f"Invalid state transition: {from_label} -> {to_state.value}.{allowed_str}"
            )
        super().__init__(message)

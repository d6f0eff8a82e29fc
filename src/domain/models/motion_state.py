"""Motion state, action and notification vocabulary.

This module defines the fixed set of states a motion moves through, the
member actions that can be taken against a motion, and the notification
triggers emitted on every transition.

State Machine:
    WAITING_SECOND -> DISCUSSING (two seconds received)
    WAITING_SECOND -> VOTING (expedited and enough seconds to bypass discussion)
    WAITING_SECOND -> CLOSED (not enough support within the seconding window)
    DISCUSSING -> VOTING (discussion period over)
    VOTING -> CLOSED (voting period over)

Terminal State:
    CLOSED. Once closed a motion is either approved or failed and no
    further transitions are permitted.
"""

from __future__ import annotations

from enum import Enum


class MotionState(Enum):
    """State in the motion lifecycle.

    States:
        WAITING_SECOND: Initial state, collecting seconds
        DISCUSSING: Seconded, members may object before voting begins
        VOTING: Members cast yes/no votes
        CLOSED: Voting over (or support never gathered)
    """

    WAITING_SECOND = "waitingsecond"
    DISCUSSING = "discussing"
    VOTING = "voting"
    CLOSED = "closed"

    def is_terminal(self) -> bool:
        """Check if this state is terminal.

        Returns:
            True only for CLOSED.
        """
        return self is MotionState.CLOSED

    def valid_transitions(self) -> frozenset[MotionState]:
        """Get valid transitions from this state.

        Returns:
            Frozenset of states this state can transition to.
            Empty set for the terminal state.
        """
        return ALLOWED_TRANSITIONS.get(self, frozenset())


# Maps each state to its valid target states
ALLOWED_TRANSITIONS: dict[MotionState, frozenset[MotionState]] = {
    MotionState.WAITING_SECOND: frozenset(
        {
            MotionState.DISCUSSING,
            MotionState.VOTING,
            MotionState.CLOSED,
        }
    ),
    MotionState.DISCUSSING: frozenset({MotionState.VOTING}),
    MotionState.VOTING: frozenset({MotionState.CLOSED}),
    MotionState.CLOSED: frozenset(),
}


class MotionAction(Enum):
    """Actions a member may attempt on a motion.

    CREATE is checked against the roster only; no state policy grants it.
    """

    CREATE = "create"
    SEE = "see"
    SECOND = "second"
    OBJECT = "object"
    WITHDRAW_OBJECTION = "withdraw_objection"
    VOTE = "vote"
    COMMENT = "comment"


class MotionNotification(Enum):
    """Notification triggers, one per transition."""

    MOTION_CREATED = "motion_created"
    DISCUSSION_BEGINNING = "discussion_beginning"
    VOTING_BEGINNING = "voting_beginning"
    MOTION_CLOSED = "motion_closed"


_NOTIFICATION_BY_STATE: dict[MotionState, MotionNotification] = {
    MotionState.WAITING_SECOND: MotionNotification.MOTION_CREATED,
    MotionState.DISCUSSING: MotionNotification.DISCUSSION_BEGINNING,
    MotionState.VOTING: MotionNotification.VOTING_BEGINNING,
    MotionState.CLOSED: MotionNotification.MOTION_CLOSED,
}


def notification_for(state: MotionState) -> MotionNotification:
    """Get the notification emitted when a motion enters a state."""
    return _NOTIFICATION_BY_STATE[state]

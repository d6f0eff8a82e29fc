"""Per-state motion policies.

Each MotionState has exactly one policy class. A policy is a stateless
decision object built fresh for every evaluation from a read-only view of
the motion. It answers three questions:

1. Is this member allowed to take this action here? (``denial_for``/``permit``)
2. Does the action just recorded make a transition due right now?
   (``action_update``)
3. Does the time elapsed since entering the state make a transition due?
   (``scheduled_update``)

Both the member-action path and the scheduler path go through these
methods, so the transition rules live in one place.

Transition Rules:
    WAITING_SECOND:
        on a second, expedited and seconds >= floor(n/3)+1 -> VOTING
        on a second, not expedited and seconds >= 2        -> DISCUSSING
        at 48h, expedited bypass threshold met             -> VOTING
        at 48h, seconds >= 2                               -> DISCUSSING
        at 48h, otherwise                                  -> CLOSED
    DISCUSSING:
        at 24h with no standing objection at 24h           -> VOTING
        at 48h                                             -> VOTING
    VOTING:
        at 48h                                             -> CLOSED
    CLOSED:
        terminal
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import ClassVar, Protocol
from uuid import UUID

from src.domain.errors.state_transition import InvalidStateTransitionError
from src.domain.models.membership import Member
from src.domain.models.motion_event import MotionEventKind, MotionLedger
from src.domain.models.motion_state import MotionAction, MotionState
from src.domain.models.motion_timetable import MotionTimetable
from src.domain.services.quorum import (
    PossibleVotesCounter,
    required_seconds_for_expedition,
)


class MotionView(Protocol):
    """Read-only view of a motion consumed by policies."""

    @property
    def id(self) -> UUID: ...

    @property
    def state(self) -> MotionState: ...

    @property
    def creator_id(self) -> UUID: ...

    @property
    def expedited(self) -> bool: ...

    @property
    def state_entered_at(self) -> datetime: ...

    @property
    def ledger(self) -> MotionLedger: ...

    @property
    def timetable(self) -> MotionTimetable: ...


class PermissionDenial(Enum):
    """Why a policy denied an action."""

    MEMBER_INACTIVE = "member_inactive"
    NOT_PERMITTED_IN_STATE = "not_permitted_in_state"
    CREATOR_CANNOT_SECOND = "creator_cannot_second"
    DUPLICATE_ACTION = "duplicate_action"
    NO_OBJECTION = "no_objection"


@dataclass(frozen=True, eq=True)
class ScheduledTransition:
    """A time-driven transition that is due.

    Attributes:
        to_state: The state to move to.
        deadline: Offset from state entry of the deadline that triggered it.
    """

    to_state: MotionState
    deadline: timedelta


class MotionStatePolicy(ABC):
    """Base class for per-state decision objects.

    Class Attributes:
        state: The state this policy governs.
        is_public: Visible to non-members (reserved, False everywhere).
        is_open: True while the motion is still undecided.
        is_closed: True only for the terminal state.
        permitted_actions: Actions this state allows at all.
    """

    state: ClassVar[MotionState]
    is_public: ClassVar[bool] = False
    is_open: ClassVar[bool] = True
    is_closed: ClassVar[bool] = False
    permitted_actions: ClassVar[frozenset[MotionAction]] = frozenset()

    def __init__(
        self,
        motion: MotionView,
        possible_votes_at: PossibleVotesCounter,
    ) -> None:
        self._motion = motion
        self._possible_votes_at = possible_votes_at

    @property
    def timetable(self) -> MotionTimetable:
        return self._motion.timetable

    def permit(self, action: MotionAction, member: Member) -> bool:
        """Check whether the member may take the action in this state."""
        return self.denial_for(action, member) is None

    def denial_for(self, action: MotionAction, member: Member) -> PermissionDenial | None:
        """Explain why an action is denied, or None if it is permitted."""
        if not member.is_active:
            return PermissionDenial.MEMBER_INACTIVE
        if action not in self.permitted_actions:
            return PermissionDenial.NOT_PERMITTED_IN_STATE
        return self._member_denial(action, member)

    def _member_denial(
        self, action: MotionAction, member: Member
    ) -> PermissionDenial | None:
        return None

    def action_update(self, at: datetime) -> MotionState | None:
        """Transition made due immediately by a recorded action, if any."""
        return None

    @abstractmethod
    def scheduled_update(self, elapsed: timedelta) -> ScheduledTransition | None:
        """Transition made due by the time elapsed since entering the state.

        Idempotent: the answer depends only on the elapsed time and on the
        ledger, never on how many times it has been asked.

        Args:
            elapsed: Time since the motion entered this state.

        Returns:
            The due transition, or None.
        """
        ...

    @abstractmethod
    def follow_up_offsets(self) -> tuple[timedelta, ...]:
        """Offsets from state entry at which scheduled checks are needed."""
        ...


class WaitingSecondPolicy(MotionStatePolicy):
    """Motion waits for seconds from members other than its creator."""

    state = MotionState.WAITING_SECOND
    permitted_actions = frozenset(
        {MotionAction.SEE, MotionAction.SECOND, MotionAction.COMMENT}
    )

    def _member_denial(
        self, action: MotionAction, member: Member
    ) -> PermissionDenial | None:
        if action is MotionAction.SECOND:
            if member.member_id == self._motion.creator_id:
                return PermissionDenial.CREATOR_CANNOT_SECOND
            if self._motion.ledger.has(member.member_id, MotionEventKind.SECOND):
                return PermissionDenial.DUPLICATE_ACTION
        return None

    def can_expedite(self, at: datetime) -> bool:
        if not self._motion.expedited:
            return False
        threshold = required_seconds_for_expedition(self._possible_votes_at(at))
        return self._motion.ledger.seconds_count >= threshold

    def has_enough_seconds(self) -> bool:
        return self._motion.ledger.seconds_count >= self.timetable.required_seconds

    def action_update(self, at: datetime) -> MotionState | None:
        # Expedited motions stay here until they can bypass discussion
        if self._motion.expedited:
            return MotionState.VOTING if self.can_expedite(at) else None
        return MotionState.DISCUSSING if self.has_enough_seconds() else None

    def scheduled_update(self, elapsed: timedelta) -> ScheduledTransition | None:
        window = self.timetable.second_window
        if elapsed < window:
            return None
        deadline_at = self._motion.state_entered_at + window
        if self.can_expedite(deadline_at):
            return ScheduledTransition(MotionState.VOTING, window)
        if self.has_enough_seconds():
            return ScheduledTransition(MotionState.DISCUSSING, window)
        return ScheduledTransition(MotionState.CLOSED, window)

    def follow_up_offsets(self) -> tuple[timedelta, ...]:
        return (self.timetable.second_window,)


class DiscussingPolicy(MotionStatePolicy):
    """Motion is discussed; members may object to delay the vote."""

    state = MotionState.DISCUSSING
    permitted_actions = frozenset(
        {
            MotionAction.SEE,
            MotionAction.OBJECT,
            MotionAction.WITHDRAW_OBJECTION,
            MotionAction.COMMENT,
        }
    )

    def _member_denial(
        self, action: MotionAction, member: Member
    ) -> PermissionDenial | None:
        ledger = self._motion.ledger
        if action is MotionAction.OBJECT:
            if ledger.has(member.member_id, MotionEventKind.OBJECTION):
                return PermissionDenial.DUPLICATE_ACTION
        elif action is MotionAction.WITHDRAW_OBJECTION:
            if ledger.has(member.member_id, MotionEventKind.OBJECTION_WITHDRAWN):
                return PermissionDenial.DUPLICATE_ACTION
            if not ledger.has(member.member_id, MotionEventKind.OBJECTION):
                return PermissionDenial.NO_OBJECTION
        return None

    def objected_at_checkpoint(self) -> bool:
        """Whether an objection stood when the discussion period ended."""
        checkpoint = self._motion.state_entered_at + self.timetable.discussion_period
        return self._motion.ledger.standing_objections(as_of=checkpoint) > 0

    def scheduled_update(self, elapsed: timedelta) -> ScheduledTransition | None:
        timetable = self.timetable
        if elapsed >= timetable.discussion_period and not self.objected_at_checkpoint():
            return ScheduledTransition(MotionState.VOTING, timetable.discussion_period)
        if elapsed >= timetable.objected_discussion_period:
            return ScheduledTransition(
                MotionState.VOTING, timetable.objected_discussion_period
            )
        return None

    def follow_up_offsets(self) -> tuple[timedelta, ...]:
        return (
            self.timetable.discussion_period,
            self.timetable.objected_discussion_period,
        )


class VotingPolicy(MotionStatePolicy):
    """Members cast one yes or no vote each."""

    state = MotionState.VOTING
    permitted_actions = frozenset(
        {MotionAction.SEE, MotionAction.VOTE, MotionAction.COMMENT}
    )

    def _member_denial(
        self, action: MotionAction, member: Member
    ) -> PermissionDenial | None:
        if action is MotionAction.VOTE and self._motion.ledger.has_voted(
            member.member_id
        ):
            return PermissionDenial.DUPLICATE_ACTION
        return None

    def scheduled_update(self, elapsed: timedelta) -> ScheduledTransition | None:
        if elapsed >= self.timetable.voting_period:
            return ScheduledTransition(MotionState.CLOSED, self.timetable.voting_period)
        return None

    def follow_up_offsets(self) -> tuple[timedelta, ...]:
        return (self.timetable.voting_period,)


class ClosedPolicy(MotionStatePolicy):
    """Terminal state; the motion can only be seen."""

    state = MotionState.CLOSED
    is_open = False
    is_closed = True
    permitted_actions = frozenset({MotionAction.SEE})

    def scheduled_update(self, elapsed: timedelta) -> ScheduledTransition | None:
        return None

    def follow_up_offsets(self) -> tuple[timedelta, ...]:
        return ()


STATE_POLICIES: dict[MotionState, type[MotionStatePolicy]] = {
    policy.state: policy
    for policy in (WaitingSecondPolicy, DiscussingPolicy, VotingPolicy, ClosedPolicy)
}


def policy_class_for(state: MotionState) -> type[MotionStatePolicy]:
    """Look up the policy class for a state.

    Raises:
        InvalidStateTransitionError: If the state has no registered policy.
    """
    try:
        return STATE_POLICIES[state]
    except KeyError:
        raise InvalidStateTransitionError(state) from None


def policy_for(
    motion: MotionView, possible_votes_at: PossibleVotesCounter
) -> MotionStatePolicy:
    """Build a fresh policy for the motion's current state."""
    return policy_class_for(motion.state)(motion, possible_votes_at)


def open_states() -> list[MotionState]:
    """States in which a motion is still undecided."""
    return [state for state, policy in STATE_POLICIES.items() if policy.is_open]


def closed_states() -> list[MotionState]:
    """States in which a motion is decided."""
    return [state for state, policy in STATE_POLICIES.items() if policy.is_closed]

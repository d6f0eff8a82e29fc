"""Motion aggregate.

A motion owns its state, its timestamps and its ledger. Member actions and
time-driven re-evaluations both go through the policy of the current state,
and every applied transition is returned as a MotionTransition record that
tells the caller which notification to emit and which follow-up checks to
schedule. The aggregate performs no I/O.

Invariants:
- closed_at is set exactly when the state is CLOSED
- abstains and possible_votes_at_close are set exactly when CLOSED
- Time-driven transitions are stamped with their deadline, not with the
  moment the check ran, so the outcome does not depend on delivery delay
- A rejected action leaves both the ledger and the state untouched
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from src.domain.errors.motion import (
    ActionNotPermittedInStateError,
    CreatorCannotSecondError,
    DuplicateActionError,
    MemberInactiveError,
    ObjectionNotFoundError,
)
from src.domain.errors.state_transition import InvalidStateTransitionError
from src.domain.models.membership import Member
from src.domain.models.motion_event import MotionEvent, MotionEventKind, MotionLedger
from src.domain.models.motion_state import (
    MotionAction,
    MotionNotification,
    MotionState,
    notification_for,
)
from src.domain.models.motion_timetable import DEFAULT_MOTION_TIMETABLE, MotionTimetable
from src.domain.services.motion_state_policy import (
    MotionStatePolicy,
    PermissionDenial,
    policy_class_for,
    policy_for,
)
from src.domain.services.quorum import (
    PossibleVotesCounter,
    has_met_requirement,
    required_seconds_for_expedition,
    required_votes,
)


def _possible_votes_unavailable(at: datetime) -> int:
    raise RuntimeError("Possible votes are not needed for this evaluation")


@dataclass(frozen=True, eq=True)
class MotionTransition:
    """A state change applied to a motion.

    Attributes:
        motion_id: The motion that changed.
        from_state: Previous state (None for creation).
        to_state: New state.
        occurred_at: When the new state was entered.
        check_offsets: Offsets from occurred_at at which the new state
            needs a scheduled re-evaluation.
    """

    motion_id: UUID
    from_state: MotionState | None
    to_state: MotionState
    occurred_at: datetime
    check_offsets: tuple[timedelta, ...] = ()

    @property
    def notification(self) -> MotionNotification:
        return notification_for(self.to_state)

    def check_times(self) -> list[datetime]:
        """Absolute instants of the follow-up checks."""
        return [self.occurred_at + offset for offset in self.check_offsets]

    def to_dict(self) -> dict[str, Any]:
        return {
            "motion_id": str(self.motion_id),
            "from_state": self.from_state.value if self.from_state else None,
            "to_state": self.to_state.value,
            "occurred_at": self.occurred_at.isoformat(),
            "notification": self.notification.value,
        }


@dataclass(frozen=True, eq=True)
class ActionOutcome:
    """Result of a recorded member action.

    Attributes:
        event: The ledger event that was appended.
        transitions: Transitions the action made due immediately.
    """

    event: MotionEvent
    transitions: tuple[MotionTransition, ...] = ()

    @property
    def transitioned(self) -> bool:
        return bool(self.transitions)


@dataclass
class Motion:
    """A proposal moving through seconding, discussion and voting.

    Attributes:
        id: Unique motion identifier.
        creator_id: Member who created the motion (immutable).
        title: Short title.
        text: The resolution being proposed.
        created_at: Creation time; anchors the seconding deadline.
        state_entered_at: When the current state was entered.
        ledger: Member actions recorded against this motion.
        rationale: Optional reasoning behind the motion.
        expedited: Whether the motion may bypass discussion (immutable).
        state: Current lifecycle state.
        timetable: Deadlines governing scheduled transitions.
        closed_at: When the motion closed.
        abstains: Possible voters at close who did not vote.
        possible_votes_at_close: Possible voters when the motion closed.
    """

    id: UUID
    creator_id: UUID
    title: str
    text: str
    created_at: datetime
    state_entered_at: datetime
    ledger: MotionLedger
    rationale: str | None = None
    expedited: bool = False
    state: MotionState = MotionState.WAITING_SECOND
    timetable: MotionTimetable = field(default=DEFAULT_MOTION_TIMETABLE)
    closed_at: datetime | None = None
    abstains: int | None = None
    possible_votes_at_close: int | None = None

    def __post_init__(self) -> None:
        """Validate motion invariants."""
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        if self.ledger.motion_id != self.id:
            raise ValueError("ledger belongs to a different motion")
        closed = self.state is MotionState.CLOSED
        if (self.closed_at is not None) != closed:
            raise ValueError("closed_at must be set exactly when the motion is closed")
        if (self.abstains is not None) != closed:
            raise ValueError("abstains must be set exactly when the motion is closed")
        if (self.possible_votes_at_close is not None) != closed:
            raise ValueError(
                "possible_votes_at_close must be set exactly when the motion is closed"
            )

    @classmethod
    def create(
        cls,
        creator_id: UUID,
        title: str,
        text: str,
        *,
        created_at: datetime,
        expedited: bool = False,
        rationale: str | None = None,
        timetable: MotionTimetable = DEFAULT_MOTION_TIMETABLE,
    ) -> Motion:
        """Create a new motion waiting for seconds."""
        if not title.strip():
            raise ValueError("title cannot be empty")
        motion_id = uuid4()
        return cls(
            id=motion_id,
            creator_id=creator_id,
            title=title,
            text=text,
            created_at=created_at,
            state_entered_at=created_at,
            ledger=MotionLedger(motion_id),
            rationale=rationale,
            expedited=expedited,
            timetable=timetable,
        )

    def creation_transition(self) -> MotionTransition:
        """Describe the creation as a transition into WAITING_SECOND."""
        return MotionTransition(
            motion_id=self.id,
            from_state=None,
            to_state=MotionState.WAITING_SECOND,
            occurred_at=self.created_at,
            check_offsets=self._policy().follow_up_offsets(),
        )

    # -------------------------------------------------------------------------
    # Policy access
    # -------------------------------------------------------------------------

    def _policy(
        self, possible_votes_at: PossibleVotesCounter = _possible_votes_unavailable
    ) -> MotionStatePolicy:
        return policy_for(self, possible_votes_at)

    def permit(self, action: MotionAction, member: Member) -> bool:
        """Check whether the member may take the action right now."""
        return self._policy().permit(action, member)

    def denial_for(
        self, action: MotionAction, member: Member
    ) -> PermissionDenial | None:
        return self._policy().denial_for(action, member)

    def authorize(self, action: MotionAction, member: Member) -> None:
        """Raise the typed rejection if the member may not take the action.

        Raises:
            MotionActionError: The specific rejection for the denial reason.
        """
        denial = self.denial_for(action, member)
        if denial is None:
            return
        member_id = member.member_id
        if denial is PermissionDenial.MEMBER_INACTIVE:
            raise MemberInactiveError(self.id, member_id, action)
        if denial is PermissionDenial.CREATOR_CANNOT_SECOND:
            raise CreatorCannotSecondError(self.id, member_id, action)
        if denial is PermissionDenial.DUPLICATE_ACTION:
            raise DuplicateActionError(self.id, member_id, action)
        if denial is PermissionDenial.NO_OBJECTION:
            raise ObjectionNotFoundError(self.id, member_id, action)
        raise ActionNotPermittedInStateError(self.id, member_id, action, self.state)

    # -------------------------------------------------------------------------
    # Member actions
    # -------------------------------------------------------------------------

    def _record(
        self,
        kind: MotionEventKind,
        member: Member,
        at: datetime,
        body: str | None = None,
    ) -> MotionEvent:
        self.authorize(kind.action, member)
        return self.ledger.append(
            MotionEvent.create(kind, member.member_id, self.id, at, body=body)
        )

    def record_second(
        self,
        member: Member,
        at: datetime,
        possible_votes_at: PossibleVotesCounter,
    ) -> ActionOutcome:
        """Second the motion and apply any transition the second makes due."""
        event = self._record(MotionEventKind.SECOND, member, at)
        to_state = self._policy(possible_votes_at).action_update(at)
        if to_state is None:
            return ActionOutcome(event=event)
        return ActionOutcome(
            event=event,
            transitions=(self._transition_to(to_state, at, possible_votes_at),),
        )

    def record_objection(self, member: Member, at: datetime) -> ActionOutcome:
        return ActionOutcome(event=self._record(MotionEventKind.OBJECTION, member, at))

    def record_objection_withdrawal(
        self, member: Member, at: datetime
    ) -> ActionOutcome:
        return ActionOutcome(
            event=self._record(MotionEventKind.OBJECTION_WITHDRAWN, member, at)
        )

    def record_vote(self, member: Member, in_favor: bool, at: datetime) -> ActionOutcome:
        kind = MotionEventKind.YES_VOTE if in_favor else MotionEventKind.NO_VOTE
        return ActionOutcome(event=self._record(kind, member, at))

    def record_comment(self, member: Member, body: str, at: datetime) -> ActionOutcome:
        if not body.strip():
            raise ValueError("comment body cannot be empty")
        return ActionOutcome(
            event=self._record(MotionEventKind.COMMENT, member, at, body=body)
        )

    # -------------------------------------------------------------------------
    # Time-driven re-evaluation
    # -------------------------------------------------------------------------

    def elapsed_in_state(self, now: datetime) -> timedelta:
        return now - self.state_entered_at

    def scheduled_update(
        self,
        now: datetime,
        possible_votes_at: PossibleVotesCounter,
        expected_state: MotionState | None = None,
    ) -> list[MotionTransition]:
        """Apply every time-driven transition due at ``now``.

        Safe to call any number of times, in any order, at any delay.

        Args:
            now: The evaluation instant.
            possible_votes_at: Reads possible votes at an instant.
            expected_state: State the check was scheduled for. When the
                motion has since left it, the check is stale and ignored.

        Returns:
            Transitions applied, oldest first. Empty when nothing was due.
        """
        if expected_state is not None and expected_state is not self.state:
            return []

        transitions: list[MotionTransition] = []
        while True:
            due = self._policy(possible_votes_at).scheduled_update(
                self.elapsed_in_state(now)
            )
            if due is None:
                return transitions
            transitions.append(
                self._transition_to(
                    due.to_state,
                    self.state_entered_at + due.deadline,
                    possible_votes_at,
                )
            )

    def _transition_to(
        self,
        to_state: MotionState,
        at: datetime,
        possible_votes_at: PossibleVotesCounter,
    ) -> MotionTransition:
        from_state = self.state
        if to_state not in from_state.valid_transitions():
            raise InvalidStateTransitionError(
                from_state, to_state, sorted(from_state.valid_transitions(), key=str)
            )

        self.state = to_state
        self.state_entered_at = at
        if to_state is MotionState.CLOSED:
            possible = possible_votes_at(at)
            self.closed_at = at
            self.possible_votes_at_close = possible
            self.abstains = max(possible - self.ledger.votes_count, 0)

        return MotionTransition(
            motion_id=self.id,
            from_state=from_state,
            to_state=to_state,
            occurred_at=at,
            check_offsets=self._policy(possible_votes_at).follow_up_offsets(),
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return policy_class_for(self.state).is_open

    @property
    def is_closed(self) -> bool:
        return policy_class_for(self.state).is_closed

    @property
    def is_approved(self) -> bool:
        """Closed with enough yes votes against the possible votes at close."""
        if not self.is_closed or self.possible_votes_at_close is None:
            return False
        return has_met_requirement(self.yes_votes, self.possible_votes_at_close)

    @property
    def is_failed(self) -> bool:
        return self.is_closed and not self.is_approved

    @property
    def approved_at(self) -> datetime | None:
        return self.closed_at if self.is_approved else None

    def is_passed(self, possible_votes: int) -> bool:
        """Still voting, but the yes votes already meet the requirement."""
        return self.state is MotionState.VOTING and has_met_requirement(
            self.yes_votes, possible_votes
        )

    @property
    def seconds_count(self) -> int:
        return self.ledger.seconds_count

    @property
    def yes_votes(self) -> int:
        return self.ledger.yes_votes

    @property
    def no_votes(self) -> int:
        return self.ledger.no_votes

    @property
    def votes_count(self) -> int:
        return self.ledger.votes_count

    @property
    def is_objected(self) -> bool:
        return self.ledger.standing_objections() > 0

    @property
    def has_enough_seconds(self) -> bool:
        return self.seconds_count >= self.timetable.required_seconds

    def required_votes(self, possible_votes: int) -> int:
        return required_votes(possible_votes)

    def seconds_for_expedition(self, possible_votes: int) -> int:
        return required_seconds_for_expedition(possible_votes)

    def can_expedite(self, possible_votes: int) -> bool:
        return self.expedited and self.seconds_count >= self.seconds_for_expedition(
            possible_votes
        )

    def has_acted(self, member_id: UUID) -> bool:
        """Whether the member already took the action the current state asks for.

        Seconding while waiting for seconds, objecting while discussing and
        voting while voting. Nothing is asked of anyone once closed.
        """
        if self.state is MotionState.WAITING_SECOND:
            return self.ledger.has(member_id, MotionEventKind.SECOND)
        if self.state is MotionState.DISCUSSING:
            return self.ledger.has(member_id, MotionEventKind.OBJECTION)
        if self.state is MotionState.VOTING:
            return self.ledger.has_voted(member_id)
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize the motion summary for logs and notification payloads."""
        return {
            "motion_id": str(self.id),
            "creator_id": str(self.creator_id),
            "title": self.title,
            "state": self.state.value,
            "expedited": self.expedited,
            "created_at": self.created_at.isoformat(),
            "state_entered_at": self.state_entered_at.isoformat(),
            "closed_at": self.closed_at.isoformat() if self.closed_at else None,
            "seconds": self.seconds_count,
            "yes_votes": self.yes_votes,
            "no_votes": self.no_votes,
            "abstains": self.abstains,
            "approved": self.is_approved,
        }

"""Motion ledger: append-only record of member actions on a motion.

Every second, objection, objection withdrawal, vote and comment is kept
as an immutable MotionEvent. Events are created once and are never
updated or deleted.

Invariants:
- For each (motion, member, kind) with kind != COMMENT, at most one event
- A member holds at most one vote (yes or no) per motion
- Every event in a ledger belongs to that ledger's motion
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from src.domain.errors.motion import DuplicateActionError
from src.domain.models.motion_state import MotionAction


class MotionEventKind(Enum):
    """Kind of member action recorded in the ledger."""

    YES_VOTE = "yes_vote"
    NO_VOTE = "no_vote"
    SECOND = "second"
    OBJECTION = "objection"
    OBJECTION_WITHDRAWN = "objection_withdrawn"
    COMMENT = "comment"

    @property
    def action(self) -> MotionAction:
        """The member action that produces this kind of event."""
        return _ACTION_BY_KIND[self]

    @property
    def label(self) -> str:
        """Human readable label, e.g. 'Objection Withdrawn'."""
        return _LABEL_BY_KIND[self]

    def is_vote(self) -> bool:
        return self in VOTE_KINDS


VOTE_KINDS: frozenset[MotionEventKind] = frozenset(
    {MotionEventKind.YES_VOTE, MotionEventKind.NO_VOTE}
)

_ACTION_BY_KIND: dict[MotionEventKind, MotionAction] = {
    MotionEventKind.YES_VOTE: MotionAction.VOTE,
    MotionEventKind.NO_VOTE: MotionAction.VOTE,
    MotionEventKind.SECOND: MotionAction.SECOND,
    MotionEventKind.OBJECTION: MotionAction.OBJECT,
    MotionEventKind.OBJECTION_WITHDRAWN: MotionAction.WITHDRAW_OBJECTION,
    MotionEventKind.COMMENT: MotionAction.COMMENT,
}

_LABEL_BY_KIND: dict[MotionEventKind, str] = {
    MotionEventKind.YES_VOTE: "Yes Vote",
    MotionEventKind.NO_VOTE: "No Vote",
    MotionEventKind.SECOND: "Second",
    MotionEventKind.OBJECTION: "Objection",
    MotionEventKind.OBJECTION_WITHDRAWN: "Objection Withdrawn",
    MotionEventKind.COMMENT: "Comment",
}


@dataclass(frozen=True, eq=True)
class MotionEvent:
    """A single member action on a motion.

    Attributes:
        event_id: Unique identifier for the event.
        kind: What the member did.
        member_id: The acting member.
        motion_id: The motion acted on.
        created_at: When the action was recorded (UTC).
        body: Comment text (comments only).
    """

    event_id: UUID
    kind: MotionEventKind
    member_id: UUID
    motion_id: UUID
    created_at: datetime
    body: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate event fields."""
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        if self.body is not None and self.kind is not MotionEventKind.COMMENT:
            raise ValueError("Only comment events carry a body")

    @classmethod
    def create(
        cls,
        kind: MotionEventKind,
        member_id: UUID,
        motion_id: UUID,
        created_at: datetime,
        body: str | None = None,
    ) -> MotionEvent:
        return cls(
            event_id=uuid4(),
            kind=kind,
            member_id=member_id,
            motion_id=motion_id,
            created_at=created_at,
            body=body,
        )

    def to_dict(self) -> dict[str, str | None]:
        """Serialize event for logs and notification payloads."""
        return {
            "event_id": str(self.event_id),
            "kind": self.kind.value,
            "member_id": str(self.member_id),
            "motion_id": str(self.motion_id),
            "created_at": self.created_at.isoformat(),
            "body": self.body,
        }


class MotionLedger:
    """Append-only ledger of events for exactly one motion."""

    def __init__(self, motion_id: UUID, events: list[MotionEvent] | None = None) -> None:
        self._motion_id = motion_id
        self._events: list[MotionEvent] = []
        for event in events or []:
            self.append(event)

    @property
    def motion_id(self) -> UUID:
        return self._motion_id

    def append(self, event: MotionEvent) -> MotionEvent:
        """Append an event, enforcing the uniqueness invariant.

        Args:
            event: The event to record.

        Returns:
            The recorded event.

        Raises:
            ValueError: If the event belongs to another motion.
            DuplicateActionError: If the member already holds this kind of event.
        """
        if event.motion_id != self._motion_id:
            raise ValueError(
                f"Event for motion {event.motion_id} cannot join ledger of "
                f"motion {self._motion_id}"
            )
        if event.kind is not MotionEventKind.COMMENT:
            kinds = VOTE_KINDS if event.kind.is_vote() else frozenset({event.kind})
            if self.has_any(event.member_id, kinds):
                raise DuplicateActionError(
                    self._motion_id, event.member_id, event.kind.action
                )
        self._events.append(event)
        return event

    def __iter__(self) -> Iterator[MotionEvent]:
        return iter(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def events(self, kind: MotionEventKind | None = None) -> list[MotionEvent]:
        """Events in recording order, optionally filtered by kind."""
        if kind is None:
            return list(self._events)
        return [e for e in self._events if e.kind is kind]

    def count(self, kind: MotionEventKind) -> int:
        return sum(1 for e in self._events if e.kind is kind)

    def has_any(self, member_id: UUID, kinds: frozenset[MotionEventKind]) -> bool:
        """Check whether a member holds an event of any of the given kinds."""
        return any(e.member_id == member_id and e.kind in kinds for e in self._events)

    def has(self, member_id: UUID, kind: MotionEventKind) -> bool:
        return self.has_any(member_id, frozenset({kind}))

    def has_voted(self, member_id: UUID) -> bool:
        return self.has_any(member_id, VOTE_KINDS)

    @property
    def seconds_count(self) -> int:
        return self.count(MotionEventKind.SECOND)

    @property
    def yes_votes(self) -> int:
        return self.count(MotionEventKind.YES_VOTE)

    @property
    def no_votes(self) -> int:
        return self.count(MotionEventKind.NO_VOTE)

    @property
    def votes_count(self) -> int:
        return self.yes_votes + self.no_votes

    @property
    def objections_count(self) -> int:
        return self.count(MotionEventKind.OBJECTION)

    def standing_objections(self, as_of: datetime | None = None) -> int:
        """Count objections on record at an instant and not withdrawn by then.

        Args:
            as_of: The checkpoint instant. Events recorded later are ignored.
                None counts everything on record.

        Returns:
            Number of members whose objection stood at the checkpoint.
        """
        on_record = [
            e for e in self._events if as_of is None or e.created_at <= as_of
        ]
        objectors = {
            e.member_id for e in on_record if e.kind is MotionEventKind.OBJECTION
        }
        withdrawn = {
            e.member_id
            for e in on_record
            if e.kind is MotionEventKind.OBJECTION_WITHDRAWN
        }
        return len(objectors - withdrawn)

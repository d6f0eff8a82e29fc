"""Membership and acting-member value objects.

Roster data is owned by an external collaborator. The core only reads it:
which members are active at a given time, and who is acting right now.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, eq=True)
class Membership:
    """A membership term for one member.

    A membership is active at time T if ``start <= T`` and the end is
    either unset or ``end >= T``.

    Attributes:
        member_id: The member holding this term.
        start: When the term began (timezone-aware).
        end: When the term ended, or None if open-ended.
    """

    member_id: UUID
    start: datetime
    end: datetime | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate membership bounds."""
        if self.start.tzinfo is None:
            raise ValueError("start must be timezone-aware (UTC)")
        if self.end is not None and self.end < self.start:
            raise ValueError("end cannot precede start")

    def is_active_at(self, at: datetime) -> bool:
        """Check whether this term covers the given instant."""
        if self.start > at:
            return False
        return self.end is None or self.end >= at


@dataclass(frozen=True, eq=True)
class Member:
    """The acting member, resolved against the roster at action time."""

    member_id: UUID
    is_active: bool

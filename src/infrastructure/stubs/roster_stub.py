"""Roster stub implementation.

This module provides an in-memory implementation of RosterProtocol for
testing and development purposes. Memberships are kept as dated terms so
tests can make members join or leave part-way through a motion.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from src.application.ports.roster import RosterProtocol
from src.domain.models.membership import Membership


class RosterStub(RosterProtocol):
    """In-memory stub for the membership roster (testing only).

    Attributes:
        _memberships: Membership terms per member.
        _conflicts: Members declaring a conflict of interest, per motion.
    """

    def __init__(self) -> None:
        self._memberships: dict[UUID, list[Membership]] = {}
        self._conflicts: dict[UUID, set[UUID]] = {}

    def clear(self) -> None:
        self._memberships.clear()
        self._conflicts.clear()

    # Roster setup

    def add_membership(
        self,
        member_id: UUID,
        start: datetime,
        end: datetime | None = None,
    ) -> Membership:
        membership = Membership(member_id=member_id, start=start, end=end)
        self._memberships.setdefault(member_id, []).append(membership)
        return membership

    def add_members(self, count: int, start: datetime) -> list[UUID]:
        """Add ``count`` open-ended members starting at ``start``."""
        member_ids = [uuid4() for _ in range(count)]
        for member_id in member_ids:
            self.add_membership(member_id, start)
        return member_ids

    def end_membership(self, member_id: UUID, end: datetime) -> None:
        """Close every open term of the member at ``end``.

        Raises:
            KeyError: If the member is unknown.
        """
        terms = self._memberships[member_id]
        self._memberships[member_id] = [
            Membership(t.member_id, t.start, end) if t.end is None else t
            for t in terms
        ]

    def declare_conflict(self, motion_id: UUID, member_id: UUID) -> None:
        self._conflicts.setdefault(motion_id, set()).add(member_id)

    # RosterProtocol

    def is_member_active(self, member_id: UUID, at: datetime) -> bool:
        return any(t.is_active_at(at) for t in self._memberships.get(member_id, []))

    def active_member_count(self, at: datetime) -> int:
        return sum(
            1 for member_id in self._memberships if self.is_member_active(member_id, at)
        )

    def conflicted_member_count(self, motion_id: UUID, at: datetime) -> int:
        """Count conflicted members who are active at the instant."""
        return sum(
            1
            for member_id in self._conflicts.get(motion_id, set())
            if self.is_member_active(member_id, at)
        )

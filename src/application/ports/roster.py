"""Roster port - read-only view of membership.

Roster data is owned outside the motion engine. The engine only asks who
is active at a given instant and how many active members are conflicted
on a motion. Answers can change over a motion's lifetime, so callers ask
at every evaluation and never cache.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID


class RosterProtocol(ABC):
    """Abstract interface for roster lookups.

    Lookups are synchronous: they are read at many points inside a single
    evaluation, and implementations are expected to serve them from an
    in-process snapshot.
    """

    @abstractmethod
    def active_member_count(self, at: datetime) -> int:
        """Count memberships active at the instant."""
        ...

    @abstractmethod
    def conflicted_member_count(self, motion_id: UUID, at: datetime) -> int:
        """Count active members with a conflict of interest on the motion."""
        ...

    @abstractmethod
    def is_member_active(self, member_id: UUID, at: datetime) -> bool:
        """Check whether the member holds an active membership at the instant."""
        ...

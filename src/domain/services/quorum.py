"""Quorum arithmetic for motions.

Pure functions over the number of possible votes. Possible votes are the
members active at evaluation time minus the members with a conflict of
interest on the motion. They change over a motion's days-long lifetime,
so callers must read the roster at each evaluation and never cache.

Thresholds:
- Required votes (simple majority): floor(n / 2) + 1
- Seconds to expedite (bypass discussion): floor(n / 3) + 1
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

# Reads possible votes for one motion at a given instant
PossibleVotesCounter = Callable[[datetime], int]


def _require_non_negative(name: str, value: int) -> None:
    if value < 0:
        raise ValueError(f"{name} cannot be negative, got {value}")


def required_votes(possible_votes: int) -> int:
    """More than half of the possible votes are required to approve a motion.

    Args:
        possible_votes: Eligible voters at evaluation time.

    Returns:
        Yes votes needed for approval.

    Raises:
        ValueError: If possible_votes is negative.
    """
    _require_non_negative("possible_votes", possible_votes)
    return possible_votes // 2 + 1


def required_seconds_for_expedition(possible_votes: int) -> int:
    """More than a third of the possible votes are required to expedite.

    Args:
        possible_votes: Eligible voters at evaluation time.

    Returns:
        Seconds needed to bring an expedited motion straight to a vote.

    Raises:
        ValueError: If possible_votes is negative.
    """
    _require_non_negative("possible_votes", possible_votes)
    return possible_votes // 3 + 1


def possible_votes(active_members: int, conflicted_members: int) -> int:
    """Eligible voters: active members minus conflicted members, floored at 0.

    Raises:
        ValueError: If either count is negative.
    """
    _require_non_negative("active_members", active_members)
    _require_non_negative("conflicted_members", conflicted_members)
    return max(active_members - conflicted_members, 0)


def has_met_requirement(yes_votes: int, possible_votes: int) -> bool:
    """Check whether yes votes reach the simple-majority requirement."""
    return yes_votes >= required_votes(possible_votes)

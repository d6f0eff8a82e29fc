"""Domain services for the motion lifecycle.

Domain services contain decision logic that doesn't naturally fit in the
Motion aggregate. They are pure and must NOT depend on infrastructure.

Available services:
- quorum: required votes, expedition threshold and possible votes
- motion_state_policy: one policy per MotionState, looked up by enum
"""

from src.domain.services.motion_state_policy import (
    STATE_POLICIES,
    ClosedPolicy,
    DiscussingPolicy,
    MotionStatePolicy,
    PermissionDenial,
    ScheduledTransition,
    VotingPolicy,
    WaitingSecondPolicy,
    closed_states,
    open_states,
    policy_for,
)
from src.domain.services.quorum import (
    has_met_requirement,
    possible_votes,
    required_seconds_for_expedition,
    required_votes,
)

__all__: list[str] = [
    "STATE_POLICIES",
    "ClosedPolicy",
    "DiscussingPolicy",
    "MotionStatePolicy",
    "PermissionDenial",
    "ScheduledTransition",
    "VotingPolicy",
    "WaitingSecondPolicy",
    "closed_states",
    "has_met_requirement",
    "open_states",
    "policy_for",
    "possible_votes",
    "required_seconds_for_expedition",
    "required_votes",
]

"""Motion tally DTO.

Application-layer view of where a motion stands: its counts and the
thresholds they are measured against.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID


@dataclass(frozen=True)
class MotionTallyDTO:
    """Counts and thresholds for one motion.

    For a closed motion ``possible_votes`` is the figure frozen at close.
    For an open motion it is read from the roster at query time.

    Attributes:
        motion_id: The motion.
        state: Current state value.
        seconds: Seconds recorded.
        yes_votes: Yes votes recorded.
        no_votes: No votes recorded.
        possible_votes: Eligible voters.
        required_votes: Yes votes needed for approval.
        seconds_for_expedition: Seconds needed to skip discussion.
        abstains: Eligible voters who did not vote (closed motions only).
        approved: Whether the motion closed approved.
        passed: Whether a motion still voting already has enough yes votes.
    """

    motion_id: UUID
    state: str
    seconds: int
    yes_votes: int
    no_votes: int
    possible_votes: int
    required_votes: int
    seconds_for_expedition: int
    abstains: int | None
    approved: bool
    passed: bool

    @property
    def votes_cast(self) -> int:
        return self.yes_votes + self.no_votes

    def to_dict(self) -> dict[str, Any]:
        return {
            "motion_id": str(self.motion_id),
            "state": self.state,
            "seconds": self.seconds,
            "yes_votes": self.yes_votes,
            "no_votes": self.no_votes,
            "votes_cast": self.votes_cast,
            "possible_votes": self.possible_votes,
            "required_votes": self.required_votes,
            "seconds_for_expedition": self.seconds_for_expedition,
            "abstains": self.abstains,
            "approved": self.approved,
            "passed": self.passed,
        }

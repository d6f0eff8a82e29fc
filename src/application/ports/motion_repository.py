"""MotionRepository port for motion persistence.

The repository stores whole Motion aggregates, ledger included. It is the
only place motion state survives between operations.

Usage:
    repo: MotionRepositoryProtocol = InMemoryMotionRepository()
    motion = await repo.get(motion_id)
    if motion is not None:
        ...
        await repo.save(motion)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable
from uuid import UUID

if TYPE_CHECKING:
    from src.domain.models.motion import Motion
    from src.domain.models.motion_state import MotionState


@runtime_checkable
class MotionRepositoryProtocol(Protocol):
    """Repository interface for motions.

    Implementations may use PostgreSQL, in-memory storage, or other backends.
    Callers never share a Motion instance across operations: a loaded motion
    is a private working copy until it is saved.
    """

    async def get(self, motion_id: UUID) -> Motion | None:
        """Load a motion.

        Returns:
            The motion, or None if no motion has that id.
        """
        ...

    async def save(self, motion: Motion) -> None:
        """Insert or replace a motion, including its ledger."""
        ...

    async def list_by_state(self, state: MotionState) -> list[Motion]:
        """List motions currently in a state, oldest first."""
        ...

"""Motion repository stub implementation.

This module provides an in-memory implementation of MotionRepositoryProtocol
for testing and development purposes. Motions are deep-copied on the way in
and out, so a caller's working copy is never shared with storage or with
another caller, the way a database-backed repository behaves.
"""

from __future__ import annotations

from copy import deepcopy
from uuid import UUID

from src.application.ports.motion_repository import MotionRepositoryProtocol
from src.domain.models.motion import Motion
from src.domain.models.motion_state import MotionState


class MotionRepositoryStub(MotionRepositoryProtocol):
    """In-memory stub for motion storage (testing only)."""

    def __init__(self) -> None:
        self._motions: dict[UUID, Motion] = {}
        self._save_count = 0

    def clear(self) -> None:
        """Clear all stored motions (for test cleanup)."""
        self._motions.clear()
        self._save_count = 0

    async def get(self, motion_id: UUID) -> Motion | None:
        motion = self._motions.get(motion_id)
        return deepcopy(motion) if motion is not None else None

    async def save(self, motion: Motion) -> None:
        self._motions[motion.id] = deepcopy(motion)
        self._save_count += 1

    async def list_by_state(self, state: MotionState) -> list[Motion]:
        matching = [deepcopy(m) for m in self._motions.values() if m.state is state]
        return sorted(matching, key=lambda m: m.created_at)

    # Testing helper methods

    @property
    def save_count(self) -> int:
        """Number of saves so far (for testing)."""
        return self._save_count

    def get_all(self) -> list[Motion]:
        return [deepcopy(m) for m in self._motions.values()]

"""Motion lifecycle service.

Use-case layer for the motion state machine. Two independent sources drive
a motion forward: member actions (second, object, withdraw, vote, comment)
and scheduled re-evaluations fired after deadlines pass. Both are funnelled
through the same aggregate and policy logic, one motion at a time.

Developer Golden Rules:
1. ONE WRITER PER MOTION - every operation on a motion holds its lock
2. CATCH UP FIRST - apply any overdue time-based transition before an action
3. SAVE, THEN NOTIFY, THEN SCHEDULE - side effects follow the saved state
4. FIRE AND FORGET - notification and scheduling failures are logged only

Usage:
    service = MotionLifecycleService(
        repository=repository,
        roster=roster,
        notifier=notifier,
        update_scheduler=update_scheduler,
        time_authority=time_authority,
    )

    motion = await service.create_motion(creator_id, "Buy a kettle", "...")
    await service.record_second(motion.id, member_id)

    # Called by MotionUpdateWorker when a scheduled check fires
    await service.scheduled_reevaluate(motion.id, MotionState.WAITING_SECOND)
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timedelta
from uuid import UUID

import structlog

from src.application.dtos.motion_tally import MotionTallyDTO
from src.application.ports.motion_notifier import MotionNotifierProtocol
from src.application.ports.motion_repository import MotionRepositoryProtocol
from src.application.ports.motion_update_scheduler import (
    MotionUpdateSchedulerProtocol,
)
from src.application.ports.roster import RosterProtocol
from src.application.ports.time_authority import TimeAuthorityProtocol
from src.config.motion_config import DEFAULT_MOTION_CONFIG, MotionConfig
from src.domain.errors.motion import (
    MemberInactiveError,
    MotionActionError,
    MotionNotFoundError,
)
from src.domain.models.membership import Member
from src.domain.models.motion import ActionOutcome, Motion, MotionTransition
from src.domain.models.motion_state import (
    MotionAction,
    MotionNotification,
    MotionState,
)
from src.domain.services.quorum import (
    PossibleVotesCounter,
    possible_votes,
    required_seconds_for_expedition,
    required_votes,
)

logger = structlog.get_logger(__name__)

# Applies one member action to a loaded motion
ActionApplier = Callable[[Motion, Member, datetime, PossibleVotesCounter], ActionOutcome]


class MotionLifecycleService:
    """Drives motions through seconding, discussion, voting and closing.

    Attributes:
        _repository: Motion persistence.
        _roster: Read-only membership lookups, queried at every evaluation.
        _notifier: Notification trigger delivery.
        _update_scheduler: Deferred re-evaluation requests.
        _time: Injected clock.
        _config: Lifecycle deadlines for new motions.
        _locks: One lock per motion id with an operation in flight.
        _lock_users: Operations holding or waiting on each lock.
    """

    def __init__(
        self,
        repository: MotionRepositoryProtocol,
        roster: RosterProtocol,
        notifier: MotionNotifierProtocol,
        update_scheduler: MotionUpdateSchedulerProtocol,
        time_authority: TimeAuthorityProtocol,
        config: MotionConfig | None = None,
    ) -> None:
        self._repository = repository
        self._roster = roster
        self._notifier = notifier
        self._update_scheduler = update_scheduler
        self._time = time_authority
        self._config = config or DEFAULT_MOTION_CONFIG
        self._locks: dict[UUID, asyncio.Lock] = {}
        self._lock_users: dict[UUID, int] = {}

    @asynccontextmanager
    async def _motion_lock(self, motion_id: UUID) -> AsyncIterator[None]:
        """Hold the motion's lock for one operation.

        The lock is dropped once no operation holds or waits on it, so ids
        that were never found and motions that went quiet keep no entry.
        """
        lock = self._locks.get(motion_id)
        if lock is None:
            lock = self._locks[motion_id] = asyncio.Lock()
        self._lock_users[motion_id] = self._lock_users.get(motion_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users[motion_id] - 1
            if remaining:
                self._lock_users[motion_id] = remaining
            else:
                del self._lock_users[motion_id]
                del self._locks[motion_id]

    def _possible_votes_counter(self, motion_id: UUID) -> PossibleVotesCounter:
        """Build a counter that reads the roster each time it is called."""

        def count(at: datetime) -> int:
            return possible_votes(
                self._roster.active_member_count(at),
                self._roster.conflicted_member_count(motion_id, at),
            )

        return count

    def _member(self, member_id: UUID, at: datetime) -> Member:
        return Member(
            member_id=member_id,
            is_active=self._roster.is_member_active(member_id, at),
        )

    async def _load(self, motion_id: UUID) -> Motion:
        motion = await self._repository.get(motion_id)
        if motion is None:
            raise MotionNotFoundError(motion_id)
        return motion

    # =========================================================================
    # Creation
    # =========================================================================

    async def create_motion(
        self,
        creator_id: UUID,
        title: str,
        text: str,
        *,
        expedited: bool = False,
        rationale: str | None = None,
    ) -> Motion:
        """Create a motion in WAITING_SECOND.

        Emits ``motion_created`` and schedules the end-of-seconding check.

        Raises:
            MemberInactiveError: If the creator has no active membership.
            ValueError: If the title is empty.
        """
        now = self._time.now()
        log = logger.bind(
            operation="create_motion",
            creator_id=str(creator_id),
            expedited=expedited,
        )

        motion = Motion.create(
            creator_id,
            title,
            text,
            created_at=now,
            expedited=expedited,
            rationale=rationale,
            timetable=self._config.timetable,
        )
        if not self._roster.is_member_active(creator_id, now):
            log.warning("motion_creation_rejected_member_inactive")
            raise MemberInactiveError(motion.id, creator_id, MotionAction.CREATE)

        async with self._motion_lock(motion.id):
            await self._commit(motion, [motion.creation_transition()], now)

        log.info("motion_created", motion_id=str(motion.id))
        return motion

    # =========================================================================
    # Member actions
    # =========================================================================

    async def record_second(self, motion_id: UUID, member_id: UUID) -> ActionOutcome:
        """Second a motion waiting for seconds.

        May move the motion to DISCUSSING, or straight to VOTING when it is
        expedited and enough members seconded.
        """
        return await self._apply_action(
            motion_id,
            member_id,
            MotionAction.SECOND,
            lambda motion, member, at, counter: motion.record_second(
                member, at, counter
            ),
        )

    async def record_objection(
        self, motion_id: UUID, member_id: UUID
    ) -> ActionOutcome:
        return await self._apply_action(
            motion_id,
            member_id,
            MotionAction.OBJECT,
            lambda motion, member, at, counter: motion.record_objection(member, at),
        )

    async def record_objection_withdrawal(
        self, motion_id: UUID, member_id: UUID
    ) -> ActionOutcome:
        return await self._apply_action(
            motion_id,
            member_id,
            MotionAction.WITHDRAW_OBJECTION,
            lambda motion, member, at, counter: motion.record_objection_withdrawal(
                member, at
            ),
        )

    async def record_vote(
        self, motion_id: UUID, member_id: UUID, in_favor: bool
    ) -> ActionOutcome:
        return await self._apply_action(
            motion_id,
            member_id,
            MotionAction.VOTE,
            lambda motion, member, at, counter: motion.record_vote(
                member, in_favor, at
            ),
        )

    async def record_comment(
        self, motion_id: UUID, member_id: UUID, body: str
    ) -> ActionOutcome:
        return await self._apply_action(
            motion_id,
            member_id,
            MotionAction.COMMENT,
            lambda motion, member, at, counter: motion.record_comment(
                member, body, at
            ),
        )

    async def _apply_action(
        self,
        motion_id: UUID,
        member_id: UUID,
        action: MotionAction,
        apply: ActionApplier,
    ) -> ActionOutcome:
        """Apply a member action under the motion's lock.

        Overdue time-based transitions are applied first. If the action is
        then rejected, those transitions are still saved but nothing of the
        action itself is.

        Raises:
            MotionNotFoundError: If the motion doesn't exist.
            MotionActionError: If the action is rejected.
        """
        log = logger.bind(
            operation=action.value,
            motion_id=str(motion_id),
            member_id=str(member_id),
        )

        async with self._motion_lock(motion_id):
            motion = await self._load(motion_id)
            now = self._time.now()
            counter = self._possible_votes_counter(motion_id)

            caught_up = motion.scheduled_update(now, counter)
            member = self._member(member_id, now)

            try:
                outcome = apply(motion, member, now, counter)
            except (MotionActionError, ValueError) as e:
                log.warning(
                    "motion_action_rejected",
                    state=motion.state.value,
                    error=type(e).__name__,
                    detail=str(e),
                )
                if caught_up:
                    await self._commit(motion, caught_up, now)
                raise

            transitions = [*caught_up, *outcome.transitions]
            await self._commit(motion, transitions, now)

        log.info(
            "motion_action_recorded",
            event_kind=outcome.event.kind.value,
            state=motion.state.value,
            transitions=len(transitions),
        )
        return ActionOutcome(event=outcome.event, transitions=tuple(transitions))

    # =========================================================================
    # Scheduled re-evaluation
    # =========================================================================

    async def scheduled_reevaluate(
        self,
        motion_id: UUID,
        expected_state: MotionState | None = None,
    ) -> list[MotionTransition]:
        """Apply whatever time-based transitions are due right now.

        Idempotent and safe under late, duplicated or out-of-order delivery.
        A check scheduled for a state the motion has already left is a no-op.

        Args:
            motion_id: Motion to re-evaluate.
            expected_state: State the check was scheduled for, if known.

        Returns:
            Transitions applied, oldest first.

        Raises:
            MotionNotFoundError: If the motion doesn't exist.
        """
        log = logger.bind(
            operation="scheduled_reevaluate",
            motion_id=str(motion_id),
            expected_state=expected_state.value if expected_state else None,
        )

        async with self._motion_lock(motion_id):
            motion = await self._load(motion_id)
            now = self._time.now()
            transitions = motion.scheduled_update(
                now,
                self._possible_votes_counter(motion_id),
                expected_state=expected_state,
            )
            if not transitions:
                log.debug("motion_reevaluation_no_change", state=motion.state.value)
                return []
            await self._commit(motion, transitions, now)

        log.info(
            "motion_reevaluated",
            state=motion.state.value,
            transitions=len(transitions),
        )
        return transitions

    # =========================================================================
    # Side effects
    # =========================================================================

    async def _commit(
        self,
        motion: Motion,
        transitions: list[MotionTransition],
        now: datetime,
    ) -> None:
        """Save the motion, notify each transition, schedule follow-up checks.

        Follow-up checks are requested only for the state the motion ended in.
        Intermediate states of a catch-up have already been left.
        """
        await self._repository.save(motion)
        if not transitions:
            return

        for transition in transitions:
            logger.info("motion_transitioned", **transition.to_dict())
            await self._notify(transition.notification, motion)

        final = transitions[-1]
        for check_at in final.check_times():
            delay = max(check_at - now, timedelta(0))
            await self._schedule(motion.id, delay, final.to_state)

    async def _notify(self, notification: MotionNotification, motion: Motion) -> None:
        try:
            await self._notifier.notify(notification, motion)
        except Exception as e:
            logger.warning(
                "motion_notification_failed",
                motion_id=str(motion.id),
                notification=notification.value,
                error=str(e),
            )

    async def _schedule(
        self, motion_id: UUID, delay: timedelta, expected_state: MotionState
    ) -> None:
        try:
            await self._update_scheduler.schedule_after(
                motion_id, delay, expected_state
            )
        except Exception as e:
            logger.warning(
                "motion_update_scheduling_failed",
                motion_id=str(motion_id),
                expected_state=expected_state.value,
                delay_seconds=delay.total_seconds(),
                error=str(e),
            )

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_motion(self, motion_id: UUID) -> Motion:
        """Load a motion as stored.

        Raises:
            MotionNotFoundError: If the motion doesn't exist.
        """
        return await self._load(motion_id)

    async def list_motions(self, state: MotionState) -> list[Motion]:
        return await self._repository.list_by_state(state)

    async def permit(
        self, motion_id: UUID, member_id: UUID, action: MotionAction
    ) -> bool:
        """Check whether the member may take the action right now.

        Evaluated against the motion as it stands once overdue time-based
        transitions are applied, without saving them.
        """
        motion = await self._load(motion_id)
        now = self._time.now()
        motion.scheduled_update(now, self._possible_votes_counter(motion_id))
        return motion.permit(action, self._member(member_id, now))

    async def get_tally(self, motion_id: UUID) -> MotionTallyDTO:
        """Summarize counts and thresholds for a motion.

        Raises:
            MotionNotFoundError: If the motion doesn't exist.
        """
        motion = await self._load(motion_id)
        if motion.possible_votes_at_close is not None:
            possible = motion.possible_votes_at_close
        else:
            possible = self._possible_votes_counter(motion_id)(self._time.now())

        return MotionTallyDTO(
            motion_id=motion.id,
            state=motion.state.value,
            seconds=motion.seconds_count,
            yes_votes=motion.yes_votes,
            no_votes=motion.no_votes,
            possible_votes=possible,
            required_votes=required_votes(possible),
            seconds_for_expedition=required_seconds_for_expedition(possible),
            abstains=motion.abstains,
            approved=motion.is_approved,
            passed=motion.is_passed(possible),
        )

"""Unit tests for MotionLifecycleService.

Tests:
- create_motion() saves, notifies and schedules the seconding deadline
- member actions are rejected atomically with typed errors
- overdue deadlines are applied before an action is judged
- notifier and scheduler failures never block a transition
- scheduled_reevaluate() is a no-op when nothing is due or the check is stale
- permit() and get_tally() read the caught-up motion without saving it
- per-motion locks are dropped once no operation needs them
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.application.services.motion_lifecycle_service import MotionLifecycleService
from src.config.motion_config import MotionConfig
from src.domain.errors.motion import (
    ActionNotPermittedInStateError,
    CreatorCannotSecondError,
    DuplicateActionError,
    MemberInactiveError,
    MotionNotFoundError,
)
from src.domain.models.motion_event import MotionEventKind
from src.domain.models.motion_state import (
    MotionAction,
    MotionNotification,
    MotionState,
)
from tests.helpers import MotionEngineHarness

HOURS = timedelta(hours=1)


class TestCreateMotion:
    @pytest.mark.asyncio
    async def test_create_saves_notifies_and_schedules(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()

        stored = await harness.reload(motion)
        assert stored.state is MotionState.WAITING_SECOND
        assert stored.created_at == harness.time.now()
        assert harness.notifier.get_notifications(motion.id) == [
            MotionNotification.MOTION_CREATED
        ]
        (request,) = harness.scheduler.get_requests(motion.id)
        assert request.delay == 48 * HOURS
        assert request.expected_state is MotionState.WAITING_SECOND

    @pytest.mark.asyncio
    async def test_inactive_creator_rejected(
        self, harness: MotionEngineHarness
    ) -> None:
        with pytest.raises(MemberInactiveError) as exc_info:
            await harness.service.create_motion(uuid4(), "Title", "Text")

        assert exc_info.value.action is MotionAction.CREATE
        assert harness.repository.save_count == 0
        assert harness.notifier.get_sent() == []

    @pytest.mark.asyncio
    async def test_empty_title_rejected(self, harness: MotionEngineHarness) -> None:
        with pytest.raises(ValueError):
            await harness.service.create_motion(harness.creator, "", "Text")

    @pytest.mark.asyncio
    async def test_deadlines_come_from_config(self) -> None:
        harness = MotionEngineHarness(config=MotionConfig(second_window_hours=12))

        motion = await harness.create_motion()

        assert motion.timetable.second_window == 12 * HOURS
        assert harness.scheduler.get_delays(motion.id) == [12 * HOURS]


class TestMemberActions:
    @pytest.mark.asyncio
    async def test_two_seconds_start_discussion(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        harness.scheduler.clear()

        first = await harness.service.record_second(motion.id, harness.others[0])
        second = await harness.service.record_second(motion.id, harness.others[1])

        assert not first.transitioned
        assert [t.to_state for t in second.transitions] == [MotionState.DISCUSSING]
        assert (await harness.reload(motion)).state is MotionState.DISCUSSING
        assert harness.notifier.get_notifications(motion.id)[-1] is (
            MotionNotification.DISCUSSION_BEGINNING
        )
        assert harness.scheduler.get_delays(motion.id) == [24 * HOURS, 48 * HOURS]
        assert {r.expected_state for r in harness.scheduler.get_requests()} == {
            MotionState.DISCUSSING
        }

    @pytest.mark.asyncio
    async def test_unknown_motion_raises(self, harness: MotionEngineHarness) -> None:
        with pytest.raises(MotionNotFoundError):
            await harness.service.record_second(uuid4(), harness.others[0])

    @pytest.mark.asyncio
    async def test_rejected_action_leaves_no_trace(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        saves = harness.repository.save_count

        with pytest.raises(CreatorCannotSecondError):
            await harness.service.record_second(motion.id, harness.creator)

        assert harness.repository.save_count == saves
        assert len((await harness.reload(motion)).ledger) == 0

    @pytest.mark.asyncio
    async def test_duplicate_vote_rejected(self, harness: MotionEngineHarness) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)
        harness.advance(hours=24)
        await harness.service.scheduled_reevaluate(motion.id)
        voter = harness.others[3]
        await harness.service.record_vote(motion.id, voter, in_favor=True)

        with pytest.raises(DuplicateActionError):
            await harness.service.record_vote(motion.id, voter, in_favor=False)

        stored = await harness.reload(motion)
        assert (stored.yes_votes, stored.no_votes) == (1, 0)

    @pytest.mark.asyncio
    async def test_former_member_rejected(self, harness: MotionEngineHarness) -> None:
        motion = await harness.create_motion()
        leaver = harness.others[0]
        harness.roster.end_membership(leaver, harness.time.now())
        harness.advance(hours=1)

        with pytest.raises(MemberInactiveError):
            await harness.service.record_second(motion.id, leaver)

    @pytest.mark.asyncio
    async def test_comment_recorded_with_body(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()

        outcome = await harness.service.record_comment(
            motion.id, harness.others[0], "I support this"
        )

        assert outcome.event.kind is MotionEventKind.COMMENT
        assert outcome.event.body == "I support this"

    @pytest.mark.asyncio
    async def test_empty_comment_rejected(self, harness: MotionEngineHarness) -> None:
        motion = await harness.create_motion()

        with pytest.raises(ValueError):
            await harness.service.record_comment(motion.id, harness.others[0], " ")


class TestCatchUpBeforeAction:
    """Overdue deadlines apply before the action is judged."""

    @pytest.mark.asyncio
    async def test_vote_after_missed_discussion_deadline(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)
        harness.advance(hours=25)

        outcome = await harness.service.record_vote(
            motion.id, harness.others[2], in_favor=True
        )

        (transition,) = outcome.transitions
        assert transition.to_state is MotionState.VOTING
        assert transition.occurred_at == motion.created_at + 24 * HOURS
        assert (await harness.reload(motion)).yes_votes == 1

    @pytest.mark.asyncio
    async def test_rejected_action_still_saves_catch_up(
        self, harness: MotionEngineHarness
    ) -> None:
        """A late second finds the motion closed; the close is kept."""
        motion = await harness.create_motion()
        harness.advance(hours=49)

        with pytest.raises(ActionNotPermittedInStateError) as exc_info:
            await harness.service.record_second(motion.id, harness.others[0])

        assert exc_info.value.state is MotionState.CLOSED
        stored = await harness.reload(motion)
        assert stored.is_failed
        assert stored.seconds_count == 0
        assert harness.notifier.get_notifications(motion.id)[-1] is (
            MotionNotification.MOTION_CLOSED
        )


class TestSideEffectFailures:
    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_block(
        self, harness: MotionEngineHarness
    ) -> None:
        harness.notifier.set_failing(True)

        motion = await harness.create_motion()
        await harness.second_by(motion, 2)

        assert (await harness.reload(motion)).state is MotionState.DISCUSSING
        assert harness.notifier.attempts == 2
        assert harness.notifier.get_sent() == []

    @pytest.mark.asyncio
    async def test_scheduler_failure_does_not_block(
        self, harness: MotionEngineHarness
    ) -> None:
        harness.scheduler.set_failing(True)

        motion = await harness.create_motion()

        assert (await harness.reload(motion)).state is MotionState.WAITING_SECOND
        assert harness.notifier.get_notifications(motion.id) == [
            MotionNotification.MOTION_CREATED
        ]

    @pytest.mark.asyncio
    async def test_repository_failure_propagates(
        self, harness: MotionEngineHarness
    ) -> None:
        repository = AsyncMock()
        repository.save.side_effect = RuntimeError("database unavailable")
        service = MotionLifecycleService(
            repository=repository,
            roster=harness.roster,
            notifier=harness.notifier,
            update_scheduler=harness.scheduler,
            time_authority=harness.time,
        )

        with pytest.raises(RuntimeError, match="database unavailable"):
            await service.create_motion(harness.creator, "Title", "Text")

        assert harness.notifier.get_sent() == []


class TestMotionLocks:
    """Per-motion locks live only while an operation is in flight."""

    @pytest.mark.asyncio
    async def test_unknown_ids_leave_no_locks(
        self, harness: MotionEngineHarness
    ) -> None:
        for _ in range(500):
            with pytest.raises(MotionNotFoundError):
                await harness.service.record_second(uuid4(), harness.others[0])
            with pytest.raises(MotionNotFoundError):
                await harness.service.scheduled_reevaluate(uuid4())

        assert harness.service._locks == {}
        assert harness.service._lock_users == {}

    @pytest.mark.asyncio
    async def test_rejected_action_releases_lock(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()

        with pytest.raises(CreatorCannotSecondError):
            await harness.second_by_member(motion, harness.creator)

        assert harness.service._locks == {}

    @pytest.mark.asyncio
    async def test_closed_motion_keeps_no_lock(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)

        stored = await harness.run_until(motion, 80)

        assert stored.state is MotionState.CLOSED
        assert harness.service._locks == {}

    @pytest.mark.asyncio
    async def test_lock_held_during_concurrent_operations(
        self, harness: MotionEngineHarness, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        motion = await harness.create_motion()
        load = harness.repository.get
        users_seen: list[dict] = []

        async def get_and_record(motion_id):
            users_seen.append(dict(harness.service._lock_users))
            return await load(motion_id)

        monkeypatch.setattr(harness.repository, "get", get_and_record)

        await asyncio.gather(
            harness.second_by_member(motion, harness.others[0]),
            harness.second_by_member(motion, harness.others[1]),
            harness.service.scheduled_reevaluate(motion.id),
        )

        assert len(users_seen) == 3
        assert all(users.get(motion.id, 0) >= 1 for users in users_seen)
        assert harness.service._locks == {}
        assert (await harness.reload(motion)).state is MotionState.DISCUSSING


class TestScheduledReevaluate:
    @pytest.mark.asyncio
    async def test_nothing_due_saves_nothing(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        saves = harness.repository.save_count
        harness.advance(hours=47)

        assert await harness.service.scheduled_reevaluate(motion.id) == []
        assert harness.repository.save_count == saves

    @pytest.mark.asyncio
    async def test_stale_check_is_no_op(self, harness: MotionEngineHarness) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)
        harness.advance(hours=100)

        result = await harness.service.scheduled_reevaluate(
            motion.id, MotionState.WAITING_SECOND
        )

        assert result == []
        assert (await harness.reload(motion)).state is MotionState.DISCUSSING

    @pytest.mark.asyncio
    async def test_unknown_motion_raises(self, harness: MotionEngineHarness) -> None:
        with pytest.raises(MotionNotFoundError):
            await harness.service.scheduled_reevaluate(uuid4())

    @pytest.mark.asyncio
    async def test_follow_ups_only_for_final_state(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)
        harness.scheduler.clear()
        harness.advance(hours=30)

        await harness.service.scheduled_reevaluate(motion.id)

        (request,) = harness.scheduler.get_requests(motion.id)
        assert request.expected_state is MotionState.VOTING
        # Voting began at 24h and ends at 72h
        assert request.delay == 42 * HOURS


class TestQueries:
    @pytest.mark.asyncio
    async def test_permit_reads_caught_up_motion_without_saving(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        member = harness.others[0]
        assert await harness.service.permit(motion.id, member, MotionAction.SECOND)

        harness.advance(hours=48)

        assert not await harness.service.permit(motion.id, member, MotionAction.SECOND)
        assert await harness.service.permit(motion.id, member, MotionAction.SEE)
        assert (await harness.reload(motion)).state is MotionState.WAITING_SECOND

    @pytest.mark.asyncio
    async def test_permit_for_inactive_member(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        assert not await harness.service.permit(motion.id, uuid4(), MotionAction.SEE)

    @pytest.mark.asyncio
    async def test_tally_while_voting(self, harness: MotionEngineHarness) -> None:
        motion = await harness.create_motion()
        await harness.second_by(motion, 2)
        harness.advance(hours=24)
        for member_id in harness.others[:6]:
            await harness.service.record_vote(motion.id, member_id, in_favor=True)

        tally = await harness.service.get_tally(motion.id)

        assert tally.state == "voting"
        assert tally.possible_votes == 10
        assert tally.required_votes == 6
        assert tally.seconds_for_expedition == 4
        assert tally.votes_cast == 6
        assert tally.passed
        assert not tally.approved
        assert tally.abstains is None

    @pytest.mark.asyncio
    async def test_tally_after_close_uses_possible_votes_at_close(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        harness.advance(hours=48)
        await harness.service.scheduled_reevaluate(motion.id)
        harness.roster.add_members(5, harness.time.now())

        tally = await harness.service.get_tally(motion.id)

        assert tally.possible_votes == 10
        assert tally.abstains == 10
        assert tally.to_dict()["state"] == "closed"

    @pytest.mark.asyncio
    async def test_conflicted_members_reduce_possible_votes(
        self, harness: MotionEngineHarness
    ) -> None:
        motion = await harness.create_motion()
        harness.roster.declare_conflict(motion.id, harness.others[0])

        tally = await harness.service.get_tally(motion.id)

        assert tally.possible_votes == 9

    @pytest.mark.asyncio
    async def test_list_motions_by_state(self, harness: MotionEngineHarness) -> None:
        waiting = await harness.create_motion()
        discussed = await harness.create_motion()
        await harness.second_by(discussed, 2)

        listed = await harness.service.list_motions(MotionState.WAITING_SECOND)

        assert [m.id for m in listed] == [waiting.id]

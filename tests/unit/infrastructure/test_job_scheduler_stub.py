"""Unit tests for JobSchedulerStub.

Due checks follow the injected clock, so these tests move a fake clock
instead of waiting.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from src.domain.models.scheduled_job import JobStatus, ScheduledJob
from src.infrastructure.stubs.job_scheduler_stub import JobSchedulerStub
from tests.helpers import FakeTimeAuthority


@pytest.fixture
def stub(fake_time_authority: FakeTimeAuthority) -> JobSchedulerStub:
    """Create a JobSchedulerStub on the fake clock."""
    return JobSchedulerStub(time_authority=fake_time_authority)


def _in(fake_time: FakeTimeAuthority, hours: float) -> datetime:
    return fake_time.now() + timedelta(hours=hours)


class TestSchedule:
    @pytest.mark.asyncio
    async def test_schedule_stores_pending_job(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        job_id = await stub.schedule(
            "motion_state_update", {"k": "v"}, _in(fake_time_authority, 1)
        )

        job = await stub.get_job(job_id)
        assert job is not None
        assert job.status == JobStatus.PENDING
        assert job.created_at == fake_time_authority.now()
        assert stub.get_pending_count() == 1

    @pytest.mark.asyncio
    async def test_naive_run_at_raises(self, stub: JobSchedulerStub) -> None:
        with pytest.raises(ValueError, match="timezone-aware"):
            await stub.schedule("motion_state_update", {}, datetime(2026, 1, 1))


class TestPendingJobs:
    @pytest.mark.asyncio
    async def test_only_due_jobs_returned(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        await stub.schedule("motion_state_update", {}, _in(fake_time_authority, 48))

        assert await stub.get_pending_jobs() == []

        fake_time_authority.advance(hours=48)
        assert len(await stub.get_pending_jobs()) == 1

    @pytest.mark.asyncio
    async def test_oldest_first_and_limited(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        late = await stub.schedule("t", {}, _in(fake_time_authority, 3))
        early = await stub.schedule("t", {}, _in(fake_time_authority, 1))
        await stub.schedule("t", {}, _in(fake_time_authority, 2))
        fake_time_authority.advance(hours=5)

        jobs = await stub.get_pending_jobs(limit=2)

        assert [j.id for j in jobs][0] == early
        assert late not in [j.id for j in jobs]


class TestClaimAndComplete:
    @pytest.mark.asyncio
    async def test_claim_not_due_returns_none(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        job_id = await stub.schedule("t", {}, _in(fake_time_authority, 1))
        assert await stub.claim_job(job_id) is None

    @pytest.mark.asyncio
    async def test_job_claimed_once(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        job_id = await stub.schedule("t", {}, fake_time_authority.now())

        claimed = await stub.claim_job(job_id)
        assert claimed is not None
        assert claimed.attempts == 1
        assert claimed.status == JobStatus.PROCESSING
        assert await stub.claim_job(job_id) is None

    @pytest.mark.asyncio
    async def test_mark_completed(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        job_id = await stub.schedule("t", {}, fake_time_authority.now())
        await stub.claim_job(job_id)

        await stub.mark_completed(job_id)

        job = await stub.get_job(job_id)
        assert job is not None and job.status == JobStatus.COMPLETED
        assert job_id in stub.get_completed_jobs()

    @pytest.mark.asyncio
    async def test_unknown_job_raises(self, stub: JobSchedulerStub) -> None:
        with pytest.raises(KeyError):
            await stub.mark_completed(uuid4())
        with pytest.raises(KeyError):
            await stub.mark_failed(uuid4(), "boom")


class TestRetryAndDeadLetter:
    @pytest.mark.asyncio
    async def test_failed_job_retried_until_attempts_run_out(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        job_id = await stub.schedule("t", {"n": 1}, fake_time_authority.now())

        for _ in range(ScheduledJob.MAX_ATTEMPTS - 1):
            await stub.claim_job(job_id)
            assert await stub.mark_failed(job_id, "boom") is None
            job = await stub.get_job(job_id)
            assert job is not None and job.status == JobStatus.PENDING

        await stub.claim_job(job_id)
        dead = await stub.mark_failed(job_id, "boom")

        assert dead is not None
        assert dead.original_job_id == job_id
        assert dead.attempts == ScheduledJob.MAX_ATTEMPTS
        assert await stub.get_job(job_id) is None
        assert await stub.get_dlq_depth() == 1

    @pytest.mark.asyncio
    async def test_dlq_page(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        for _ in range(2):
            job_id = await stub.schedule("t", {}, fake_time_authority.now())
            for _ in range(ScheduledJob.MAX_ATTEMPTS):
                await stub.claim_job(job_id)
                await stub.mark_failed(job_id, "boom")
            fake_time_authority.advance(seconds=1)

        page, total = await stub.get_dlq_jobs(limit=1)

        assert total == 2
        assert len(page) == 1


class TestClear:
    @pytest.mark.asyncio
    async def test_clear(
        self, stub: JobSchedulerStub, fake_time_authority: FakeTimeAuthority
    ) -> None:
        await stub.schedule("t", {}, fake_time_authority.now())
        stub.clear()
        assert stub.get_all_jobs() == []

"""
Pytest configuration and shared fixtures for motion lifecycle tests.

Testing Standards:
- Async tests run under pytest-asyncio (auto mode enabled in pyproject.toml)
- Unit tests go in tests/unit/<layer>/
- Integration tests go in tests/integration/
- Time is always driven by FakeTimeAuthority, never by sleeping
"""

from collections.abc import Iterator
from datetime import datetime, timezone
from uuid import uuid4

import pytest
import structlog

from src.bootstrap.motion_engine import reset_motion_engine_dependencies
from src.domain.models.membership import Member
from src.domain.models.motion import Motion
from tests.helpers import FakeTimeAuthority, MotionEngineHarness

T0 = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from src import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """A fake clock frozen at 2026-01-01T00:00:00 UTC."""
    return FakeTimeAuthority(frozen_at=T0)


@pytest.fixture
def harness() -> MotionEngineHarness:
    """Lifecycle service over stubs, ten active members."""
    return MotionEngineHarness(member_count=10)


@pytest.fixture
def creator() -> Member:
    return Member(member_id=uuid4(), is_active=True)


@pytest.fixture
def motion(creator: Member) -> Motion:
    """A fresh non-expedited motion created at T0."""
    return Motion.create(creator.member_id, "Title", "Text", created_at=T0)


@pytest.fixture(autouse=True)
def _reset_bootstrap() -> Iterator[None]:
    """Keep bootstrap singletons and logging config from leaking between tests."""
    yield
    reset_motion_engine_dependencies()
    structlog.reset_defaults()

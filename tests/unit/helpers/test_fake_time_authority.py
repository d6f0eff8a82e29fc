"""Tests for the FakeTimeAuthority test helper.

Every lifecycle test trusts this clock, so it is tested on its own.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.application.ports.time_authority import TimeAuthorityProtocol
from tests.helpers.fake_time_authority import DEFAULT_FAKE_TIME, FakeTimeAuthority


class TestFakeTimeAuthority:
    def test_implements_protocol(self) -> None:
        assert isinstance(FakeTimeAuthority(), TimeAuthorityProtocol)

    def test_frozen_until_advanced(self) -> None:
        fake_time = FakeTimeAuthority()
        assert fake_time.now() == fake_time.now() == DEFAULT_FAKE_TIME

    def test_naive_start_treated_as_utc(self) -> None:
        fake_time = FakeTimeAuthority(frozen_at=datetime(2026, 3, 1))
        assert fake_time.now().tzinfo == timezone.utc

    def test_advance_by_seconds_delta_or_units(self) -> None:
        fake_time = FakeTimeAuthority()

        fake_time.advance(seconds=60)
        fake_time.advance(delta=timedelta(hours=1))
        result = fake_time.advance(days=2)

        assert result == DEFAULT_FAKE_TIME + timedelta(days=2, hours=1, seconds=60)

    def test_advance_requires_amount(self) -> None:
        with pytest.raises(ValueError, match="Must provide"):
            FakeTimeAuthority().advance()

    def test_cannot_go_backwards(self) -> None:
        with pytest.raises(ValueError, match="backwards"):
            FakeTimeAuthority().advance(hours=-1)

    def test_set_time_can_move_backwards(self) -> None:
        fake_time = FakeTimeAuthority()
        target = datetime(2025, 6, 1, tzinfo=timezone.utc)

        fake_time.set_time(target)

        assert fake_time.now() == target

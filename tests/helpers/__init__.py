"""Test helpers for motion lifecycle tests.

Helpers:
    FakeTimeAuthority: Controllable time authority for deterministic tests
    MotionEngineHarness: Lifecycle service wired to in-memory stubs

Usage:
    from tests.helpers import FakeTimeAuthority, MotionEngineHarness
"""

from tests.helpers.fake_time_authority import FakeTimeAuthority
from tests.helpers.motion_engine_harness import MotionEngineHarness

__all__ = ["FakeTimeAuthority", "MotionEngineHarness"]

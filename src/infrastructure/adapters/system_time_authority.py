"""System clock adapter for TimeAuthorityProtocol.

The only place in the codebase that reads the wall clock.
"""

from __future__ import annotations

from datetime import datetime, timezone

from src.application.ports.time_authority import TimeAuthorityProtocol


class SystemTimeAuthority(TimeAuthorityProtocol):
    """Time authority backed by the host clock, always in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

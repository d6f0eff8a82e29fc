"""Time Authority Protocol - interface for consistent timestamp provisioning.

Every deadline in the motion lifecycle is measured against this clock.
Services MUST inject a TimeAuthorityProtocol implementation instead of
reading the host clock directly, so tests can drive days of deliberation
with a fake clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class TimeAuthorityProtocol(ABC):
    """Abstract interface for time authority.

    For production:
        Use SystemTimeAuthority from src/infrastructure/adapters/

    For testing:
        Use FakeTimeAuthority from tests/helpers/fake_time_authority.py
    """

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware UTC datetime."""
        ...

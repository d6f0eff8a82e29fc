"""Bootstrap wiring for logging configuration.

The motion engine runs as a long-lived worker or inside a host process.
Either way logging is configured once, before the first service logs.
"""

from __future__ import annotations

import os

from src.infrastructure.observability import configure_structlog as _configure_structlog

# Selects JSON ("production") or console ("development") output
ENVIRONMENT_ENV = "MOTION_ENVIRONMENT"
DEFAULT_ENVIRONMENT = "production"


def configure_structlog(environment: str | None = None) -> str:
    """Configure structlog, falling back to MOTION_ENVIRONMENT.

    Returns:
        The environment that was applied.
    """
    resolved = environment or os.getenv(ENVIRONMENT_ENV, DEFAULT_ENVIRONMENT)
    _configure_structlog(environment=resolved)
    return resolved


__all__ = ["configure_structlog"]

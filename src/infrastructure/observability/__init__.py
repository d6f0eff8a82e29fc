"""Observability infrastructure: structured logging and correlation ids.

Usage:
    from src.infrastructure.observability import (
        configure_structlog,
        generate_correlation_id,
        set_correlation_id,
    )

    configure_structlog(environment="production")
    set_correlation_id(generate_correlation_id())
"""

from src.infrastructure.observability.correlation import (
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from src.infrastructure.observability.logging import configure_structlog

__all__: list[str] = [
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
]

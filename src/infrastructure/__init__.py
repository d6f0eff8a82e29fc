"""
Infrastructure layer - External adapters for the motion lifecycle engine.

This layer contains:
- Adapters (system clock, job-queue update scheduler, logging notifier)
- In-memory stubs for development and testing
- Observability (structlog configuration, correlation ids)

IMPORT RULES:
- CAN import from: domain, application
- Implements ports defined in application layer
"""

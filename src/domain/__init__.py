"""
Domain layer - Pure business logic for the motion lifecycle.

This layer contains:
- The Motion aggregate and its append-only ledger
- Motion states, actions and notifications
- Per-state policies and quorum arithmetic
- Domain exceptions

CRITICAL: This layer must NOT import from application, infrastructure, or bootstrap.
Only stdlib and typing imports are allowed.
"""

from src.domain.exceptions import AssemblyError

__all__: list[str] = ["AssemblyError"]

"""
Application layer - Use cases and orchestration for the motion lifecycle.

This layer contains:
- The motion lifecycle service (member actions, scheduled re-evaluation)
- The worker that drains scheduled motion updates
- Port definitions (abstract interfaces for infrastructure)

IMPORT RULES:
- CAN import from: domain
- CANNOT import from: infrastructure, bootstrap
"""

"""
Assembly - Motion Lifecycle Engine

Members propose motions, second them, discuss and object, then vote.
Each motion resolves to approved or failed through a small fixed state
machine that is driven both by member actions and by the passage of time.

Lifecycle:
- waitingsecond -> discussing -> voting -> closed
- Expedited motions may skip discussing
- Motions that never gather support close as failed
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

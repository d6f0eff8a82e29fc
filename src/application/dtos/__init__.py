"""Application-layer data transfer objects."""

from src.application.dtos.motion_tally import MotionTallyDTO

__all__ = ["MotionTallyDTO"]

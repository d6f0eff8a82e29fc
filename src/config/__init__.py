"""Configuration module for the motion lifecycle engine.

Available Configurations:
- MotionConfig: Lifecycle deadlines, seconding threshold and update worker
"""

from src.config.motion_config import (
    DEFAULT_MOTION_CONFIG,
    TEST_MOTION_CONFIG,
    MotionConfig,
)

__all__ = [
    "MotionConfig",
    "DEFAULT_MOTION_CONFIG",
    "TEST_MOTION_CONFIG",
]

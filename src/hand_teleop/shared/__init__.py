"""
Shared types and constants for hand teleoperation.

This module contains shared definitions used across multiple components
"""

from hand_teleop.shared.constants import (
    MAX_SERVO_VALUE,
    MIN_SERVO_VALUE,
    NUM_LANDMARKS,
    SERVO_MAX_VALUE_OVERRIDES,
    SERVO_NAMES,
)

__all__ = [
    # Constants
    "MAX_SERVO_VALUE",
    "MIN_SERVO_VALUE",
    "NUM_LANDMARKS",
    "SERVO_MAX_VALUE_OVERRIDES",
    "SERVO_NAMES",
]

"""
hand_teleop - Webcam hand tracking to robotic hand servo commands.

This package provides:
- formula: the formula language mapping hand landmarks to servo positions
- control: servo control loop, robot transport and config persistence
- shared: Shared types and constants
"""

__version__ = "0.1.0"

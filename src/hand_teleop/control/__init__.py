"""
Servo control layer: formula registry, robot transport and config persistence.
"""

from hand_teleop.control.config import get_default_config, load_config, save_config
from hand_teleop.control.robot_client import RobotClient, RobotConnectionError
from hand_teleop.control.servo_control import ServoControl

__all__ = [
    "RobotClient",
    "RobotConnectionError",
    "ServoControl",
    "get_default_config",
    "load_config",
    "save_config",
]

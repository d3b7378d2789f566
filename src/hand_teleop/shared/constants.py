"""
Constants for the hand teleoperation project.

This module defines all shared constants used across the hand_teleop package.
NOTE: Adjust these constants if your robot hand exposes a different servo layout.
"""

# ====================================================================================
# Network Config
# ====================================================================================

DEFAULT_ROBOT_IP = ""
API_ENDPOINT = "/api/servos"
DEFAULT_REQUEST_TIMEOUT = 2.0  # seconds

DEFAULT_MIN_CHANGE = 3  # Minimum position delta before a servo is re-sent
DEFAULT_SEND_INTERVAL = 0.4  # seconds
ROBOT_STATUS_UPDATE_INTERVAL = 2.0  # seconds

# ====================================================================================
# Servo Config
# ====================================================================================

# Servo id to display name mapping, in the order the robot hand exposes them
SERVO_NAMES: dict[int, str] = {
    1: "Pink Adductor",
    2: "Pink Flexor",
    3: "Ring Adductor",
    4: "Ring Flexor",
    5: "Middle Flexor",
    6: "Index Adductor",
    7: "Index Flexor",
    8: "Thumb Rotator",
    9: "Thumb Flexor",
    10: "Wrist Flexor",
    11: "Wrist Rotator",
}

MIN_SERVO_VALUE = 0
MAX_SERVO_VALUE = 1023

# The wrist rotator reports a raw angle, remapped on the robot side
WRIST_ROTATOR_SERVO_ID = 11
ROTATION_SERVO_MAX_VALUE = 4095

# Servo id to max value, for servos that do not use MAX_SERVO_VALUE
SERVO_MAX_VALUE_OVERRIDES: dict[int, int] = {
    WRIST_ROTATOR_SERVO_ID: ROTATION_SERVO_MAX_VALUE,
}

# ====================================================================================
# Hand Tracking
# ====================================================================================

DEFAULT_HAND = "right"

# ====================================================================================
# Landmark Indices
# ====================================================================================

LANDMARK_WRIST = 0
# Thumb
LANDMARK_THUMB_CMC = 1
LANDMARK_THUMB_MCP = 2
LANDMARK_THUMB_IP = 3
LANDMARK_THUMB_TIP = 4
# Index
LANDMARK_INDEX_MCP = 5
LANDMARK_INDEX_PIP = 6
LANDMARK_INDEX_DIP = 7
LANDMARK_INDEX_TIP = 8
# Middle
LANDMARK_MIDDLE_MCP = 9
LANDMARK_MIDDLE_PIP = 10
LANDMARK_MIDDLE_DIP = 11
LANDMARK_MIDDLE_TIP = 12
# Ring
LANDMARK_RING_MCP = 13
LANDMARK_RING_PIP = 14
LANDMARK_RING_DIP = 15
LANDMARK_RING_TIP = 16
# Pinky
LANDMARK_PINKY_MCP = 17
LANDMARK_PINKY_PIP = 18
LANDMARK_PINKY_DIP = 19
LANDMARK_PINKY_TIP = 20

NUM_LANDMARKS = 21
MIN_LANDMARK_ID = LANDMARK_WRIST
MAX_LANDMARK_ID = LANDMARK_PINKY_TIP

LANDMARK_NAMES: list[str] = [
    "wrist",
    "thumb_cmc",
    "thumb_mcp",
    "thumb_ip",
    "thumb_tip",
    "index_mcp",
    "index_pip",
    "index_dip",
    "index_tip",
    "middle_mcp",
    "middle_pip",
    "middle_dip",
    "middle_tip",
    "ring_mcp",
    "ring_pip",
    "ring_dip",
    "ring_tip",
    "pinky_mcp",
    "pinky_pip",
    "pinky_dip",
    "pinky_tip",
]

# Reference direction the palm normal is measured against by rotationY()
PALM_REFERENCE_DIRECTION: tuple[float, float, float] = (0.0, -1.0, 0.0)

# ===================================================================================
# File Paths
# ====================================================================================

DEFAULT_CONFIG_PATH = "data/config/robot-hand-config.json"
CONFIG_PATH_ENV_VAR = "HAND_TELEOP_CONFIG_PATH"

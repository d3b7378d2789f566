"""
Pytest fixtures for hand teleoperation tests.

Provides landmark frames, configs and a mocked robot client.
Fixtures use the project's actual constants so tests follow the
configured servo layout.
"""

import json
from unittest.mock import MagicMock

import numpy as np
import pytest

from hand_teleop.control.robot_client import RobotClient
from hand_teleop.shared.constants import (
    LANDMARK_NAMES,
    NUM_LANDMARKS,
    SERVO_MAX_VALUE_OVERRIDES,
    WRIST_ROTATOR_SERVO_ID,
)
from hand_teleop.shared.types import Landmark

# =============================================================================
# Landmark Generators
# =============================================================================


def make_landmarks(points: np.ndarray) -> list[Landmark]:
    """
    Build a landmark frame from an (N, 3) array of world coordinates.

    Screen coordinates are derived from the world ones so drawing code has
    something plausible; formulas never read them.
    """
    return [
        Landmark(
            x=1.0 - float(p[0]),
            y=float(p[1]),
            z=float(p[2]),
            x3D=float(p[0]),
            y3D=float(p[1]),
            z3D=float(p[2]),
            name=LANDMARK_NAMES[i],
        )
        for i, p in enumerate(points)
    ]


def landmarks_to_json(landmarks: list[Landmark]) -> list[dict]:
    return [lm.model_dump(by_alias=True) for lm in landmarks]


# =============================================================================
# Landmark Fixtures
# =============================================================================


@pytest.fixture
def sample_points():
    """World coordinates for a neutral, flat right hand (z = 0 plane)."""
    points = np.zeros((NUM_LANDMARKS, 3))

    # Wrist
    points[0] = [0.5, 0.8, 0.0]

    # Thumb
    points[1] = [0.4, 0.7, 0.0]  # CMC
    points[2] = [0.35, 0.6, 0.0]  # MCP
    points[3] = [0.3, 0.5, 0.0]  # IP
    points[4] = [0.25, 0.4, 0.0]  # TIP

    # Index finger
    points[5] = [0.45, 0.6, 0.0]  # MCP
    points[6] = [0.45, 0.45, 0.0]  # PIP
    points[7] = [0.45, 0.35, 0.0]  # DIP
    points[8] = [0.45, 0.25, 0.0]  # TIP

    # Middle finger
    points[9] = [0.5, 0.55, 0.0]
    points[10] = [0.5, 0.4, 0.0]
    points[11] = [0.5, 0.3, 0.0]
    points[12] = [0.5, 0.2, 0.0]

    # Ring finger
    points[13] = [0.55, 0.6, 0.0]
    points[14] = [0.55, 0.45, 0.0]
    points[15] = [0.55, 0.35, 0.0]
    points[16] = [0.55, 0.25, 0.0]

    # Pinky
    points[17] = [0.6, 0.65, 0.0]
    points[18] = [0.6, 0.55, 0.0]
    points[19] = [0.6, 0.45, 0.0]
    points[20] = [0.6, 0.4, 0.0]

    return points


@pytest.fixture
def landmark_factory():
    """Builds a frame from an (N, 3) array of world coordinates."""
    return make_landmarks


@pytest.fixture
def sample_landmarks(sample_points):
    """Neutral hand as a landmark frame."""
    return make_landmarks(sample_points)


@pytest.fixture
def pinch_landmarks(sample_points):
    """Thumb tip touching the index tip."""
    points = sample_points.copy()
    points[4] = points[8]
    return make_landmarks(points)


@pytest.fixture
def random_landmarks():
    """Random but reproducible frame."""
    rng = np.random.default_rng(42)
    return make_landmarks(rng.random((NUM_LANDMARKS, 3)))


@pytest.fixture
def landmarks_file(tmp_path, sample_landmarks):
    """A single frame written as JSON."""
    filepath = tmp_path / "frame.json"
    filepath.write_text(json.dumps(landmarks_to_json(sample_landmarks)))
    return filepath


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def sample_config_data():
    """Config document as written by the browser front-end."""
    return {
        "robotIp": "192.168.1.50",
        "minChangeThreshold": 3,
        "sendInterval": 0.4,
        "handToTrack": "right",
        "formulas": {
            "1": "map(distance(4, 8), 0, 0.5, 0, 1000)",
            "7": "Ly[8] * 1000",
            str(WRIST_ROTATOR_SERVO_ID): "rotationY(0, 5, 17) * 20",
        },
    }


@pytest.fixture
def temp_config_file(tmp_path, sample_config_data):
    """Create a temporary config file with sample data."""
    filepath = tmp_path / "robot-hand-config.json"
    with open(filepath, "w") as f:
        json.dump(sample_config_data, f)
    return filepath


@pytest.fixture
def project_max_value_overrides():
    """Access to actual SERVO_MAX_VALUE_OVERRIDES from your constants."""
    return SERVO_MAX_VALUE_OVERRIDES.copy()


# =============================================================================
# Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_client():
    """RobotClient stand-in that records calls without network access."""
    client = MagicMock(spec=RobotClient)
    client.robot_ip = "192.168.1.50"
    client.get_status.return_value = [{"id": 1, "position": 0}]
    return client

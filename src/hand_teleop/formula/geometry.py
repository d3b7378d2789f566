"""
Geometry helpers behind the built-in formula functions.

All calculations use the metric (3D) landmark coordinates.
"""

from collections.abc import Sequence

import numpy as np

from hand_teleop.formula.errors import FormulaEvaluationError
from hand_teleop.shared.constants import PALM_REFERENCE_DIRECTION
from hand_teleop.shared.types import Landmark


def _as_vector(landmark: Landmark) -> np.ndarray:
    return np.array(landmark.position_3d, dtype=float)


def distance(landmark1: Landmark, landmark2: Landmark) -> float:
    """Euclidean distance between two landmarks."""
    return float(np.linalg.norm(_as_vector(landmark1) - _as_vector(landmark2)))


def plane_normal_angle(
    origin: Landmark,
    landmark1: Landmark,
    landmark2: Landmark,
    direction: Sequence[float] = PALM_REFERENCE_DIRECTION,
) -> float:
    """
    Angle in degrees between the normal of the plane through three landmarks
    and a reference direction.

    The normal is ``(landmark1 - origin) x (landmark2 - origin)``, normalized.
    With wrist, index MCP and pinky MCP this is the palm normal.

    Raises:
        FormulaEvaluationError: If the landmarks are collinear (no plane).
    """
    o = _as_vector(origin)
    normal = np.cross(_as_vector(landmark1) - o, _as_vector(landmark2) - o)
    length = np.linalg.norm(normal)
    if length == 0.0:
        raise FormulaEvaluationError(
            "Landmarks are collinear, cannot compute plane normal"
        )
    cos_theta = np.dot(normal / length, np.asarray(direction, dtype=float))
    # Rounding can push |cos| just past 1
    cos_theta = np.clip(cos_theta, -1.0, 1.0)
    return float(np.degrees(np.arccos(cos_theta)))


def map_range(
    value: float, in_min: float, in_max: float, out_min: float, out_max: float
) -> float:
    """
    Linearly map value from [in_min, in_max] to [out_min, out_max].

    Values at or beyond either input bound return the matching output bound.
    """
    if value <= in_min:
        return out_min
    if value >= in_max:
        return out_max
    normalized = (value - in_min) / (in_max - in_min)
    return out_min + normalized * (out_max - out_min)

"""
Type definitions and Pydantic models for hand teleoperation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from hand_teleop.shared.constants import (
    DEFAULT_HAND,
    DEFAULT_MIN_CHANGE,
    DEFAULT_ROBOT_IP,
    DEFAULT_SEND_INTERVAL,
    MAX_SERVO_VALUE,
    SERVO_MAX_VALUE_OVERRIDES,
)

# ====================================================================================
# Hand Tracking Models
# ====================================================================================


class Landmark(BaseModel):
    """
    A single tracked hand landmark.

    ``x``/``y`` are mirrored, normalized screen coordinates used for drawing only.
    ``x3d``/``y3d``/``z3d`` are metric world coordinates; every formula reads these.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    x: float = Field(0.0, description="Mirrored screen-space x (0..1)")
    y: float = Field(0.0, description="Screen-space y (0..1)")
    z: float = Field(0.0, description="Relative depth reported by the detector")
    x3d: float = Field(..., alias="x3D", description="World-space x in meters")
    y3d: float = Field(..., alias="y3D", description="World-space y in meters")
    z3d: float = Field(..., alias="z3D", description="World-space z in meters")
    name: str | None = Field(None, description="Anatomical landmark name")

    @property
    def position_3d(self) -> tuple[float, float, float]:
        """World-space coordinates as an (x, y, z) tuple."""
        return (self.x3d, self.y3d, self.z3d)


# ====================================================================================
# Servo Models
# ====================================================================================


class ServoDefinition(BaseModel):
    """
    Static description of one servo on the robot hand.
    """

    id: int = Field(..., ge=1, description="Servo identifier used by the robot API")
    name: str = Field(..., description="Human readable servo name")
    max_value: int = Field(
        MAX_SERVO_VALUE, ge=0, description="Upper bound for commanded positions"
    )


class ServoPosition(BaseModel):
    """
    One element of the position payload posted to the robot hand.
    """

    id: int = Field(..., ge=1)
    position: int


# ===================================================================================
# Configuration Models
# ===================================================================================


class TeleopConfig(BaseModel):
    """
    Persisted teleoperation settings.

    Field aliases match the JSON document written by the browser front-end, so
    configs can be exchanged between the two.
    """

    model_config = ConfigDict(populate_by_name=True)

    robot_ip: str = Field(DEFAULT_ROBOT_IP, alias="robotIp")
    min_change_threshold: float = Field(
        DEFAULT_MIN_CHANGE, ge=0, alias="minChangeThreshold"
    )
    send_interval: float = Field(DEFAULT_SEND_INTERVAL, gt=0, alias="sendInterval")
    hand_to_track: Literal["left", "right", "both"] = Field(
        DEFAULT_HAND, alias="handToTrack"
    )
    formulas: dict[str, str] = Field(
        default_factory=dict, description="Formula strings keyed by servo id"
    )
    servo_max_values: dict[str, int] = Field(
        default_factory=lambda: {
            str(servo_id): value
            for servo_id, value in SERVO_MAX_VALUE_OVERRIDES.items()
        },
        alias="servoMaxValues",
        description="Per-servo upper bounds that differ from MAX_SERVO_VALUE",
    )

    def get_formula(self, servo_id: int) -> str | None:
        """Get the formula bound to a servo, if any."""
        return self.formulas.get(str(servo_id))

    def set_formula(self, servo_id: int, formula: str) -> None:
        """Bind a formula to a servo."""
        self.formulas[str(servo_id)] = formula

    def max_value_for(self, servo_id: int) -> int:
        """Upper bound for a servo, falling back to MAX_SERVO_VALUE."""
        return self.servo_max_values.get(str(servo_id), MAX_SERVO_VALUE)

    def servo_max_value_map(self) -> dict[int, int]:
        """Per-servo overrides keyed by integer servo id."""
        return {int(ch): value for ch, value in self.servo_max_values.items()}

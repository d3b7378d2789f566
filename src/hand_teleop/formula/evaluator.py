"""
Evaluates a parsed formula against one frame of hand landmarks.
"""

import re
from collections.abc import Sequence

from hand_teleop.formula import geometry
from hand_teleop.formula.errors import (
    ArgumentCountError,
    DivisionByZeroError,
    FormulaEvaluationError,
    InvalidLandmarkError,
    UnknownFunctionError,
    UnknownVariableError,
)
from hand_teleop.formula.nodes import Binary, FunctionCall, Node, Number, Unary, Variable
from hand_teleop.shared.constants import MAX_LANDMARK_ID, MIN_LANDMARK_ID
from hand_teleop.shared.types import Landmark

# L[0].x
_landmark_dot_re = re.compile(r"^L\[(\d+)\]\.([xyz])$")
# Lx[0]
_landmark_axis_re = re.compile(r"^L([xyz])\[(\d+)\]$")


def _fmt(value: float) -> str:
    return f"{value:g}"


def get_landmark(landmark_id: float, landmarks: Sequence[Landmark] | None) -> Landmark:
    """
    Look up a landmark by id.

    Raises:
        InvalidLandmarkError: If no landmarks are available, or the id is not an
            integer in 0-20 present in the frame.
    """
    if landmarks is None:
        raise InvalidLandmarkError(
            f"Invalid landmark ID: {_fmt(landmark_id)} (no landmarks available)"
        )
    if (
        not float(landmark_id).is_integer()
        or not MIN_LANDMARK_ID <= landmark_id <= MAX_LANDMARK_ID
        or int(landmark_id) >= len(landmarks)
    ):
        raise InvalidLandmarkError(f"Invalid landmark ID: {_fmt(landmark_id)}")
    return landmarks[int(landmark_id)]


def _get_landmarks(
    ids: Sequence[float], landmarks: Sequence[Landmark] | None
) -> list[Landmark]:
    try:
        return [get_landmark(i, landmarks) for i in ids]
    except InvalidLandmarkError as e:
        ids_text = ", ".join(_fmt(i) for i in ids)
        raise InvalidLandmarkError(f"Invalid landmark ID(s): {ids_text}") from e


def get_variable_value(name: str, landmarks: Sequence[Landmark] | None) -> float:
    """Resolve ``L[<id>].<axis>`` or ``L<axis>[<id>]`` to a 3D coordinate."""
    m = _landmark_dot_re.match(name)
    if m:
        landmark_id, axis = int(m.group(1)), m.group(2)
    else:
        m = _landmark_axis_re.match(name)
        if not m:
            raise UnknownVariableError(f"Unknown variable: {name}")
        axis, landmark_id = m.group(1), int(m.group(2))

    landmark = get_landmark(landmark_id, landmarks)
    return getattr(landmark, f"{axis}3d")


def _check_arity(name: str, args: list[float], expected: int, usage: str = "") -> None:
    if len(args) != expected:
        raise ArgumentCountError(
            f"{name} function requires exactly {expected} arguments{usage}"
        )


def call_function(
    name: str, args: list[float], landmarks: Sequence[Landmark] | None
) -> float:
    """Dispatch a built-in function on already evaluated arguments."""
    match name:
        case "distance":
            _check_arity(name, args, 2)
            landmark1, landmark2 = _get_landmarks(args, landmarks)
            return geometry.distance(landmark1, landmark2)

        case "rotationY":
            _check_arity(name, args, 3)
            origin, landmark1, landmark2 = _get_landmarks(args, landmarks)
            return geometry.plane_normal_angle(origin, landmark1, landmark2)

        case "map":
            _check_arity(
                name,
                args,
                5,
                ": value, domain_1_min, domain_1_max, domain_2_min, domain_2_max",
            )
            return geometry.map_range(*args)

        case _:
            raise UnknownFunctionError(f"Unknown function: {name}")


def evaluate(node: Node, landmarks: Sequence[Landmark] | None = None) -> float:
    """
    Evaluate an expression tree.

    Args:
        node: Root of the tree returned by ``parse``
        landmarks: Landmarks of the tracked hand, or None when no hand is visible

    Returns:
        float: Raw (unclamped) result

    Raises:
        FormulaEvaluationError: On division by zero, unknown names, wrong
            argument counts or invalid landmark ids.
    """
    match node:
        case Number(value=value):
            return value

        case Binary(operator=op, left=left, right=right):
            a = evaluate(left, landmarks)
            b = evaluate(right, landmarks)
            match op:
                case "+":
                    return a + b
                case "-":
                    return a - b
                case "*":
                    return a * b
                case "/":
                    if b == 0:
                        raise DivisionByZeroError("Division by zero")
                    return a / b
            raise FormulaEvaluationError(f"Unknown operator: {op}")

        case Unary(operator="-", operand=operand):
            return -evaluate(operand, landmarks)

        case FunctionCall(name=name, arguments=arguments):
            args = [evaluate(arg, landmarks) for arg in arguments]
            return call_function(name, args, landmarks)

        case Variable(name=name):
            return get_variable_value(name, landmarks)

    raise FormulaEvaluationError(f"Unknown AST node type: {type(node).__name__}")

"""
Public entry points of the formula engine.

The engine holds no state between calls: callers pass the formula string and
the current landmark frame every time. Parsed trees are cached per formula
string; they are immutable, so caching is not observable.
"""

import logging
import math
from collections.abc import Sequence
from functools import lru_cache

import numpy as np

from hand_teleop.formula.errors import (
    EmptyFormulaError,
    FormulaError,
    FormulaEvaluationError,
    FormulaSyntaxError,
)
from hand_teleop.formula.evaluator import evaluate
from hand_teleop.formula.nodes import Node
from hand_teleop.formula.parser import parse
from hand_teleop.formula.tokenizer import tokenize
from hand_teleop.shared.constants import MAX_SERVO_VALUE, MIN_SERVO_VALUE
from hand_teleop.shared.types import Landmark

logger = logging.getLogger(__name__)

FORMULA_CACHE_SIZE = 256


def is_blank(formula: str | None) -> bool:
    return not formula or not formula.strip()


@lru_cache(maxsize=FORMULA_CACHE_SIZE)
def _compile(formula: str) -> Node:
    try:
        return parse(tokenize(formula))
    except RecursionError:
        raise FormulaSyntaxError("Formula is nested too deeply") from None


def compile_formula(formula: str) -> Node:
    """
    Tokenize and parse a formula.

    Raises:
        EmptyFormulaError: If the formula is blank.
        FormulaSyntaxError: If the formula does not match the grammar or is
            nested deeper than the interpreter stack allows.
    """
    if is_blank(formula):
        raise EmptyFormulaError()
    return _compile(formula)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward positive infinity."""
    return int(math.floor(value + 0.5))


def evaluate_formula(
    formula: str,
    landmarks: Sequence[Landmark] | None,
    *,
    min_value: int = MIN_SERVO_VALUE,
    max_value: int = MAX_SERVO_VALUE,
) -> int:
    """
    Evaluate a formula into a servo position.

    Args:
        formula: Formula text, e.g. ``map(distance(4, 8), 0, 0.1, 0, 1023)``
        landmarks: Landmarks of the tracked hand, or None when no hand is visible
        min_value: Lower bound of the servo range
        max_value: Upper bound of the servo range (servo specific)

    Returns:
        int: Result clamped to [min_value, max_value] and rounded

    Raises:
        FormulaError: EmptyFormulaError, FormulaSyntaxError or a
            FormulaEvaluationError subclass describing the failure.
    """
    ast = compile_formula(formula)
    try:
        result = evaluate(ast, landmarks)
    except RecursionError:
        raise FormulaEvaluationError("Formula is nested too deeply") from None
    if not math.isfinite(result):
        raise FormulaEvaluationError(f"Formula produced a non-finite value: {result}")

    position = round_half_up(float(np.clip(result, min_value, max_value)))
    logger.debug(f"Evaluated '{formula}' -> {result} -> {position}")
    return position


def validate(formula: str | None) -> bool:
    """
    Check that a formula is non-blank and syntactically valid.

    Names are not resolved, so ``foo`` or ``bar(1)`` validate as True.
    """
    if is_blank(formula):
        return False
    try:
        _compile(formula)
    except FormulaError:
        return False
    return True


def get_error_message(formula: str | None) -> str | None:
    """
    Describe why a formula is invalid.

    Returns:
        str | None: "Empty formula" for blank input, the syntax error message
            for invalid input, None when the formula parses.
    """
    if is_blank(formula):
        return str(EmptyFormulaError())
    try:
        _compile(formula)
    except FormulaError as e:
        return str(e)
    return None

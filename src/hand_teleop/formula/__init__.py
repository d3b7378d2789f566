"""
Formula language mapping hand landmarks to servo positions.

Example:
    >>> evaluate_formula("map(distance(4, 8), 0, 0.1, 0, 1023)", landmarks)
"""

from hand_teleop.formula.engine import (
    compile_formula,
    evaluate_formula,
    get_error_message,
    validate,
)
from hand_teleop.formula.errors import (
    ArgumentCountError,
    DivisionByZeroError,
    EmptyFormulaError,
    FormulaError,
    FormulaEvaluationError,
    FormulaSyntaxError,
    InvalidLandmarkError,
    UnknownFunctionError,
    UnknownVariableError,
)
from hand_teleop.formula.evaluator import evaluate
from hand_teleop.formula.parser import parse
from hand_teleop.formula.tokenizer import Token, TokenType, tokenize

__all__ = [
    # Engine
    "compile_formula",
    "evaluate_formula",
    "get_error_message",
    "validate",
    # Pipeline stages
    "tokenize",
    "parse",
    "evaluate",
    "Token",
    "TokenType",
    # Errors
    "FormulaError",
    "EmptyFormulaError",
    "FormulaSyntaxError",
    "FormulaEvaluationError",
    "DivisionByZeroError",
    "UnknownVariableError",
    "UnknownFunctionError",
    "ArgumentCountError",
    "InvalidLandmarkError",
]

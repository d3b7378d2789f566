"""
Exceptions raised by the formula engine.
"""


class FormulaError(Exception):
    """Base class for every error raised while handling a formula."""


class EmptyFormulaError(FormulaError):
    """Raised when a formula is blank or whitespace only."""

    def __init__(self, message: str = "Empty formula"):
        super().__init__(message)


class FormulaSyntaxError(FormulaError):
    """Raised when a formula does not match the grammar."""


class FormulaEvaluationError(FormulaError):
    """Raised when a syntactically valid formula cannot be evaluated."""


class DivisionByZeroError(FormulaEvaluationError):
    pass


class UnknownVariableError(FormulaEvaluationError):
    pass


class UnknownFunctionError(FormulaEvaluationError):
    pass


class ArgumentCountError(FormulaEvaluationError):
    pass


class InvalidLandmarkError(FormulaEvaluationError):
    """Raised for landmark ids outside 0-20 or when no hand is tracked."""

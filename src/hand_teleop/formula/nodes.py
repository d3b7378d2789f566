"""
Expression tree produced by the formula parser.

Nodes are immutable so a parsed tree can be cached and shared between
evaluations.
"""

from dataclasses import dataclass
from typing import Literal, Union


@dataclass(frozen=True)
class Number:
    value: float


@dataclass(frozen=True)
class Binary:
    operator: Literal["+", "-", "*", "/"]
    left: "Node"
    right: "Node"


@dataclass(frozen=True)
class Unary:
    """Unary minus; binds to a single primary only (``-2*3`` is ``(-2)*3``)."""

    operator: Literal["-"]
    operand: "Node"


@dataclass(frozen=True)
class FunctionCall:
    name: str
    arguments: tuple["Node", ...] = ()


@dataclass(frozen=True)
class Variable:
    name: str


Node = Union[Number, Binary, Unary, FunctionCall, Variable]

"""
Recursive-descent parser for servo formulas.

Grammar (left-associative, ``*``/``/`` bind tighter than ``+``/``-``)::

    Expression     := Additive
    Additive       := Multiplicative (('+' | '-') Multiplicative)*
    Multiplicative := Primary (('*' | '/') Primary)*
    Primary        := Number
                    | '(' Expression ')'
                    | FunctionName '(' [Expression (',' Expression)*] ')'
                    | Variable
                    | '-' Primary

Function arity is not checked here; the evaluator does that.
"""

from hand_teleop.formula.errors import FormulaSyntaxError
from hand_teleop.formula.nodes import (
    Binary,
    FunctionCall,
    Node,
    Number,
    Unary,
    Variable,
)
from hand_teleop.formula.tokenizer import Token, TokenType


class Cursor:
    def __init__(self, tokens: list[Token]):
        self.toks = tokens
        self.i = 0

    def peek(self) -> Token | None:
        return self.toks[self.i] if self.i < len(self.toks) else None

    def consume(self) -> Token:
        t = self.toks[self.i]
        self.i += 1
        return t

    def at_end(self) -> bool:
        return self.i >= len(self.toks)

    def match_operator(self, *ops: str) -> Token | None:
        t = self.peek()
        if t and t.type is TokenType.OPERATOR and t.value in ops:
            self.i += 1
            return t
        return None

    def check_operator(self, op: str) -> bool:
        t = self.peek()
        return t is not None and t.type is TokenType.OPERATOR and t.value == op


def parse_expression(cur: Cursor) -> Node:
    return parse_additive(cur)


def parse_additive(cur: Cursor) -> Node:
    left = parse_multiplicative(cur)
    while True:
        op = cur.match_operator("+", "-")
        if not op:
            return left
        right = parse_multiplicative(cur)
        left = Binary(op.value, left, right)


def parse_multiplicative(cur: Cursor) -> Node:
    left = parse_primary(cur)
    while True:
        op = cur.match_operator("*", "/")
        if not op:
            return left
        right = parse_primary(cur)
        left = Binary(op.value, left, right)


def parse_function_call(cur: Cursor) -> FunctionCall:
    name = cur.consume().value
    if not cur.match_operator("("):
        raise FormulaSyntaxError(f"Expected '(' after function name '{name}'")

    args: list[Node] = []
    if cur.peek() is not None and not cur.check_operator(")"):
        args.append(parse_expression(cur))
        while cur.peek() is not None and cur.peek().type is TokenType.COMMA:
            cur.consume()
            args.append(parse_expression(cur))

    if not cur.match_operator(")"):
        raise FormulaSyntaxError(f"Missing closing parenthesis for function '{name}'")
    return FunctionCall(name, tuple(args))


def parse_primary(cur: Cursor) -> Node:
    t = cur.peek()
    if t is None:
        raise FormulaSyntaxError("Unexpected end of formula")

    if t.type is TokenType.NUMBER:
        cur.consume()
        if t.value is None:
            raise FormulaSyntaxError(f"Invalid number: {t.lexeme}")
        return Number(t.value)

    if cur.match_operator("("):
        expr = parse_expression(cur)
        if not cur.match_operator(")"):
            raise FormulaSyntaxError("Missing closing parenthesis")
        return expr

    if t.type is TokenType.FUNCTION:
        return parse_function_call(cur)

    if t.type is TokenType.VARIABLE:
        cur.consume()
        return Variable(t.value)

    if cur.match_operator("-"):
        return Unary("-", parse_primary(cur))

    raise FormulaSyntaxError(f"Unexpected token: {t.lexeme}")


def parse(tokens: list[Token]) -> Node:
    """Parse a token list into an expression tree."""
    cur = Cursor(tokens)
    ast = parse_expression(cur)
    if not cur.at_end():
        raise FormulaSyntaxError(f"Unexpected token: {cur.peek().lexeme}")
    return ast

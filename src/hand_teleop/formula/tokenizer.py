"""
Tokenizer for servo formulas.

Whitespace is removed before scanning, so it is never significant. Characters
that do not start a token are skipped rather than reported.
"""

import re
from enum import Enum
from typing import NamedTuple


class TokenType(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    FUNCTION = "function"
    VARIABLE = "variable"
    COMMA = "comma"


class Token(NamedTuple):
    """
    A lexical token.

    ``value`` is the parsed float for NUMBER tokens (None when the literal is
    malformed, e.g. ``1.2.3``) and the raw lexeme for every other type.
    """

    type: TokenType
    value: float | str | None
    lexeme: str


OPERATORS = frozenset("+-*/()")

_whitespace_re = re.compile(r"\s+")
_number_re = re.compile(r"[0-9][0-9.]*")
# Brackets are allowed so L[0] / Lx[0] scan as one identifier; ".<axis>" may
# only follow a closing bracket (L[0].x).
_identifier_re = re.compile(r"[A-Za-z](?:[A-Za-z0-9_\[\]]|(?<=\])\.[xyz])*")


def _parse_number(lexeme: str) -> float | None:
    try:
        return float(lexeme)
    except ValueError:
        return None


def tokenize(formula: str) -> list[Token]:
    """Convert a formula string into an ordered list of tokens. Never raises."""
    text = _whitespace_re.sub("", formula)
    tokens: list[Token] = []
    i = 0
    n = len(text)

    while i < n:
        ch = text[i]

        m = _number_re.match(text, i)
        if m:
            lexeme = m.group(0)
            tokens.append(Token(TokenType.NUMBER, _parse_number(lexeme), lexeme))
            i = m.end()
            continue

        if ch in OPERATORS:
            tokens.append(Token(TokenType.OPERATOR, ch, ch))
            i += 1
            continue

        m = _identifier_re.match(text, i)
        if m:
            name = m.group(0)
            i = m.end()
            if i < n and text[i] == "(":
                tokens.append(Token(TokenType.FUNCTION, name, name))
            else:
                tokens.append(Token(TokenType.VARIABLE, name, name))
            continue

        if ch == ",":
            tokens.append(Token(TokenType.COMMA, ch, ch))
            i += 1
            continue

        # unrecognized
        i += 1

    return tokens

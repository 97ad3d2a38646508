"""Token kinds of the address language and the symbol tables used to lex them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .value import format_value


class TokenKind(Enum):
    """Every kind of token; the member value is the text the token prints as.

    The four literal-carrying kinds (identifiers, integers, floats and strings)
    print their payload instead, see :class:`Token`.
    """

    IDENTIFIER = "identifier"
    INTEGER_LITERAL = "integer literal"
    FLOAT_LITERAL = "float literal"
    STRING_LITERAL = "string literal"
    NEW_LINE = "\\n"
    END_OF_FILE = "EOF"
    LEFT_PARENTHESIS = "("
    RIGHT_PARENTHESIS = ")"
    LEFT_SQUARE_BRACKET = "["
    RIGHT_SQUARE_BRACKET = "]"
    COLON = ":"
    COMMA = ","
    SEMICOLON = ";"
    MULTIPLY = "*"
    PLUS = "+"
    MINUS = "-"
    SLASH = "/"
    VERTICAL_BAR = "|"
    AMPERSAND = "&"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    EQUAL = "="
    DOT = "."
    PERCENT = "%"
    LEFT_CURLY_BRACE = "{"
    RIGHT_CURLY_BRACE = "}"
    EQUAL_EQUAL = "=="
    NOT_EQUAL = "!="
    LESS_THAN_EQUAL = "<="
    GREATER_THAN_EQUAL = ">="
    LEFT_SHIFT = "<<"
    RIGHT_SHIFT = ">>"
    DOUBLE_SLASH = "//"
    SEND = "=>"
    ELLIPSIS = "..."
    APOSTROPHE = "'"
    REPLACE = "replace"
    EXCHANGE = "<=>"
    LOOP = "loop"
    PREDICATE = "predicate"
    SUB_PROGRAM = "subprogram"
    DEREF = "dereference"
    AT = "@"
    BANG = "!"
    RETURN = "return"
    FALSE = "false"
    NULL = "null"
    TRUE = "true"
    AND = "and"
    DEL = "del"
    NOT = "not"
    OR = "or"
    LET = "let"
    CONST = "const"
    IMPORT = "import"
    FROM = "from"
    AS = "as"
    COLON_COLON = "::"

    @property
    def carries_value(self) -> bool:
        """Whether tokens of this kind hold a payload."""
        return self in _PAYLOAD_TYPES

    def __str__(self) -> str:
        return self.value


_PAYLOAD_TYPES: dict[TokenKind, type] = {
    TokenKind.IDENTIFIER: str,
    TokenKind.INTEGER_LITERAL: int,
    TokenKind.FLOAT_LITERAL: float,
    TokenKind.STRING_LITERAL: str,
}

TokenValue = Union[str, int, float, None]


@dataclass(frozen=True)
class Token:
    """A token: its kind and, for identifiers and literals, its payload."""

    kind: TokenKind
    value: TokenValue = None

    def __post_init__(self) -> None:
        expected = _PAYLOAD_TYPES.get(self.kind)
        if expected is None:
            if self.value is not None:
                raise ValueError(f"token kind {self.kind.name} carries no value")
            return
        if isinstance(self.value, bool) or not isinstance(self.value, expected):
            raise TypeError(
                f"token kind {self.kind.name} needs a {expected.__name__} value, "
                f"got {self.value!r}"
            )

    def __str__(self) -> str:
        if self.kind is TokenKind.STRING_LITERAL:
            return f'"{self.value}"'
        if self.kind is TokenKind.FLOAT_LITERAL:
            return format_value(self.value)
        if self.kind.carries_value:
            return str(self.value)
        return self.kind.value


_SINGLE: dict[str, TokenKind] = {
    "!": TokenKind.BANG,
    "}": TokenKind.RIGHT_CURLY_BRACE,
    "{": TokenKind.LEFT_CURLY_BRACE,
    "]": TokenKind.RIGHT_SQUARE_BRACKET,
    "[": TokenKind.LEFT_SQUARE_BRACKET,
    ":": TokenKind.COLON,
    ",": TokenKind.COMMA,
    "/": TokenKind.SLASH,
    ".": TokenKind.DOT,
    "=": TokenKind.EQUAL,
    ">": TokenKind.GREATER_THAN,
    "<": TokenKind.LESS_THAN,
    "%": TokenKind.PERCENT,
    "*": TokenKind.MULTIPLY,
    ")": TokenKind.RIGHT_PARENTHESIS,
    "(": TokenKind.LEFT_PARENTHESIS,
    ";": TokenKind.SEMICOLON,
    "-": TokenKind.MINUS,
    "+": TokenKind.PLUS,
    "'": TokenKind.APOSTROPHE,
    "|": TokenKind.VERTICAL_BAR,
    "@": TokenKind.AT,
}

_DOUBLE: dict[tuple[str, str], TokenKind] = {
    ("!", "="): TokenKind.NOT_EQUAL,
    ("=", ">"): TokenKind.SEND,
    ("=", "="): TokenKind.EQUAL_EQUAL,
    (">", "="): TokenKind.GREATER_THAN_EQUAL,
    ("<", "="): TokenKind.LESS_THAN_EQUAL,
    (":", ":"): TokenKind.COLON_COLON,
}

_TRIPLE: dict[tuple[str, str, str], TokenKind] = {
    (".", ".", "."): TokenKind.ELLIPSIS,
    ("<", "=", ">"): TokenKind.EXCHANGE,
}


def match_single_symbol(c: str) -> TokenKind | None:
    """Return the kind of the one-character symbol ``c``, or None."""
    return _SINGLE.get(c)


def match_double_symbol(a: str, b: str) -> TokenKind | None:
    """Return the kind of the two-character symbol ``a b``, or None."""
    return _DOUBLE.get((a, b))


def match_triple_symbol(a: str, b: str, c: str) -> TokenKind | None:
    """Return the kind of the three-character symbol ``a b c``, or None."""
    return _TRIPLE.get((a, b, c))
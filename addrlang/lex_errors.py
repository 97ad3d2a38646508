"""Errors raised while splitting source text into tokens."""

from __future__ import annotations

from typing import Any


class LexError(Exception):
    """Base class of lexing errors; every one carries the location it occurred at."""

    def __init__(self, location: Any, message: str) -> None:
        self.location = location
        super().__init__(message)


class UnexpectedCharacterError(LexError):
    """A character that starts no token was found."""

    def __init__(self, location: Any, char: str) -> None:
        self.char = char
        super().__init__(location, f"Unexpected character '{char}' at {location}")


class UnterminatedStringError(LexError):
    """A string literal ran to the end of the input without its closing quote."""

    def __init__(self, location: Any) -> None:
        super().__init__(location, f"Unterminated string literal at {location}")


class FloatFormatError(LexError):
    """A float literal could not be converted to a number."""

    def __init__(self, location: Any, detail: str) -> None:
        self.detail = detail
        super().__init__(location, f"Float format error '{detail}' at {location}")


class IntegerFormatError(LexError):
    """An integer literal could not be converted to a number."""

    def __init__(self, location: Any, detail: str) -> None:
        self.detail = detail
        super().__init__(location, f"Integer format error '{detail}' at {location}")
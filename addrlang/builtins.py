"""Functions built into the virtual machine.

Every builtin is called with the running machine and the list of its
arguments, and returns a runtime value.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .typings import Type
from .value import Value, format_value, type_of

BuiltinFunction = Callable[[Any, list], Value]


class BuiltinError(Exception):
    """A builtin was called with arguments it cannot work with."""


def _is(value: Value, kind: Type) -> bool:
    return type_of(value) is kind


def builtin_print(vm: Any, args: list[Value]) -> Value:
    """Print all arguments with nothing between them, then a newline."""
    print("".join(format_value(arg) for arg in args))
    return None


def builtin_char_at(vm: Any, args: list[Value]) -> Value:
    """Return the character of a string at an index, as a string."""
    if len(args) != 2:
        raise BuiltinError("charAt() takes exactly two arguments")
    text, index = args
    if not (_is(text, Type.STRING) and _is(index, Type.INT)):
        raise BuiltinError("Invalid arguments for charAt()")
    # The bound is the encoded length; an index past the last character fails too.
    if index < 0 or index >= len(text.encode("utf-8")) or index >= len(text):
        raise BuiltinError("Index out of bounds")
    return text[index]


def builtin_concat(vm: Any, args: list[Value]) -> Value:
    """Join the printed forms of all arguments into one string."""
    return "".join(format_value(arg) for arg in args)


def builtin_replace(vm: Any, args: list[Value]) -> Value:
    """Replace every occurrence of one substring with another."""
    if len(args) != 3:
        raise BuiltinError("replace() takes exactly three arguments")
    text, old, new = args
    if not all(_is(arg, Type.STRING) for arg in args):
        raise BuiltinError("Invalid arguments for replace()")
    return text.replace(old, new)


def builtin_substring(vm: Any, args: list[Value]) -> Value:
    """Return the part of a string between two offsets into its UTF-8 encoding."""
    if len(args) != 3:
        raise BuiltinError("substring() takes exactly three arguments")
    text, start, end = args
    if not (_is(text, Type.STRING) and _is(start, Type.INT) and _is(end, Type.INT)):
        raise BuiltinError("Invalid arguments for substring()")
    encoded = text.encode("utf-8")
    if start < 0 or end > len(encoded) or start > end:
        raise BuiltinError("Invalid range for substring()")
    try:
        return encoded[start:end].decode("utf-8")
    except UnicodeDecodeError:
        raise BuiltinError("substring() range does not fall on character boundaries") from None
"""Runtime values and the operations defined on them.

Values are plain Python objects: ``None`` is null, and ``bool``, ``int``,
``float``, ``str`` and callables stand for the other kinds.  Integers are
kept within the signed 64-bit range.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from decimal import Decimal
from typing import Any, Union

from .typings import Type

Value = Union[None, bool, int, float, str, Callable[..., Any]]

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class ValueOperationError(Exception):
    """Raised when an operation is applied to values of the wrong type."""


class IncompatibleTypesError(ValueOperationError):
    """A binary operation was given operands whose types do not combine."""

    def __init__(self, operation: str, lhs: Value, rhs: Value) -> None:
        self.operation = operation
        self.lhs_type = type_of(lhs)
        self.lhs_value = format_value(lhs)
        self.rhs_type = type_of(rhs)
        self.rhs_value = format_value(rhs)
        super().__init__(
            f"Incompatible types for '{operation}': "
            f"({self.lhs_type}: {self.lhs_value}) and "
            f"({self.rhs_type}: {self.rhs_value})"
        )


class UnexpectedTypeError(ValueOperationError):
    """A value was not of the type (or one of the types) expected."""

    def __init__(self, expected: Type | tuple[Type, ...], actual: Value) -> None:
        self.expected_type = expected
        self.actual_type = type_of(actual)
        self.actual_value = format_value(actual)
        if isinstance(expected, Type):
            head = f"Expect type '{expected}'"
        else:
            names = ", ".join(t.name.title() for t in expected)
            head = f"Expect types '[{names}]'"
        super().__init__(f"{head}, but actual : ({self.actual_type}: {self.actual_value})")


def type_of(value: Value) -> Type:
    """Return the type tag of a runtime value."""
    if value is None:
        return Type.NULL
    if isinstance(value, bool):
        return Type.BOOL
    if isinstance(value, int):
        return Type.INT
    if isinstance(value, float):
        return Type.FLOAT
    if isinstance(value, str):
        return Type.STRING
    if callable(value):
        return Type.FUNCTION
    raise TypeError(f"not a runtime value: {value!r}")


def _format_float(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_value(value: Value) -> str:
    """Render a value the way the language prints it."""
    kind = type_of(value)
    if kind is Type.NULL:
        return "Null"
    if kind is Type.BOOL:
        return "true" if value else "false"
    if kind is Type.FUNCTION:
        return "Function"
    if kind is Type.FLOAT:
        return _format_float(value)  # type: ignore[arg-type]
    return str(value)


def _extract(value: Value, expected: Type) -> Any:
    if type_of(value) is not expected:
        raise UnexpectedTypeError(expected, value)
    return value


def extract_int(value: Value) -> int:
    """Return the integer held by ``value``."""
    return _extract(value, Type.INT)


def extract_float(value: Value) -> float:
    """Return the float held by ``value``."""
    return _extract(value, Type.FLOAT)


def extract_bool(value: Value) -> bool:
    """Return the boolean held by ``value``."""
    return _extract(value, Type.BOOL)


def extract_string(value: Value) -> str:
    """Return the string held by ``value``."""
    return _extract(value, Type.STRING)


def _pair_type(lhs: Value, rhs: Value, operation: str, allowed: frozenset[Type]) -> Type:
    kind = type_of(lhs)
    if kind is not type_of(rhs) or kind not in allowed:
        raise IncompatibleTypesError(operation, lhs, rhs)
    return kind


_NUMERIC = frozenset({Type.INT, Type.FLOAT})
_ORDERED = frozenset({Type.INT, Type.FLOAT, Type.STRING})
_BOOLEAN = frozenset({Type.BOOL})


def _checked(result: int, operation: str) -> int:
    if not _I64_MIN <= result <= _I64_MAX:
        raise OverflowError(f"attempt to {operation} with overflow")
    return result


def _wrapped(result: int) -> int:
    return (result - _I64_MIN) % 2**64 + _I64_MIN


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def add(lhs: Value, rhs: Value) -> Value:
    """Add two numbers of the same type, or concatenate two strings."""
    kind = _pair_type(lhs, rhs, "+", _ORDERED)
    if kind is Type.INT:
        return _checked(lhs + rhs, "add")  # type: ignore[operator]
    return lhs + rhs  # type: ignore[operator]


def sub(lhs: Value, rhs: Value) -> Value:
    """Subtract two numbers of the same type; integers wrap around."""
    kind = _pair_type(lhs, rhs, "-", _NUMERIC)
    if kind is Type.INT:
        return _wrapped(lhs - rhs)  # type: ignore[operator]
    return lhs - rhs  # type: ignore[operator]


def mul(lhs: Value, rhs: Value) -> Value:
    """Multiply two numbers of the same type."""
    kind = _pair_type(lhs, rhs, "*", _NUMERIC)
    if kind is Type.INT:
        return _checked(lhs * rhs, "multiply")  # type: ignore[operator]
    return lhs * rhs  # type: ignore[operator]


def div(lhs: Value, rhs: Value) -> Value:
    """Divide two numbers; integer division truncates toward zero."""
    kind = _pair_type(lhs, rhs, "*", _NUMERIC)
    if kind is Type.INT:
        if rhs == 0:
            raise ZeroDivisionError("attempt to divide by zero")
        return _checked(_trunc_div(lhs, rhs), "divide")  # type: ignore[arg-type]
    if rhs == 0.0:
        if lhs == 0.0 or math.isnan(lhs):  # type: ignore[arg-type]
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)  # type: ignore[arg-type]
    return lhs / rhs  # type: ignore[operator]


def modulus(lhs: Value, rhs: Value) -> Value:
    """Remainder of division; its sign follows the dividend."""
    kind = _pair_type(lhs, rhs, "%", _NUMERIC)
    if kind is Type.INT:
        if rhs == 0:
            raise ZeroDivisionError(
                "attempt to calculate the remainder with a divisor of zero"
            )
        if lhs == _I64_MIN and rhs == -1:
            raise OverflowError("attempt to calculate the remainder with overflow")
        return lhs - rhs * _trunc_div(lhs, rhs)  # type: ignore[operator, arg-type]
    try:
        return math.fmod(lhs, rhs)  # type: ignore[arg-type]
    except ValueError:
        return math.nan


def logical_and(lhs: Value, rhs: Value) -> bool:
    """Boolean conjunction of two booleans."""
    _pair_type(lhs, rhs, "and", _BOOLEAN)
    return bool(lhs and rhs)


def logical_or(lhs: Value, rhs: Value) -> bool:
    """Boolean disjunction of two booleans."""
    _pair_type(lhs, rhs, "and", _BOOLEAN)
    return bool(lhs or rhs)


def equal(lhs: Value, rhs: Value) -> bool:
    """Compare two values; values of different types are never equal."""
    kind = type_of(lhs)
    if kind is not type_of(rhs) or kind is Type.FUNCTION:
        return False
    return lhs == rhs


def not_equal(lhs: Value, rhs: Value) -> bool:
    """The negation of :func:`equal`."""
    return not equal(lhs, rhs)


def less(lhs: Value, rhs: Value) -> bool:
    """Order two numbers or strings of the same type."""
    _pair_type(lhs, rhs, "<", _ORDERED)
    return lhs < rhs  # type: ignore[operator]


def less_equal(lhs: Value, rhs: Value) -> bool:
    """Order two numbers or strings of the same type."""
    _pair_type(lhs, rhs, "<=", _ORDERED)
    return lhs <= rhs  # type: ignore[operator]


def greater(lhs: Value, rhs: Value) -> bool:
    """Order two numbers or strings of the same type."""
    _pair_type(lhs, rhs, ">", _ORDERED)
    return lhs > rhs  # type: ignore[operator]


def greater_equal(lhs: Value, rhs: Value) -> bool:
    """Order two numbers or strings of the same type."""
    _pair_type(lhs, rhs, ">=", _ORDERED)
    return lhs >= rhs  # type: ignore[operator]


def negate(value: Value) -> Value:
    """Arithmetic negation of a number."""
    kind = type_of(value)
    if kind is Type.INT:
        return _checked(-value, "negate")  # type: ignore[operator]
    if kind is Type.FLOAT:
        return -value  # type: ignore[operator]
    raise UnexpectedTypeError(Type.INT, value)


def logical_not(value: Value) -> bool:
    """Boolean negation of a boolean."""
    return not extract_bool(value)
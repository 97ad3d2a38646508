"""Type tags for runtime values."""

from __future__ import annotations

from enum import Enum


class Type(Enum):
    """The type of a runtime value; the member value is its display name."""

    NULL = "null"
    FLOAT = "float"
    STRING = "string"
    BOOL = "bool"
    INT = "int"
    FUNCTION = "function"
    ERROR = "?"
    UNRESOLVED = "Unresolved"

    def __str__(self) -> str:
        return self.value


_PARSABLE = {
    Type.NULL.value: Type.NULL,
    Type.FLOAT.value: Type.FLOAT,
    Type.STRING.value: Type.STRING,
    Type.BOOL.value: Type.BOOL,
    Type.INT.value: Type.INT,
}


def parse_type(s: str) -> Type | None:
    """Return the type named by ``s``, or None if it names no declarable type."""
    return _PARSABLE.get(s)
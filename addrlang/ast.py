"""Syntax tree of the address language and a visitor to walk it."""

from __future__ import annotations

import re
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Generic, List, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass
class Located(Generic[T]):
    """A node together with the source locations where it starts and ends.

    Locations are opaque; they must be JSON-compatible for serialization.
    """

    node: T
    l_location: Any = None
    r_location: Any = None

    def accept(self, visitor: Visitor) -> Any:
        """Hand this node to ``visitor``."""
        return visitor.visit(self)


@dataclass(frozen=True, order=True)
class Label:
    """A label, optionally qualified by a module alias."""

    identifier: str
    mod_alias: Optional[str] = None

    def __str__(self) -> str:
        if self.mod_alias is None:
            return self.identifier
        return f"{self.mod_alias}::{self.identifier}"


@dataclass(order=True)
class Path:
    """A module path given by its components."""

    absolute: bool
    ids: List[str] = field(default_factory=list)


class BinaryOperator(Enum):
    """Operators taking two operands."""

    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    LT = "LT"
    SUM = "Sum"
    SUB = "Sub"
    MUL = "Mul"
    DIV = "Div"
    MOD = "Mod"
    AND = "And"
    OR = "Or"


class UnaryOperator(Enum):
    """Operators taking one operand."""

    DEREFERENCE = "Dereference"
    MINUS = "Minus"
    NOT = "Not"


@dataclass
class MultipleDereference:
    """Dereference repeated as many times as ``count`` evaluates to."""

    count: Located[Any]


# Expressions


@dataclass
class NullLiteral:
    """The null literal."""


def _bits(value: float) -> bytes:
    return struct.pack("<d", value)


@dataclass(eq=False)
class FloatLiteral:
    """A float literal; two literals are equal when their bit patterns are."""

    value: float

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FloatLiteral):
            return NotImplemented
        return _bits(self.value) == _bits(other.value)


@dataclass
class BoolLiteral:
    """A boolean literal."""

    value: bool


@dataclass
class IntLiteral:
    """An integer literal."""

    value: int


@dataclass
class StringLiteral:
    """A string literal."""

    value: str


@dataclass
class Var:
    """A reference to a variable."""

    name: str


@dataclass
class ListExpr:
    """A list of expressions."""

    elements: List[Located[Any]] = field(default_factory=list)


@dataclass
class Call:
    """A call of a named function."""

    function: str
    args: List[Located[Any]] = field(default_factory=list)


@dataclass
class UnaryOp:
    """A unary operation."""

    op: Union[UnaryOperator, MultipleDereference]
    expr: Located[Any]


@dataclass
class BinaryOp:
    """A binary operation."""

    op: BinaryOperator
    lhs: Located[Any]
    rhs: Located[Any]


# Simple statements


@dataclass
class Import:
    """Import of labels from a module path."""

    labels: List[str]
    path: Path
    alias: Optional[str] = None


@dataclass
class Del:
    """Deletion of what an expression designates."""

    rhs: Located[Any]


@dataclass
class Assign:
    """Assignment ``lhs = rhs``."""

    lhs: Located[Any]
    rhs: Located[Any]


@dataclass
class Send:
    """Send ``lhs => rhs``."""

    lhs: Located[Any]
    rhs: Located[Any]


@dataclass
class Exchange:
    """Exchange ``lhs <=> rhs``."""

    lhs: Located[Any]
    rhs: Located[Any]


@dataclass
class ExpressionStatement:
    """An expression evaluated for its effect."""

    expression: Located[Any]


# One-line statements

Statements = Union[Located[Any], List[Located[Any]]]
"""Either one one-line statement or a list of simple statements."""


@dataclass
class SubProgram:
    """Call of a subprogram, optionally jumping to a label afterwards."""

    sp_name: Label
    args: List[Located[Any]] = field(default_factory=list)
    label_to: Optional[str] = None


@dataclass
class Loop:
    """A counting or conditional loop running up to a label."""

    initial_value: Located[Any]
    step: Located[Any]
    last_value_or_condition: Located[Any]
    iterator: Located[Any]
    label_until: str
    label_to: Optional[str] = None


@dataclass
class Predicate:
    """A conditional choosing between two statement groups."""

    condition: Located[Any]
    if_true: Statements
    if_false: Statements


@dataclass
class Exit:
    """Stop the algorithm."""


@dataclass
class Return:
    """Return from a subprogram."""


@dataclass
class UnconditionalJump:
    """Jump to a label."""

    label: str


@dataclass
class FileLine:
    """One line of a program: its labels and its statements."""

    labels: List[str]
    statements: Statements

    def accept(self, visitor: Visitor) -> Any:
        """Hand this line to ``visitor``."""
        return visitor.visit(self)


@dataclass
class Algorithm:
    """A whole program."""

    body: List[FileLine] = field(default_factory=list)

    def accept(self, visitor: Visitor) -> Any:
        """Hand this program to ``visitor``."""
        return visitor.visit(self)


@lru_cache(maxsize=None)
def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def _children(node: Any) -> Iterator[Any]:
    values = node if isinstance(node, list) else (
        getattr(node, f.name) for f in fields(node)
    )
    for value in values:
        if isinstance(value, list):
            yield from (item for item in value if is_dataclass(item))
        elif is_dataclass(value) and not isinstance(value, type):
            yield value


class Visitor:
    """Walks a tree, calling ``visit_<snake_case_class_name>`` for each node.

    Nodes without a matching method are handled by :meth:`generic_visit`,
    which visits their children.
    """

    def visit(self, node: Any) -> Any:
        handler = getattr(self, f"visit_{_snake_case(type(node).__name__)}", None)
        if handler is None:
            return self.generic_visit(node)
        return handler(node)

    def generic_visit(self, node: Any) -> None:
        for child in _children(node):
            self.visit(child)
"""JSON encoding of syntax trees.

Enum-like nodes are written externally tagged: a variant without fields is
its tag as a string, any other variant an object holding one key, the tag.
"""

from __future__ import annotations

import json
from enum import Enum, auto
from pathlib import Path as FilePath
from typing import Any, Union

from .ast import (
    Algorithm,
    Assign,
    BinaryOp,
    BinaryOperator,
    BoolLiteral,
    Call,
    Del,
    Exchange,
    Exit,
    ExpressionStatement,
    FileLine,
    FloatLiteral,
    Import,
    IntLiteral,
    Label,
    ListExpr,
    Located,
    Loop,
    MultipleDereference,
    NullLiteral,
    Path,
    Predicate,
    Return,
    Send,
    StringLiteral,
    SubProgram,
    UnaryOp,
    UnaryOperator,
    UnconditionalJump,
    Var,
)


class _Field(Enum):
    NODE = auto()
    NODES = auto()
    STATEMENTS = auto()
    LABEL = auto()
    PATH = auto()
    BINOP = auto()
    UNOP = auto()
    STR = auto()
    OPT_STR = auto()
    STRS = auto()
    BOOL = auto()
    INT = auto()
    FLOAT = auto()


_SPEC: dict[type, tuple[str, dict[str, _Field]]] = {
    NullLiteral: ("Null", {}),
    FloatLiteral: ("Float", {"value": _Field.FLOAT}),
    BoolLiteral: ("Bool", {"value": _Field.BOOL}),
    IntLiteral: ("Int", {"value": _Field.INT}),
    StringLiteral: ("String", {"value": _Field.STR}),
    Var: ("Var", {"name": _Field.STR}),
    ListExpr: ("List", {"elements": _Field.NODES}),
    Call: ("Call", {"function": _Field.STR, "args": _Field.NODES}),
    UnaryOp: ("UnaryOp", {"op": _Field.UNOP, "expr": _Field.NODE}),
    BinaryOp: ("BinaryOp", {"op": _Field.BINOP, "lhs": _Field.NODE, "rhs": _Field.NODE}),
    Import: ("Import", {"labels": _Field.STRS, "path": _Field.PATH, "alias": _Field.OPT_STR}),
    Del: ("Del", {"rhs": _Field.NODE}),
    Assign: ("Assign", {"lhs": _Field.NODE, "rhs": _Field.NODE}),
    Send: ("Send", {"lhs": _Field.NODE, "rhs": _Field.NODE}),
    Exchange: ("Exchange", {"lhs": _Field.NODE, "rhs": _Field.NODE}),
    ExpressionStatement: ("Expression", {"expression": _Field.NODE}),
    SubProgram: (
        "SubProgram",
        {"sp_name": _Field.LABEL, "args": _Field.NODES, "label_to": _Field.OPT_STR},
    ),
    Loop: (
        "Loop",
        {
            "initial_value": _Field.NODE,
            "step": _Field.NODE,
            "last_value_or_condition": _Field.NODE,
            "iterator": _Field.NODE,
            "label_until": _Field.STR,
            "label_to": _Field.OPT_STR,
        },
    ),
    Predicate: (
        "Predicate",
        {"condition": _Field.NODE, "if_true": _Field.STATEMENTS, "if_false": _Field.STATEMENTS},
    ),
    Exit: ("Exit", {}),
    Return: ("Return", {}),
    UnconditionalJump: ("UnconditionalJump", {"label": _Field.STR}),
}

_BY_TAG = {tag: (cls, spec) for cls, (tag, spec) in _SPEC.items()}


# Encoding


def _encode_located(located: Located[Any]) -> dict[str, Any]:
    return {
        "l_location": located.l_location,
        "r_location": located.r_location,
        "node": _encode_node(located.node),
    }


def _encode_statements(statements: Any) -> dict[str, Any]:
    if isinstance(statements, list):
        return {"SimpleStatements": [_encode_located(s) for s in statements]}
    return {"OneLineStatement": _encode_located(statements)}


def _encode_field(kind: _Field, value: Any) -> Any:
    if kind is _Field.NODE:
        return _encode_located(value)
    if kind is _Field.NODES:
        return [_encode_located(v) for v in value]
    if kind is _Field.STATEMENTS:
        return _encode_statements(value)
    if kind is _Field.LABEL:
        return {"identifier": value.identifier, "mod_alias": value.mod_alias}
    if kind is _Field.PATH:
        return {"absolute": value.absolute, "ids": list(value.ids)}
    if kind is _Field.BINOP:
        return value.value
    if kind is _Field.UNOP:
        if isinstance(value, MultipleDereference):
            return {"MultipleDereference": _encode_located(value.count)}
        return value.value
    if kind is _Field.STRS:
        return list(value)
    return value


def _encode_node(node: Any) -> Union[str, dict[str, Any]]:
    try:
        tag, spec = _SPEC[type(node)]
    except KeyError:
        raise TypeError(f"cannot serialize {type(node).__name__}") from None
    if not spec:
        return tag
    return {tag: {name: _encode_field(kind, getattr(node, name)) for name, kind in spec.items()}}


def _encode_algorithm(ast: Algorithm) -> dict[str, Any]:
    return {
        "Body": [
            {"Line": {"labels": list(line.labels), "statements": _encode_statements(line.statements)}}
            for line in ast.body
        ]
    }


# Decoding


def _variant(data: Any, what: str) -> tuple[str, Any]:
    if isinstance(data, dict) and len(data) == 1:
        return next(iter(data.items()))
    raise ValueError(f"expected a single-key object for {what}, got {data!r}")


def _require(data: Any, key: str, what: str) -> Any:
    if not isinstance(data, dict) or key not in data:
        raise ValueError(f"missing field '{key}' in {what}")
    return data[key]


def _check(value: Any, accepted: type, what: str) -> Any:
    if isinstance(value, bool) and accepted is not bool:
        raise ValueError(f"invalid {what}: {value!r}")
    if not isinstance(value, accepted):
        raise ValueError(f"invalid {what}: {value!r}")
    return value


def _decode_located(data: Any) -> Located[Any]:
    return Located(
        node=_decode_node(_require(data, "node", "located node")),
        l_location=_require(data, "l_location", "located node"),
        r_location=_require(data, "r_location", "located node"),
    )


def _decode_statements(data: Any) -> Any:
    tag, body = _variant(data, "statements")
    if tag == "OneLineStatement":
        return _decode_located(body)
    if tag == "SimpleStatements":
        return [_decode_located(item) for item in _check(body, list, "statement list")]
    raise ValueError(f"unknown statements variant '{tag}'")


def _decode_field(kind: _Field, value: Any) -> Any:
    if kind is _Field.NODE:
        return _decode_located(value)
    if kind is _Field.NODES:
        return [_decode_located(v) for v in _check(value, list, "node list")]
    if kind is _Field.STATEMENTS:
        return _decode_statements(value)
    if kind is _Field.LABEL:
        alias = value.get("mod_alias") if isinstance(value, dict) else None
        if alias is not None:
            _check(alias, str, "module alias")
        return Label(_check(_require(value, "identifier", "label"), str, "identifier"), alias)
    if kind is _Field.PATH:
        ids = _check(_require(value, "ids", "path"), list, "path ids")
        return Path(
            _check(_require(value, "absolute", "path"), bool, "path flag"),
            [_check(i, str, "path id") for i in ids],
        )
    if kind is _Field.BINOP:
        return BinaryOperator(value)
    if kind is _Field.UNOP:
        if isinstance(value, str):
            return UnaryOperator(value)
        tag, body = _variant(value, "unary operator")
        if tag != "MultipleDereference":
            raise ValueError(f"unknown unary operator '{tag}'")
        return MultipleDereference(_decode_located(body))
    if kind is _Field.STR:
        return _check(value, str, "string")
    if kind is _Field.OPT_STR:
        return None if value is None else _check(value, str, "string")
    if kind is _Field.STRS:
        return [_check(v, str, "string") for v in _check(value, list, "string list")]
    if kind is _Field.BOOL:
        return _check(value, bool, "boolean")
    if kind is _Field.INT:
        return _check(value, int, "integer")
    return float(_check(value, (int, float), "float"))  # type: ignore[arg-type]


def _decode_node(data: Any) -> Any:
    if isinstance(data, str):
        tag, body = data, None
    else:
        tag, body = _variant(data, "node")
    try:
        cls, spec = _BY_TAG[tag]
    except (KeyError, TypeError):
        raise ValueError(f"unknown node variant {tag!r}") from None
    if not spec:
        return cls()
    if not isinstance(body, dict):
        raise ValueError(f"variant '{tag}' needs fields")
    values = {}
    for name, kind in spec.items():
        if name not in body and kind is _Field.OPT_STR:
            values[name] = None
        else:
            values[name] = _decode_field(kind, _require(body, name, tag))
    return cls(**values)


def _decode_algorithm(data: Any) -> Algorithm:
    tag, lines = _variant(data, "algorithm")
    if tag != "Body":
        raise ValueError(f"unknown algorithm variant '{tag}'")
    body = []
    for item in _check(lines, list, "line list"):
        line_tag, line = _variant(item, "file line")
        if line_tag != "Line":
            raise ValueError(f"unknown file line variant '{line_tag}'")
        labels = _decode_field(_Field.STRS, _require(line, "labels", "file line"))
        statements = _decode_statements(_require(line, "statements", "file line"))
        body.append(FileLine(labels, statements))
    return Algorithm(body)


# Public interface


def serialize_ast(ast: Algorithm) -> str:
    """Encode a program as compact JSON text."""
    return json.dumps(_encode_algorithm(ast), separators=(",", ":"), ensure_ascii=False)


def deserialize_ast(text: str) -> Algorithm:
    """Decode a program from JSON text; raises ValueError on malformed input."""
    return _decode_algorithm(json.loads(text))


def serialize_ast_to_file(ast: Algorithm, file_path: Union[str, FilePath]) -> None:
    """Write a program as JSON to ``file_path``."""
    FilePath(file_path).write_text(serialize_ast(ast), encoding="utf-8")


def deserialize_ast_from_file(file_path: Union[str, FilePath]) -> Algorithm:
    """Read a program from the JSON file ``file_path``."""
    return deserialize_ast(FilePath(file_path).read_text(encoding="utf-8"))
import json
import math

import pytest

from addrlang.ast import (
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
from addrlang.serializer import (
    deserialize_ast,
    deserialize_ast_from_file,
    serialize_ast,
    serialize_ast_to_file,
)


def _source_algorithm():
    stmt = Located(Return())
    return Algorithm([FileLine(["label1"], stmt)])


def _rich_algorithm():
    x = Located(Var("x"), 1, 2)
    simple = [
        Located(Import(["a", "b"], Path(True, ["lib", "m"]), "m")),
        Located(Import(["c"], Path(False, []))),
        Located(Del(x)),
        Located(Assign(x, Located(ListExpr([Located(NullLiteral()), Located(BoolLiteral(True))])))),
        Located(Send(Located(FloatLiteral(2.5)), x)),
        Located(Exchange(x, Located(Var("y")))),
        Located(
            ExpressionStatement(
                Located(
                    Call(
                        "Print",
                        [
                            Located(StringLiteral("hi")),
                            Located(UnaryOp(UnaryOperator.MINUS, Located(IntLiteral(-3)))),
                            Located(UnaryOp(MultipleDereference(Located(IntLiteral(2))), x)),
                        ],
                    )
                )
            )
        ),
    ]
    lines = [
        FileLine(["start"], simple),
        FileLine([], Located(SubProgram(Label("f", "m"), [x], "end"))),
        FileLine(
            [],
            Located(
                Loop(
                    Located(IntLiteral(0)),
                    Located(IntLiteral(1)),
                    Located(BinaryOp(BinaryOperator.LT, x, Located(IntLiteral(10)))),
                    x,
                    "until",
                )
            ),
        ),
        FileLine(
            [],
            Located(
                Predicate(
                    Located(BinaryOp(BinaryOperator.EQ, x, x)),
                    Located(UnconditionalJump("start")),
                    [Located(Assign(x, x))],
                )
            ),
        ),
        FileLine(["end"], Located(Exit())),
    ]
    return Algorithm(lines)


def test_serialize_deserialize():
    algorithm = _source_algorithm()
    assert deserialize_ast(serialize_ast(algorithm)) == algorithm


def test_serialize_deserialize_file(tmp_path):
    algorithm = _source_algorithm()
    file_path = tmp_path / "test_algorithm.json"
    serialize_ast_to_file(algorithm, file_path)
    assert deserialize_ast_from_file(file_path) == algorithm


def test_wire_format_is_externally_tagged():
    data = json.loads(serialize_ast(_source_algorithm()))
    assert data == {
        "Body": [
            {
                "Line": {
                    "labels": ["label1"],
                    "statements": {
                        "OneLineStatement": {
                            "l_location": None,
                            "r_location": None,
                            "node": "Return",
                        }
                    },
                }
            }
        ]
    }


def test_rich_tree_round_trip():
    algorithm = _rich_algorithm()
    assert deserialize_ast(serialize_ast(algorithm)) == algorithm


def test_serialization_is_stable():
    text = serialize_ast(_rich_algorithm())
    assert serialize_ast(deserialize_ast(text)) == text


def test_nan_float_round_trips():
    algorithm = Algorithm([FileLine([], [Located(ExpressionStatement(Located(FloatLiteral(math.nan))))])])
    assert deserialize_ast(serialize_ast(algorithm)) == algorithm


def test_missing_optional_field_decodes_as_none():
    text = json.dumps(
        {
            "Body": [
                {
                    "Line": {
                        "labels": [],
                        "statements": {
                            "OneLineStatement": {
                                "l_location": None,
                                "r_location": None,
                                "node": {"SubProgram": {"sp_name": {"identifier": "f"}, "args": []}},
                            }
                        },
                    }
                }
            ]
        }
    )
    line = deserialize_ast(text).body[0]
    assert line.statements.node == SubProgram(Label("f"), [], None)


def test_invalid_json_raises():
    with pytest.raises(ValueError):
        deserialize_ast("{not json")


def test_unknown_variant_raises():
    with pytest.raises(ValueError):
        deserialize_ast('{"Corpus": []}')


def test_unknown_node_raises():
    text = (
        '{"Body":[{"Line":{"labels":[],"statements":{"OneLineStatement":'
        '{"l_location":null,"r_location":null,"node":"Jump"}}}}]}'
    )
    with pytest.raises(ValueError):
        deserialize_ast(text)


def test_wrong_field_type_raises():
    text = (
        '{"Body":[{"Line":{"labels":[],"statements":{"OneLineStatement":'
        '{"l_location":null,"r_location":null,"node":{"UnconditionalJump":{"label":5}}}}}}]}'
    )
    with pytest.raises(ValueError):
        deserialize_ast(text)


def test_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        deserialize_ast_from_file(tmp_path / "absent.json")
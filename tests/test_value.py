import math

import pytest

from addrlang.typings import Type
from addrlang.value import (
    IncompatibleTypesError,
    UnexpectedTypeError,
    ValueOperationError,
    add,
    div,
    equal,
    extract_bool,
    extract_float,
    extract_int,
    extract_string,
    format_value,
    greater,
    greater_equal,
    less,
    less_equal,
    logical_and,
    logical_not,
    logical_or,
    modulus,
    mul,
    negate,
    not_equal,
    sub,
    type_of,
)

I64_MIN = -(2**63)
I64_MAX = 2**63 - 1


@pytest.mark.parametrize(
    "value, kind",
    [
        (None, Type.NULL),
        (True, Type.BOOL),
        (False, Type.BOOL),
        (3, Type.INT),
        (2.5, Type.FLOAT),
        ("abc", Type.STRING),
        (len, Type.FUNCTION),
    ],
)
def test_type_of(value, kind):
    assert type_of(value) is kind


def test_type_of_rejects_foreign_objects():
    with pytest.raises(TypeError):
        type_of([1, 2])


def test_format_fixed_words():
    assert format_value(None) == "Null"
    assert format_value(True) == "true"
    assert format_value(False) == "false"
    assert format_value(len) == "Function"


def test_format_passthrough():
    assert format_value("hello") == "hello"
    assert format_value(42) == str(42)
    assert format_value(2.5) == str(2.5)


def test_format_whole_float_has_no_fraction():
    assert format_value(1.0) == "1"


def test_format_special_floats():
    assert format_value(math.nan) == "NaN"
    assert format_value(math.inf) == "inf"


@pytest.mark.parametrize("x", [1e20, 1e-7, 123.456, -0.5, 3.0])
def test_format_float_plain_notation_round_trips(x):
    text = format_value(x)
    assert "e" not in text.lower()
    assert float(text) == x


def test_extract_matching():
    assert extract_int(7) == 7
    assert extract_float(1.5) == 1.5
    assert extract_bool(True) is True
    assert extract_string("s") == "s"


@pytest.mark.parametrize(
    "extract, value, expected",
    [
        (extract_int, True, Type.INT),
        (extract_int, 1.0, Type.INT),
        (extract_float, 1, Type.FLOAT),
        (extract_bool, 1, Type.BOOL),
        (extract_string, None, Type.STRING),
    ],
)
def test_extract_mismatch(extract, value, expected):
    with pytest.raises(UnexpectedTypeError) as info:
        extract(value)
    assert info.value.expected_type is expected
    assert info.value.actual_type is type_of(value)
    assert info.value.actual_value == format_value(value)


@pytest.mark.parametrize("a, b", [(5, 3), (-4, 9), (2.5, 0.25)])
def test_add_sub_round_trip(a, b):
    assert sub(add(a, b), b) == a


def test_add_strings_concatenates():
    assert add("foo", "bar") == "foo" + "bar"


def test_add_mixed_types_fails():
    with pytest.raises(IncompatibleTypesError) as info:
        add(1, 1.0)
    err = info.value
    assert err.operation == "+"
    assert err.lhs_type is Type.INT
    assert err.rhs_type is Type.FLOAT
    assert "Incompatible types for '+'" in str(err)
    assert isinstance(err, ValueOperationError)


def test_add_overflow_raises():
    with pytest.raises(OverflowError):
        add(I64_MAX, 1)


def test_sub_wraps():
    assert sub(I64_MIN, 1) == I64_MAX


def test_sub_rejects_strings():
    with pytest.raises(IncompatibleTypesError) as info:
        sub("a", "b")
    assert info.value.operation == "-"


def test_mul_rejects_bools():
    with pytest.raises(IncompatibleTypesError) as info:
        mul(True, True)
    assert info.value.operation == "*"


@pytest.mark.parametrize("a, b", [(7, 2), (-7, 2), (7, -2), (-7, -2), (6, 3)])
def test_int_division_identity(a, b):
    q = div(a, b)
    r = modulus(a, b)
    assert add(mul(q, b), r) == a
    assert abs(r) < abs(b)
    assert r == 0 or (r < 0) == (a < 0)


def test_int_division_truncates_toward_zero():
    assert div(-7, 2) == negate(div(7, 2))


def test_int_division_by_zero():
    with pytest.raises(ZeroDivisionError):
        div(1, 0)
    with pytest.raises(ZeroDivisionError):
        modulus(1, 0)


def test_float_division_by_zero():
    assert math.isinf(div(1.0, 0.0)) and div(1.0, 0.0) > 0
    assert math.isinf(div(-1.0, 0.0)) and div(-1.0, 0.0) < 0
    assert math.isnan(div(0.0, 0.0))
    assert math.isnan(modulus(1.0, 0.0))


def test_float_modulus_sign_follows_dividend():
    r = modulus(-7.5, 2.0)
    assert r < 0
    assert add(mul(-3.0, 2.0), r) == -7.5


def test_div_mixed_types_fails():
    with pytest.raises(IncompatibleTypesError):
        div(1, 2.0)


@pytest.mark.parametrize("a", [True, False])
@pytest.mark.parametrize("b", [True, False])
def test_logical_and_or(a, b):
    assert logical_and(a, b) == (a and b)
    assert logical_or(a, b) == (a or b)


def test_logical_ops_reject_non_bool():
    with pytest.raises(IncompatibleTypesError):
        logical_and(1, True)
    with pytest.raises(IncompatibleTypesError) as info:
        logical_or(True, "x")
    assert info.value.operation == "and"


@pytest.mark.parametrize(
    "a, b, same",
    [
        (1, 1, True),
        (1, 2, False),
        (1, 1.0, False),
        (True, 1, False),
        (None, None, True),
        ("a", "a", True),
        (len, len, False),
        (math.nan, math.nan, False),
    ],
)
def test_equal_and_not_equal(a, b, same):
    assert equal(a, b) is same
    assert not_equal(a, b) is (not same)


@pytest.mark.parametrize("lo, hi", [(1, 2), (-1.5, 0.5), ("a", "b")])
def test_ordering(lo, hi):
    assert less(lo, hi) is True
    assert greater(hi, lo) is True
    assert less_equal(lo, lo) is True
    assert greater_equal(hi, hi) is True
    assert less(hi, lo) is False
    assert greater_equal(lo, hi) is False


@pytest.mark.parametrize(
    "op, symbol",
    [(less, "<"), (less_equal, "<="), (greater, ">"), (greater_equal, ">=")],
)
def test_ordering_rejects_mismatch(op, symbol):
    with pytest.raises(IncompatibleTypesError) as info:
        op(1, 1.0)
    assert info.value.operation == symbol
    with pytest.raises(IncompatibleTypesError):
        op(None, None)


@pytest.mark.parametrize("x", [5, -3, 2.5, 0])
def test_negate_is_involution(x):
    assert negate(negate(x)) == x
    assert add(negate(x), x) == type(x)(0)


def test_negate_rejects_string():
    with pytest.raises(UnexpectedTypeError) as info:
        negate("a")
    assert info.value.expected_type is Type.INT
    assert "Expect type" in str(info.value)


def test_logical_not():
    assert logical_not(True) is False
    assert logical_not(False) is True
    with pytest.raises(UnexpectedTypeError) as info:
        logical_not(1)
    assert info.value.expected_type is Type.BOOL
    assert "'bool'" in str(info.value)


def test_unexpected_type_with_several_expected():
    err = UnexpectedTypeError((Type.INT, Type.FLOAT), "x")
    assert err.expected_type == (Type.INT, Type.FLOAT)
    assert err.actual_type is Type.STRING
    message = str(err)
    assert "Expect types" in message
    assert "Int" in message and "Float" in message
import pytest

from addrlang.builtins import (
    BuiltinError,
    builtin_char_at,
    builtin_concat,
    builtin_print,
    builtin_replace,
    builtin_substring,
)


def test_print_joins_arguments_and_returns_null(capsys):
    result = builtin_print(None, ["a", "b"])
    assert result is None
    assert capsys.readouterr().out == "ab\n"


def test_print_formats_null(capsys):
    builtin_print(None, [None])
    assert capsys.readouterr().out == "Null\n"


def test_print_without_arguments_prints_newline(capsys):
    builtin_print(None, [])
    assert capsys.readouterr().out == "\n"


@pytest.mark.parametrize("index", range(5))
def test_char_at_matches_indexing(index):
    text = "hello"
    assert builtin_char_at(None, [text, index]) == text[index]


@pytest.mark.parametrize("index", [-1, 5, 100])
def test_char_at_out_of_bounds(index):
    with pytest.raises(BuiltinError, match="Index out of bounds"):
        builtin_char_at(None, ["hello", index])


def test_char_at_argument_count():
    with pytest.raises(BuiltinError, match="exactly two"):
        builtin_char_at(None, ["hello"])


def test_char_at_rejects_bool_index():
    with pytest.raises(BuiltinError, match="Invalid arguments"):
        builtin_char_at(None, ["hello", True])


def test_concat_strings_round_trip():
    parts = ["ab", "cd", "ef"]
    assert builtin_concat(None, parts) == "".join(parts)


def test_concat_formats_values():
    assert builtin_concat(None, ["x", 1, True, None]) == "x1trueNull"


def test_concat_empty():
    assert builtin_concat(None, []) == ""


def test_replace_all_occurrences():
    result = builtin_replace(None, ["a-b-c", "-", "+"])
    assert "-" not in result
    assert result.count("+") == 2
    assert builtin_replace(None, [result, "+", "-"]) == "a-b-c"


def test_replace_argument_count():
    with pytest.raises(BuiltinError, match="exactly three"):
        builtin_replace(None, ["a", "b"])


def test_replace_requires_strings():
    with pytest.raises(BuiltinError, match="Invalid arguments"):
        builtin_replace(None, ["a", 1, "b"])


def test_substring_whole_string():
    assert builtin_substring(None, ["hello", 0, 5]) == "hello"


def test_substring_splits_and_rejoins():
    text = "address"
    left = builtin_substring(None, [text, 0, 3])
    right = builtin_substring(None, [text, 3, len(text)])
    assert left + right == text
    assert len(left) == 3


def test_substring_empty_range():
    assert builtin_substring(None, ["hello", 2, 2]) == ""


@pytest.mark.parametrize("start,end", [(-1, 2), (0, 6), (3, 2)])
def test_substring_invalid_range(start, end):
    with pytest.raises(BuiltinError, match="Invalid range"):
        builtin_substring(None, ["hello", start, end])


def test_substring_argument_count():
    with pytest.raises(BuiltinError, match="exactly three"):
        builtin_substring(None, ["hello", 1])


def test_substring_requires_int_offsets():
    with pytest.raises(BuiltinError, match="Invalid arguments"):
        builtin_substring(None, ["hello", 1.0, 2])
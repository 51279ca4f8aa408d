import errno

import pytest
from hypothesis import given, strategies as st

from strictjson.error import Category, ErrorCode, JsonError, parse_line_col


def test_display_with_position():
    err = JsonError.syntax(ErrorCode.KEY_MUST_BE_A_STRING, 1, 2)
    assert str(err) == "key must be a string at line 1 column 2"


def test_display_without_position():
    err = JsonError.syntax(ErrorCode.TRAILING_COMMA, 0, 0)
    assert str(err) == "trailing comma"


def test_repr_matches_debug_format():
    err = JsonError.syntax(ErrorCode.KEY_MUST_BE_A_STRING, 1, 2)
    assert repr(err) == 'JsonError("key must be a string", line: 1, column: 2)'


def test_control_character_message():
    err = JsonError.syntax(ErrorCode.CONTROL_CHARACTER_WHILE_PARSING_STRING, 0, 0)
    assert str(err) == "control character (\\u0000-\\u001F) found while parsing a string"


@pytest.mark.parametrize(
    "code",
    [
        ErrorCode.EOF_WHILE_PARSING_LIST,
        ErrorCode.EOF_WHILE_PARSING_OBJECT,
        ErrorCode.EOF_WHILE_PARSING_STRING,
        ErrorCode.EOF_WHILE_PARSING_VALUE,
    ],
)
def test_eof_codes_classify_as_eof(code):
    err = JsonError.syntax(code, 1, 1)
    assert err.classify() is Category.EOF
    assert err.is_eof()
    assert not err.is_syntax()


@pytest.mark.parametrize(
    "code",
    [
        ErrorCode.EXPECTED_COLON,
        ErrorCode.INVALID_NUMBER,
        ErrorCode.NUMBER_OUT_OF_RANGE,
        ErrorCode.TRAILING_CHARACTERS,
        ErrorCode.RECURSION_LIMIT_EXCEEDED,
        ErrorCode.KEY_MUST_BE_A_STRING,
    ],
)
def test_syntax_codes_classify_as_syntax(code):
    err = JsonError.syntax(code, 1, 1)
    assert err.classify() is Category.SYNTAX
    assert err.is_syntax()
    assert not err.is_data()


def test_custom_is_data():
    err = JsonError.custom("missing field `a`")
    assert err.classify() is Category.DATA
    assert err.is_data()
    assert (err.line, err.column) == (0, 0)
    assert str(err) == "missing field `a`"


def test_custom_parses_position_suffix():
    err = JsonError.custom("bad thing at line 3 column 7")
    assert err.line == 3
    assert err.column == 7
    assert err.description == "bad thing"
    assert str(err) == "bad thing at line 3 column 7"


def test_io_error_wrapping():
    cause = OSError(errno.EIO, "disk gone")
    err = JsonError.io(cause)
    assert err.is_io()
    assert err.classify() is Category.IO
    assert err.to_os_error() is cause
    assert (err.line, err.column) == (0, 0)


def test_to_os_error_for_syntax():
    err = JsonError.syntax(ErrorCode.INVALID_NUMBER, 2, 5)
    converted = err.to_os_error()
    assert isinstance(converted, OSError)
    assert converted.errno == errno.EINVAL
    assert converted.__cause__ is err


def test_to_os_error_for_eof_differs_from_syntax():
    eof = JsonError.syntax(ErrorCode.EOF_WHILE_PARSING_VALUE, 1, 1).to_os_error()
    bad = JsonError.syntax(ErrorCode.INVALID_NUMBER, 1, 1).to_os_error()
    assert eof.errno != bad.errno


def test_invalid_type_null():
    err = JsonError.invalid_type(None, "a string")
    assert str(err) == "invalid type: null, expected a string"
    assert err.is_data()


def test_invalid_type_other():
    err = JsonError.invalid_type("boolean `true`", "a string")
    assert err.description == "invalid type: boolean `true`, expected a string"


def test_fix_position_fills_unknown():
    err = JsonError.custom("oops")
    fixed = err.fix_position(lambda code: JsonError.syntax(code, 4, 9))
    assert (fixed.line, fixed.column) == (4, 9)
    assert fixed.code is ErrorCode.MESSAGE
    assert fixed.description == "oops"


def test_fix_position_keeps_known():
    err = JsonError.syntax(ErrorCode.TRAILING_COMMA, 2, 3)
    fixed = err.fix_position(lambda code: JsonError.syntax(code, 99, 99))
    assert fixed is err


def test_raises_as_exception():
    err = JsonError.syntax(ErrorCode.EXPECTED_COLON, 1, 4)
    assert str(err) == "expected `:` at line 1 column 4"
    with pytest.raises(JsonError) as info:
        raise err
    assert info.value is err
    assert info.value.code is ErrorCode.EXPECTED_COLON


def test_parse_line_col_basic():
    assert parse_line_col("boom at line 10 column 20") == ("boom", 10, 20)


@pytest.mark.parametrize(
    "msg",
    [
        "no suffix here",
        "x at line 1 column",
        "x at line column 2",
        "x at line 1 column 2 extra",
        "x at line 1 col 2",
    ],
)
def test_parse_line_col_rejects(msg):
    assert parse_line_col(msg) is None


@given(
    st.text().filter(lambda s: " at line " not in s),
    st.integers(min_value=1, max_value=10**6),
    st.integers(min_value=0, max_value=10**6),
)
def test_custom_round_trips_display(text, line, column):
    original = JsonError.custom(text).fix_position(
        lambda code: JsonError.syntax(code, line, column)
    )
    again = JsonError.custom(str(original))
    assert (again.line, again.column) == (line, column)
    assert again.description == text
    assert str(again) == str(original)
import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strictjson.error import ErrorCode, JsonError
from strictjson.numbers import (
    f64_from_parts,
    ignore_integer,
    parse_any_number,
    parse_integer,
    parse_number,
)
from strictjson.scanner import Scanner


def _code_of(text):
    with pytest.raises(JsonError) as info:
        parse_number(text)
    return info.value.code


def test_small_integers():
    assert parse_number("123") == 123
    assert parse_number("-1") == -1
    assert parse_number("0") == 0


def test_negative_zero_is_float():
    value = parse_number("-0")
    assert isinstance(value, float)
    assert value == 0.0 and math.copysign(1.0, value) == -1.0


def test_u64_max_stays_integer():
    assert parse_number("18446744073709551615") == 2**64 - 1


def test_beyond_u64_becomes_float():
    value = parse_number("18446744073709551616")
    assert isinstance(value, float)
    assert value == float(2**64)


def test_i64_min_stays_integer():
    assert parse_number("-9223372036854775808") == -(2**63)


def test_below_i64_min_becomes_float():
    value = parse_number("-9223372036854775809")
    assert isinstance(value, float)
    assert value == -float(2**63 + 1)


def test_decimal_and_exponent():
    assert parse_number("1.5") == 1.5
    assert parse_number("2e3") == 2000.0
    assert parse_number("25E-1") == 2.5
    assert parse_number("-1.25e+2") == -125.0


def test_long_integer_is_close():
    text = "123456789012345678901234567890"
    assert math.isclose(parse_number(text), float(text), rel_tol=1e-15)


def test_long_fraction_is_close():
    text = "0.123456789012345678901234567890"
    assert math.isclose(parse_number(text), float(text), rel_tol=1e-15)


def test_huge_negative_exponents_give_zero():
    assert parse_number("1e-400") == 0.0
    assert parse_number("1e-99999999999") == 0.0
    assert parse_number("0e99999999999") == 0.0
    negative = parse_number("-1e-99999999999")
    assert negative == 0.0 and math.copysign(1.0, negative) == -1.0


@pytest.mark.parametrize(
    "text,code",
    [
        ("", ErrorCode.EOF_WHILE_PARSING_VALUE),
        ("-", ErrorCode.EOF_WHILE_PARSING_VALUE),
        ("1.", ErrorCode.EOF_WHILE_PARSING_VALUE),
        ("1e", ErrorCode.EOF_WHILE_PARSING_VALUE),
        ("1e+", ErrorCode.EOF_WHILE_PARSING_VALUE),
        ("01", ErrorCode.INVALID_NUMBER),
        ("1.e5", ErrorCode.INVALID_NUMBER),
        ("1ea", ErrorCode.INVALID_NUMBER),
        ("abc", ErrorCode.INVALID_NUMBER),
        ("1 ", ErrorCode.INVALID_NUMBER),
        ("+1", ErrorCode.INVALID_NUMBER),
        ("-a", ErrorCode.INVALID_NUMBER),
    ],
)
def test_errors(text, code):
    assert _code_of(text) is code


def test_trailing_character_position():
    with pytest.raises(JsonError) as info:
        parse_number("12x")
    assert info.value.line == 1
    assert info.value.column == 3


def test_parse_integer_after_sign():
    scanner = Scanner(b"-42,")
    scanner.eat_char()
    assert parse_integer(scanner, False) == -42
    assert scanner.peek() == ord(",")


def test_parse_any_number_matches_parse_integer():
    assert parse_any_number(Scanner(b"7.5]"), True) == parse_integer(
        Scanner(b"7.5]"), True
    )


def test_parse_integer_eof():
    with pytest.raises(JsonError) as info:
        parse_integer(Scanner(b""), True)
    assert info.value.code is ErrorCode.EOF_WHILE_PARSING_VALUE
    assert info.value.is_eof()


def test_f64_from_parts():
    scanner = Scanner(b"")
    assert f64_from_parts(scanner, True, 15, -1) == 1.5
    assert f64_from_parts(scanner, False, 15, -1) == -1.5
    zero = f64_from_parts(scanner, False, 0, 400)
    assert zero == 0.0 and math.copysign(1.0, zero) == -1.0
    with pytest.raises(JsonError) as info:
        f64_from_parts(scanner, True, 1, 309)
    assert info.value.code is ErrorCode.NUMBER_OUT_OF_RANGE


def test_ignore_integer_skips_whole_number():
    scanner = Scanner(b"12.5e3,")
    ignore_integer(scanner)
    assert scanner.peek() == ord(",")


def test_ignore_integer_skips_signed_exponent():
    scanner = Scanner(b"0E-7]")
    ignore_integer(scanner)
    assert scanner.peek() == ord("]")


@pytest.mark.parametrize("data", [b"01", b"1.", b"1.x", b"1e", b"1e+x", b"x"])
def test_ignore_integer_errors(data):
    with pytest.raises(JsonError) as info:
        ignore_integer(Scanner(data))
    assert info.value.code is ErrorCode.INVALID_NUMBER


@given(st.integers(min_value=0, max_value=2**64 - 1))
def test_unsigned_round_trip(n):
    assert parse_number(str(n)) == n


@given(st.integers(min_value=-(2**63), max_value=-1))
def test_signed_round_trip(n):
    assert parse_number(str(n)) == n


@given(st.floats(allow_nan=False, allow_infinity=False, min_value=1e-300, max_value=1e300))
def test_float_close_round_trip(x):
    assert math.isclose(parse_number(repr(x)), x, rel_tol=1e-14)
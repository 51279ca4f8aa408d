"""Parsing and skipping of JSON numbers."""

from __future__ import annotations

from typing import Union

from .error import ErrorCode, JsonError
from .scanner import Scanner

__all__ = [
    "parse_integer",
    "parse_any_number",
    "ignore_integer",
    "f64_from_parts",
    "parse_number",
]

Number = Union[int, float]

_U64_MAX = 2**64 - 1
_I64_MIN_MAGNITUDE = 2**63
_I32_MAX = 2**31 - 1
_I32_MIN = -(2**31)

_ZERO = ord("0")
_NINE = ord("9")
_DOT = ord(".")
_PLUS = ord("+")
_MINUS = ord("-")
_EXPONENT_MARKERS = frozenset(b"eE")

_POW10 = tuple(float(f"1e{power}") for power in range(309))


def _is_digit(byte: int) -> bool:
    return _ZERO <= byte <= _NINE


def _overflows(accumulated: int, digit: int, limit: int) -> bool:
    """True if ``accumulated * 10 + digit`` would exceed ``limit``."""
    return accumulated >= limit // 10 and (
        accumulated > limit // 10 or digit > limit % 10
    )


def _saturate_i32(value: int) -> int:
    return max(_I32_MIN, min(_I32_MAX, value))


def parse_integer(scanner: Scanner, positive: bool) -> Number:
    """Parse a number whose sign, if any, has already been consumed.

    Integers that fit are returned as ``int``; anything with a fraction or
    exponent, integers too large for 64 bits, and ``-0`` come back as
    ``float``.
    """
    first = scanner.next_char()
    if first is None:
        raise scanner.error(ErrorCode.EOF_WHILE_PARSING_VALUE)

    if first == _ZERO:
        # There can be only one leading '0'.
        if _is_digit(scanner.peek_or_null()):
            raise scanner.peek_error(ErrorCode.INVALID_NUMBER)
        return _parse_number(scanner, positive, 0)

    if not _is_digit(first):
        raise scanner.error(ErrorCode.INVALID_NUMBER)

    significand = first - _ZERO
    while True:
        byte = scanner.peek_or_null()
        if not _is_digit(byte):
            return _parse_number(scanner, positive, significand)
        digit = byte - _ZERO
        if _overflows(significand, digit, _U64_MAX):
            return _parse_long_integer(scanner, positive, significand)
        scanner.eat_char()
        significand = significand * 10 + digit


def parse_any_number(scanner: Scanner, positive: bool) -> Number:
    """Parse a number after its sign; same as :func:`parse_integer`."""
    return parse_integer(scanner, positive)


def _parse_number(scanner: Scanner, positive: bool, significand: int) -> Number:
    byte = scanner.peek_or_null()
    if byte == _DOT:
        return _parse_decimal(scanner, positive, significand, 0)
    if byte in _EXPONENT_MARKERS:
        return _parse_exponent(scanner, positive, significand, 0)
    if positive:
        return significand
    # Out of the signed range, or -0: produce a float.
    if significand == 0 or significand > _I64_MIN_MAGNITUDE:
        return -float(significand)
    return -significand


def _parse_decimal(
    scanner: Scanner, positive: bool, significand: int, exponent: int
) -> float:
    scanner.eat_char()

    while _is_digit(scanner.peek_or_null()):
        digit = scanner.peek_or_null() - _ZERO
        if _overflows(significand, digit, _U64_MAX):
            return _parse_decimal_overflow(scanner, positive, significand, exponent)
        scanner.eat_char()
        significand = significand * 10 + digit
        exponent -= 1

    # There must be at least one digit after the decimal point.
    if exponent == 0:
        if scanner.peek() is not None:
            raise scanner.peek_error(ErrorCode.INVALID_NUMBER)
        raise scanner.peek_error(ErrorCode.EOF_WHILE_PARSING_VALUE)

    if scanner.peek_or_null() in _EXPONENT_MARKERS:
        return _parse_exponent(scanner, positive, significand, exponent)
    return f64_from_parts(scanner, positive, significand, exponent)


def _parse_exponent(
    scanner: Scanner, positive: bool, significand: int, starting_exp: int
) -> float:
    scanner.eat_char()

    sign = scanner.peek_or_null()
    positive_exp = True
    if sign == _PLUS:
        scanner.eat_char()
    elif sign == _MINUS:
        scanner.eat_char()
        positive_exp = False

    first = scanner.next_char()
    if first is None:
        raise scanner.error(ErrorCode.EOF_WHILE_PARSING_VALUE)
    # A digit must follow the exponent marker.
    if not _is_digit(first):
        raise scanner.error(ErrorCode.INVALID_NUMBER)

    exp = first - _ZERO
    while _is_digit(scanner.peek_or_null()):
        digit = scanner.peek_or_null() - _ZERO
        scanner.eat_char()
        if _overflows(exp, digit, _I32_MAX):
            return _parse_exponent_overflow(
                scanner, positive, significand == 0, positive_exp
            )
        exp = exp * 10 + digit

    if positive_exp:
        final_exp = _saturate_i32(starting_exp + exp)
    else:
        final_exp = _saturate_i32(starting_exp - exp)
    return f64_from_parts(scanner, positive, significand, final_exp)


def _parse_long_integer(scanner: Scanner, positive: bool, significand: int) -> float:
    # Digits beyond 64 bits are dropped and counted as a power of ten.
    exponent = 0
    while True:
        byte = scanner.peek_or_null()
        if _is_digit(byte):
            scanner.eat_char()
            exponent += 1
        elif byte == _DOT:
            return _parse_decimal(scanner, positive, significand, exponent)
        elif byte in _EXPONENT_MARKERS:
            return _parse_exponent(scanner, positive, significand, exponent)
        else:
            return f64_from_parts(scanner, positive, significand, exponent)


def _parse_decimal_overflow(
    scanner: Scanner, positive: bool, significand: int, exponent: int
) -> float:
    # Further digits cannot change the significand; skip them.
    while _is_digit(scanner.peek_or_null()):
        scanner.eat_char()

    if scanner.peek_or_null() in _EXPONENT_MARKERS:
        return _parse_exponent(scanner, positive, significand, exponent)
    return f64_from_parts(scanner, positive, significand, exponent)


def _parse_exponent_overflow(
    scanner: Scanner, positive: bool, zero_significand: bool, positive_exp: bool
) -> float:
    # Refuse to produce infinity.
    if not zero_significand and positive_exp:
        raise scanner.error(ErrorCode.NUMBER_OUT_OF_RANGE)

    while _is_digit(scanner.peek_or_null()):
        scanner.eat_char()
    return 0.0 if positive else -0.0


def f64_from_parts(
    scanner: Scanner, positive: bool, significand: int, exponent: int
) -> float:
    """Compute ``significand * 10**exponent`` as a float, with the sign applied.

    Raises ``NUMBER_OUT_OF_RANGE`` where the result would be infinite.
    """
    f = float(significand)
    while True:
        magnitude = abs(exponent)
        if magnitude < len(_POW10):
            power = _POW10[magnitude]
            if exponent >= 0:
                f *= power
                if f == float("inf"):
                    raise scanner.error(ErrorCode.NUMBER_OUT_OF_RANGE)
            else:
                f /= power
            break
        if f == 0.0:
            break
        if exponent >= 0:
            raise scanner.error(ErrorCode.NUMBER_OUT_OF_RANGE)
        f /= 1e308
        exponent += 308
    return f if positive else -f


def ignore_integer(scanner: Scanner) -> None:
    """Skip a number whose sign, if any, has already been consumed."""
    first = scanner.next_char_or_null()
    if first == _ZERO:
        # There can be only one leading '0'.
        if _is_digit(scanner.peek_or_null()):
            raise scanner.peek_error(ErrorCode.INVALID_NUMBER)
    elif _is_digit(first):
        while _is_digit(scanner.peek_or_null()):
            scanner.eat_char()
    else:
        raise scanner.error(ErrorCode.INVALID_NUMBER)

    byte = scanner.peek_or_null()
    if byte == _DOT:
        _ignore_decimal(scanner)
    elif byte in _EXPONENT_MARKERS:
        _ignore_exponent(scanner)


def _ignore_decimal(scanner: Scanner) -> None:
    scanner.eat_char()

    at_least_one_digit = False
    while _is_digit(scanner.peek_or_null()):
        scanner.eat_char()
        at_least_one_digit = True

    if not at_least_one_digit:
        raise scanner.peek_error(ErrorCode.INVALID_NUMBER)

    if scanner.peek_or_null() in _EXPONENT_MARKERS:
        _ignore_exponent(scanner)


def _ignore_exponent(scanner: Scanner) -> None:
    scanner.eat_char()

    if scanner.peek_or_null() in (_PLUS, _MINUS):
        scanner.eat_char()

    # A digit must follow the exponent marker.
    if not _is_digit(scanner.next_char_or_null()):
        raise scanner.error(ErrorCode.INVALID_NUMBER)

    while _is_digit(scanner.peek_or_null()):
        scanner.eat_char()


def parse_number(s: Union[str, bytes]) -> Number:
    """Parse ``s`` as exactly one JSON number, with an optional leading '-'."""
    scanner = Scanner(s)
    peek = scanner.peek()
    if peek is None:
        raise scanner.peek_error(ErrorCode.EOF_WHILE_PARSING_VALUE)

    failure: JsonError | None = None
    value: Number = 0
    try:
        if peek == _MINUS:
            scanner.eat_char()
            value = parse_any_number(scanner, False)
        elif _is_digit(peek):
            value = parse_any_number(scanner, True)
        else:
            raise scanner.peek_error(ErrorCode.INVALID_NUMBER)
    except JsonError as err:
        failure = err

    if scanner.peek() is not None:
        raise scanner.peek_error(ErrorCode.INVALID_NUMBER)
    if failure is not None:
        raise scanner.fix_position(failure)
    return value
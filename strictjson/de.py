"""Deserialize JSON text into Python values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple, Union

from .error import ErrorCode, JsonError
from .numbers import Number, parse_any_number, parse_integer, ignore_integer
from .scanner import Scanner

__all__ = ["Deserializer"]

_DEFAULT_DEPTH = 128

_QUOTE = ord('"')
_COMMA = ord(",")
_COLON = ord(":")
_MINUS = ord("-")
_LBRACKET = ord("[")
_RBRACKET = ord("]")
_LBRACE = ord("{")
_RBRACE = ord("}")
_N = ord("n")
_T = ord("t")
_F = ord("f")
_ZERO = ord("0")
_NINE = ord("9")


def _is_digit(byte: Optional[int]) -> bool:
    return byte is not None and _ZERO <= byte <= _NINE


def _describe_number(value: Number) -> str:
    if isinstance(value, float):
        return f"floating point `{value!r}`"
    return f"integer `{value}`"


@dataclass
class _Frame:
    """An array or object under construction."""

    is_object: bool
    container: Union[List[Any], dict] = field(default_factory=list)
    first: bool = True
    key: Optional[str] = None

    @property
    def close(self) -> int:
        return _RBRACE if self.is_object else _RBRACKET

    def add(self, value: Any) -> None:
        if self.is_object:
            self.container[self.key] = value
        else:
            self.container.append(value)


class Deserializer:
    """Reads JSON values from in-memory input.

    Nesting of arrays and objects is limited to 127 levels unless
    :meth:`disable_recursion_limit` is called.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview, str]) -> None:
        self.scanner = Scanner(data)
        self._remaining_depth = _DEFAULT_DEPTH
        self._check_depth = True

    @classmethod
    def from_str(cls, s: str) -> "Deserializer":
        """A deserializer over a text string."""
        return cls(s)

    @classmethod
    def from_slice(cls, data: Union[bytes, bytearray, memoryview]) -> "Deserializer":
        """A deserializer over a byte string."""
        return cls(data)

    @classmethod
    def from_reader(cls, reader: Any) -> "Deserializer":
        """A deserializer over everything ``reader.read()`` returns."""
        try:
            content = reader.read()
        except OSError as err:
            raise JsonError.io(err) from err
        return cls(content)

    def disable_recursion_limit(self) -> None:
        """Allow arbitrarily deep nesting."""
        self._check_depth = False

    def end(self) -> None:
        """Check that only whitespace remains in the input."""
        if self.scanner.parse_whitespace() is not None:
            raise self.scanner.peek_error(ErrorCode.TRAILING_CHARACTERS)

    # -- depth ----------------------------------------------------------

    def _descend(self) -> None:
        if self._check_depth:
            self._remaining_depth -= 1
            if self._remaining_depth == 0:
                raise self.scanner.peek_error(ErrorCode.RECURSION_LIMIT_EXCEEDED)

    def _ascend(self) -> None:
        if self._check_depth:
            self._remaining_depth += 1

    # -- public entry points --------------------------------------------

    def _located(self, err: JsonError) -> JsonError:
        return self.scanner.fix_position(err)

    def _expect_value(self) -> int:
        peek = self.scanner.parse_whitespace()
        if peek is None:
            raise self.scanner.peek_error(ErrorCode.EOF_WHILE_PARSING_VALUE)
        return peek

    def parse_value(self) -> Any:
        """Parse any JSON value into ``None``, bool, number, str, list or dict."""
        depth = self._remaining_depth
        try:
            return self._parse_any()
        except JsonError as err:
            raise self._located(err) from None
        finally:
            self._remaining_depth = depth

    def parse_bool(self) -> bool:
        """Parse ``true`` or ``false``."""
        s = self.scanner
        peek = self._expect_value()
        if peek == _T:
            s.eat_char()
            s.parse_ident(b"rue")
            return True
        if peek == _F:
            s.eat_char()
            s.parse_ident(b"alse")
            return False
        raise self._peek_invalid_type("a boolean")

    def parse_number_value(self) -> Number:
        """Parse a JSON number."""
        peek = self._expect_value()
        return self._parse_number(peek, "a number")

    def parse_string(self) -> str:
        """Parse a JSON string into text."""
        s = self.scanner
        peek = self._expect_value()
        if peek == _QUOTE:
            s.eat_char()
            return s.parse_str()
        raise self._peek_invalid_type("a string")

    def parse_bytes(self) -> bytes:
        """Parse a string as raw bytes, or an array of integers 0 to 255."""
        s = self.scanner
        peek = self._expect_value()
        if peek == _QUOTE:
            s.eat_char()
            return s.parse_str_raw()
        if peek == _LBRACKET:
            depth = self._remaining_depth
            try:
                return self._parse_byte_seq()
            except JsonError as err:
                raise self._located(err) from None
            finally:
                self._remaining_depth = depth
        raise self._peek_invalid_type("byte array")

    def parse_null(self) -> None:
        """Parse ``null``."""
        s = self.scanner
        peek = self._expect_value()
        if peek == _N:
            s.eat_char()
            s.parse_ident(b"ull")
            return None
        raise self._peek_invalid_type("unit")

    def parse_array(self) -> List[Any]:
        """Parse a JSON array."""
        if self._expect_value() == _LBRACKET:
            return self.parse_value()
        raise self._peek_invalid_type("a sequence")

    def parse_object(self) -> dict:
        """Parse a JSON object; a repeated key keeps its last value."""
        if self._expect_value() == _LBRACE:
            return self.parse_value()
        raise self._peek_invalid_type("a map")

    # -- value parsing --------------------------------------------------

    def _parse_any(self) -> Any:
        s = self.scanner
        stack: List[_Frame] = []
        while True:
            peek = self._expect_value()
            if peek in (_LBRACKET, _LBRACE):
                self._descend()
                s.eat_char()
                is_object = peek == _LBRACE
                stack.append(_Frame(is_object, {} if is_object else []))
                done = False
                value: Any = None
            else:
                value = self._parse_scalar(peek)
                done = True

            while stack:
                frame = stack[-1]
                if done:
                    frame.add(value)
                if self._advance(frame):
                    break
                s.eat_char()
                self._ascend()
                stack.pop()
                value = frame.container
                done = True
            else:
                return value

    def _parse_scalar(self, peek: int) -> Any:
        s = self.scanner
        if peek == _N:
            s.eat_char()
            s.parse_ident(b"ull")
            return None
        if peek == _T:
            s.eat_char()
            s.parse_ident(b"rue")
            return True
        if peek == _F:
            s.eat_char()
            s.parse_ident(b"alse")
            return False
        if peek == _MINUS:
            s.eat_char()
            return parse_any_number(s, False)
        if _is_digit(peek):
            return parse_any_number(s, True)
        if peek == _QUOTE:
            s.eat_char()
            return s.parse_str()
        raise s.peek_error(ErrorCode.EXPECTED_SOME_VALUE)

    def _entry_start(
        self, close: int, first: bool, eof_code: ErrorCode, comma_code: ErrorCode
    ) -> Tuple[bool, bool, Optional[int]]:
        """Move past a separator; return (closed, first, next byte)."""
        s = self.scanner
        peek = s.parse_whitespace()
        if peek == close:
            return True, first, peek
        if peek == _COMMA and not first:
            s.eat_char()
            peek = s.parse_whitespace()
        elif peek is None:
            raise s.peek_error(eof_code)
        elif first:
            first = False
        else:
            raise s.peek_error(comma_code)
        return False, first, peek

    def _advance(self, frame: _Frame) -> bool:
        """Position at the next entry of ``frame``; False at its close."""
        s = self.scanner
        if frame.is_object:
            closed, frame.first, peek = self._entry_start(
                _RBRACE,
                frame.first,
                ErrorCode.EOF_WHILE_PARSING_OBJECT,
                ErrorCode.EXPECTED_OBJECT_COMMA_OR_END,
            )
            if closed:
                return False
            if peek == _QUOTE:
                s.eat_char()
                frame.key = s.parse_str()
            elif peek == _RBRACE:
                raise s.peek_error(ErrorCode.TRAILING_COMMA)
            elif peek is None:
                raise s.peek_error(ErrorCode.EOF_WHILE_PARSING_VALUE)
            else:
                raise s.peek_error(ErrorCode.KEY_MUST_BE_A_STRING)
            self._parse_object_colon()
            return True

        closed, frame.first, peek = self._entry_start(
            _RBRACKET,
            frame.first,
            ErrorCode.EOF_WHILE_PARSING_LIST,
            ErrorCode.EXPECTED_LIST_COMMA_OR_END,
        )
        if closed:
            return False
        self._check_element_start(peek)
        return True

    def _check_element_start(self, peek: Optional[int]) -> None:
        s = self.scanner
        if peek == _RBRACKET:
            raise s.peek_error(ErrorCode.TRAILING_COMMA)
        if peek is None:
            raise s.peek_error(ErrorCode.EOF_WHILE_PARSING_VALUE)

    def _parse_object_colon(self) -> None:
        s = self.scanner
        peek = s.parse_whitespace()
        if peek == _COLON:
            s.eat_char()
        elif peek is None:
            raise s.peek_error(ErrorCode.EOF_WHILE_PARSING_OBJECT)
        else:
            raise s.peek_error(ErrorCode.EXPECTED_COLON)

    def _parse_number(self, peek: int, expected: str) -> Number:
        s = self.scanner
        if peek == _MINUS:
            s.eat_char()
            return parse_integer(s, False)
        if _is_digit(peek):
            return parse_integer(s, True)
        raise self._peek_invalid_type(expected)

    def _parse_byte_seq(self) -> bytes:
        s = self.scanner
        self._descend()
        s.eat_char()
        out = bytearray()
        first = True
        while True:
            closed, first, peek = self._entry_start(
                _RBRACKET,
                first,
                ErrorCode.EOF_WHILE_PARSING_LIST,
                ErrorCode.EXPECTED_LIST_COMMA_OR_END,
            )
            if closed:
                break
            self._check_element_start(peek)
            number = self._parse_number(peek, "u8")
            if isinstance(number, float):
                raise JsonError.invalid_type(_describe_number(number), "u8")
            if not 0 <= number <= 255:
                raise JsonError.custom(f"invalid value: integer `{number}`, expected u8")
            out.append(number)
        s.eat_char()
        self._ascend()
        return bytes(out)

    def _peek_invalid_type(self, expected: str) -> JsonError:
        s = self.scanner
        peek = s.peek_or_null()
        try:
            if peek == _N:
                s.eat_char()
                s.parse_ident(b"ull")
                err = JsonError.invalid_type(None, expected)
            elif peek == _T:
                s.eat_char()
                s.parse_ident(b"rue")
                err = JsonError.invalid_type("boolean `true`", expected)
            elif peek == _F:
                s.eat_char()
                s.parse_ident(b"alse")
                err = JsonError.invalid_type("boolean `false`", expected)
            elif peek == _MINUS:
                s.eat_char()
                number = parse_any_number(s, False)
                err = JsonError.invalid_type(_describe_number(number), expected)
            elif _is_digit(peek):
                number = parse_any_number(s, True)
                err = JsonError.invalid_type(_describe_number(number), expected)
            elif peek == _QUOTE:
                s.eat_char()
                text = s.parse_str()
                err = JsonError.invalid_type(f'string "{text}"', expected)
            elif peek == _LBRACKET:
                err = JsonError.invalid_type("sequence", expected)
            elif peek == _LBRACE:
                err = JsonError.invalid_type("map", expected)
            else:
                err = s.peek_error(ErrorCode.EXPECTED_SOME_VALUE)
        except JsonError as failure:
            return failure
        return self._located(err)

    # -- skipping -------------------------------------------------------

    def ignore_value(self) -> None:
        """Skip one JSON value, checking its syntax."""
        s = self.scanner
        stack: List[int] = []
        enclosing: Optional[int] = None

        while True:
            peek = self._expect_value()
            frame: Optional[int] = None
            if peek == _N:
                s.eat_char()
                s.parse_ident(b"ull")
            elif peek == _T:
                s.eat_char()
                s.parse_ident(b"rue")
            elif peek == _F:
                s.eat_char()
                s.parse_ident(b"alse")
            elif peek == _MINUS:
                s.eat_char()
                ignore_integer(s)
            elif _is_digit(peek):
                ignore_integer(s)
            elif peek == _QUOTE:
                s.eat_char()
                s.ignore_str()
            elif peek in (_LBRACKET, _LBRACE):
                if enclosing is not None:
                    stack.append(enclosing)
                    enclosing = None
                s.eat_char()
                frame = peek
            else:
                raise s.peek_error(ErrorCode.EXPECTED_SOME_VALUE)

            if frame is not None:
                accept_comma = False
            elif enclosing is not None:
                frame, enclosing = enclosing, None
                accept_comma = True
            elif stack:
                frame = stack.pop()
                accept_comma = True
            else:
                return

            while True:
                byte = s.parse_whitespace()
                if byte == _COMMA and accept_comma:
                    s.eat_char()
                    break
                if (byte == _RBRACKET and frame == _LBRACKET) or (
                    byte == _RBRACE and frame == _LBRACE
                ):
                    pass
                elif byte is None:
                    raise s.peek_error(
                        ErrorCode.EOF_WHILE_PARSING_LIST
                        if frame == _LBRACKET
                        else ErrorCode.EOF_WHILE_PARSING_OBJECT
                    )
                elif accept_comma:
                    raise s.peek_error(
                        ErrorCode.EXPECTED_LIST_COMMA_OR_END
                        if frame == _LBRACKET
                        else ErrorCode.EXPECTED_OBJECT_COMMA_OR_END
                    )
                else:
                    break

                s.eat_char()
                if not stack:
                    return
                frame = stack.pop()
                accept_comma = True

            if frame == _LBRACE:
                byte = s.parse_whitespace()
                if byte == _QUOTE:
                    s.eat_char()
                elif byte is None:
                    raise s.peek_error(ErrorCode.EOF_WHILE_PARSING_OBJECT)
                else:
                    raise s.peek_error(ErrorCode.KEY_MUST_BE_A_STRING)
                s.ignore_str()
                byte = s.parse_whitespace()
                if byte == _COLON:
                    s.eat_char()
                elif byte is None:
                    raise s.peek_error(ErrorCode.EOF_WHILE_PARSING_OBJECT)
                else:
                    raise s.peek_error(ErrorCode.EXPECTED_COLON)

            enclosing = frame
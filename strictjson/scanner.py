"""Low-level byte scanning of JSON text: positions, whitespace, idents, strings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Union

from .error import ErrorCode, JsonError

__all__ = ["Position", "Scanner"]

_QUOTE = 0x22
_BACKSLASH = 0x5C
_NEWLINE = 0x0A
_LETTER_U = 0x75
_WHITESPACE = frozenset(b" \n\t\r")

_STRING_SPECIAL = re.compile(rb'["\\\x00-\x1f]')
_HEX4 = re.compile(rb"[0-9a-fA-F]{4}")

_SIMPLE_ESCAPES = {
    ord('"'): b'"',
    ord("\\"): b"\\",
    ord("/"): b"/",
    ord("b"): b"\x08",
    ord("f"): b"\x0c",
    ord("n"): b"\n",
    ord("r"): b"\r",
    ord("t"): b"\t",
}

_IGNORABLE_ESCAPES = frozenset(_SIMPLE_ESCAPES)


def _hex_value(byte: int) -> Optional[int]:
    if 0x30 <= byte <= 0x39:
        return byte - 0x30
    if 0x41 <= byte <= 0x46:
        return byte - 0x41 + 10
    if 0x61 <= byte <= 0x66:
        return byte - 0x61 + 10
    return None


def _is_leading_surrogate(n: int) -> bool:
    return 0xD800 <= n <= 0xDBFF


def _is_trailing_surrogate(n: int) -> bool:
    return 0xDC00 <= n <= 0xDFFF


def _combine_surrogates(lead: int, trail: int) -> int:
    return (((lead - 0xD800) << 10) | (trail - 0xDC00)) + 0x10000


def _wtf8(code_point: int) -> bytes:
    return chr(code_point).encode("utf-8", "surrogatepass")


@dataclass(frozen=True)
class Position:
    """A one-based line and the number of bytes read on that line."""

    line: int
    column: int


class Scanner:
    """A cursor over JSON input bytes.

    ``str`` input is encoded as UTF-8. Positions count bytes; a newline
    starts a new line whose column begins at 0.
    """

    def __init__(self, data: Union[bytes, bytearray, memoryview, str]) -> None:
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self._index = 0

    # -- cursor ---------------------------------------------------------

    def peek(self) -> Optional[int]:
        """The next byte without consuming it, or ``None`` at the end."""
        if self._index < len(self._data):
            return self._data[self._index]
        return None

    def peek_or_null(self) -> int:
        """The next byte, or 0 at the end."""
        byte = self.peek()
        return 0 if byte is None else byte

    def next_char(self) -> Optional[int]:
        """Consume and return the next byte, or ``None`` at the end."""
        if self._index < len(self._data):
            byte = self._data[self._index]
            self._index += 1
            return byte
        return None

    def next_char_or_null(self) -> int:
        """Consume and return the next byte, or 0 at the end."""
        byte = self.next_char()
        return 0 if byte is None else byte

    def eat_char(self) -> None:
        """Consume the byte last peeked."""
        if self._index < len(self._data):
            self._index += 1

    def byte_offset(self) -> int:
        """Number of bytes consumed so far."""
        return self._index

    # -- positions and errors -------------------------------------------

    def _position_of_index(self, index: int) -> Position:
        line = 1 + self._data.count(b"\n", 0, index)
        last_newline = self._data.rfind(b"\n", 0, index)
        return Position(line, index - (last_newline + 1))

    def position(self) -> Position:
        """Position of the last consumed byte."""
        return self._position_of_index(self._index)

    def peek_position(self) -> Position:
        """Position of the byte that ``peek`` returns."""
        return self._position_of_index(min(len(self._data), self._index + 1))

    def error(self, code: ErrorCode) -> JsonError:
        """An error located at the last consumed byte."""
        pos = self.position()
        return JsonError.syntax(code, pos.line, pos.column)

    def peek_error(self, code: ErrorCode) -> JsonError:
        """An error located at the next byte."""
        pos = self.peek_position()
        return JsonError.syntax(code, pos.line, pos.column)

    def fix_position(self, err: JsonError) -> JsonError:
        """Give ``err`` the current position if it has none."""
        return err.fix_position(self.error)

    # -- tokens ---------------------------------------------------------

    def parse_whitespace(self) -> Optional[int]:
        """Skip whitespace; return the next byte unconsumed, or ``None``."""
        data = self._data
        index = self._index
        while index < len(data) and data[index] in _WHITESPACE:
            index += 1
        self._index = index
        return self.peek()

    def parse_ident(self, ident: bytes) -> None:
        """Consume exactly the bytes of ``ident``."""
        for expected in ident:
            byte = self.next_char()
            if byte is None:
                raise self.error(ErrorCode.EOF_WHILE_PARSING_VALUE)
            if byte != expected:
                raise self.error(ErrorCode.EXPECTED_SOME_IDENT)

    def parse_str(self) -> str:
        """Read a string body after its opening quote, as text."""
        raw = self._scan_string(validate=True)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            raise self.error(ErrorCode.INVALID_UNICODE_CODE_POINT) from None

    def parse_str_raw(self) -> bytes:
        """Read a string body after its opening quote, as bytes.

        The bytes are not checked for UTF-8; control characters are kept and
        lone surrogate escapes are encoded as three-byte sequences.
        """
        return self._scan_string(validate=False)

    def ignore_str(self) -> None:
        """Skip a string body after its opening quote."""
        data = self._data
        while True:
            match = _STRING_SPECIAL.search(data, self._index)
            if match is None:
                self._index = len(data)
                raise self.error(ErrorCode.EOF_WHILE_PARSING_STRING)
            self._index = match.start() + 1
            byte = data[match.start()]
            if byte == _QUOTE:
                return
            if byte == _BACKSLASH:
                escape = self._next_or_eof()
                if escape == _LETTER_U:
                    self._decode_hex_escape()
                elif escape not in _IGNORABLE_ESCAPES:
                    raise self.error(ErrorCode.INVALID_ESCAPE)
            else:
                raise self.error(ErrorCode.CONTROL_CHARACTER_WHILE_PARSING_STRING)

    # -- string internals -----------------------------------------------

    def _next_or_eof(self) -> int:
        byte = self.next_char()
        if byte is None:
            raise self.error(ErrorCode.EOF_WHILE_PARSING_STRING)
        return byte

    def _scan_string(self, validate: bool) -> bytes:
        data = self._data
        out = bytearray()
        while True:
            match = _STRING_SPECIAL.search(data, self._index)
            if match is None:
                out += data[self._index:]
                self._index = len(data)
                raise self.error(ErrorCode.EOF_WHILE_PARSING_STRING)
            start = match.start()
            out += data[self._index:start]
            self._index = start + 1
            byte = data[start]
            if byte == _QUOTE:
                return bytes(out)
            if byte == _BACKSLASH:
                self._parse_escape(out, validate)
            elif validate:
                raise self.error(ErrorCode.CONTROL_CHARACTER_WHILE_PARSING_STRING)
            else:
                out.append(byte)

    def _parse_escape(self, out: bytearray, validate: bool) -> None:
        escape = self._next_or_eof()
        simple = _SIMPLE_ESCAPES.get(escape)
        if simple is not None:
            out += simple
        elif escape == _LETTER_U:
            self._parse_unicode_escape(out, validate)
        else:
            raise self.error(ErrorCode.INVALID_ESCAPE)

    def _parse_unicode_escape(self, out: bytearray, validate: bool) -> None:
        lead = self._decode_hex_escape()
        if _is_trailing_surrogate(lead):
            if validate:
                raise self.error(ErrorCode.LONE_LEADING_SURROGATE_IN_HEX_ESCAPE)
            out += _wtf8(lead)
            return
        if not _is_leading_surrogate(lead):
            out += _wtf8(lead)
            return

        if validate:
            if self._next_or_eof() != _BACKSLASH:
                raise self.error(ErrorCode.UNEXPECTED_END_OF_HEX_ESCAPE)
            if self._next_or_eof() != _LETTER_U:
                raise self.error(ErrorCode.UNEXPECTED_END_OF_HEX_ESCAPE)
            trail = self._decode_hex_escape()
            if not _is_trailing_surrogate(trail):
                raise self.error(ErrorCode.LONE_LEADING_SURROGATE_IN_HEX_ESCAPE)
            out += _wtf8(_combine_surrogates(lead, trail))
            return

        trail = self._peek_escaped_trailing_surrogate()
        if trail is None:
            out += _wtf8(lead)
        else:
            self._index += 6
            out += _wtf8(_combine_surrogates(lead, trail))

    def _peek_escaped_trailing_surrogate(self) -> Optional[int]:
        index = self._index
        if self._data[index:index + 2] != b"\\u":
            return None
        match = _HEX4.match(self._data, index + 2)
        if match is None:
            return None
        value = int(match.group(), 16)
        return value if _is_trailing_surrogate(value) else None

    def _decode_hex_escape(self) -> int:
        data = self._data
        if self._index + 4 > len(data):
            self._index = len(data)
            raise self.error(ErrorCode.EOF_WHILE_PARSING_STRING)
        value = 0
        for _ in range(4):
            digit = _hex_value(data[self._index])
            self._index += 1
            if digit is None:
                raise self.error(ErrorCode.INVALID_ESCAPE)
            value = (value << 4) | digit
        return value
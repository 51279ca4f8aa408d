"""Errors raised while reading or writing JSON."""

from __future__ import annotations

import enum
import errno
import json
from typing import Callable, Optional, Tuple

__all__ = ["Category", "ErrorCode", "JsonError", "parse_line_col"]

_LINE_MARKER = " at line "
_COLUMN_MARKER = " column "


class Category(enum.Enum):
    """Broad classification of a :class:`JsonError`."""

    IO = "io"
    SYNTAX = "syntax"
    DATA = "data"
    EOF = "eof"


class ErrorCode(enum.Enum):
    """The specific reason behind a :class:`JsonError`.

    The value of each member is its human readable description, except for
    ``MESSAGE`` and ``IO`` whose text is carried by the error itself.
    """

    MESSAGE = "message"
    IO = "io error"
    EOF_WHILE_PARSING_LIST = "EOF while parsing a list"
    EOF_WHILE_PARSING_OBJECT = "EOF while parsing an object"
    EOF_WHILE_PARSING_STRING = "EOF while parsing a string"
    EOF_WHILE_PARSING_VALUE = "EOF while parsing a value"
    EXPECTED_COLON = "expected `:`"
    EXPECTED_LIST_COMMA_OR_END = "expected `,` or `]`"
    EXPECTED_OBJECT_COMMA_OR_END = "expected `,` or `}`"
    EXPECTED_SOME_IDENT = "expected ident"
    EXPECTED_SOME_VALUE = "expected value"
    INVALID_ESCAPE = "invalid escape"
    INVALID_NUMBER = "invalid number"
    NUMBER_OUT_OF_RANGE = "number out of range"
    INVALID_UNICODE_CODE_POINT = "invalid unicode code point"
    CONTROL_CHARACTER_WHILE_PARSING_STRING = (
        "control character (\\u0000-\\u001F) found while parsing a string"
    )
    KEY_MUST_BE_A_STRING = "key must be a string"
    LONE_LEADING_SURROGATE_IN_HEX_ESCAPE = "lone leading surrogate in hex escape"
    TRAILING_COMMA = "trailing comma"
    TRAILING_CHARACTERS = "trailing characters"
    UNEXPECTED_END_OF_HEX_ESCAPE = "unexpected end of hex escape"
    RECURSION_LIMIT_EXCEEDED = "recursion limit exceeded"


_EOF_CODES = frozenset(
    {
        ErrorCode.EOF_WHILE_PARSING_LIST,
        ErrorCode.EOF_WHILE_PARSING_OBJECT,
        ErrorCode.EOF_WHILE_PARSING_STRING,
        ErrorCode.EOF_WHILE_PARSING_VALUE,
    }
)


class JsonError(Exception):
    """An error found while reading or writing JSON.

    ``line`` and ``column`` are one-based; a line of 0 means the position
    is unknown.
    """

    def __init__(
        self,
        code: ErrorCode,
        line: int = 0,
        column: int = 0,
        message: Optional[str] = None,
    ) -> None:
        self.code = code
        self.line = line
        self.column = column
        self.message = message
        self.io_error: Optional[OSError] = None
        super().__init__(self.description)

    @property
    def description(self) -> str:
        """The description of the cause, without position."""
        if self.code in (ErrorCode.MESSAGE, ErrorCode.IO):
            return self.message or ""
        return self.code.value

    def __str__(self) -> str:
        if self.line == 0:
            return self.description
        return f"{self.description} at line {self.line} column {self.column}"

    def __repr__(self) -> str:
        text = json.dumps(self.description, ensure_ascii=False)
        return f"JsonError({text}, line: {self.line}, column: {self.column})"

    @classmethod
    def syntax(cls, code: ErrorCode, line: int, column: int) -> "JsonError":
        """An error with a known code at a known position."""
        return cls(code, line, column)

    @classmethod
    def custom(cls, msg: object) -> "JsonError":
        """A data error with a free-form message.

        A trailing ``" at line L column C"`` in the message is taken as the
        position of the error and removed from the text.
        """
        text = str(msg)
        parsed = parse_line_col(text)
        if parsed is None:
            return cls(ErrorCode.MESSAGE, 0, 0, text)
        stripped, line, column = parsed
        return cls(ErrorCode.MESSAGE, line, column, stripped)

    @classmethod
    def io(cls, error: OSError) -> "JsonError":
        """Wrap an I/O failure."""
        err = cls(ErrorCode.IO, 0, 0, str(error))
        err.io_error = error
        err.__cause__ = error
        return err

    @classmethod
    def invalid_type(cls, unexpected: Optional[str], expected: str) -> "JsonError":
        """A type mismatch; ``unexpected`` of ``None`` stands for JSON null."""
        found = "null" if unexpected is None else unexpected
        return cls.custom(f"invalid type: {found}, expected {expected}")

    def fix_position(
        self, make_error: Callable[[ErrorCode], "JsonError"]
    ) -> "JsonError":
        """Fill in an unknown position using ``make_error``.

        ``make_error`` receives the code and returns an error whose position
        is used. Errors that already have a position are returned unchanged.
        """
        if self.line != 0:
            return self
        located = make_error(self.code)
        fixed = type(self)(self.code, located.line, located.column, self.message)
        fixed.io_error = self.io_error
        if self.io_error is not None:
            fixed.__cause__ = self.io_error
        return fixed

    def classify(self) -> Category:
        """Categorize the cause of this error."""
        if self.code is ErrorCode.MESSAGE:
            return Category.DATA
        if self.code is ErrorCode.IO:
            return Category.IO
        if self.code in _EOF_CODES:
            return Category.EOF
        return Category.SYNTAX

    def is_io(self) -> bool:
        """True if caused by a failure to read or write bytes."""
        return self.classify() is Category.IO

    def is_syntax(self) -> bool:
        """True if caused by input that is not valid JSON."""
        return self.classify() is Category.SYNTAX

    def is_data(self) -> bool:
        """True if caused by semantically incorrect input data."""
        return self.classify() is Category.DATA

    def is_eof(self) -> bool:
        """True if caused by the input ending too early."""
        return self.classify() is Category.EOF

    def to_os_error(self) -> OSError:
        """Convert into an :class:`OSError`.

        I/O errors give back the wrapped error; syntax and data errors become
        ``EINVAL`` and end-of-input errors ``ENODATA`` (``EIO`` where that is
        not available).
        """
        if self.code is ErrorCode.IO and self.io_error is not None:
            return self.io_error
        if self.is_eof():
            number = getattr(errno, "ENODATA", errno.EIO)
        else:
            number = errno.EINVAL
        converted = OSError(number, str(self))
        converted.__cause__ = self
        return converted


def _digits_end(text: str, start: int) -> int:
    end = start
    while end < len(text) and "0" <= text[end] <= "9":
        end += 1
    return end


def parse_line_col(msg: str) -> Optional[Tuple[str, int, int]]:
    """Split a trailing ``" at line L column C"`` off ``msg``.

    Returns ``(text_without_suffix, line, column)`` or ``None`` when the
    message does not end with such a suffix.
    """
    start_of_suffix = msg.rfind(_LINE_MARKER)
    if start_of_suffix < 0:
        return None

    start_of_line = start_of_suffix + len(_LINE_MARKER)
    end_of_line = _digits_end(msg, start_of_line)
    if not msg.startswith(_COLUMN_MARKER, end_of_line):
        return None

    start_of_column = end_of_line + len(_COLUMN_MARKER)
    end_of_column = _digits_end(msg, start_of_column)
    if end_of_column < len(msg):
        return None

    line_digits = msg[start_of_line:end_of_line]
    column_digits = msg[start_of_column:end_of_column]
    if not line_digits or not column_digits:
        return None
    return msg[:start_of_suffix], int(line_digits), int(column_digits)
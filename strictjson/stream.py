"""Iterate over a stream of JSON values, and whole-document entry points."""

from __future__ import annotations

from typing import Any, Iterator, Union

from .de import Deserializer
from .error import ErrorCode, JsonError

__all__ = [
    "StreamDeserializer",
    "iter_values",
    "from_str",
    "from_slice",
    "from_reader",
]

# Values starting with one of these bytes show their own end.
_SELF_DELINEATED = frozenset(b'["{')

# Bytes that may directly follow a number, literal or other open-ended value.
_VALUE_TERMINATORS = frozenset(b' \n\t\r"[]{},:')


class StreamDeserializer:
    """Yield successive JSON values from one input.

    Values must be self-delineating (arrays, objects, strings) or be followed
    by whitespace or the start of a self-delineating value. A syntax error in
    a value is raised from ``__next__`` and ends the iteration.
    """

    def __init__(self, deserializer: Deserializer) -> None:
        self._de = deserializer
        self._offset = deserializer.scanner.byte_offset()
        self._failed = False

    def byte_offset(self) -> int:
        """Bytes consumed by values read successfully so far.

        After an end-of-input error, the remaining input starts at this
        offset and may be joined to more data to try again.
        """
        return self._offset

    def __iter__(self) -> Iterator[Any]:
        return self

    def __next__(self) -> Any:
        if self._failed:
            raise StopIteration
        scanner = self._de.scanner
        peek = scanner.parse_whitespace()
        if peek is None:
            self._offset = scanner.byte_offset()
            raise StopIteration

        self_delineated = peek in _SELF_DELINEATED
        self._offset = scanner.byte_offset()
        try:
            value = self._de.parse_value()
        except JsonError:
            self._failed = True
            raise
        self._offset = scanner.byte_offset()
        if not self_delineated:
            self._peek_end_of_value()
        return value

    def _peek_end_of_value(self) -> None:
        scanner = self._de.scanner
        byte = scanner.peek()
        if byte is None or byte in _VALUE_TERMINATORS:
            return
        position = scanner.peek_position()
        raise JsonError.syntax(
            ErrorCode.TRAILING_CHARACTERS, position.line, position.column
        )


def iter_values(data: Union[str, bytes, bytearray, memoryview]) -> StreamDeserializer:
    """Iterate over the JSON values in ``data``."""
    return StreamDeserializer(Deserializer(data))


def _from_deserializer(de: Deserializer) -> Any:
    value = de.parse_value()
    # The whole input must have been consumed.
    de.end()
    return value


def from_str(s: str) -> Any:
    """Parse a string holding exactly one JSON value."""
    return _from_deserializer(Deserializer.from_str(s))


def from_slice(data: Union[bytes, bytearray, memoryview]) -> Any:
    """Parse bytes holding exactly one JSON value."""
    return _from_deserializer(Deserializer.from_slice(data))


def from_reader(reader: Any) -> Any:
    """Parse exactly one JSON value from everything ``reader.read()`` returns."""
    return _from_deserializer(Deserializer.from_reader(reader))
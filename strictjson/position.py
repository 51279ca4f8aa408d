"""Byte iteration with line and column tracking."""

from __future__ import annotations

from typing import Iterable, Iterator

__all__ = ["LineColIterator"]

_NEWLINE = 0x0A


class LineColIterator:
    """Yield bytes from ``iterable`` while counting lines and columns.

    Lines are one-based. The column is the number of bytes read on the
    current line, so it is 0 right after a newline.
    """

    def __init__(self, iterable: Iterable[int]) -> None:
        self._iter: Iterator[int] = iter(iterable)
        self._line = 1
        self._col = 0
        self._start_of_line = 0

    def __iter__(self) -> "LineColIterator":
        return self

    def __next__(self) -> int:
        byte = next(self._iter)
        if byte == _NEWLINE:
            self._start_of_line += self._col + 1
            self._line += 1
            self._col = 0
        else:
            self._col += 1
        return byte

    def line(self) -> int:
        """The current one-based line."""
        return self._line

    def col(self) -> int:
        """Bytes read so far on the current line."""
        return self._col

    def byte_offset(self) -> int:
        """Total bytes read so far."""
        return self._start_of_line + self._col
"""Line iterator that tracks its position for error messages."""

from __future__ import annotations

from typing import Iterable, Iterator


class NumberedLines:
    """Iterator over text lines that remembers the 1-based number of the last line.

    The header parser and the assembler consume the same NumberedLines in
    turn, so error messages point at the real line of the file.
    """

    def __init__(self, lines: Iterable[str]) -> None:
        self._lines: Iterator[str] = iter(lines)
        self.line_no = 0

    def __iter__(self) -> "NumberedLines":
        return self

    def __next__(self) -> str:
        line = next(self._lines)
        self.line_no += 1
        return line


def numbered(lines: Iterable[str]) -> NumberedLines:
    """Wrap lines in a NumberedLines unless they already are one."""
    if isinstance(lines, NumberedLines):
        return lines
    return NumberedLines(lines)

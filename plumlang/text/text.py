from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """
    Half-open range [start, end) in source text.

    Invariant:
    - 0 <= start <= end

    Offsets are python string indices, so slicing the source with them is direct.
    """

    start: int
    end: int

    def __post_init__(self):
        if self.start < 0 or self.end < 0:
            raise ValueError("TextRange positions cannot be negative")
        if self.start > self.end:
            raise ValueError("TextRange invariant violated: start > end")

    @staticmethod
    def new(start: int, end: int) -> "TextRange":
        """Create a TextRange from start and end offsets."""
        return TextRange(start, end)

    @staticmethod
    def at(offset: int, length: int) -> "TextRange":
        """Create a TextRange at offset with given length."""
        return TextRange(offset, offset + length)

    @staticmethod
    def empty(offset: int) -> "TextRange":
        """Create an empty TextRange at the given offset."""
        return TextRange(offset, offset)

    def len(self) -> int:
        """Get the length of the range."""
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        """Get the range as a tuple of (start, end) integers."""
        return (self.start, self.end)

    def contains(self, offset: int) -> bool:
        return self.start <= offset < self.end

    def cover(self, other: "TextRange") -> "TextRange":
        """Get the minimal range that covers both this range and another range."""
        return TextRange(min(self.start, other.start), max(self.end, other.end))

    def shift(self, delta: int) -> "TextRange":
        return TextRange(self.start + delta, self.end + delta)

    def __repr__(self) -> str:
        return f"TextRange({self.start}, {self.end})"


ZERO_RANGE: Final[TextRange] = TextRange(0, 0)
"""Placeholder span for values that were not produced from source text."""


def slice_text_range(source: str, range: TextRange) -> str:
    """Get the substring of the source text covered by the given TextRange."""
    return source[range.start : range.end]


def line_col(source: str, offset: int) -> tuple[int, int]:
    """Zero-based (line, column) of an offset; offsets past the end clamp to the end."""
    offset = min(max(offset, 0), len(source))
    line = source.count("\n", 0, offset)
    line_start = source.rfind("\n", 0, offset) + 1
    return line, offset - line_start


def line_bounds(source: str, line: int) -> tuple[int, int]:
    """Start and end offsets of a zero-based line, excluding the newline."""
    start = 0
    for _ in range(line):
        next_newline = source.find("\n", start)
        if next_newline == -1:
            return len(source), len(source)
        start = next_newline + 1
    end = source.find("\n", start)
    if end == -1:
        end = len(source)
    return start, end

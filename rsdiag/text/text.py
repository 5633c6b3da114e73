"""Offsets and ranges into source text.

Offsets are Python string indices (code points), so a range slices the
source directly.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, order=True)
class TextSize:
    """Offset into source text, or a length."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError(f"TextSize cannot be negative: {self.value}")

    @classmethod
    def from_int(cls, value: int) -> "TextSize":
        return cls(value)

    def __add__(self, other: "TextSize") -> "TextSize":
        return TextSize(self.value + other.value)

    def __sub__(self, other: "TextSize") -> "TextSize":
        return TextSize(self.value - other.value)

    def __repr__(self) -> str:
        return f"TextSize({self.value})"


@dataclass(frozen=True, slots=True, order=True)
class TextRange:
    """Half-open range `[start, end)` with `start <= end`."""

    start: TextSize
    end: TextSize

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"TextRange start {self.start.value} is past its end {self.end.value}")

    @classmethod
    def new(cls, start: TextSize, end: TextSize) -> "TextRange":
        return cls(start, end)

    @classmethod
    def from_offsets(cls, start: int, end: int) -> "TextRange":
        return cls(TextSize(start), TextSize(end))

    @classmethod
    def at(cls, offset: TextSize, length: TextSize) -> "TextRange":
        return cls(offset, offset + length)

    @classmethod
    def empty(cls, offset: TextSize) -> "TextRange":
        return cls(offset, offset)

    def len(self) -> TextSize:
        return self.end - self.start

    def is_empty(self) -> bool:
        return self.start == self.end

    def as_tuple(self) -> tuple[int, int]:
        return (self.start.value, self.end.value)

    def contains(self, offset: TextSize) -> bool:
        return self.start <= offset < self.end

    def contains_strictly(self, offset: TextSize) -> bool:
        """Like `contains`, with the start excluded as well."""
        return self.start < offset < self.end

    def contains_range(self, other: "TextRange") -> bool:
        return self.start <= other.start and other.end <= self.end

    def is_disjoint(self, other: "TextRange") -> bool:
        """No start of either range falls inside the other.

        Empty ranges contain nothing, so an empty range is disjoint from
        everything except a range it starts inside of.
        """
        return not (self.contains(other.start) or other.contains(self.start))

    def touches(self, other: "TextRange") -> bool:
        """Ranges overlap or share an endpoint."""
        return self.start <= other.end and other.start <= self.end

    def cover(self, other: "TextRange") -> "TextRange":
        return TextRange(min(self.start, other.start), max(self.end, other.end))

    def __repr__(self) -> str:
        return f"TextRange({self.start.value}, {self.end.value})"


def slice_text_range(source: str, range: TextRange) -> str:
    return source[range.start.value : range.end.value]

"""Errors reported by the lexer and parser."""

from dataclasses import dataclass

from rsdiag.text import TextRange, TextSize

type Location = TextSize | TextRange
"""Either a single offset or a range in the source text."""


@dataclass(frozen=True, slots=True)
class ParseError:
    """A lexer/parser error anchored at an offset or a range."""

    code: str
    message: str
    location: Location

    @property
    def offset(self) -> TextSize:
        if isinstance(self.location, TextRange):
            return self.location.start
        return self.location

    def __str__(self) -> str:
        return self.message


def location_to_range(location: Location) -> TextRange:
    """Widen a single offset to a one-character range; ranges pass through."""
    if isinstance(location, TextRange):
        return location
    return TextRange.at(location, TextSize(1))

"""Parsed syntax marker utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rsdiag.parser.marker import CompletedMarker


@dataclass(frozen=True, slots=True)
class ParsedSyntax:
    """Success/failure wrapper for parse routines, carrying the completed node."""

    marker: CompletedMarker | None

    @staticmethod
    def present(marker: CompletedMarker) -> ParsedSyntax:
        return ParsedSyntax(marker=marker)

    @staticmethod
    def absent() -> ParsedSyntax:
        return ParsedSyntax(marker=None)

    def is_present(self) -> bool:
        return self.marker is not None

    def is_absent(self) -> bool:
        return self.marker is None

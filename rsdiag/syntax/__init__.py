"""Syntax vocabulary and parse errors."""

from rsdiag.syntax.kind import EXPRESSION_KINDS, RustSyntaxKind
from rsdiag.syntax.error import Location, ParseError, location_to_range

__all__ = [
    "EXPRESSION_KINDS",
    "Location",
    "ParseError",
    "RustSyntaxKind",
    "location_to_range",
]

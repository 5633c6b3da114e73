"""Parser infrastructure (token source + event-based parser + tree sink)."""

from rsdiag.parser.event import (
    Event,
    FinishEvent,
    StartEvent,
    TokenEvent,
    process_events,
)
from rsdiag.parser.grammar import PathMode, Restrictions, parse_source_file
from rsdiag.parser.marker import CompletedMarker, Marker
from rsdiag.parser.options import ParserOptions
from rsdiag.parser.parse_lists import ParseNodeList, ParseSeparatedList
from rsdiag.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from rsdiag.parser.parsed_syntax import ParsedSyntax
from rsdiag.parser.parser import Parser, ParserProgress
from rsdiag.parser.rust import parse, parse_result
from rsdiag.parser.token_source import TokenSource
from rsdiag.parser.tree_sink import LosslessTreeSink, ParsedGreenTree, build_lossless_tree

__all__ = [
    "CompletedMarker",
    "Event",
    "FinishEvent",
    "LosslessTreeSink",
    "Marker",
    "ParseNodeList",
    "ParseRecoveryTokenSet",
    "ParseSeparatedList",
    "ParsedGreenTree",
    "ParsedSyntax",
    "Parser",
    "ParserOptions",
    "ParserProgress",
    "PathMode",
    "RecoveryError",
    "Restrictions",
    "StartEvent",
    "TokenEvent",
    "TokenSource",
    "build_lossless_tree",
    "parse",
    "parse_result",
    "parse_source_file",
    "process_events",
]

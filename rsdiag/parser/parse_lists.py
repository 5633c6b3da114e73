"""Reusable list parse loops."""

from collections.abc import Callable
from dataclasses import dataclass

from rsdiag.diagnostics import PARSER_UNEXPECTED_TOKEN
from rsdiag.lexer import TokenKind
from rsdiag.parser.marker import CompletedMarker
from rsdiag.parser.parsed_syntax import ParsedSyntax
from rsdiag.parser.parser import Parser, ParserProgress
from rsdiag.syntax import RustSyntaxKind


@dataclass(slots=True)
class ParseNodeList:
    """Non-separated list parser with progress and recovery hooks."""

    list_kind: RustSyntaxKind
    is_at_list_end: Callable[[Parser], bool]
    parse_element: Callable[[Parser], ParsedSyntax]
    recover: Callable[[Parser, ParsedSyntax], bool]

    def parse_list(self, parser: Parser) -> CompletedMarker:
        marker = parser.start()
        self.parse_elements(parser)
        return marker.complete(parser, self.list_kind)

    def parse_elements(self, parser: Parser) -> None:
        """Run the element loop without wrapping the elements in a list node."""
        progress = ParserProgress()
        while not parser.at(TokenKind.EOF) and not self.is_at_list_end(parser):
            progress.assert_progressing(parser)
            parsed_element = self.parse_element(parser)
            if not self.recover(parser, parsed_element):
                break


@dataclass(slots=True)
class ParseSeparatedList:
    """Comma-style separated list between two delimiters, trailing separator allowed."""

    list_kind: RustSyntaxKind
    open: TokenKind
    close: TokenKind
    parse_element: Callable[[Parser], ParsedSyntax]
    recovery: frozenset[TokenKind]
    separator: TokenKind = TokenKind.COMMA

    def parse_list(self, parser: Parser) -> CompletedMarker:
        marker = parser.start()
        self.parse_delimited(parser)
        return marker.complete(parser, self.list_kind)

    def parse_delimited(self, parser: Parser) -> None:
        """Parse delimiters and elements into the currently open node."""
        parser.expect(self.open)
        progress = ParserProgress()
        stop = self.recovery | {self.close}
        while not parser.at(TokenKind.EOF) and not parser.at(self.close):
            progress.assert_progressing(parser)
            parsed = self.parse_element(parser)
            if parsed.is_absent():
                position = parser.position
                parser.err_recover(
                    PARSER_UNEXPECTED_TOKEN,
                    stop,
                    message=f"unexpected {parser.current.name} in list",
                )
                if parser.position == position:
                    break
                continue
            if parser.at(self.close):
                break
            parser.expect(self.separator)
        parser.expect(self.close)

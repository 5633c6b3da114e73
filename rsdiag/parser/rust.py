"""High-level parse entrypoint for Rust source text."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rsdiag.lexer import BufferedLexer, Lexer
from rsdiag.parser.grammar import parse_source_file
from rsdiag.parser.options import ParserOptions
from rsdiag.parser.parser import Parser
from rsdiag.parser.token_source import TokenSource
from rsdiag.parser.tree_sink import ParsedGreenTree, build_lossless_tree

if TYPE_CHECKING:
    from rsdiag.pipeline import SourceFile


def parse(text: str, options: ParserOptions | None = None) -> ParsedGreenTree:
    resolved_options = options if options is not None else ParserOptions()

    lexer = Lexer(text)
    buffered = BufferedLexer(lexer)
    source = TokenSource(buffered)
    parser = Parser(source, options=resolved_options)

    parse_source_file(parser)
    events, parser_errors = parser.finish()
    trivia, lexer_errors = source.finish()
    # Stable sort: at equal offsets lexer errors stay ahead of parser errors.
    errors = sorted([*lexer_errors, *parser_errors], key=lambda error: error.offset)

    return build_lossless_tree(
        text=text,
        events=events,
        trivia=trivia,
        errors=errors,
    )


def parse_result(text: str, options: ParserOptions | None = None) -> SourceFile:
    from rsdiag.pipeline import SourceFile

    resolved_options = options if options is not None else ParserOptions()
    return SourceFile(
        source_text=text,
        parsed=parse(text, options=resolved_options),
        options=resolved_options,
    )

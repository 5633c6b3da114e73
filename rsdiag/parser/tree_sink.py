"""Lossless tree sink: parser events plus recorded trivia into a green tree."""

from dataclasses import dataclass

from rsdiag.cst import GreenNode, TreeBuilder
from rsdiag.lexer import Trivia, TriviaPiece
from rsdiag.parser.event import Event, process_events
from rsdiag.syntax import ParseError, RustSyntaxKind
from rsdiag.text import TextSize


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    errors: list[ParseError]


class LosslessTreeSink:
    """Builds a green tree in which every source character belongs to one token.

    Trivia recorded by the token source is attached to a neighbouring token:
    pieces flagged `trailing` follow the previous token, the others precede the
    next one. The outermost node also receives the EOF token, which carries
    whatever trivia is left at the end of the file.
    """

    def __init__(self, text: str, trivia: list[Trivia]) -> None:
        self._text = text
        self._trivia = trivia
        self._next_trivia = 0
        self._cursor = 0
        self._depth = 0
        self._eof_emitted = False
        self._builder = TreeBuilder()

    def start_node(self, kind: RustSyntaxKind) -> None:
        self._builder.start_node(kind)
        self._depth += 1

    def token(self, kind: RustSyntaxKind, end: TextSize) -> None:
        self._emit_token(kind, end.value)

    def finish_node(self) -> None:
        if self._depth == 0:
            raise RuntimeError("finish_node without a matching start_node")
        self._depth -= 1
        if self._depth == 0 and not self._eof_emitted:
            self._emit_token(RustSyntaxKind.EOF, len(self._text))
        self._builder.finish_node()

    def finish(self) -> GreenNode:
        if self._cursor != len(self._text):
            raise RuntimeError(f"Tree covers {self._cursor} of {len(self._text)} characters")
        return self._builder.finish()

    def _emit_token(self, kind: RustSyntaxKind, end: int) -> None:
        if kind == RustSyntaxKind.EOF:
            self._eof_emitted = True
        leading = self._take_trivia(trailing=False, limit=end)
        text = self._text[self._cursor : end]
        self._cursor = end
        trailing = self._take_trivia(trailing=True, limit=len(self._text))
        self._builder.token_with_trivia(kind=kind, text=text, leading=leading, trailing=trailing)

    def _take_trivia(self, *, trailing: bool, limit: int) -> tuple[TriviaPiece, ...]:
        pieces: list[TriviaPiece] = []
        while self._next_trivia < len(self._trivia):
            trivia = self._trivia[self._next_trivia]
            if trivia.trailing != trailing or trivia.range.start.value != self._cursor:
                break
            if trivia.range.end.value > limit:
                break
            pieces.append(TriviaPiece(kind=trivia.kind, length=trivia.range.len()))
            self._cursor = trivia.range.end.value
            self._next_trivia += 1
        return tuple(pieces)


def build_lossless_tree(
    text: str,
    events: list[Event],
    trivia: list[Trivia],
    errors: list[ParseError],
) -> ParsedGreenTree:
    sink = LosslessTreeSink(text, trivia)
    process_events(sink, events)
    return ParsedGreenTree(root=sink.finish(), errors=errors)

"""Parser state shared by every grammar function.

The parser never builds a tree. It appends start/token/finish events that
the tree sink replays later, and it collects errors as it goes.
"""

from collections.abc import Collection
from dataclasses import dataclass

from rsdiag.diagnostics import PARSER_EXPECTED_TOKEN, DiagnosticSpec
from rsdiag.lexer import TokenKind
from rsdiag.parser.event import Event, StartEvent, TokenEvent
from rsdiag.parser.marker import CompletedMarker, Marker
from rsdiag.parser.options import ParserOptions
from rsdiag.parser.token_source import TokenSource
from rsdiag.syntax import Location, ParseError, RustSyntaxKind
from rsdiag.text import TextRange, TextSize


@dataclass(slots=True)
class ParserProgress:
    """Guard for loops: each iteration has to move past at least one token."""

    last_position: TextSize | None = None

    def assert_progressing(self, parser: "Parser") -> None:
        position = parser.position
        if self.last_position is not None and position <= self.last_position:
            raise RuntimeError(f"Parser is stuck at {parser.current.name} {parser.current_range}")
        self.last_position = position


class Parser:
    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._tokens = source
        self.options = options or ParserOptions()
        self.events: list[Event] = []
        self._errors: list[ParseError] = []
        # end of the last bumped token; missing tokens are reported here
        self._prev_end = TextSize(0)

    @property
    def current(self) -> TokenKind:
        return self._tokens.current

    @property
    def current_range(self) -> TextRange:
        return self._tokens.current_range

    @property
    def position(self) -> TextSize:
        return self._tokens.position

    @property
    def has_preceding_line_break(self) -> bool:
        return self._tokens.has_preceding_line_break

    def nth(self, n: int) -> TokenKind:
        return self._tokens.nth(n)

    def at(self, kind: TokenKind) -> bool:
        return self._tokens.current == kind

    def nth_at(self, n: int, kind: TokenKind) -> bool:
        return self._tokens.nth(n) == kind

    def at_set(self, kinds: Collection[TokenKind]) -> bool:
        return self._tokens.current in kinds

    def at_joined(self, *kinds: TokenKind) -> bool:
        """Whether the upcoming tokens are `kinds`, written with no trivia between them.

        Used for operators the lexer leaves split, such as `>>=` or `<=`.
        """
        return all(
            self.nth(n) == kind and (n == 0 or not self._tokens.has_nth_preceding_trivia(n))
            for n, kind in enumerate(kinds)
        )

    def start(self) -> Marker:
        self.events.append(StartEvent.tombstone())
        return Marker(pos=len(self.events) - 1)

    def bump(self) -> None:
        """Move the current token into the open node. A no-op at EOF."""
        if self.at(TokenKind.EOF):
            return
        end = self.current_range.end
        self.events.append(TokenEvent(kind=RustSyntaxKind.from_token_kind(self.current), end=end))
        self._prev_end = end
        self._tokens.bump()

    def bump_n(self, count: int) -> None:
        for _ in range(count):
            self.bump()

    def eat(self, kind: TokenKind) -> bool:
        if not self.at(kind):
            return False
        self.bump()
        return True

    def expect(self, kind: TokenKind) -> bool:
        """Eat `kind` or report it as missing right after the previous token."""
        if self.eat(kind):
            return True
        self.error(PARSER_EXPECTED_TOKEN, f"expected {kind.name}", at=self._prev_end)
        return False

    def error(self, spec: DiagnosticSpec, message: str | None = None, *, at: Location | None = None) -> None:
        """Record an error at `at`, or at the current token.

        A second error at the offset of the previous one is dropped, since it
        is almost always a consequence of the first.
        """
        error = ParseError(
            code=spec.code,
            message=message or spec.message,
            location=self.current_range if at is None else at,
        )
        if not self._errors or self._errors[-1].offset != error.offset:
            self._errors.append(error)

    def error_expected(self, spec: DiagnosticSpec) -> None:
        self.error(spec, at=self._prev_end)

    def err_and_bump(self, spec: DiagnosticSpec, message: str | None = None) -> CompletedMarker:
        """Report the current token and wrap it in an ERROR node."""
        marker = self.start()
        self.error(spec, message)
        self.bump()
        return marker.complete(self, RustSyntaxKind.ERROR)

    def err_recover(
        self,
        spec: DiagnosticSpec,
        recovery: frozenset[TokenKind],
        message: str | None = None,
    ) -> None:
        """Report an error; consume the current token unless it can resume parsing."""
        if self.at_set(recovery) or self.at_set((TokenKind.L_CURLY, TokenKind.R_CURLY)):
            self.error(spec, message)
        else:
            self.err_and_bump(spec, message)

    def finish(self) -> tuple[list[Event], list[ParseError]]:
        return self.events, self._errors

"""Token source: the parser's view of the token stream, with trivia set aside."""

from rsdiag.lexer import BufferedLexer, Token, TokenKind, Trivia, TriviaKind
from rsdiag.lexer.tokens import trivia_kind_from_token_kind
from rsdiag.syntax.error import ParseError
from rsdiag.text import TextRange, TextSize


class TokenSource:
    """Feeds non-trivia tokens to the parser and records the trivia it skips.

    Each trivia piece is marked trailing when it sits on the same line as the
    token before it. The first newline ends the trailing run: it and whatever
    follows belong to the next token as leading trivia. Trivia before the
    first token is always leading.
    """

    def __init__(self, lexer: BufferedLexer) -> None:
        self._lexer = lexer
        self._trivia: list[Trivia] = []
        self._current = Token(TokenKind.EOF, TextRange.empty(TextSize(0)))
        self._after_line_break = False
        self._after_trivia = False
        self._advance(trailing=False)

    @property
    def current(self) -> TokenKind:
        return self._current.kind

    @property
    def current_range(self) -> TextRange:
        return self._current.range

    @property
    def position(self) -> TextSize:
        return self._current.range.start

    @property
    def has_preceding_line_break(self) -> bool:
        return self._after_line_break

    @property
    def trivia(self) -> list[Trivia]:
        return self._trivia

    def bump(self) -> None:
        if self._current.kind != TokenKind.EOF:
            self._advance(trailing=True)

    def nth(self, n: int) -> TokenKind:
        return self._nth_token(n).kind

    def nth_range(self, n: int) -> TextRange:
        return self._nth_token(n).range

    def has_nth_preceding_trivia(self, n: int) -> bool:
        """Whether anything separates the (n-1)-th and n-th upcoming tokens."""
        if n == 0:
            return self._after_trivia
        return self.nth_range(n).start > self.nth_range(n - 1).end

    def finish(self) -> tuple[list[Trivia], list[ParseError]]:
        return self._trivia, self._lexer.finish()

    def _nth_token(self, n: int) -> Token:
        return self._current if n == 0 else self._lexer.nth_non_trivia(n)

    def _advance(self, trailing: bool) -> None:
        self._after_line_break = False
        self._after_trivia = False
        token = self._lexer.next_token()
        while token.kind.is_trivia:
            kind = trivia_kind_from_token_kind(token.kind)
            if kind == TriviaKind.NEWLINE:
                trailing = False
                self._after_line_break = True
            self._trivia.append(Trivia(kind, token.range, trailing))
            self._after_trivia = True
            token = self._lexer.next_token()
        self._after_line_break = self._after_line_break or token.has_preceding_line_break()
        self._current = token

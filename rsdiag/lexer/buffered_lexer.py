"""Buffered lexer with lookahead support."""

from collections import deque

from rsdiag.lexer.lexer import Lexer
from rsdiag.lexer.tokens import Token, TokenKind
from rsdiag.syntax.error import ParseError


class BufferedLexer:
    """Lexer wrapper for lookahead.

    Tokens lexed ahead are kept in a queue and handed out in order by
    `next_token`; the inner lexer is never rewound.
    """

    def __init__(self, lexer: Lexer) -> None:
        self._inner = lexer
        self._lookahead: deque[Token] = deque()

    @property
    def inner(self) -> Lexer:
        return self._inner

    @property
    def source(self) -> str:
        return self._inner.source

    def next_token(self) -> Token:
        if self._lookahead:
            return self._lookahead.popleft()
        return self._inner.next_token()

    def nth_non_trivia(self, n: int) -> Token:
        """Return the n-th upcoming non-trivia token (1-based); EOF once input runs out."""
        if n <= 0:
            raise ValueError("n must be >= 1")

        remaining = n
        for token in self._lookahead:
            if token.kind.is_trivia:
                continue
            remaining -= 1
            if remaining == 0 or token.kind == TokenKind.EOF:
                return token

        while True:
            token = self._inner.next_token()
            self._lookahead.append(token)
            if token.kind.is_trivia:
                continue
            remaining -= 1
            if remaining == 0 or token.kind == TokenKind.EOF:
                return token

    def finish(self) -> list[ParseError]:
        return self._inner.errors

"""Lexer."""

from rsdiag.lexer.buffered_lexer import BufferedLexer
from rsdiag.lexer.lexer import Lexer, dump_tokens, token_text
from rsdiag.lexer.tokens import (
    KEYWORDS,
    Token,
    TokenFlags,
    TokenKind,
    Trivia,
    TriviaKind,
    TriviaPiece,
)

__all__ = [
    "KEYWORDS",
    "BufferedLexer",
    "Lexer",
    "Token",
    "TokenFlags",
    "TokenKind",
    "Trivia",
    "TriviaKind",
    "TriviaPiece",
    "dump_tokens",
    "token_text",
]

"""Lexer."""

from typing import Final

from rsdiag.diagnostics.codes import (
    LEXER_UNKNOWN_CHARACTER,
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_CHAR,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from rsdiag.lexer.tokens import KEYWORDS, Token, TokenFlags, TokenKind
from rsdiag.syntax.error import ParseError
from rsdiag.text import TextRange, slice_text_range

# `<`/`>`-based compound operators are glued by the parser so that generic
# argument lists like `Vec<Vec<u8>>` can be closed one `>` at a time.
_PUNCTUATION: Final[tuple[tuple[str, TokenKind], ...]] = (
    ("..=", TokenKind.DOT2EQ),
    ("..", TokenKind.DOT2),
    ("::", TokenKind.COLON2),
    ("->", TokenKind.THIN_ARROW),
    ("=>", TokenKind.FAT_ARROW),
    ("==", TokenKind.EQ2),
    ("!=", TokenKind.NEQ),
    ("&&", TokenKind.AMP2),
    ("||", TokenKind.PIPE2),
    ("+=", TokenKind.PLUSEQ),
    ("-=", TokenKind.MINUSEQ),
    ("*=", TokenKind.STAREQ),
    ("/=", TokenKind.SLASHEQ),
    ("%=", TokenKind.PERCENTEQ),
    ("^=", TokenKind.CARETEQ),
    ("&=", TokenKind.AMPEQ),
    ("|=", TokenKind.PIPEEQ),
    (";", TokenKind.SEMICOLON),
    (",", TokenKind.COMMA),
    (".", TokenKind.DOT),
    (":", TokenKind.COLON),
    ("#", TokenKind.POUND),
    ("$", TokenKind.DOLLAR),
    ("@", TokenKind.AT),
    ("?", TokenKind.QUESTION),
    ("~", TokenKind.TILDE),
    ("=", TokenKind.EQ),
    ("<", TokenKind.LT),
    (">", TokenKind.GT),
    ("!", TokenKind.BANG),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.STAR),
    ("/", TokenKind.SLASH),
    ("%", TokenKind.PERCENT),
    ("^", TokenKind.CARET),
    ("&", TokenKind.AMP),
    ("|", TokenKind.PIPE),
    ("{", TokenKind.L_CURLY),
    ("}", TokenKind.R_CURLY),
    ("[", TokenKind.L_BRACK),
    ("]", TokenKind.R_BRACK),
    ("(", TokenKind.L_PAREN),
    (")", TokenKind.R_PAREN),
)


class Lexer:
    """Splits source text into tokens, trivia included, without losing a character.

    Lexing never fails: malformed input still produces a token covering the
    offending text, and the problem is recorded in `errors`.
    """

    def __init__(self, source: str) -> None:
        self._source = source
        self._pos = 0
        self._token_start = 0
        self._flags = TokenFlags.NONE
        # set by a newline, consumed by the next non-trivia token
        self._line_break_pending = False
        self._errors: list[ParseError] = []

    @property
    def source(self) -> str:
        return self._source

    @property
    def errors(self) -> list[ParseError]:
        return self._errors

    def next_token(self) -> Token:
        """Lex one token; at the end of input this keeps returning EOF."""
        self._token_start = self._pos
        self._flags = TokenFlags.NONE
        kind = TokenKind.EOF if self._at_end() else self._lex_token()
        if self._line_break_pending and not kind.is_trivia:
            self._flags |= TokenFlags.PRECEDING_LINE_BREAK
            self._line_break_pending = False
        return Token(kind, TextRange.from_offsets(self._token_start, self._pos), self._flags)

    def lex(self) -> list[Token]:
        """All tokens up to and including EOF."""
        tokens = [self.next_token()]
        while tokens[-1].kind != TokenKind.EOF:
            tokens.append(self.next_token())
        return tokens

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _lex_token(self) -> TokenKind:
        ch = self._char()

        if ch in "\r\n\t ":
            return self._lex_whitespace()

        if ch == "/" and self._peek() == "/":
            return self._lex_line_comment()
        if ch == "/" and self._peek() == "*":
            return self._lex_block_comment()

        if ch == '"':
            return self._lex_string(TokenKind.STRING)
        if ch == "'":
            return self._lex_quote()

        if ch == "r" and (self._peek() == '"' or (self._peek() == "#" and self._raw_string_ahead(1))):
            return self._lex_raw_string(TokenKind.STRING)
        if ch == "b" and self._peek() == '"':
            self._advance(1)
            return self._lex_string(TokenKind.BYTE_STRING)
        if ch == "b" and self._peek() == "'":
            self._advance(1)
            return self._lex_char(TokenKind.BYTE)
        if ch == "b" and self._peek() == "r" and self._raw_string_ahead(2):
            self._advance(1)
            return self._lex_raw_string(TokenKind.BYTE_STRING)
        if ch == "r" and self._peek() == "#" and _is_ident_start(self._peek(2)):
            self._advance(2)
            self._flags |= TokenFlags.IS_RAW
            self._consume_ident_rest()
            return TokenKind.IDENT

        if ch.isdigit():
            return self._lex_number()

        if _is_ident_start(ch):
            return self._lex_identifier()

        for text, kind in _PUNCTUATION:
            if self._source.startswith(text, self._pos):
                self._advance(len(text))
                return kind

        self._advance(1)
        self._error(LEXER_UNKNOWN_CHARACTER, f"{LEXER_UNKNOWN_CHARACTER.message} {ch!r}")
        return TokenKind.SKIPPED

    def _lex_line_comment(self) -> TokenKind:
        # Consume until end of line, do not consume the newline itself.
        while not self._at_end() and self._char() not in "\r\n":
            self._advance(1)
        return TokenKind.COMMENT

    def _lex_block_comment(self) -> TokenKind:
        self._advance(2)
        depth = 1
        while not self._at_end():
            if self._char() == "/" and self._peek() == "*":
                self._advance(2)
                depth += 1
                continue
            if self._char() == "*" and self._peek() == "/":
                self._advance(2)
                depth -= 1
                if depth == 0:
                    return TokenKind.COMMENT
                continue
            self._advance(1)
        self._error(LEXER_UNTERMINATED_BLOCK_COMMENT)
        return TokenKind.COMMENT

    def _lex_string(self, kind: TokenKind) -> TokenKind:
        self._advance(1)
        while not self._at_end():
            ch = self._char()
            if ch == '"':
                self._advance(1)
                return kind
            if ch == "\\":
                self._flags |= TokenFlags.HAS_ESCAPE
                self._advance(2)
                continue
            self._advance(1)
        self._pos = len(self._source)
        self._error(LEXER_UNTERMINATED_STRING)
        return kind

    def _raw_string_ahead(self, ahead: int) -> bool:
        index = self._pos + ahead
        while index < len(self._source) and self._source[index] == "#":
            index += 1
        return index < len(self._source) and self._source[index] == '"'

    def _lex_raw_string(self, kind: TokenKind) -> TokenKind:
        # Positioned on the `r`.
        self._advance(1)
        self._flags |= TokenFlags.IS_RAW
        hashes = 0
        while self._char() == "#":
            hashes += 1
            self._advance(1)
        self._advance(1)
        terminator = '"' + "#" * hashes
        end = self._source.find(terminator, self._pos)
        if end < 0:
            self._pos = len(self._source)
            self._error(LEXER_UNTERMINATED_STRING)
            return kind
        self._pos = end + len(terminator)
        return kind

    def _lex_quote(self) -> TokenKind:
        # `'a` is a lifetime unless it is closed right after one character: `'a'`.
        if _is_ident_start(self._peek()) and self._peek(2) != "'":
            self._advance(1)
            self._consume_ident_rest()
            return TokenKind.LIFETIME
        return self._lex_char(TokenKind.CHAR)

    def _lex_char(self, kind: TokenKind) -> TokenKind:
        self._advance(1)
        while not self._at_end():
            ch = self._char()
            if ch == "'":
                self._advance(1)
                return kind
            if ch in "\r\n":
                break
            if ch == "\\":
                self._flags |= TokenFlags.HAS_ESCAPE
                self._advance(2)
                continue
            self._advance(1)
        self._error(LEXER_UNTERMINATED_CHAR)
        return kind

    def _lex_number(self) -> TokenKind:
        if self._char() == "0" and self._peek() in ("x", "o", "b"):
            self._advance(2)
            while _is_ident_continue(self._char()):
                self._advance(1)
            return TokenKind.INT_NUMBER

        is_float = False
        self._consume_digits()
        # `1.foo()` and `1..2` keep the dot out of the literal.
        if self._char() == "." and self._peek().isdigit():
            is_float = True
            self._advance(1)
            self._consume_digits()
        if self._char() in ("e", "E") and (
            self._peek().isdigit() or (self._peek() in ("+", "-") and self._peek(2).isdigit())
        ):
            is_float = True
            self._advance(2)
            self._consume_digits()

        suffix_start = self._pos
        if _is_ident_start(self._char()):
            self._consume_ident_rest()
            if self._source[suffix_start : self._pos] in ("f32", "f64"):
                is_float = True
        return TokenKind.FLOAT_NUMBER if is_float else TokenKind.INT_NUMBER

    def _consume_digits(self) -> None:
        while not self._at_end() and (self._char().isdigit() or self._char() == "_"):
            self._advance(1)

    def _lex_identifier(self) -> TokenKind:
        start = self._pos
        self._consume_ident_rest()
        text = self._source[start : self._pos]
        if text == "_":
            return TokenKind.UNDERSCORE
        return KEYWORDS.get(text, TokenKind.IDENT)

    def _consume_ident_rest(self) -> None:
        self._advance(1)
        while not self._at_end() and _is_ident_continue(self._char()):
            self._advance(1)

    def _lex_whitespace(self) -> TokenKind:
        if self._consume_newline():
            self._line_break_pending = True
            return TokenKind.NEWLINE
        while not self._at_end() and self._char() in (" ", "\t"):
            self._advance(1)
        return TokenKind.WHITESPACE

    def _consume_newline(self) -> bool:
        if self._char() == "\n":
            self._advance(1)
            return True
        if self._char() == "\r":
            if self._peek() == "\n":
                self._advance(2)
            else:
                self._advance(1)
            return True
        return False

    def _error(self, spec: DiagnosticSpec, message: str | None = None) -> None:
        location = TextRange.from_offsets(self._token_start, self._pos)
        self._errors.append(ParseError(code=spec.code, message=message or spec.message, location=location))

    def _char(self) -> str:
        if self._at_end():
            return "\0"
        return self._source[self._pos]

    def _peek(self, ahead: int = 1) -> str:
        index = self._pos + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._pos = min(self._pos + steps, len(self._source))


def _is_ident_start(ch: str) -> bool:
    return ch.isalpha() or ch == "_"


def _is_ident_continue(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, errors: list[ParseError] | None = None) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<18} range={tok.range.as_tuple()} flags={tok.flags} text={text!r}")

    if errors is not None:
        print("\nErrors:")
        for error in errors:
            print(f"- {error.code} location={error.location!r} message={error.message}")

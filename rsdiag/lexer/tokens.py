"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Final

from rsdiag.text import TextRange, TextSize


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12
    SKIPPED = 13  # unknown characters, kept so the tree stays lossless

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENT = 20
    INT_NUMBER = 21
    FLOAT_NUMBER = 22
    STRING = 23  # "..." and r#"..."#
    BYTE_STRING = 24
    CHAR = 25
    BYTE = 26
    LIFETIME = 27  # 'a

    # -------------------------
    # Keywords
    # -------------------------
    AS_KW = 40
    BREAK_KW = 41
    CONST_KW = 42
    CONTINUE_KW = 43
    CRATE_KW = 44
    ELSE_KW = 45
    ENUM_KW = 46
    FALSE_KW = 47
    FN_KW = 48
    FOR_KW = 49
    IF_KW = 50
    IMPL_KW = 51
    IN_KW = 52
    LET_KW = 53
    LOOP_KW = 54
    MATCH_KW = 55
    MOD_KW = 56
    MOVE_KW = 57
    MUT_KW = 58
    PUB_KW = 59
    REF_KW = 60
    RETURN_KW = 61
    SELF_KW = 62
    SELF_TYPE_KW = 63  # Self
    STATIC_KW = 64
    STRUCT_KW = 65
    SUPER_KW = 66
    TRAIT_KW = 67
    TRUE_KW = 68
    TYPE_KW = 69
    UNSAFE_KW = 70
    USE_KW = 71
    WHERE_KW = 72
    WHILE_KW = 73
    DYN_KW = 74

    # -------------------------
    # Punctuation / operators (multi-char included)
    # -------------------------
    SEMICOLON = 100  # ;
    COMMA = 101  # ,
    DOT = 102  # .
    DOT2 = 103  # ..
    DOT2EQ = 104  # ..=
    COLON = 105  # :
    COLON2 = 106  # ::
    THIN_ARROW = 107  # ->
    FAT_ARROW = 108  # =>
    POUND = 109  # #
    DOLLAR = 110  # $
    AT = 111  # @
    QUESTION = 112  # ?
    TILDE = 113  # ~
    UNDERSCORE = 114  # _

    EQ = 120  # =
    EQ2 = 121  # ==
    NEQ = 122  # !=
    LT = 123  # <
    GT = 124  # >
    BANG = 127  # !
    PLUS = 128  # +
    MINUS = 129  # -
    STAR = 130  # *
    SLASH = 131  # /
    PERCENT = 132  # %
    CARET = 133  # ^
    AMP = 134  # &
    PIPE = 135  # |
    AMP2 = 136  # &&
    PIPE2 = 137  # ||
    PLUSEQ = 140  # +=
    MINUSEQ = 141  # -=
    STAREQ = 142  # *=
    SLASHEQ = 143  # /=
    PERCENTEQ = 144  # %=
    CARETEQ = 145  # ^=
    AMPEQ = 146  # &=
    PIPEEQ = 147  # |=

    L_CURLY = 160  # {
    R_CURLY = 161  # }
    L_BRACK = 162  # [
    R_BRACK = 163  # ]
    L_PAREN = 164  # (
    R_PAREN = 165  # )

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
            TokenKind.SKIPPED,
        )

    @property
    def is_keyword(self) -> bool:
        return TokenKind.AS_KW <= self <= TokenKind.DYN_KW


KEYWORDS: Final[dict[str, TokenKind]] = {
    "as": TokenKind.AS_KW,
    "break": TokenKind.BREAK_KW,
    "const": TokenKind.CONST_KW,
    "continue": TokenKind.CONTINUE_KW,
    "crate": TokenKind.CRATE_KW,
    "dyn": TokenKind.DYN_KW,
    "else": TokenKind.ELSE_KW,
    "enum": TokenKind.ENUM_KW,
    "false": TokenKind.FALSE_KW,
    "fn": TokenKind.FN_KW,
    "for": TokenKind.FOR_KW,
    "if": TokenKind.IF_KW,
    "impl": TokenKind.IMPL_KW,
    "in": TokenKind.IN_KW,
    "let": TokenKind.LET_KW,
    "loop": TokenKind.LOOP_KW,
    "match": TokenKind.MATCH_KW,
    "mod": TokenKind.MOD_KW,
    "move": TokenKind.MOVE_KW,
    "mut": TokenKind.MUT_KW,
    "pub": TokenKind.PUB_KW,
    "ref": TokenKind.REF_KW,
    "return": TokenKind.RETURN_KW,
    "self": TokenKind.SELF_KW,
    "Self": TokenKind.SELF_TYPE_KW,
    "static": TokenKind.STATIC_KW,
    "struct": TokenKind.STRUCT_KW,
    "super": TokenKind.SUPER_KW,
    "trait": TokenKind.TRAIT_KW,
    "true": TokenKind.TRUE_KW,
    "type": TokenKind.TYPE_KW,
    "unsafe": TokenKind.UNSAFE_KW,
    "use": TokenKind.USE_KW,
    "where": TokenKind.WHERE_KW,
    "while": TokenKind.WHILE_KW,
}


class TriviaKind(IntEnum):
    """The trivia vocabulary (separate from TokenKind for type-safety)."""

    WHITESPACE = 1
    NEWLINE = 2
    COMMENT = 3
    SKIPPED = 4


def trivia_kind_from_token_kind(kind: TokenKind) -> TriviaKind:
    """Map lexer trivia token kinds to TriviaKind.

    Raises if called with a non-trivia TokenKind.
    """
    match kind:
        case TokenKind.NEWLINE:
            return TriviaKind.NEWLINE
        case TokenKind.WHITESPACE:
            return TriviaKind.WHITESPACE
        case TokenKind.COMMENT:
            return TriviaKind.COMMENT
        case TokenKind.SKIPPED:
            return TriviaKind.SKIPPED
        case _:
            raise ValueError(f"Not a trivia token kind: {kind!r}")


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0
    HAS_ESCAPE = 1 << 1
    IS_RAW = 1 << 2


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)


@dataclass(frozen=True, slots=True)
class Trivia:
    """Range-based trivia recorded by the TokenSource (range + trailing ownership)."""

    kind: TriviaKind
    range: TextRange
    trailing: bool


@dataclass(frozen=True, slots=True)
class TriviaPiece:
    """Compact trivia unit stored in the CST (kind + length)."""

    kind: TriviaKind
    length: TextSize

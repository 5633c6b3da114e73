"""Token-set recovery: skip unexpected tokens into a single ERROR node."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from rsdiag.lexer import TokenKind
from rsdiag.parser.marker import CompletedMarker
from rsdiag.parser.parser import Parser
from rsdiag.syntax import RustSyntaxKind

_CLOSING_DELIMITER: Final[dict[TokenKind, TokenKind]] = {
    TokenKind.L_PAREN: TokenKind.R_PAREN,
    TokenKind.L_BRACK: TokenKind.R_BRACK,
    TokenKind.L_CURLY: TokenKind.R_CURLY,
}
_CLOSERS: Final[frozenset[TokenKind]] = frozenset(_CLOSING_DELIMITER.values())


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Skip tokens until one of `recovery_set`, or a line break when enabled.

    Delimited groups opened while skipping are skipped whole: a recovery token
    nested in `(...)`, `[...]` or `{...}` on the same line does not stop
    recovery. A closing delimiter that does not match the innermost open group
    always stops it, as it belongs to an enclosing construct.
    """

    node_kind: RustSyntaxKind
    recovery_set: frozenset[TokenKind]
    line_break: bool = False

    def recover(self, parser: Parser) -> tuple[CompletedMarker | None, RecoveryError | None]:
        if parser.at(TokenKind.EOF):
            return None, RecoveryError.EOF
        if self.is_at_recovered(parser):
            return None, RecoveryError.ALREADY_RECOVERED

        marker = parser.start()
        open_groups: list[TokenKind] = []
        while True:
            current = parser.current
            if current in _CLOSING_DELIMITER:
                open_groups.append(_CLOSING_DELIMITER[current])
            elif open_groups and current == open_groups[-1]:
                open_groups.pop()
            parser.bump()
            if self._stops_at(parser, open_groups):
                break
        return marker.complete(parser, self.node_kind), None

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.recovery_set) or (self.line_break and parser.has_preceding_line_break)

    def _stops_at(self, parser: Parser, open_groups: list[TokenKind]) -> bool:
        if parser.at(TokenKind.EOF):
            return True
        if self.line_break and parser.has_preceding_line_break:
            return True
        if not parser.at_set(self.recovery_set):
            return False
        if not open_groups or parser.has_preceding_line_break:
            return True
        return parser.current in _CLOSERS and parser.current != open_groups[-1]

"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final

from rsdiag.diagnostics.diagnostic import Severity


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


SYNTAX_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="SYNTAX_ERROR",
    message="Syntax Error",
    severity="error",
    category="syntax",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Missing trailing `\"` symbol to terminate the string literal",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_CHAR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_CHAR",
    message="Missing trailing `'` symbol to terminate the character literal",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_BLOCK_COMMENT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_BLOCK_COMMENT",
    message="Missing trailing `*/` symbols to terminate the block comment",
    severity="error",
    category="lexer",
)

LEXER_UNKNOWN_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNKNOWN_CHARACTER",
    message="Unknown character",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_ITEM: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_ITEM",
    message="expected an item",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="expected expression",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_TYPE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TYPE",
    message="expected type",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_PATTERN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_PATTERN",
    message="expected pattern",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_NAME",
    message="expected a name",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="unexpected token",
    severity="error",
    category="parser",
)

LINT_STYLE_UNNECESSARY_BRACES: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LINT_STYLE_UNNECESSARY_BRACES",
    message="Unnecessary braces in use statement",
    hint="Remove unnecessary braces",
    severity="weak_warning",
    category="lint/style",
)

LINT_STYLE_STRUCT_SHORTHAND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LINT_STYLE_STRUCT_SHORTHAND",
    message="Shorthand struct initialization",
    hint="Use struct shorthand initialization",
    severity="weak_warning",
    category="lint/style",
)

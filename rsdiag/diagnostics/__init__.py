"""Diagnostics."""

from rsdiag.diagnostics.codes import (
    LEXER_UNKNOWN_CHARACTER,
    LEXER_UNTERMINATED_BLOCK_COMMENT,
    LEXER_UNTERMINATED_CHAR,
    LEXER_UNTERMINATED_STRING,
    LINT_STYLE_STRUCT_SHORTHAND,
    LINT_STYLE_UNNECESSARY_BRACES,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_ITEM,
    PARSER_EXPECTED_NAME,
    PARSER_EXPECTED_PATTERN,
    PARSER_EXPECTED_TOKEN,
    PARSER_EXPECTED_TYPE,
    PARSER_UNEXPECTED_TOKEN,
    SYNTAX_ERROR,
    DiagnosticSpec,
)
from rsdiag.diagnostics.diagnostic import SEVERITIES, Diagnostic, Fix, Severity
from rsdiag.diagnostics.report import fixable, has_errors

__all__ = [
    "LEXER_UNKNOWN_CHARACTER",
    "LEXER_UNTERMINATED_BLOCK_COMMENT",
    "LEXER_UNTERMINATED_CHAR",
    "LEXER_UNTERMINATED_STRING",
    "LINT_STYLE_STRUCT_SHORTHAND",
    "LINT_STYLE_UNNECESSARY_BRACES",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_ITEM",
    "PARSER_EXPECTED_NAME",
    "PARSER_EXPECTED_PATTERN",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_EXPECTED_TYPE",
    "PARSER_UNEXPECTED_TOKEN",
    "SEVERITIES",
    "SYNTAX_ERROR",
    "Diagnostic",
    "DiagnosticSpec",
    "Fix",
    "Severity",
    "fixable",
    "has_errors",
]

"""Lint rules and the diagnostic aggregator."""

from rsdiag.lint.options import LintOptions, select_lint_rules
from rsdiag.lint.rules import (
    LintConfidence,
    LintDomain,
    LintRule,
    StructShorthandInitializationRule,
    UnnecessaryBracesInUseRule,
    default_lint_rules,
    validate_lint_rules,
)
from rsdiag.lint.runner import diagnostics, syntax_error_diagnostic

__all__ = [
    "LintConfidence",
    "LintDomain",
    "LintOptions",
    "LintRule",
    "StructShorthandInitializationRule",
    "UnnecessaryBracesInUseRule",
    "default_lint_rules",
    "diagnostics",
    "select_lint_rules",
    "syntax_error_diagnostic",
    "validate_lint_rules",
]

"""Diagnostic aggregator over a shared parse."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from rsdiag.diagnostics import SYNTAX_ERROR, Diagnostic
from rsdiag.lint.options import LintOptions, select_lint_rules
from rsdiag.lint.rules import LintRule, default_lint_rules
from rsdiag.pipeline.result import SourceFile
from rsdiag.syntax import ParseError, location_to_range

logger = logging.getLogger(__name__)


def syntax_error_diagnostic(error: ParseError) -> Diagnostic:
    """Report a lexer or parser error; a bare offset becomes a one-character range."""
    return Diagnostic(
        code=SYNTAX_ERROR.code,
        message=f"{SYNTAX_ERROR.message}: {error.message}",
        range=location_to_range(error.location),
        severity=SYNTAX_ERROR.severity,
        category=SYNTAX_ERROR.category,
    )


def diagnostics(
    file: SourceFile,
    *,
    rules: Sequence[LintRule] | None = None,
    lint_options: LintOptions | None = None,
) -> list[Diagnostic]:
    """Parse errors first, then each rule's findings in registration order.

    Rules run as given: checking caller-supplied rule metadata is the job of
    `run_diagnostics`. Only `lint_options` naming an unknown rule raises.
    """
    resolved_rules = select_lint_rules(tuple(rules) if rules is not None else default_lint_rules(), lint_options)

    errors = file.errors()
    logger.debug("%d parse error(s), %d rule(s)", len(errors), len(resolved_rules))
    result = [syntax_error_diagnostic(error) for error in errors]
    for rule in resolved_rules:
        found = rule.run(file)
        logger.debug("rule %s reported %d diagnostic(s)", rule.name, len(found))
        result.extend(found)
    return result

"""Entrypoints that run diagnostics and fixes over one parse lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from rsdiag.diagnostics import Diagnostic
from rsdiag.lint.rules import validate_lint_rules
from rsdiag.lint.runner import diagnostics as _diagnostics
from rsdiag.parser import ParserOptions, parse_result
from rsdiag.pipeline.result import SourceFile
from rsdiag.pipeline.results import DiagnosticsRunResult
from rsdiag.text import Delete, Insert, TextEditBuilder, TextRange

if TYPE_CHECKING:
    from rsdiag.lint.options import LintOptions
    from rsdiag.lint.rules import LintRule

logger = logging.getLogger(__name__)


def run_diagnostics(
    text: str,
    *,
    parse: SourceFile | None = None,
    options: ParserOptions | None = None,
    rules: Sequence[LintRule] | None = None,
    lint_options: LintOptions | None = None,
) -> DiagnosticsRunResult:
    """Parse `text` once (or reuse `parse`) and collect every diagnostic.

    Raises `ValueError` when caller-supplied `rules` carry invalid metadata.
    """
    if rules is not None:
        validate_lint_rules(rules)
    resolved_parse = _resolve_parse(text, options=options, parse=parse)
    found = _diagnostics(resolved_parse, rules=rules, lint_options=lint_options)
    return DiagnosticsRunResult(parse=resolved_parse, diagnostics=found)


def apply_fixes(text: str, diagnostics: Iterable[Diagnostic]) -> str:
    """Apply every fix that does not overlap a fix accepted before it.

    Skipped fixes are found again by re-running diagnostics on the result.
    """
    builder = TextEditBuilder()
    accepted: list[TextRange] = []
    skipped = 0
    for diagnostic in diagnostics:
        if diagnostic.fix is None:
            continue
        touched = diagnostic.fix.edit.touched_range
        if touched is None:
            continue
        # touching ranges conflict too: two inserts at one offset have no defined order
        if any(touched.touches(other) for other in accepted):
            skipped += 1
            continue
        accepted.append(touched)
        for operation in diagnostic.fix.edit:
            match operation:
                case Delete(range=deleted):
                    builder.delete(deleted)
                case Insert(offset=offset, text=inserted):
                    builder.insert(offset, inserted)
    if skipped:
        logger.debug("skipped %d overlapping fix(es)", skipped)
    return builder.finish().apply(text)


def _resolve_parse(
    text: str,
    *,
    options: ParserOptions | None,
    parse: SourceFile | None,
) -> SourceFile:
    if parse is not None:
        if options is not None:
            raise ValueError("Pass either parse or options, not both")
        return parse
    return parse_result(text, options=options)
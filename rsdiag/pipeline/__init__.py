"""Parse carrier, run results and lazy pipeline entrypoint exports."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from rsdiag.parser.options import ParserOptions
from rsdiag.pipeline.result import SourceFile
from rsdiag.pipeline.results import DiagnosticsRunResult

if TYPE_CHECKING:
    from rsdiag.diagnostics import Diagnostic
    from rsdiag.lint.options import LintOptions
    from rsdiag.lint.rules import LintRule


def run_diagnostics(
    text: str,
    *,
    parse: SourceFile | None = None,
    options: ParserOptions | None = None,
    rules: Sequence[LintRule] | None = None,
    lint_options: LintOptions | None = None,
) -> DiagnosticsRunResult:
    from rsdiag.pipeline.entrypoints import run_diagnostics as _run_diagnostics

    return _run_diagnostics(text, parse=parse, options=options, rules=rules, lint_options=lint_options)


def apply_fixes(text: str, diagnostics: Iterable[Diagnostic]) -> str:
    from rsdiag.pipeline.entrypoints import apply_fixes as _apply_fixes

    return _apply_fixes(text, diagnostics)


__all__ = [
    "DiagnosticsRunResult",
    "SourceFile",
    "apply_fixes",
    "run_diagnostics",
]

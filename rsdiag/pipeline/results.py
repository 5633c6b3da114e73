"""Run result carriers for the pipeline entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from rsdiag.diagnostics import Diagnostic, fixable, has_errors
from rsdiag.pipeline.result import SourceFile


@dataclass(frozen=True, slots=True)
class DiagnosticsRunResult:
    """Parse errors and lint findings computed from one shared parse."""

    parse: SourceFile
    diagnostics: list[Diagnostic]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def fixable(self) -> list[Diagnostic]:
        return fixable(self.diagnostics)

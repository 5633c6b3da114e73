"""Syntax diagnostics and quick fixes for Rust source files."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rsdiag.diagnostics import Diagnostic
    from rsdiag.pipeline import SourceFile


def diagnostics_for(file: SourceFile) -> list[Diagnostic]:
    """Parse errors, then every default lint rule's findings, for one parsed file."""
    from rsdiag.lint.runner import diagnostics

    return diagnostics(file)


__all__ = ["diagnostics_for"]

"""Diagnostics core types."""

from dataclasses import dataclass
from typing import Literal

from rsdiag.text import TextEdit, TextRange, TextSize

Severity = Literal["error", "warning", "weak_warning"]

SEVERITIES: frozenset[str] = frozenset({"error", "warning", "weak_warning"})


@dataclass(frozen=True, slots=True)
class Fix:
    """A suggested edit; offered to the caller, never applied by the engine."""

    label: str
    edit: TextEdit
    cursor_position: TextSize | None = None


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic emitted by the lexer/parser and by lint rules."""

    code: str
    message: str
    range: TextRange
    severity: Severity = "error"
    hint: str | None = None
    category: str | None = None
    fix: Fix | None = None

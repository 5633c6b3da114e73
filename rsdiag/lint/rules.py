"""Lint rules and rule contracts."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Protocol

from rsdiag.ast import NamedField, NameRef, StructLit, UseTree, UseTreeList, descendants_of
from rsdiag.diagnostics import (
    LINT_STYLE_STRUCT_SHORTHAND,
    LINT_STYLE_UNNECESSARY_BRACES,
    Diagnostic,
    DiagnosticSpec,
    Fix,
    Severity,
)
from rsdiag.syntax import RustSyntaxKind
from rsdiag.text import TextEdit, TextRange

if TYPE_CHECKING:
    from rsdiag.pipeline.result import SourceFile

type LintDomain = Literal["style"]
type LintConfidence = Literal["policy"]


class LintRule(Protocol):
    """Contract shared by every check: a pure function of one parsed file."""

    @property
    def code(self) -> str: ...

    @property
    def name(self) -> str: ...

    @property
    def category(self) -> str: ...

    @property
    def domain(self) -> LintDomain: ...

    @property
    def confidence(self) -> LintConfidence: ...

    @property
    def severity(self) -> Severity: ...

    def run(self, file: SourceFile) -> list[Diagnostic]: ...


@dataclass(frozen=True, slots=True)
class UnnecessaryBracesInUseRule:
    """Flags `use` tree lists that hold a single tree: `use a::{b};`."""

    code: str = LINT_STYLE_UNNECESSARY_BRACES.code
    name: str = "unnecessaryBracesInUse"
    category: str = "lint/style"
    domain: LintDomain = "style"
    confidence: LintConfidence = "policy"
    severity: Severity = LINT_STYLE_UNNECESSARY_BRACES.severity

    def run(self, file: SourceFile) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for tree_list in descendants_of(file.syntax_root(), UseTreeList):
            trees = tree_list.use_trees()
            if len(trees) != 1:
                continue
            diagnostics.append(
                _diagnostic(
                    self,
                    LINT_STYLE_UNNECESSARY_BRACES,
                    tree_list.text_trimmed_range,
                    _unnecessary_braces_edit(tree_list, trees[0]),
                )
            )
        return diagnostics


@dataclass(frozen=True, slots=True)
class StructShorthandInitializationRule:
    """Flags struct literal fields written as `name: name`.

    The comparison is textual, so `a: (a)` is left alone. A comment between
    the name and the value keeps the field reported but without a fix.
    """

    code: str = LINT_STYLE_STRUCT_SHORTHAND.code
    name: str = "structShorthandInitialization"
    category: str = "lint/style"
    domain: LintDomain = "style"
    confidence: LintConfidence = "policy"
    severity: Severity = LINT_STYLE_STRUCT_SHORTHAND.severity

    def run(self, file: SourceFile) -> list[Diagnostic]:
        diagnostics: list[Diagnostic] = []
        for literal in descendants_of(file.syntax_root(), StructLit):
            field_list = literal.named_field_list()
            if field_list is None:
                continue
            for field in field_list.fields():
                name_ref = _redundant_name(field)
                if name_ref is None:
                    continue
                edit = _shorthand_edit(field, name_ref)
                diagnostics.append(_diagnostic(self, LINT_STYLE_STRUCT_SHORTHAND, field.text_trimmed_range, edit))
        return diagnostics


def default_lint_rules() -> tuple[LintRule, ...]:
    """Rules in registration order; the aggregator reports them in this order."""
    return (
        UnnecessaryBracesInUseRule(),
        StructShorthandInitializationRule(),
    )


def validate_lint_rules(rules: Sequence[LintRule]) -> None:
    allowed_domains = {"style"}
    allowed_confidence = {"policy"}
    allowed_severities = {"error", "warning", "weak_warning"}
    seen_codes: set[str] = set()
    for rule in rules:
        if rule.domain not in allowed_domains:
            raise ValueError(
                f"Lint rule `{rule.name}` has invalid domain `{rule.domain}`; expected style."
            )
        if rule.confidence not in allowed_confidence:
            raise ValueError(
                f"Lint rule `{rule.name}` has invalid confidence `{rule.confidence}`; expected policy."
            )
        if rule.severity not in allowed_severities:
            raise ValueError(
                f"Lint rule `{rule.name}` has invalid severity `{rule.severity}`; expected error/warning/weak_warning."
            )
        if not rule.code.startswith("LINT_"):
            raise ValueError(f"Lint rule `{rule.name}` has invalid code `{rule.code}`; expected `LINT_` prefix.")
        if rule.code in seen_codes:
            raise ValueError(f"Lint rule `{rule.name}` reuses code `{rule.code}`.")
        seen_codes.add(rule.code)


def _diagnostic(rule: LintRule, spec: DiagnosticSpec, range: TextRange, edit: TextEdit | None) -> Diagnostic:
    fix = None
    if edit is not None:
        fix = Fix(label=spec.hint or spec.message, edit=edit)
    return Diagnostic(
        code=rule.code,
        message=spec.message,
        range=range,
        severity=rule.severity,
        hint=spec.hint,
        category=rule.category,
        fix=fix,
    )


def _unnecessary_braces_edit(tree_list: UseTreeList, tree: UseTree) -> TextEdit | None:
    list_range = tree_list.text_trimmed_range
    separator = tree_list.syntax.prev_sibling()
    after_separator = separator is not None and separator.kind == RustSyntaxKind.COLON2
    path = tree.path()
    segment = path.segment() if path is not None else None
    is_self = segment is not None and segment.is_self and tree.use_tree_list() is None and not tree.is_glob

    if is_self and tree.rename() is not None:
        # `a::{self as b}` has no brace-free spelling
        return None
    if is_self and after_separator:
        owner = tree_list.parent_use_tree()
        if owner is None or owner.path() is None:
            # `use ::{self};` has no path left once the braces go
            return None
        return TextEdit.delete(TextRange.new(separator.text_trimmed_range.start, list_range.end))

    if after_separator and tree.text_trimmed.startswith("::"):
        # `a::{::b}` would become `a::::b`
        return None
    return TextEdit.replace(list_range, tree.text_trimmed)


def _redundant_name(field: NamedField) -> NameRef | None:
    """The field name when the value repeats it, as in `a: a`."""
    if field.is_shorthand:
        return None
    name_ref = field.name_ref()
    expr = field.expr()
    if name_ref is None or expr is None:
        return None
    # `0: 0` in a tuple-struct literal has no shorthand form
    if name_ref.syntax.find_token(RustSyntaxKind.IDENT) is None:
        return None
    return name_ref if name_ref.text == expr.text_trimmed else None


def _shorthand_edit(field: NamedField, name_ref: NameRef) -> TextEdit | None:
    # keep any attributes written before the field name
    start = name_ref.text_trimmed_range.start
    end = field.text_trimmed_range.end
    written = field.text_trimmed[start.value - field.text_trimmed_range.start.value :]
    if "//" in written or "/*" in written:
        # the edit would drop a comment between the name and the value
        return None
    return TextEdit.replace(TextRange.new(start, end), name_ref.text)

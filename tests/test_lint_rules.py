from dataclasses import dataclass

import pytest

from rsdiag.diagnostics import Diagnostic
from rsdiag.lint import (
    LintOptions,
    StructShorthandInitializationRule,
    UnnecessaryBracesInUseRule,
    default_lint_rules,
    diagnostics,
    select_lint_rules,
    validate_lint_rules,
)
from rsdiag.parser import parse_result
from rsdiag.pipeline import apply_fixes, run_diagnostics

from tests._debug import debug_dump_diagnostics


def _run(rule, source: str) -> list[Diagnostic]:
    parsed = parse_result(source)
    diagnostics = rule.run(parsed)
    debug_dump_diagnostics(f"lint::{rule.name}", diagnostics, source)
    return diagnostics


def _check_apply(rule, before: str, after: str) -> None:
    diagnostics = _run(rule, before)
    assert diagnostics
    fix = diagnostics[-1].fix
    assert fix is not None

    fixed = fix.edit.apply(before)

    assert fixed == after
    assert parse_result(fixed).errors() == []
    assert _run(rule, fixed) == []


def _check_not_applicable(rule, source: str) -> None:
    assert _run(rule, source) == []


def test_unnecessary_braces_reports_single_tree_lists() -> None:
    [diagnostic] = _run(UnnecessaryBracesInUseRule(), "use {b};")

    assert diagnostic.code == "LINT_STYLE_UNNECESSARY_BRACES"
    assert diagnostic.message == "Unnecessary braces in use statement"
    assert diagnostic.severity == "weak_warning"
    assert diagnostic.category == "lint/style"
    assert diagnostic.range.as_tuple() == (4, 7)
    assert diagnostic.fix is not None
    assert diagnostic.fix.label == "Remove unnecessary braces"


@pytest.mark.parametrize(
    ("before", "after"),
    [
        ("use {b};", "use b;"),
        ("use a::{c};", "use a::c;"),
        ("use a::{self};", "use a;"),
        ("use a::{c::d};", "use a::c::d;"),
        ("use a::{c::*};", "use a::c::*;"),
        ("use a::{b,};", "use a::b;"),
        ("use a::{ b as c };", "use a::b as c;"),
        ("use a::{b}; // keep\n", "use a::b; // keep\n"),
        ("pub use a::{self};\nfn f() {}\n", "pub use a;\nfn f() {}\n"),
        ("use a::{c, d::{e}};", "use a::{c, d::e};"),
        ("use {::{b, c}};", "use ::{b, c};"),
    ],
)
def test_unnecessary_braces_fix(before: str, after: str) -> None:
    _check_apply(UnnecessaryBracesInUseRule(), before, after)


@pytest.mark.parametrize(
    "source",
    [
        "use a::{b, c};",
        "use a::{};",
        "use a::b;",
        "use a::*;",
        "use a::{self, b};",
        "use a; use a::{c, d::e};",
    ],
)
def test_unnecessary_braces_not_applicable(source: str) -> None:
    _check_not_applicable(UnnecessaryBracesInUseRule(), source)


def test_self_with_alias_is_reported_without_fix() -> None:
    [diagnostic] = _run(UnnecessaryBracesInUseRule(), "use a::{self as b};")

    assert diagnostic.range.as_tuple() == (7, 18)
    assert diagnostic.fix is None


@pytest.mark.parametrize(
    "source",
    [
        "use ::{self};",
        "use m::{::{b, c}};",
        "use m::{::*};",
        "use self::{::{self}, crate};",
    ],
)
def test_braces_without_valid_brace_free_spelling_have_no_fix(source: str) -> None:
    assert parse_result(source).errors() == []
    [diagnostic] = _run(UnnecessaryBracesInUseRule(), source)

    assert diagnostic.fix is None
    assert apply_fixes(source, [diagnostic]) == source


def test_nested_lists_are_each_reported() -> None:
    diagnostics = _run(UnnecessaryBracesInUseRule(), "use a::{b::{c}};")

    assert [diagnostic.range.as_tuple() for diagnostic in diagnostics] == [(7, 15), (11, 14)]


def test_struct_shorthand_reports_field() -> None:
    source = "fn main() { let a = 1; S { a: a }; }"
    [diagnostic] = _run(StructShorthandInitializationRule(), source)

    assert diagnostic.code == "LINT_STYLE_STRUCT_SHORTHAND"
    assert diagnostic.message == "Shorthand struct initialization"
    assert diagnostic.severity == "weak_warning"
    assert source[diagnostic.range.start.value : diagnostic.range.end.value] == "a: a"
    assert diagnostic.fix is not None
    assert diagnostic.fix.label == "Use struct shorthand initialization"


@pytest.mark.parametrize(
    ("before", "after"),
    [
        (
            "fn main() { let a = 1; S { a: a }; }",
            "fn main() { let a = 1; S { a }; }",
        ),
        (
            "fn f() { S { a: a, b: c }; }",
            "fn f() { S { a, b: c }; }",
        ),
        (
            "fn f() { S { #[cfg(x)] a: a }; }",
            "fn f() { S { #[cfg(x)] a }; }",
        ),
        (
            "fn f() {\n    S {\n        b,\n        a: a,\n    };\n}\n",
            "fn f() {\n    S {\n        b,\n        a,\n    };\n}\n",
        ),
        (
            "fn f() { let s = Outer { inner: Inner { x: x } }; }",
            "fn f() { let s = Outer { inner: Inner { x } }; }",
        ),
        (
            "fn f() { A { a: a, b }; }",
            "fn f() { A { a, b }; }",
        ),
        (
            "fn main() {\n    let a = \"haha\";\n    A {\n        a: a\n    };\n}\n",
            "fn main() {\n    let a = \"haha\";\n    A {\n        a\n    };\n}\n",
        ),
        (
            "fn f() { S { a: a /* c */ }; }",
            "fn f() { S { a /* c */ }; }",
        ),
    ],
)
def test_struct_shorthand_fix(before: str, after: str) -> None:
    _check_apply(StructShorthandInitializationRule(), before, after)


@pytest.mark.parametrize(
    "source",
    [
        "fn f() { S { a }; }",
        "fn f() { S { a: b }; }",
        "fn f() { S { a: (a) }; }",
        "fn f() { S { a: a.b }; }",
        "fn f() { S { a: self.a }; }",
        "fn f() { S { 0: 0 }; }",
        "fn f() { if x == S {} }",
    ],
)
def test_struct_shorthand_not_applicable(source: str) -> None:
    _check_not_applicable(StructShorthandInitializationRule(), source)


def test_comment_inside_field_keeps_diagnostic_without_fix() -> None:
    source = "fn f() { S { a: /* c */ a }; }"
    [diagnostic] = _run(StructShorthandInitializationRule(), source)

    assert source[diagnostic.range.start.value : diagnostic.range.end.value] == "a: /* c */ a"
    assert diagnostic.fix is None


def test_rules_run_on_broken_files() -> None:
    diagnostics = _run(UnnecessaryBracesInUseRule(), "use a::{b};\nfn f( {\n")

    assert [diagnostic.code for diagnostic in diagnostics] == ["LINT_STYLE_UNNECESSARY_BRACES"]


def test_default_rules_are_valid_and_ordered() -> None:
    rules = default_lint_rules()

    validate_lint_rules(rules)
    assert [rule.name for rule in rules] == ["unnecessaryBracesInUse", "structShorthandInitialization"]


@dataclass(frozen=True, slots=True)
class _BadDomainRule:
    code: str = "LINT_TEST_BAD_DOMAIN"
    name: str = "badDomain"
    category: str = "lint/test"
    domain: str = "typecheck"
    confidence: str = "policy"
    severity: str = "warning"

    def run(self, file) -> list[Diagnostic]:
        return []


def test_validate_rejects_bad_domain() -> None:
    with pytest.raises(ValueError, match="invalid domain"):
        validate_lint_rules([_BadDomainRule()])


def test_validate_rejects_duplicate_codes() -> None:
    with pytest.raises(ValueError, match="reuses code"):
        validate_lint_rules([UnnecessaryBracesInUseRule(), UnnecessaryBracesInUseRule(name="again")])


def test_validate_rejects_codes_without_lint_prefix() -> None:
    with pytest.raises(ValueError, match="LINT_"):
        validate_lint_rules([StructShorthandInitializationRule(code="STYLE_SHORTHAND")])


def test_lint_options_select_and_override() -> None:
    rules = default_lint_rules()

    only_shorthand = select_lint_rules(rules, LintOptions(enabled=frozenset({"structShorthandInitialization"})))
    assert [rule.name for rule in only_shorthand] == ["structShorthandInitialization"]

    without_braces = select_lint_rules(rules, LintOptions(disabled=frozenset({"LINT_STYLE_UNNECESSARY_BRACES"})))
    assert [rule.name for rule in without_braces] == ["structShorthandInitialization"]

    overridden = select_lint_rules(
        rules,
        LintOptions(severity_overrides={"unnecessaryBracesInUse": "error"}),
    )
    assert [rule.severity for rule in overridden] == ["error", "weak_warning"]
    assert rules[0].severity == "weak_warning"


def test_lint_options_reject_unknown_rules_and_severities() -> None:
    with pytest.raises(ValueError, match="Unknown lint rule"):
        select_lint_rules(default_lint_rules(), LintOptions(disabled=frozenset({"noSuchRule"})))
    with pytest.raises(ValueError, match="Severity override"):
        LintOptions(severity_overrides={"unnecessaryBracesInUse": "fatal"})


def test_severity_override_reaches_diagnostics() -> None:
    result = run_diagnostics(
        "use a::{b};",
        lint_options=LintOptions(severity_overrides={"LINT_STYLE_UNNECESSARY_BRACES": "error"}),
    )

    [diagnostic] = result.diagnostics
    assert diagnostic.severity == "error"
    assert result.has_errors


def test_fixes_converge_over_passes() -> None:
    source = "use a::{b::{c}};"

    first = apply_fixes(source, run_diagnostics(source).diagnostics)
    second = apply_fixes(first, run_diagnostics(first).diagnostics)

    assert first == "use a::b::{c};"
    assert second == "use a::b::c;"
    assert run_diagnostics(second).diagnostics == []


def test_aggregator_runs_rules_as_given() -> None:
    parsed = parse_result("use a::{b};")

    assert diagnostics(parsed, rules=[_BadDomainRule()]) == []


def test_run_diagnostics_validates_supplied_rules() -> None:
    with pytest.raises(ValueError, match="invalid domain"):
        run_diagnostics("use a::{b};", rules=[_BadDomainRule()])

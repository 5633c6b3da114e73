import logging

import pytest

from rsdiag import diagnostics_for
from rsdiag.parser import ParserOptions, parse_result
from rsdiag.pipeline import apply_fixes, run_diagnostics


def test_run_diagnostics_reuses_provided_parse() -> None:
    source = "use a::{b};\n"
    parsed = parse_result(source)

    result = run_diagnostics("ignored", parse=parsed)

    assert result.parse is parsed
    assert [diagnostic.code for diagnostic in result.diagnostics] == ["LINT_STYLE_UNNECESSARY_BRACES"]


def test_run_diagnostics_rejects_parse_with_options() -> None:
    parsed = parse_result("use a;\n")

    with pytest.raises(ValueError, match="Pass either parse or options, not both"):
        run_diagnostics("use a;\n", parse=parsed, options=ParserOptions())


def test_syntax_errors_come_first_and_widen_offsets() -> None:
    source = "use a::b\nfn f() { S { a: a }; }\n"

    result = run_diagnostics(source)

    assert [diagnostic.code for diagnostic in result.diagnostics] == [
        "SYNTAX_ERROR",
        "LINT_STYLE_STRUCT_SHORTHAND",
    ]
    syntax_error = result.diagnostics[0]
    assert syntax_error.message == "Syntax Error: expected SEMICOLON"
    assert syntax_error.range.as_tuple() == (8, 9)
    assert syntax_error.severity == "error"
    assert syntax_error.fix is None
    assert result.has_errors
    assert [diagnostic.code for diagnostic in result.fixable()] == ["LINT_STYLE_STRUCT_SHORTHAND"]


def test_lexer_errors_keep_their_range() -> None:
    source = 'fn f() { let s = "abc; }\n'
    parsed = parse_result(source)

    first = parsed.diagnostics[0]

    assert first.message == "Syntax Error: Missing trailing `\"` symbol to terminate the string literal"
    assert first.range.start.value == source.index('"')
    assert parsed.has_errors


def test_diagnostics_for_matches_run_diagnostics() -> None:
    source = "use {b};\nfn f() { S { a: a }; }\n"
    parsed = parse_result(source)

    assert diagnostics_for(parsed) == run_diagnostics(source).diagnostics
    assert [diagnostic.code for diagnostic in diagnostics_for(parsed)] == [
        "LINT_STYLE_UNNECESSARY_BRACES",
        "LINT_STYLE_STRUCT_SHORTHAND",
    ]


def test_clean_file_has_no_diagnostics() -> None:
    source = "use a::{b, c};\nfn f(b: u8) -> S { S { a: b, b } }\n"

    result = run_diagnostics(source)

    assert result.diagnostics == []
    assert not result.has_errors
    assert not parse_result(source).has_errors


def test_apply_fixes_applies_independent_fixes_together() -> None:
    source = "use a::{b};\nfn f() { S { a: a, c: c }; }\n"

    fixed = apply_fixes(source, run_diagnostics(source).diagnostics)

    assert fixed == "use a::b;\nfn f() { S { a, c }; }\n"
    assert run_diagnostics(fixed).diagnostics == []


def test_apply_fixes_skips_overlapping_fixes(caplog: pytest.LogCaptureFixture) -> None:
    source = "use a::{d::{{e}}};"
    diagnostics = run_diagnostics(source).diagnostics
    assert len(diagnostics) == 3

    with caplog.at_level(logging.DEBUG, logger="rsdiag.pipeline.entrypoints"):
        fixed = apply_fixes(source, diagnostics)

    assert fixed == "use a::d::{{e}};"
    assert "skipped 2 overlapping fix(es)" in caplog.text


def test_apply_fixes_ignores_diagnostics_without_fix() -> None:
    source = "use a::{self as b};"

    diagnostics = run_diagnostics(source).diagnostics

    assert len(diagnostics) == 1
    assert apply_fixes(source, diagnostics) == source

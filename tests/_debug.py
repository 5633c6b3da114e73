"""Opt-in debug output for tests.

Set `PRINT_TOKENS`, `PRINT_CST`, `PRINT_SOURCE` or `PRINT_DIAGNOSTICS` to a
truthy value and run pytest with `-s` to see what a test worked on.
"""

from __future__ import annotations

import os

from rsdiag.cst import SyntaxNode, dump_tree
from rsdiag.diagnostics import Diagnostic
from rsdiag.lexer import Token, token_text


def _enabled(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes", "on"}


def _section(test_name: str, title: str) -> None:
    print(f"\n===== {test_name} {title} =====")


def debug_print_source(test_name: str, source: str) -> None:
    if _enabled("PRINT_SOURCE"):
        _section(test_name, "SOURCE")
        print(source)


def debug_dump_tokens(test_name: str, source: str, tokens: list[Token]) -> None:
    if not _enabled("PRINT_TOKENS"):
        return
    debug_print_source(test_name, source)
    _section(test_name, "TOKENS")
    for index, token in enumerate(tokens):
        start, end = token.range.as_tuple()
        print(f"{index:03d} {token.kind.name:<24} {start}..{end} {token_text(source, token)!r}")


def debug_dump_cst(test_name: str, source: str, root: SyntaxNode) -> None:
    if not _enabled("PRINT_CST"):
        return
    debug_print_source(test_name, source)
    _section(test_name, "CST")
    print(dump_tree(root))


def debug_dump_diagnostics(test_name: str, diagnostics: list[Diagnostic], source: str | None = None) -> None:
    if not _enabled("PRINT_DIAGNOSTICS"):
        return
    if source is not None:
        debug_print_source(test_name, source)
    _section(test_name, "DIAGNOSTICS")
    for diagnostic in diagnostics:
        start, end = diagnostic.range.as_tuple()
        print(f"{diagnostic.code} {start}..{end} {diagnostic.message}")
    if not diagnostics:
        print("(none)")

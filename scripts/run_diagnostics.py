#!/usr/bin/env python3
"""Report diagnostics for Rust sources and optionally apply their fixes."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from tqdm import tqdm

from rsdiag.diagnostics import Diagnostic
from rsdiag.lint import LintOptions
from rsdiag.pipeline import apply_fixes, run_diagnostics

logger = logging.getLogger(__name__)


def _collect_sources(paths: list[Path]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(sorted(candidate for candidate in path.rglob("*.rs") if candidate.is_file()))
        else:
            files.append(path)
    return files


def _line_col(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def _format(path: Path, text: str, diagnostic: Diagnostic) -> str:
    line, column = _line_col(text, diagnostic.range.start.value)
    return f"{path}:{line}:{column}: {diagnostic.severity} {diagnostic.code} {diagnostic.message}"


def _lint_options(args: argparse.Namespace) -> LintOptions | None:
    if not args.disable and not args.enable:
        return None
    enabled = frozenset(args.enable) if args.enable else None
    return LintOptions(enabled=enabled, disabled=frozenset(args.disable))


def main() -> int:
    parser = argparse.ArgumentParser(description="Report syntax errors and style diagnostics in Rust sources")
    parser.add_argument("paths", nargs="+", type=Path, help="Files or directories of .rs sources")
    parser.add_argument("--fix", action="store_true", help="Apply available fixes and write the files back")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="With --fix, print the fixed text instead of writing it",
    )
    parser.add_argument("--enable", action="append", default=[], help="Only run this rule (code or name)")
    parser.add_argument("--disable", action="append", default=[], help="Skip this rule (code or name)")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    files = _collect_sources(args.paths)
    if not files:
        print("No Rust sources found", file=sys.stderr)
        return 2

    lint_options = _lint_options(args)
    lines: list[str] = []
    error_count = 0
    fixed_count = 0
    iterator = tqdm(files, desc="diagnostics", unit="file") if not args.no_progress else files
    for path in iterator:
        text = path.read_text(encoding="utf-8")
        result = run_diagnostics(text, lint_options=lint_options)
        logger.debug("%s: %d diagnostic(s)", path, len(result.diagnostics))
        lines.extend(_format(path, text, diagnostic) for diagnostic in result.diagnostics)
        if result.has_errors:
            error_count += 1

        if args.fix and result.fixable():
            fixed = apply_fixes(text, result.fixable())
            if args.dry_run:
                lines.append(f"--- {path} (fixed)\n{fixed}")
            elif fixed != text:
                path.write_text(fixed, encoding="utf-8")
                fixed_count += 1

    for line in lines:
        print(line)
    if args.fix and not args.dry_run:
        print(f"Fixed {fixed_count} file(s)")
    return 1 if error_count else 0


if __name__ == "__main__":
    raise SystemExit(main())

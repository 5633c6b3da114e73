#!/usr/bin/env python3
"""Print the tokens and the syntax tree of a Rust file."""

from __future__ import annotations

import argparse
from pathlib import Path

from rsdiag.cst import dump_tree
from rsdiag.lexer import Lexer, dump_tokens
from rsdiag.parser import parse_result


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump lexer tokens and the CST of a Rust file")
    parser.add_argument("path", type=Path)
    parser.add_argument("--no-tokens", action="store_true", help="Only print the tree")
    args = parser.parse_args()

    text = args.path.read_text(encoding="utf-8")

    if not args.no_tokens:
        lexer = Lexer(text)
        dump_tokens(lexer.lex(), text, lexer.errors)
        print()

    result = parse_result(text)
    print(dump_tree(result.syntax_root()))
    for error in result.errors():
        print(f"error {error.code} at {error.location!r}: {error.message}")


if __name__ == "__main__":
    main()

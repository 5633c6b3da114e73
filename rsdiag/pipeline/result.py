"""Parse carrier shared by the diagnostic entrypoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rsdiag.cst import from_green
from rsdiag.diagnostics import has_errors
from rsdiag.parser.options import ParserOptions
from rsdiag.parser.tree_sink import ParsedGreenTree

if TYPE_CHECKING:
    from rsdiag.ast import SourceFileNode
    from rsdiag.cst import GreenNode, SyntaxNode
    from rsdiag.diagnostics import Diagnostic
    from rsdiag.syntax import ParseError


@dataclass(slots=True)
class SourceFile:
    """One parsed Rust source file: the text, its green tree and its parse errors.

    Parse once and hand the same carrier to every consumer; the red tree and
    the typed root are built on first access and cached.
    """

    source_text: str
    parsed: ParsedGreenTree
    options: ParserOptions = field(default_factory=ParserOptions)
    _syntax_root: SyntaxNode | None = field(default=None, init=False, repr=False)
    _ast_root: SourceFileNode | None = field(default=None, init=False, repr=False)

    def green_root(self) -> GreenNode:
        return self.parsed.root

    def syntax_root(self) -> SyntaxNode:
        if self._syntax_root is None:
            self._syntax_root = from_green(self.parsed.root, self.source_text)
        return self._syntax_root

    def ast_root(self) -> SourceFileNode:
        if self._ast_root is None:
            from rsdiag.ast import SourceFileNode

            root = SourceFileNode.from_root(self.syntax_root())
            if root is None:
                raise RuntimeError("Parsed tree has no SOURCE_FILE node")
            self._ast_root = root
        return self._ast_root

    def errors(self) -> list[ParseError]:
        """Lexer and parser errors, ordered by offset."""
        return list(self.parsed.errors)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        from rsdiag.lint.runner import syntax_error_diagnostic

        return [syntax_error_diagnostic(error) for error in self.parsed.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

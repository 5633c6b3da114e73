"""Concrete syntax tree: immutable green nodes and red navigation wrappers."""

from rsdiag.cst.green import GreenElement, GreenNode, GreenToken, TreeBuilder
from rsdiag.cst.red import (
    SyntaxElement,
    SyntaxNode,
    SyntaxToken,
    SyntaxTriviaPiece,
    dump_tree,
    from_green,
)

__all__ = [
    "GreenElement",
    "GreenNode",
    "GreenToken",
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "SyntaxTriviaPiece",
    "TreeBuilder",
    "dump_tree",
    "from_green",
]

"""Typed AST views over the red syntax tree."""

from rsdiag.ast.views import (
    AstView,
    Expr,
    NamedField,
    NamedFieldList,
    NameRef,
    Path,
    PathSegment,
    Rename,
    SourceFileNode,
    StructLit,
    UseItem,
    UseTree,
    UseTreeList,
    descendants_of,
)

__all__ = [
    "AstView",
    "Expr",
    "NameRef",
    "NamedField",
    "NamedFieldList",
    "Path",
    "PathSegment",
    "Rename",
    "SourceFileNode",
    "StructLit",
    "UseItem",
    "UseTree",
    "UseTreeList",
    "descendants_of",
]

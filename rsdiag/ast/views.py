"""Typed views over red syntax nodes.

A view is a thin, immutable wrapper that knows the shape of one node kind and
exposes its children by role. `cast` returns None for any other kind, so views
can be tried against arbitrary nodes while walking a tree.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Self

from rsdiag.cst import SyntaxNode, SyntaxToken
from rsdiag.syntax import RustSyntaxKind
from rsdiag.text import TextRange


@dataclass(frozen=True, slots=True)
class AstView:
    syntax: SyntaxNode

    KIND: ClassVar[RustSyntaxKind | None] = None

    @classmethod
    def can_cast(cls, kind: RustSyntaxKind) -> bool:
        return kind == cls.KIND

    @classmethod
    def cast(cls, node: SyntaxNode | None) -> Self | None:
        if node is None or not cls.can_cast(node.kind):
            return None
        return cls(node)

    @property
    def text_trimmed(self) -> str:
        return self.syntax.text_trimmed

    @property
    def text_trimmed_range(self) -> TextRange:
        return self.syntax.text_trimmed_range


@dataclass(frozen=True, slots=True)
class NameRef(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.NAME_REF

    @property
    def text(self) -> str:
        return self.syntax.text_trimmed


@dataclass(frozen=True, slots=True)
class Rename(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.RENAME

    @property
    def name(self) -> str | None:
        """The alias, `_` included; None when missing."""
        name = self.syntax.find_child(RustSyntaxKind.NAME)
        if name is not None:
            return name.text_trimmed
        underscore = self.syntax.find_token(RustSyntaxKind.UNDERSCORE)
        return underscore.text if underscore is not None else None


_SEGMENT_KEYWORDS = frozenset(
    {
        RustSyntaxKind.SELF_KW,
        RustSyntaxKind.SELF_TYPE_KW,
        RustSyntaxKind.SUPER_KW,
        RustSyntaxKind.CRATE_KW,
    }
)


@dataclass(frozen=True, slots=True)
class PathSegment(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.PATH_SEGMENT

    def name_ref(self) -> NameRef | None:
        return NameRef.cast(self.syntax.find_child(RustSyntaxKind.NAME_REF))

    def keyword(self) -> SyntaxToken | None:
        """`self`, `Self`, `super` or `crate` when the segment is one of those."""
        for token in self.syntax.child_tokens():
            if token.kind in _SEGMENT_KEYWORDS:
                return token
        return None

    @property
    def is_self(self) -> bool:
        keyword = self.keyword()
        return keyword is not None and keyword.kind == RustSyntaxKind.SELF_KW


@dataclass(frozen=True, slots=True)
class Path(AstView):
    """`qualifier::segment`; the qualifier is itself a Path."""

    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.PATH

    def qualifier(self) -> Path | None:
        return Path.cast(self.syntax.find_child(RustSyntaxKind.PATH))

    def segment(self) -> PathSegment | None:
        return PathSegment.cast(self.syntax.find_child(RustSyntaxKind.PATH_SEGMENT))

    def segments(self) -> list[PathSegment]:
        """All segments, outermost qualifier first."""
        segments: list[PathSegment] = []
        path: Path | None = self
        while path is not None:
            segment = path.segment()
            if segment is not None:
                segments.append(segment)
            path = path.qualifier()
        segments.reverse()
        return segments


@dataclass(frozen=True, slots=True)
class UseTree(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.USE_TREE

    def path(self) -> Path | None:
        return Path.cast(self.syntax.find_child(RustSyntaxKind.PATH))

    def use_tree_list(self) -> UseTreeList | None:
        return UseTreeList.cast(self.syntax.find_child(RustSyntaxKind.USE_TREE_LIST))

    def rename(self) -> Rename | None:
        return Rename.cast(self.syntax.find_child(RustSyntaxKind.RENAME))

    @property
    def is_glob(self) -> bool:
        return self.syntax.find_token(RustSyntaxKind.STAR) is not None


@dataclass(frozen=True, slots=True)
class UseTreeList(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.USE_TREE_LIST

    def use_trees(self) -> list[UseTree]:
        return [UseTree(child) for child in self.syntax.child_nodes() if child.kind == RustSyntaxKind.USE_TREE]

    def parent_use_tree(self) -> UseTree | None:
        return UseTree.cast(self.syntax.parent)


@dataclass(frozen=True, slots=True)
class UseItem(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.USE_ITEM

    def use_tree(self) -> UseTree | None:
        return UseTree.cast(self.syntax.find_child(RustSyntaxKind.USE_TREE))


@dataclass(frozen=True, slots=True)
class Expr(AstView):
    """Any expression node."""

    @classmethod
    def can_cast(cls, kind: RustSyntaxKind) -> bool:
        return kind.is_expression

    @property
    def kind(self) -> RustSyntaxKind:
        return self.syntax.kind


@dataclass(frozen=True, slots=True)
class NamedField(AstView):
    """`name: expr`, or the shorthand `name`."""

    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.NAMED_FIELD

    def name_ref(self) -> NameRef | None:
        return NameRef.cast(self.syntax.find_child(RustSyntaxKind.NAME_REF))

    def expr(self) -> Expr | None:
        for child in self.syntax.child_nodes():
            expr = Expr.cast(child)
            if expr is not None:
                return expr
        return None

    @property
    def is_shorthand(self) -> bool:
        return self.syntax.find_token(RustSyntaxKind.COLON) is None


@dataclass(frozen=True, slots=True)
class NamedFieldList(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.NAMED_FIELD_LIST

    def fields(self) -> list[NamedField]:
        return [NamedField(child) for child in self.syntax.child_nodes() if child.kind == RustSyntaxKind.NAMED_FIELD]

    def spread(self) -> Expr | None:
        """The `..base` expression, if any."""
        if self.syntax.find_token(RustSyntaxKind.DOT2) is None:
            return None
        for child in self.syntax.child_nodes():
            expr = Expr.cast(child)
            if expr is not None:
                return expr
        return None


@dataclass(frozen=True, slots=True)
class StructLit(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.STRUCT_LIT

    def path(self) -> Path | None:
        return Path.cast(self.syntax.find_child(RustSyntaxKind.PATH))

    def named_field_list(self) -> NamedFieldList | None:
        return NamedFieldList.cast(self.syntax.find_child(RustSyntaxKind.NAMED_FIELD_LIST))


@dataclass(frozen=True, slots=True)
class SourceFileNode(AstView):
    KIND: ClassVar[RustSyntaxKind | None] = RustSyntaxKind.SOURCE_FILE

    @classmethod
    def from_root(cls, root: SyntaxNode) -> SourceFileNode | None:
        """Find the source file under the builder's ROOT wrapper."""
        if root.kind == RustSyntaxKind.SOURCE_FILE:
            return cls(root)
        return cls.cast(root.find_child(RustSyntaxKind.SOURCE_FILE))

    def items(self) -> list[SyntaxNode]:
        return [child for child in self.syntax.child_nodes() if child.kind != RustSyntaxKind.ERROR]

    def use_items(self) -> list[UseItem]:
        return [UseItem(child) for child in self.syntax.child_nodes() if child.kind == RustSyntaxKind.USE_ITEM]


def descendants_of[T: AstView](root: SyntaxNode, view: type[T]) -> list[T]:
    """All nodes under `root` (inclusive) that `view` can wrap, in document order."""
    out: list[T] = []
    for node in root.descendants():
        cast = view.cast(node)
        if cast is not None:
            out.append(cast)
    return out

"""Red tree: positioned, parent-linked views over the green tree.

A red element is a green element plus the context the green tree leaves
out: its absolute offset, its parent and its index in that parent. Child
elements are created the first time a node's children are asked for, so
walking part of a tree only pays for that part.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from rsdiag.cst.green import GreenNode, GreenToken
from rsdiag.lexer import TriviaKind, TriviaPiece
from rsdiag.syntax import RustSyntaxKind
from rsdiag.text import TextRange


@dataclass(frozen=True, slots=True)
class SyntaxTriviaPiece:
    kind: TriviaKind
    text: str


class _RedElement:
    __slots__ = ("parent", "index_in_parent", "start", "_source")

    def __init__(self, parent: SyntaxNode | None, index_in_parent: int, start: int, source: str) -> None:
        self.parent = parent
        self.index_in_parent = index_in_parent
        self.start = start
        self._source = source

    @property
    def kind(self) -> RustSyntaxKind:
        raise NotImplementedError

    @property
    def end(self) -> int:
        raise NotImplementedError

    @property
    def text_range(self) -> TextRange:
        """Range including all trivia owned by this element."""
        return TextRange.from_offsets(self.start, self.end)

    def next_sibling(self) -> SyntaxElement | None:
        return self._sibling(1)

    def prev_sibling(self) -> SyntaxElement | None:
        return self._sibling(-1)

    def ancestors(self) -> Iterator[SyntaxNode]:
        """Enclosing nodes from the parent up to the root."""
        node = self.parent
        while node is not None:
            yield node
            node = node.parent

    def _sibling(self, step: int) -> SyntaxElement | None:
        if self.parent is None:
            return None
        index = self.index_in_parent + step
        siblings = self.parent.children
        if 0 <= index < len(siblings):
            return siblings[index]
        return None


class SyntaxToken(_RedElement):
    __slots__ = ("green",)

    def __init__(self, green: GreenToken, parent: SyntaxNode, index_in_parent: int, start: int, source: str) -> None:
        super().__init__(parent, index_in_parent, start, source)
        self.green = green

    def __repr__(self) -> str:
        return f"{self.kind.name}@{self.token_start}..{self.token_end} {self.text!r}"

    @property
    def kind(self) -> RustSyntaxKind:
        return self.green.kind

    @property
    def text(self) -> str:
        return self.green.text

    @property
    def text_trimmed(self) -> str:
        return self.green.text

    @property
    def end(self) -> int:
        return self.start + self.green.width

    @property
    def token_start(self) -> int:
        return self.start + sum(piece.length.value for piece in self.green.leading_trivia)

    @property
    def token_end(self) -> int:
        return self.token_start + len(self.green.text)

    @property
    def text_trimmed_range(self) -> TextRange:
        return TextRange.from_offsets(self.token_start, self.token_end)

    @property
    def text_with_trivia(self) -> str:
        return self._source[self.start : self.end]

    @property
    def leading_trivia(self) -> tuple[SyntaxTriviaPiece, ...]:
        return _trivia_pieces(self._source, self.start, self.green.leading_trivia)

    @property
    def trailing_trivia(self) -> tuple[SyntaxTriviaPiece, ...]:
        return _trivia_pieces(self._source, self.token_end, self.green.trailing_trivia)

    @property
    def leading_trivia_text(self) -> str:
        return self._source[self.start : self.token_start]

    @property
    def trailing_trivia_text(self) -> str:
        return self._source[self.token_end : self.end]


class SyntaxNode(_RedElement):
    __slots__ = ("green", "_children")

    def __init__(
        self,
        green: GreenNode,
        parent: SyntaxNode | None,
        index_in_parent: int,
        start: int,
        source: str,
    ) -> None:
        super().__init__(parent, index_in_parent, start, source)
        self.green = green
        self._children: tuple[SyntaxElement, ...] | None = None

    def __repr__(self) -> str:
        return f"{self.kind.name}@{self.start}..{self.end}"

    @property
    def kind(self) -> RustSyntaxKind:
        return self.green.kind

    @property
    def end(self) -> int:
        return self.start + self.green.width

    @property
    def text(self) -> str:
        """Source text of the node, trivia included."""
        return self._source[self.start : self.end]

    @property
    def text_trimmed_range(self) -> TextRange:
        """Range from the first token's text to the last token's text.

        A node without tokens has an empty range at its start.
        """
        first = self.first_token()
        last = self.last_token()
        if first is None or last is None:
            return TextRange.from_offsets(self.start, self.start)
        return TextRange.from_offsets(first.token_start, last.token_end)

    @property
    def text_trimmed(self) -> str:
        start, end = self.text_trimmed_range.as_tuple()
        return self._source[start:end]

    @property
    def children(self) -> tuple[SyntaxElement, ...]:
        if self._children is None:
            self._children = tuple(self._red_children())
        return self._children

    def _red_children(self) -> Iterator[SyntaxElement]:
        offset = self.start
        for index, green in enumerate(self.green.children):
            if isinstance(green, GreenNode):
                yield SyntaxNode(green, self, index, offset, self._source)
            else:
                yield SyntaxToken(green, self, index, offset, self._source)
            offset += green.width

    def child_nodes(self) -> tuple[SyntaxNode, ...]:
        return tuple(child for child in self.children if isinstance(child, SyntaxNode))

    def child_tokens(self) -> tuple[SyntaxToken, ...]:
        return tuple(child for child in self.children if isinstance(child, SyntaxToken))

    def first_child(self) -> SyntaxNode | None:
        return next(iter(self.child_nodes()), None)

    def find_child(self, kind: RustSyntaxKind) -> SyntaxNode | None:
        return next((node for node in self.child_nodes() if node.kind == kind), None)

    def find_token(self, kind: RustSyntaxKind) -> SyntaxToken | None:
        return next((token for token in self.child_tokens() if token.kind == kind), None)

    def first_token(self) -> SyntaxToken | None:
        return next(self.descendants_tokens(), None)

    def last_token(self) -> SyntaxToken | None:
        stack: list[SyntaxElement] = [self]
        while stack:
            element = stack.pop()
            if isinstance(element, SyntaxToken):
                return element
            stack.extend(element.children)
        return None

    def descendants(self) -> Iterator[SyntaxNode]:
        """All nodes of this subtree in preorder, starting with this node."""
        stack: list[SyntaxNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.child_nodes()))

    def descendants_tokens(self) -> Iterator[SyntaxToken]:
        stack: list[SyntaxElement] = [self]
        while stack:
            element = stack.pop()
            if isinstance(element, SyntaxToken):
                yield element
            else:
                stack.extend(reversed(element.children))


type SyntaxElement = SyntaxNode | SyntaxToken


def from_green(root: GreenNode, source: str) -> SyntaxNode:
    if root.width != len(source):
        raise ValueError(f"Tree covers {root.width} characters but the source has {len(source)}")
    return SyntaxNode(root, None, 0, 0, source)


def _trivia_pieces(source: str, start: int, pieces: tuple[TriviaPiece, ...]) -> tuple[SyntaxTriviaPiece, ...]:
    out: list[SyntaxTriviaPiece] = []
    for piece in pieces:
        end = start + piece.length.value
        out.append(SyntaxTriviaPiece(piece.kind, source[start:end]))
        start = end
    return tuple(out)


def dump_tree(node: SyntaxNode, indent: int = 0) -> str:
    """Render a node and its subtree, one element per line."""
    pad = "  " * indent
    lines = [f"{pad}{node!r}"]
    for child in node.children:
        if isinstance(child, SyntaxNode):
            lines.append(dump_tree(child, indent + 1))
        else:
            lines.append(f"{pad}  {child!r}")
    return "\n".join(lines)


__all__ = [
    "SyntaxElement",
    "SyntaxNode",
    "SyntaxToken",
    "SyntaxTriviaPiece",
    "dump_tree",
    "from_green",
]

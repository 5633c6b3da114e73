"""Green tree: immutable, position-free syntax elements.

Green elements know their kind, their text and their width, never their
offset or parent; those live in the red layer built on top.
"""

from dataclasses import dataclass, field

from rsdiag.lexer import TriviaPiece
from rsdiag.syntax import RustSyntaxKind


def _pieces_width(pieces: tuple[TriviaPiece, ...]) -> int:
    return sum(piece.length.value for piece in pieces)


@dataclass(frozen=True, slots=True)
class GreenToken:
    kind: RustSyntaxKind
    text: str
    leading_trivia: tuple[TriviaPiece, ...] = ()
    trailing_trivia: tuple[TriviaPiece, ...] = ()

    @property
    def width(self) -> int:
        """Characters covered, trivia included."""
        return _pieces_width(self.leading_trivia) + len(self.text) + _pieces_width(self.trailing_trivia)


@dataclass(frozen=True, slots=True)
class GreenNode:
    kind: RustSyntaxKind
    children: tuple["GreenElement", ...]
    width: int = field(init=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "width", sum(child.width for child in self.children))


type GreenElement = GreenNode | GreenToken


class TreeBuilder:
    """Builds a green tree from start/token/finish calls.

    Children of all open nodes share one flat list; each open node remembers
    where its children begin and takes that tail when it is finished.
    """

    def __init__(self) -> None:
        self._parents: list[tuple[RustSyntaxKind, int]] = []
        self._children: list[GreenElement] = []

    def start_node(self, kind: RustSyntaxKind) -> None:
        self._parents.append((kind, len(self._children)))

    def token_with_trivia(
        self,
        kind: RustSyntaxKind,
        text: str,
        leading: tuple[TriviaPiece, ...],
        trailing: tuple[TriviaPiece, ...],
    ) -> None:
        self._children.append(GreenToken(kind, text, leading, trailing))

    def finish_node(self) -> None:
        if not self._parents:
            raise RuntimeError("finish_node called without a matching start_node")
        kind, first_child = self._parents.pop()
        children = tuple(self._children[first_child:])
        del self._children[first_child:]
        self._children.append(GreenNode(kind, children))

    def finish(self) -> GreenNode:
        """Close the tree, wrapping top-level elements in a ROOT node."""
        if self._parents:
            unclosed = ", ".join(kind.name for kind, _ in self._parents)
            raise RuntimeError(f"Cannot finish tree with open nodes: {unclosed}")
        match self._children:
            case [GreenNode(kind=RustSyntaxKind.ROOT) as root]:
                return root
            case children:
                return GreenNode(RustSyntaxKind.ROOT, tuple(children))

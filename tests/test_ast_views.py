from rsdiag.ast import (
    Expr,
    NamedField,
    NameRef,
    Path,
    SourceFileNode,
    StructLit,
    UseTree,
    UseTreeList,
    descendants_of,
)
from rsdiag.parser import parse_result
from rsdiag.syntax import RustSyntaxKind

from tests._debug import debug_dump_cst


def _use_tree(source: str) -> UseTree:
    parsed = parse_result(source)
    assert parsed.errors() == []
    [use_item] = parsed.ast_root().use_items()
    tree = use_item.use_tree()
    assert tree is not None
    return tree


def test_source_file_view_lists_items() -> None:
    source = "use a;\nfn f() {}\n) )\nstruct S;\n"
    parsed = parse_result(source)
    debug_dump_cst("ast_views::items", source, parsed.syntax_root())

    root = parsed.ast_root()

    assert isinstance(root, SourceFileNode)
    assert [item.kind for item in root.items()] == [
        RustSyntaxKind.USE_ITEM,
        RustSyntaxKind.FN_DEF,
        RustSyntaxKind.STRUCT_DEF,
    ]
    assert len(root.use_items()) == 1
    assert parsed.ast_root() is root


def test_path_segments_outermost_first() -> None:
    tree = _use_tree("use crate::a::b;")

    path = tree.path()
    assert path is not None
    segments = path.segments()

    assert [segment.text_trimmed for segment in segments] == ["crate", "a", "b"]
    assert segments[0].keyword() is not None
    assert segments[0].name_ref() is None
    name_ref = segments[2].name_ref()
    assert name_ref is not None
    assert name_ref.text == "b"
    qualifier = path.qualifier()
    assert qualifier is not None
    assert qualifier.text_trimmed == "crate::a"


def test_use_tree_list_and_self_segment() -> None:
    tree = _use_tree("use a::{self, b as _, c as d, e::*};")

    tree_list = tree.use_tree_list()
    assert tree_list is not None
    assert tree_list.parent_use_tree() == tree
    inner = tree_list.use_trees()
    assert [item.text_trimmed for item in inner] == ["self", "b as _", "c as d", "e::*"]

    self_path = inner[0].path()
    assert self_path is not None
    self_segment = self_path.segment()
    assert self_segment is not None
    assert self_segment.is_self

    underscore = inner[1].rename()
    assert underscore is not None
    assert underscore.name == "_"
    alias = inner[2].rename()
    assert alias is not None
    assert alias.name == "d"

    assert inner[3].is_glob
    assert not inner[2].is_glob


def test_struct_literal_fields_and_spread() -> None:
    parsed = parse_result("fn f() { let p = P { a: a, b, c: 1 + 2, ..base }; }")
    assert parsed.errors() == []

    [literal] = descendants_of(parsed.syntax_root(), StructLit)
    path = literal.path()
    assert path is not None
    assert path.text_trimmed == "P"

    field_list = literal.named_field_list()
    assert field_list is not None
    fields = field_list.fields()
    assert [field.is_shorthand for field in fields] == [False, True, False]

    first_expr = fields[0].expr()
    assert first_expr is not None
    assert first_expr.kind == RustSyntaxKind.PATH_EXPR
    assert fields[1].expr() is None
    third_expr = fields[2].expr()
    assert third_expr is not None
    assert third_expr.kind == RustSyntaxKind.BIN_EXPR
    assert third_expr.text_trimmed == "1 + 2"

    spread = field_list.spread()
    assert spread is not None
    assert spread.text_trimmed == "base"


def test_cast_rejects_other_kinds() -> None:
    parsed = parse_result("use a;")
    root = parsed.syntax_root()

    assert UseTreeList.cast(root) is None
    assert StructLit.cast(None) is None
    assert NameRef.can_cast(RustSyntaxKind.NAME_REF)
    assert not NameRef.can_cast(RustSyntaxKind.NAME)
    assert Expr.can_cast(RustSyntaxKind.CALL_EXPR)
    assert not Expr.can_cast(RustSyntaxKind.USE_TREE)
    assert [path.text_trimmed for path in descendants_of(root, Path)] == ["a"]


def test_descendants_of_follows_document_order() -> None:
    parsed = parse_result("fn f() { A { x: 1 }; B { y: C { z } }; }")

    literals = descendants_of(parsed.syntax_root(), StructLit)
    fields = descendants_of(parsed.syntax_root(), NamedField)

    assert [literal.text_trimmed.split(" ")[0] for literal in literals] == ["A", "B", "C"]
    assert [field.text_trimmed for field in fields] == ["x: 1", "y: C { z }", "z"]

from rsdiag.cst import SyntaxNode, SyntaxToken, from_green
from rsdiag.lexer import TriviaKind
from rsdiag.parser import parse
from rsdiag.syntax import RustSyntaxKind


def _red(source: str) -> SyntaxNode:
    return from_green(parse(source).root, source)


def _source_file(root: SyntaxNode) -> SyntaxNode:
    source_file = root.find_child(RustSyntaxKind.SOURCE_FILE)
    assert source_file is not None
    return source_file


def _token(root: SyntaxNode, kind: RustSyntaxKind, text: str) -> SyntaxToken:
    for token in root.descendants_tokens():
        if token.kind == kind and token.text_trimmed == text:
            return token
    raise AssertionError(f"no {kind.name} token {text!r}")


def test_red_wrappers_navigation_and_siblings() -> None:
    source = "use a;\nstruct S;\n"
    source_file = _source_file(_red(source))

    items = source_file.child_nodes()
    assert [item.kind for item in items] == [RustSyntaxKind.USE_ITEM, RustSyntaxKind.STRUCT_DEF]
    assert items[0].next_sibling() is items[1]
    assert items[1].prev_sibling() is items[0]
    assert items[0].prev_sibling() is None

    eof = items[1].next_sibling()
    assert isinstance(eof, SyntaxToken)
    assert eof.kind == RustSyntaxKind.EOF
    assert eof.next_sibling() is None


def test_token_ancestors_reach_the_root() -> None:
    root = _red("use a::b;")

    token = _token(root, RustSyntaxKind.IDENT, "b")

    assert [node.kind for node in token.ancestors()] == [
        RustSyntaxKind.NAME_REF,
        RustSyntaxKind.PATH_SEGMENT,
        RustSyntaxKind.PATH,
        RustSyntaxKind.USE_TREE,
        RustSyntaxKind.USE_ITEM,
        RustSyntaxKind.SOURCE_FILE,
        RustSyntaxKind.ROOT,
    ]


def test_trailing_trivia_stays_on_the_same_line() -> None:
    source = "use a; // note\nstruct S;\n"
    root = _red(source)

    semicolon = _token(root, RustSyntaxKind.SEMICOLON, ";")
    assert semicolon.trailing_trivia_text == " // note"
    assert [piece.kind for piece in semicolon.trailing_trivia] == [TriviaKind.WHITESPACE, TriviaKind.COMMENT]
    assert semicolon.leading_trivia_text == ""

    struct_kw = _token(root, RustSyntaxKind.STRUCT_KW, "struct")
    assert struct_kw.leading_trivia_text == "\n"
    assert struct_kw.text_with_trivia == "\nstruct "


def test_leading_trivia_of_first_token_and_eof() -> None:
    source = "  // header\nfn f() {}\n\n"
    root = _red(source)

    fn_kw = _token(root, RustSyntaxKind.FN_KW, "fn")
    assert fn_kw.leading_trivia_text == "  // header\n"

    eof = root.last_token()
    assert eof is not None
    assert eof.kind == RustSyntaxKind.EOF
    assert eof.text == ""
    assert eof.leading_trivia_text == "\n\n"


def test_trimmed_ranges_exclude_outer_trivia() -> None:
    source = "use a; // note\nstruct S;\n"
    items = _source_file(_red(source)).child_nodes()

    use_item, struct_def = items
    assert use_item.text_range.as_tuple() == (0, 14)
    assert use_item.text_trimmed_range.as_tuple() == (0, 6)
    assert use_item.text_trimmed == "use a;"
    assert struct_def.text == "\nstruct S;"
    assert struct_def.text_trimmed_range.as_tuple() == (15, 24)


def test_descendants_are_in_source_order() -> None:
    root = _red("use a::{b, c};")

    name_refs = [node.text_trimmed for node in root.descendants() if node.kind == RustSyntaxKind.NAME_REF]

    assert name_refs == ["a", "b", "c"]
    assert next(iter(root.descendants())) is root


def test_empty_source_still_has_source_file_and_eof() -> None:
    root = _red("")
    source_file = _source_file(root)

    assert root.text == ""
    assert [token.kind for token in root.descendants_tokens()] == [RustSyntaxKind.EOF]
    assert source_file.text_trimmed_range.as_tuple() == (0, 0)
    assert source_file.text_trimmed == ""


def test_green_width_covers_the_whole_source() -> None:
    source = "// head\nfn f() { let x = 1; } /* tail */\n"
    green = parse(source).root

    assert green.kind == RustSyntaxKind.ROOT
    assert green.width == len(source)
    assert sum(child.width for child in green.children) == green.width

import pytest

from rsdiag.cst import SyntaxNode, from_green
from rsdiag.lexer import BufferedLexer, Lexer, TokenKind
from rsdiag.parser import (
    Parser,
    ParserOptions,
    ParseRecoveryTokenSet,
    RecoveryError,
    TokenSource,
    parse,
)
from rsdiag.syntax import RustSyntaxKind
from rsdiag.text import TextSize

from tests._debug import debug_dump_cst
from tests._shared_cases import BROKEN_CASES, CLEAN_CASES, PARSER_CASES, RustCase, case_id


def _root(source: str, options: ParserOptions | None = None) -> tuple[SyntaxNode, list]:
    parsed = parse(source, options)
    return from_green(parsed.root, source), parsed.errors


def _kinds(node: SyntaxNode) -> list[RustSyntaxKind]:
    return [descendant.kind for descendant in node.descendants()]


def _first(node: SyntaxNode, kind: RustSyntaxKind) -> SyntaxNode:
    for descendant in node.descendants():
        if descendant.kind == kind:
            return descendant
    raise AssertionError(f"no {kind.name} under {node!r}")


@pytest.mark.parametrize("case", CLEAN_CASES, ids=case_id)
def test_clean_cases_parse_without_errors(case: RustCase) -> None:
    root, errors = _root(case.source)
    debug_dump_cst(f"parser_case::{case.name}", case.source, root)

    assert errors == []
    assert RustSyntaxKind.ERROR not in _kinds(root)


@pytest.mark.parametrize("case", PARSER_CASES, ids=case_id)
def test_tree_is_lossless(case: RustCase) -> None:
    root, _ = _root(case.source)

    assert root.kind == RustSyntaxKind.ROOT
    assert root.text == case.source
    assert "".join(token.text_with_trivia for token in root.descendants_tokens()) == case.source
    source_file = root.first_child()
    assert source_file is not None
    assert source_file.kind == RustSyntaxKind.SOURCE_FILE
    assert source_file.last_token() is not None
    assert source_file.last_token().kind == RustSyntaxKind.EOF


@pytest.mark.parametrize("case", BROKEN_CASES, ids=case_id)
def test_broken_cases_report_sorted_errors(case: RustCase) -> None:
    _, errors = _root(case.source)

    assert errors
    offsets = [error.offset for error in errors]
    assert offsets == sorted(offsets)


def test_use_tree_shape() -> None:
    root, errors = _root("use a::{b, c as d};")
    assert errors == []

    use_item = _first(root, RustSyntaxKind.USE_ITEM)
    assert [child.kind for child in use_item.children] == [
        RustSyntaxKind.USE_KW,
        RustSyntaxKind.USE_TREE,
        RustSyntaxKind.SEMICOLON,
    ]
    use_tree = use_item.find_child(RustSyntaxKind.USE_TREE)
    assert use_tree is not None
    assert [child.kind for child in use_tree.children] == [
        RustSyntaxKind.PATH,
        RustSyntaxKind.COLON2,
        RustSyntaxKind.USE_TREE_LIST,
    ]
    tree_list = use_tree.find_child(RustSyntaxKind.USE_TREE_LIST)
    assert tree_list is not None
    inner = [child for child in tree_list.child_nodes()]
    assert [node.kind for node in inner] == [RustSyntaxKind.USE_TREE, RustSyntaxKind.USE_TREE]
    assert inner[1].find_child(RustSyntaxKind.RENAME) is not None
    assert inner[1].text_trimmed == "c as d"


def test_paths_nest_to_the_left() -> None:
    root, errors = _root("use a::b::c;")
    assert errors == []

    outer = _first(root, RustSyntaxKind.PATH)
    assert outer.text_trimmed == "a::b::c"
    middle = outer.find_child(RustSyntaxKind.PATH)
    assert middle is not None
    assert middle.text_trimmed == "a::b"
    innermost = middle.find_child(RustSyntaxKind.PATH)
    assert innermost is not None
    assert innermost.text_trimmed == "a"
    segment = outer.find_child(RustSyntaxKind.PATH_SEGMENT)
    assert segment is not None
    assert segment.text_trimmed == "c"


def test_self_segment_holds_keyword_token() -> None:
    root, errors = _root("use a::{self};")
    assert errors == []

    tree_list = _first(root, RustSyntaxKind.USE_TREE_LIST)
    segment = _first(tree_list, RustSyntaxKind.PATH_SEGMENT)
    assert segment.find_token(RustSyntaxKind.SELF_KW) is not None
    assert segment.find_child(RustSyntaxKind.NAME_REF) is None


def test_struct_literal_fields_and_shorthand() -> None:
    source = "fn f() { let p = P { a: 1, b, ..base }; }"
    root, errors = _root(source)
    assert errors == []

    literal = _first(root, RustSyntaxKind.STRUCT_LIT)
    assert literal.text_trimmed == "P { a: 1, b, ..base }"
    field_list = literal.find_child(RustSyntaxKind.NAMED_FIELD_LIST)
    assert field_list is not None
    fields = [node for node in field_list.child_nodes() if node.kind == RustSyntaxKind.NAMED_FIELD]
    assert [field.text_trimmed for field in fields] == ["a: 1", "b"]
    assert [child.kind for child in fields[1].children] == [RustSyntaxKind.NAME_REF]
    assert field_list.find_token(RustSyntaxKind.DOT2) is not None


def test_struct_literal_is_not_parsed_in_conditions() -> None:
    root, errors = _root("fn f() { if x == S {} }")

    assert errors == []
    assert RustSyntaxKind.STRUCT_LIT not in _kinds(root)
    assert RustSyntaxKind.IF_EXPR in _kinds(root)


def test_struct_literal_in_condition_can_be_allowed() -> None:
    root, errors = _root(
        "fn f() { if x == S {} }",
        ParserOptions(allow_struct_literal_in_condition=True),
    )

    assert RustSyntaxKind.STRUCT_LIT in _kinds(root)
    assert errors


def test_split_angle_operators_are_joined() -> None:
    root, errors = _root("fn f() { a <<= 1; b >>= 2; c = d << 2 >= e; let v: Vec<Vec<u8>> = Vec::new(); }")

    assert errors == []
    bin_exprs = [node for node in root.descendants() if node.kind == RustSyntaxKind.BIN_EXPR]
    assert [node.text_trimmed for node in bin_exprs] == [
        "a <<= 1",
        "b >>= 2",
        "c = d << 2 >= e",
        "d << 2 >= e",
        "d << 2",
    ]


def test_spaced_angle_brackets_are_not_joined() -> None:
    root, errors = _root("fn f() { a < < b; }")

    assert errors


def test_tail_expression_is_not_wrapped() -> None:
    root, errors = _root("fn f() -> i32 { let x = 1; x + 1 }")
    assert errors == []

    block = _first(root, RustSyntaxKind.BLOCK)
    assert [node.kind for node in block.child_nodes()] == [RustSyntaxKind.LET_STMT, RustSyntaxKind.BIN_EXPR]


def test_statements_are_wrapped_and_block_like_needs_no_semicolon() -> None:
    root, errors = _root("fn f() { g(); if a { b } loop {} h() }")
    assert errors == []

    block = _first(root, RustSyntaxKind.BLOCK)
    assert [node.kind for node in block.child_nodes()] == [
        RustSyntaxKind.EXPR_STMT,
        RustSyntaxKind.EXPR_STMT,
        RustSyntaxKind.EXPR_STMT,
        RustSyntaxKind.CALL_EXPR,
    ]


def test_missing_semicolon_is_reported_after_previous_token() -> None:
    _, errors = _root("use a::b\n")

    assert len(errors) == 1
    assert errors[0].code == "PARSER_EXPECTED_TOKEN"
    assert errors[0].message == "expected SEMICOLON"
    assert errors[0].location == TextSize(8)


def test_recovery_keeps_following_items() -> None:
    root, errors = _root("fn f() {}\n) ) =>\nstruct S;\n")

    assert errors
    source_file = _first(root, RustSyntaxKind.SOURCE_FILE)
    kinds = [node.kind for node in source_file.child_nodes()]
    assert kinds[0] == RustSyntaxKind.FN_DEF
    assert kinds[-1] == RustSyntaxKind.STRUCT_DEF
    assert RustSyntaxKind.ERROR in kinds


def test_lexer_and_parser_errors_are_merged_by_offset() -> None:
    _, errors = _root('fn f() { let s = "abc; }\n')

    assert errors[0].code == "LEXER_UNTERMINATED_STRING"
    assert len(errors) > 1
    assert all(error.code.startswith("PARSER_") for error in errors[1:])


def test_unknown_character_keeps_tree_clean() -> None:
    source = "fn f() { § }"
    root, errors = _root(source)

    assert [error.code for error in errors] == ["LEXER_UNKNOWN_CHARACTER"]
    assert RustSyntaxKind.ERROR not in _kinds(root)
    assert root.text == source


def test_match_arms_and_guards() -> None:
    root, errors = _root("fn f(x: Option<i32>) { match x { Some(n) if n > 0 => n, Some(_) | None => 0 } }")

    assert errors == []
    arms = [node for node in root.descendants() if node.kind == RustSyntaxKind.MATCH_ARM]
    assert len(arms) == 2
    assert arms[0].find_child(RustSyntaxKind.MATCH_GUARD) is not None
    assert arms[1].find_child(RustSyntaxKind.OR_PAT) is not None


def test_recovery_token_set_reports_already_recovered() -> None:
    parser = Parser(TokenSource(BufferedLexer(Lexer("fn"))))
    recovery = ParseRecoveryTokenSet(
        node_kind=RustSyntaxKind.ERROR,
        recovery_set=frozenset({TokenKind.FN_KW}),
    )

    completed, error = recovery.recover(parser)

    assert completed is None
    assert error == RecoveryError.ALREADY_RECOVERED


def test_recovery_token_set_wraps_skipped_tokens() -> None:
    parser = Parser(TokenSource(BufferedLexer(Lexer(") ) fn"))))
    recovery = ParseRecoveryTokenSet(
        node_kind=RustSyntaxKind.ERROR,
        recovery_set=frozenset({TokenKind.FN_KW}),
    )

    completed, error = recovery.recover(parser)

    assert error is None
    assert completed is not None
    assert completed.kind == RustSyntaxKind.ERROR
    assert parser.at(TokenKind.FN_KW)


def test_recovery_token_set_skips_delimited_groups() -> None:
    parser = Parser(TokenSource(BufferedLexer(Lexer("( fn ) fn"))))
    recovery = ParseRecoveryTokenSet(
        node_kind=RustSyntaxKind.ERROR,
        recovery_set=frozenset({TokenKind.FN_KW}),
    )

    completed, error = recovery.recover(parser)

    assert error is None
    assert completed is not None
    assert parser.at(TokenKind.FN_KW)
    assert parser.position == TextSize.from_int(7)


def test_recovery_token_set_stops_at_unmatched_closer() -> None:
    parser = Parser(TokenSource(BufferedLexer(Lexer("( x } y"))))
    recovery = ParseRecoveryTokenSet(
        node_kind=RustSyntaxKind.ERROR,
        recovery_set=frozenset({TokenKind.R_CURLY}),
    )

    recovery.recover(parser)

    assert parser.at(TokenKind.R_CURLY)

"""Rust grammar routines that emit CST events.

Node shapes follow rust-analyzer's tree so that typed views and lint rules can
navigate them the same way:

    use a::{b, c as d};
    USE_ITEM
      USE_KW
      USE_TREE
        PATH (PATH_SEGMENT (NAME_REF))
        COLON2
        USE_TREE_LIST (L_CURLY, USE_TREE, COMMA, USE_TREE (PATH, RENAME), R_CURLY)
      SEMICOLON

Multi-segment paths nest to the left: `a::b::c` is
`PATH(PATH(PATH(a), ::, b), ::, c)`.
"""

from dataclasses import dataclass, replace
from enum import StrEnum
from typing import Final

from rsdiag.diagnostics.codes import (
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_ITEM,
    PARSER_EXPECTED_NAME,
    PARSER_EXPECTED_PATTERN,
    PARSER_EXPECTED_TYPE,
    PARSER_UNEXPECTED_TOKEN,
)
from rsdiag.lexer import TokenKind
from rsdiag.parser.marker import CompletedMarker, Marker
from rsdiag.parser.parse_lists import ParseNodeList, ParseSeparatedList
from rsdiag.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from rsdiag.parser.parsed_syntax import ParsedSyntax
from rsdiag.parser.parser import Parser, ParserProgress
from rsdiag.syntax import RustSyntaxKind

# -------------------------
# Token sets
# -------------------------

LITERAL_FIRST: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.INT_NUMBER,
        TokenKind.FLOAT_NUMBER,
        TokenKind.STRING,
        TokenKind.BYTE_STRING,
        TokenKind.CHAR,
        TokenKind.BYTE,
        TokenKind.TRUE_KW,
        TokenKind.FALSE_KW,
    }
)

PATH_SEGMENT_FIRST: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.IDENT,
        TokenKind.SELF_KW,
        TokenKind.SELF_TYPE_KW,
        TokenKind.SUPER_KW,
        TokenKind.CRATE_KW,
    }
)

PATH_FIRST: Final[frozenset[TokenKind]] = PATH_SEGMENT_FIRST | {TokenKind.COLON2, TokenKind.LT}

USE_TREE_FIRST: Final[frozenset[TokenKind]] = PATH_SEGMENT_FIRST | {
    TokenKind.COLON2,
    TokenKind.STAR,
    TokenKind.L_CURLY,
}

EXPR_FIRST: Final[frozenset[TokenKind]] = (
    LITERAL_FIRST
    | PATH_FIRST
    | {
        TokenKind.L_PAREN,
        TokenKind.L_BRACK,
        TokenKind.L_CURLY,
        TokenKind.UNSAFE_KW,
        TokenKind.IF_KW,
        TokenKind.WHILE_KW,
        TokenKind.LOOP_KW,
        TokenKind.FOR_KW,
        TokenKind.MATCH_KW,
        TokenKind.PIPE,
        TokenKind.PIPE2,
        TokenKind.MOVE_KW,
        TokenKind.RETURN_KW,
        TokenKind.BREAK_KW,
        TokenKind.CONTINUE_KW,
        TokenKind.AMP,
        TokenKind.AMP2,
        TokenKind.STAR,
        TokenKind.BANG,
        TokenKind.MINUS,
        TokenKind.DOT2,
        TokenKind.DOT2EQ,
        TokenKind.LIFETIME,
    }
)

ITEM_KEYWORDS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.USE_KW,
        TokenKind.STRUCT_KW,
        TokenKind.ENUM_KW,
        TokenKind.FN_KW,
        TokenKind.IMPL_KW,
        TokenKind.TRAIT_KW,
        TokenKind.MOD_KW,
        TokenKind.CONST_KW,
        TokenKind.STATIC_KW,
        TokenKind.TYPE_KW,
        TokenKind.PUB_KW,
        TokenKind.UNSAFE_KW,
    }
)

ITEM_RECOVERY_SET: Final[frozenset[TokenKind]] = ITEM_KEYWORDS | {TokenKind.POUND}

BLOCK_LIKE: Final[frozenset[RustSyntaxKind]] = frozenset(
    {
        RustSyntaxKind.BLOCK_EXPR,
        RustSyntaxKind.IF_EXPR,
        RustSyntaxKind.WHILE_EXPR,
        RustSyntaxKind.LOOP_EXPR,
        RustSyntaxKind.FOR_EXPR,
        RustSyntaxKind.MATCH_EXPR,
    }
)

_DELIMITERS: Final[dict[TokenKind, TokenKind]] = {
    TokenKind.L_PAREN: TokenKind.R_PAREN,
    TokenKind.L_BRACK: TokenKind.R_BRACK,
    TokenKind.L_CURLY: TokenKind.R_CURLY,
}

_COMPOUND_ASSIGNMENT: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.PLUSEQ,
        TokenKind.MINUSEQ,
        TokenKind.STAREQ,
        TokenKind.SLASHEQ,
        TokenKind.PERCENTEQ,
        TokenKind.CARETEQ,
        TokenKind.AMPEQ,
        TokenKind.PIPEEQ,
    }
)

_ASSIGNMENT_BP: Final[int] = 1
_RANGE_BP: Final[int] = 2
_CAST_BP: Final[int] = 12
_PREFIX_BP: Final[int] = 13


class PathMode(StrEnum):
    """Where a path is parsed; controls which generic-argument forms are accepted."""

    USE = "use"
    TYPE = "type"
    EXPR = "expr"


@dataclass(frozen=True, slots=True)
class Restrictions:
    """Context flags for expression parsing."""

    # `if S {}`: `S {` would otherwise start a struct literal.
    forbid_structs: bool = False
    # Statement position: a block-like expression ends the statement.
    prefer_stmt: bool = False


_NO_RESTRICTIONS: Final[Restrictions] = Restrictions()


# -------------------------
# Source file and items
# -------------------------


def parse_source_file(parser: Parser) -> CompletedMarker:
    root = parser.start()
    _item_list_loop(parser, stop_at=frozenset({TokenKind.EOF}))
    return root.complete(parser, RustSyntaxKind.SOURCE_FILE)


def parse_item_list(parser: Parser) -> CompletedMarker:
    """`{ items }` body of a module, impl block or trait."""
    marker = parser.start()
    parser.expect(TokenKind.L_CURLY)
    _item_list_loop(parser, stop_at=frozenset({TokenKind.R_CURLY, TokenKind.EOF}))
    parser.expect(TokenKind.R_CURLY)
    return marker.complete(parser, RustSyntaxKind.ITEM_LIST)


def _item_list_loop(parser: Parser, stop_at: frozenset[TokenKind]) -> None:
    recovery = ParseRecoveryTokenSet(
        node_kind=RustSyntaxKind.ERROR,
        recovery_set=ITEM_RECOVERY_SET | stop_at,
        line_break=parser.options.recover_on_line_break,
    )

    def parse_element(current: Parser) -> ParsedSyntax:
        if current.at(TokenKind.SEMICOLON):
            return ParsedSyntax.present(current.err_and_bump(PARSER_EXPECTED_ITEM))
        return parse_item(current)

    def recover_element(current: Parser, parsed: ParsedSyntax) -> bool:
        if parsed.is_present():
            return True

        current.error(PARSER_EXPECTED_ITEM)
        _, recovery_error = recovery.recover(current)
        if recovery_error == RecoveryError.ALREADY_RECOVERED:
            current.err_and_bump(PARSER_EXPECTED_ITEM)
        return True

    ParseNodeList(
        list_kind=RustSyntaxKind.ITEM_LIST,
        is_at_list_end=lambda current: current.at_set(stop_at),
        parse_element=parse_element,
        recover=recover_element,
    ).parse_elements(parser)


def parse_item(parser: Parser) -> ParsedSyntax:
    if parser.at(TokenKind.POUND) and parser.nth_at(1, TokenKind.BANG):
        return ParsedSyntax.present(parse_attribute(parser))

    marker = parser.start()
    has_attributes = parse_outer_attributes(parser)
    return _parse_item_rest(parser, marker, has_prefix=has_attributes)


def _parse_item_rest(parser: Parser, marker: Marker, *, has_prefix: bool) -> ParsedSyntax:
    has_visibility = parse_visibility(parser)
    kind = _parse_item_body(parser)
    if kind is not None:
        return ParsedSyntax.present(marker.complete(parser, kind))

    if has_prefix or has_visibility:
        parser.error(PARSER_EXPECTED_ITEM)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.ERROR))

    marker.abandon(parser)
    return ParsedSyntax.absent()


def _parse_item_body(parser: Parser) -> RustSyntaxKind | None:
    """Parse an item after its attributes and visibility; None if nothing was consumed."""
    current = parser.current
    if current == TokenKind.USE_KW:
        _use_item(parser)
        return RustSyntaxKind.USE_ITEM
    if current == TokenKind.STRUCT_KW:
        _struct_def(parser)
        return RustSyntaxKind.STRUCT_DEF
    if current == TokenKind.ENUM_KW:
        _enum_def(parser)
        return RustSyntaxKind.ENUM_DEF
    if current == TokenKind.FN_KW:
        _fn_def(parser)
        return RustSyntaxKind.FN_DEF
    if current == TokenKind.CONST_KW:
        if parser.nth(1) in (TokenKind.FN_KW, TokenKind.UNSAFE_KW):
            _fn_def(parser)
            return RustSyntaxKind.FN_DEF
        _const_def(parser)
        return RustSyntaxKind.CONST_DEF
    if current == TokenKind.UNSAFE_KW:
        match parser.nth(1):
            case TokenKind.FN_KW:
                _fn_def(parser)
                return RustSyntaxKind.FN_DEF
            case TokenKind.IMPL_KW:
                _impl_block(parser)
                return RustSyntaxKind.IMPL_BLOCK
            case TokenKind.TRAIT_KW:
                _trait_def(parser)
                return RustSyntaxKind.TRAIT_DEF
            case _:
                return None
    if current == TokenKind.IMPL_KW:
        _impl_block(parser)
        return RustSyntaxKind.IMPL_BLOCK
    if current == TokenKind.TRAIT_KW:
        _trait_def(parser)
        return RustSyntaxKind.TRAIT_DEF
    if current == TokenKind.MOD_KW:
        _module(parser)
        return RustSyntaxKind.MODULE
    if current == TokenKind.STATIC_KW:
        _static_def(parser)
        return RustSyntaxKind.STATIC_DEF
    if current == TokenKind.TYPE_KW:
        _type_alias_def(parser)
        return RustSyntaxKind.TYPE_ALIAS_DEF
    if current == TokenKind.IDENT and parser.nth_at(1, TokenKind.BANG):
        _macro_item(parser)
        return RustSyntaxKind.MACRO_ITEM
    return None


def at_item_start(parser: Parser) -> bool:
    """Whether an item (rather than an expression) starts at the current token."""
    current = parser.current
    if current == TokenKind.CONST_KW:
        return not parser.nth_at(1, TokenKind.L_CURLY)
    if current == TokenKind.UNSAFE_KW:
        return parser.nth(1) in (TokenKind.FN_KW, TokenKind.IMPL_KW, TokenKind.TRAIT_KW)
    if current == TokenKind.IDENT:
        # `macro_rules! name { ... }`
        return parser.nth_at(1, TokenKind.BANG) and parser.nth_at(2, TokenKind.IDENT)
    return current in ITEM_KEYWORDS


def _use_item(parser: Parser) -> None:
    parser.bump()
    if parse_use_tree(parser).is_absent():
        parser.error_expected(PARSER_EXPECTED_NAME)
    parser.expect(TokenKind.SEMICOLON)


def parse_use_tree(parser: Parser) -> ParsedSyntax:
    """`a::b`, `a::*`, `a::{...}`, `{...}`, `::{...}`, `a as b`."""
    if not parser.at_set(USE_TREE_FIRST):
        return ParsedSyntax.absent()

    marker = parser.start()
    if parser.at(TokenKind.STAR):
        parser.bump()
    elif parser.at(TokenKind.COLON2) and parser.nth_at(1, TokenKind.STAR):
        parser.bump_n(2)
    elif parser.at(TokenKind.L_CURLY) or (parser.at(TokenKind.COLON2) and parser.nth_at(1, TokenKind.L_CURLY)):
        parser.eat(TokenKind.COLON2)
        parse_use_tree_list(parser)
    else:
        parse_path(parser, PathMode.USE)
        if parser.at(TokenKind.AS_KW):
            parse_rename(parser)
        elif parser.eat(TokenKind.COLON2):
            if parser.at(TokenKind.STAR):
                parser.bump()
            elif parser.at(TokenKind.L_CURLY):
                parse_use_tree_list(parser)
            else:
                parser.error(PARSER_UNEXPECTED_TOKEN, "expected `{` or `*` after `::`")
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.USE_TREE))


def parse_use_tree_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.USE_TREE_LIST,
        open=TokenKind.L_CURLY,
        close=TokenKind.R_CURLY,
        parse_element=parse_use_tree,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.USE_KW}),
    ).parse_list(parser)


def parse_rename(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if not parser.eat(TokenKind.UNDERSCORE):
        parse_name(parser)
    return marker.complete(parser, RustSyntaxKind.RENAME)


def _struct_def(parser: Parser) -> None:
    parser.bump()
    parse_name(parser)
    parse_type_param_list(parser)
    if parser.at(TokenKind.SEMICOLON):
        parser.bump()
    elif parser.at(TokenKind.L_PAREN):
        _tuple_field_def_list(parser)
        parse_where_clause(parser)
        parser.expect(TokenKind.SEMICOLON)
    else:
        parse_where_clause(parser)
        if parser.at(TokenKind.L_CURLY):
            _named_field_def_list(parser)
        else:
            parser.expect(TokenKind.SEMICOLON)


def _named_field_def_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.NAMED_FIELD_DEF_LIST,
        open=TokenKind.L_CURLY,
        close=TokenKind.R_CURLY,
        parse_element=_named_field_def,
        recovery=ITEM_RECOVERY_SET - {TokenKind.PUB_KW, TokenKind.POUND},
    ).parse_list(parser)


def _named_field_def(parser: Parser) -> ParsedSyntax:
    if not parser.at_set(frozenset({TokenKind.POUND, TokenKind.PUB_KW, TokenKind.IDENT})):
        return ParsedSyntax.absent()
    marker = parser.start()
    parse_outer_attributes(parser)
    parse_visibility(parser)
    parse_name(parser)
    parser.expect(TokenKind.COLON)
    if parse_type(parser).is_absent():
        parser.error_expected(PARSER_EXPECTED_TYPE)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.NAMED_FIELD_DEF))


def _tuple_field_def_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.TUPLE_FIELD_DEF_LIST,
        open=TokenKind.L_PAREN,
        close=TokenKind.R_PAREN,
        parse_element=_tuple_field_def,
        recovery=frozenset({TokenKind.SEMICOLON}),
    ).parse_list(parser)


def _tuple_field_def(parser: Parser) -> ParsedSyntax:
    marker = parser.start()
    has_prefix = parse_outer_attributes(parser)
    has_prefix = parse_visibility(parser) or has_prefix
    if parse_type(parser).is_absent():
        if not has_prefix:
            marker.abandon(parser)
            return ParsedSyntax.absent()
        parser.error_expected(PARSER_EXPECTED_TYPE)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TUPLE_FIELD_DEF))


def _enum_def(parser: Parser) -> None:
    parser.bump()
    parse_name(parser)
    parse_type_param_list(parser)
    parse_where_clause(parser)
    if parser.at(TokenKind.L_CURLY):
        ParseSeparatedList(
            list_kind=RustSyntaxKind.VARIANT_LIST,
            open=TokenKind.L_CURLY,
            close=TokenKind.R_CURLY,
            parse_element=_variant,
            recovery=ITEM_RECOVERY_SET - {TokenKind.PUB_KW, TokenKind.POUND},
        ).parse_list(parser)
    else:
        parser.expect(TokenKind.L_CURLY)


def _variant(parser: Parser) -> ParsedSyntax:
    if not parser.at_set(frozenset({TokenKind.POUND, TokenKind.PUB_KW, TokenKind.IDENT})):
        return ParsedSyntax.absent()
    marker = parser.start()
    parse_outer_attributes(parser)
    parse_visibility(parser)
    parse_name(parser)
    if parser.at(TokenKind.L_CURLY):
        _named_field_def_list(parser)
    elif parser.at(TokenKind.L_PAREN):
        _tuple_field_def_list(parser)
    if parser.eat(TokenKind.EQ):
        _expect_expr(parser)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.VARIANT))


def _fn_def(parser: Parser) -> None:
    parser.eat(TokenKind.CONST_KW)
    parser.eat(TokenKind.UNSAFE_KW)
    parser.expect(TokenKind.FN_KW)
    parse_name(parser)
    parse_type_param_list(parser)
    if parser.at(TokenKind.L_PAREN):
        _param_list(parser)
    else:
        parser.expect(TokenKind.L_PAREN)
    parse_ret_type(parser)
    parse_where_clause(parser)
    if parser.at(TokenKind.L_CURLY):
        parse_block(parser)
    else:
        parser.expect(TokenKind.SEMICOLON)


def _param_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.PARAM_LIST,
        open=TokenKind.L_PAREN,
        close=TokenKind.R_PAREN,
        parse_element=_param,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.THIN_ARROW}),
    ).parse_list(parser)


def _at_self_param(parser: Parser) -> bool:
    if parser.at(TokenKind.SELF_KW):
        return True
    if parser.at(TokenKind.MUT_KW):
        return parser.nth_at(1, TokenKind.SELF_KW)
    if not parser.at(TokenKind.AMP):
        return False
    n = 1
    if parser.nth_at(n, TokenKind.LIFETIME):
        n += 1
    if parser.nth_at(n, TokenKind.MUT_KW):
        n += 1
    return parser.nth_at(n, TokenKind.SELF_KW)


def _param(parser: Parser) -> ParsedSyntax:
    if _at_self_param(parser):
        marker = parser.start()
        if parser.eat(TokenKind.AMP):
            if parser.at(TokenKind.LIFETIME):
                parse_lifetime_ref(parser)
        parser.eat(TokenKind.MUT_KW)
        parser.bump()
        if parser.eat(TokenKind.COLON):
            _expect_type(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.SELF_PARAM))

    marker = parser.start()
    has_attributes = parse_outer_attributes(parser)
    if parse_pattern_single(parser).is_absent():
        if not has_attributes:
            marker.abandon(parser)
            return ParsedSyntax.absent()
        parser.error_expected(PARSER_EXPECTED_PATTERN)
    parser.expect(TokenKind.COLON)
    _expect_type(parser)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PARAM))


def parse_ret_type(parser: Parser) -> None:
    if not parser.at(TokenKind.THIN_ARROW):
        return
    marker = parser.start()
    parser.bump()
    _expect_type(parser, allow_bounds=False)
    marker.complete(parser, RustSyntaxKind.RET_TYPE)


def _impl_block(parser: Parser) -> None:
    parser.eat(TokenKind.UNSAFE_KW)
    parser.bump()
    parse_type_param_list(parser)
    parser.eat(TokenKind.BANG)
    _expect_type(parser, allow_bounds=False)
    if parser.eat(TokenKind.FOR_KW):
        _expect_type(parser, allow_bounds=False)
    parse_where_clause(parser)
    if parser.at(TokenKind.L_CURLY):
        parse_item_list(parser)
    else:
        parser.expect(TokenKind.L_CURLY)


def _trait_def(parser: Parser) -> None:
    parser.eat(TokenKind.UNSAFE_KW)
    parser.bump()
    parse_name(parser)
    parse_type_param_list(parser)
    if parser.eat(TokenKind.COLON):
        parse_type_bound_list(parser)
    parse_where_clause(parser)
    if parser.at(TokenKind.L_CURLY):
        parse_item_list(parser)
    else:
        parser.expect(TokenKind.L_CURLY)


def _module(parser: Parser) -> None:
    parser.bump()
    parse_name(parser)
    if parser.at(TokenKind.L_CURLY):
        parse_item_list(parser)
    else:
        parser.expect(TokenKind.SEMICOLON)


def _const_def(parser: Parser) -> None:
    parser.bump()
    if not parser.eat(TokenKind.UNDERSCORE):
        parse_name(parser)
    if parser.eat(TokenKind.COLON):
        _expect_type(parser)
    if parser.eat(TokenKind.EQ):
        _expect_expr(parser)
    parser.expect(TokenKind.SEMICOLON)


def _static_def(parser: Parser) -> None:
    parser.bump()
    parser.eat(TokenKind.MUT_KW)
    parse_name(parser)
    parser.expect(TokenKind.COLON)
    _expect_type(parser)
    if parser.eat(TokenKind.EQ):
        _expect_expr(parser)
    parser.expect(TokenKind.SEMICOLON)


def _type_alias_def(parser: Parser) -> None:
    parser.bump()
    parse_name(parser)
    parse_type_param_list(parser)
    if parser.eat(TokenKind.COLON):
        parse_type_bound_list(parser)
    parse_where_clause(parser)
    if parser.eat(TokenKind.EQ):
        _expect_type(parser)
    parser.expect(TokenKind.SEMICOLON)


def _macro_item(parser: Parser) -> None:
    parse_path(parser, PathMode.EXPR)
    parser.bump()
    if parser.at(TokenKind.IDENT):
        parse_name(parser)
    if not parser.at_set(frozenset(_DELIMITERS)):
        parser.error(PARSER_UNEXPECTED_TOKEN, "expected a macro body")
        return
    braced = parser.at(TokenKind.L_CURLY)
    parse_token_tree(parser)
    if not braced:
        parser.expect(TokenKind.SEMICOLON)


# -------------------------
# Attributes, visibility, names
# -------------------------


def parse_outer_attributes(parser: Parser) -> bool:
    parsed_any = False
    while parser.at(TokenKind.POUND):
        parse_attribute(parser)
        parsed_any = True
    return parsed_any


def parse_attribute(parser: Parser) -> CompletedMarker:
    """`#[path]`, `#[path = expr]`, `#[path(tokens)]` and the inner `#![...]` forms."""
    marker = parser.start()
    parser.bump()
    parser.eat(TokenKind.BANG)
    if parser.expect(TokenKind.L_BRACK):
        if parser.at_set(PATH_FIRST):
            parse_path(parser, PathMode.USE)
        else:
            parser.error_expected(PARSER_EXPECTED_NAME)
        if parser.eat(TokenKind.EQ):
            _expect_expr(parser)
        elif parser.at_set(frozenset(_DELIMITERS)):
            parse_token_tree(parser)
        parser.expect(TokenKind.R_BRACK)
    return marker.complete(parser, RustSyntaxKind.ATTR)


def parse_visibility(parser: Parser) -> bool:
    """`pub`, `pub(crate)`, `pub(self)`, `pub(super)`, `pub(in path)`."""
    if not parser.at(TokenKind.PUB_KW):
        return False
    marker = parser.start()
    parser.bump()
    if parser.at(TokenKind.L_PAREN):
        restricted = parser.nth(1) in (TokenKind.CRATE_KW, TokenKind.SELF_KW, TokenKind.SUPER_KW) and parser.nth_at(
            2, TokenKind.R_PAREN
        )
        if restricted:
            parser.bump_n(3)
        elif parser.nth_at(1, TokenKind.IN_KW):
            parser.bump_n(2)
            parse_path(parser, PathMode.USE)
            parser.expect(TokenKind.R_PAREN)
    marker.complete(parser, RustSyntaxKind.VISIBILITY)
    return True


def parse_name(parser: Parser) -> bool:
    if parser.at(TokenKind.IDENT):
        marker = parser.start()
        parser.bump()
        marker.complete(parser, RustSyntaxKind.NAME)
        return True
    parser.error_expected(PARSER_EXPECTED_NAME)
    return False


def parse_name_ref(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, RustSyntaxKind.NAME_REF)


def parse_lifetime_ref(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    return marker.complete(parser, RustSyntaxKind.LIFETIME_REF)


def parse_token_tree(parser: Parser) -> CompletedMarker:
    """A delimited, balanced run of arbitrary tokens (macro bodies and attribute arguments)."""
    marker = parser.start()
    close = _DELIMITERS[parser.current]
    parser.bump()
    while not parser.at(TokenKind.EOF) and not parser.at(close):
        if parser.at_set(frozenset(_DELIMITERS)):
            parse_token_tree(parser)
        elif parser.current in _DELIMITERS.values():
            parser.err_and_bump(PARSER_UNEXPECTED_TOKEN, f"unmatched {parser.current.name}")
        else:
            parser.bump()
    parser.expect(close)
    return marker.complete(parser, RustSyntaxKind.TOKEN_TREE)


# -------------------------
# Paths
# -------------------------


def parse_path(parser: Parser, mode: PathMode) -> CompletedMarker:
    marker = parser.start()
    _path_segment(parser, mode, first=True)
    qualifier = marker.complete(parser, RustSyntaxKind.PATH)

    while parser.at(TokenKind.COLON2) and parser.nth(1) in PATH_SEGMENT_FIRST:
        path = qualifier.precede(parser)
        parser.bump()
        _path_segment(parser, mode, first=False)
        qualifier = path.complete(parser, RustSyntaxKind.PATH)
    return qualifier


def _path_segment(parser: Parser, mode: PathMode, *, first: bool) -> None:
    marker = parser.start()
    if first and parser.at(TokenKind.COLON2):
        parser.bump()

    if parser.at(TokenKind.IDENT):
        parse_name_ref(parser)
    elif parser.at_set(PATH_SEGMENT_FIRST):
        parser.bump()
    elif first and parser.at(TokenKind.LT) and mode != PathMode.USE:
        # `<T as Trait>::item`
        parser.bump()
        _expect_type(parser)
        if parser.eat(TokenKind.AS_KW):
            parse_path(parser, PathMode.TYPE)
        parser.expect(TokenKind.GT)
    else:
        parser.error_expected(PARSER_EXPECTED_NAME)

    if mode != PathMode.USE:
        if parser.at(TokenKind.COLON2) and parser.nth_at(1, TokenKind.LT):
            parser.bump()
            parse_type_arg_list(parser)
        elif mode == PathMode.TYPE and parser.at(TokenKind.LT):
            parse_type_arg_list(parser)
        elif mode == PathMode.TYPE and parser.at(TokenKind.L_PAREN):
            # `Fn(A, B) -> C`
            ParseSeparatedList(
                list_kind=RustSyntaxKind.PARAM_LIST,
                open=TokenKind.L_PAREN,
                close=TokenKind.R_PAREN,
                parse_element=parse_type,
                recovery=frozenset({TokenKind.SEMICOLON}),
            ).parse_list(parser)
            parse_ret_type(parser)
    marker.complete(parser, RustSyntaxKind.PATH_SEGMENT)


def parse_type_arg_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.TYPE_ARG_LIST,
        open=TokenKind.LT,
        close=TokenKind.GT,
        parse_element=_type_arg,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.EQ}),
    ).parse_list(parser)


def _type_arg(parser: Parser) -> ParsedSyntax:
    if parser.at(TokenKind.LIFETIME):
        return ParsedSyntax.present(parse_lifetime_ref(parser))
    if parser.at(TokenKind.IDENT) and parser.nth_at(1, TokenKind.EQ):
        marker = parser.start()
        parse_name_ref(parser)
        parser.bump()
        _expect_type(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.ASSOC_TYPE_ARG))
    if parser.at_set(LITERAL_FIRST) or parser.at(TokenKind.L_CURLY):
        return parse_expr(parser)
    return parse_type(parser)


# -------------------------
# Types
# -------------------------


def parse_type(parser: Parser, *, allow_bounds: bool = True) -> ParsedSyntax:
    current = parser.current
    marker = parser.start()

    if current == TokenKind.L_PAREN:
        parser.bump()
        if parser.eat(TokenKind.R_PAREN):
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TUPLE_TYPE))
        _expect_type(parser)
        if not parser.at(TokenKind.COMMA):
            parser.expect(TokenKind.R_PAREN)
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PAREN_TYPE))
        while parser.eat(TokenKind.COMMA):
            if parser.at(TokenKind.R_PAREN):
                break
            _expect_type(parser)
        parser.expect(TokenKind.R_PAREN)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TUPLE_TYPE))

    if current == TokenKind.BANG:
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.NEVER_TYPE))

    if current == TokenKind.UNDERSCORE:
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PLACEHOLDER_TYPE))

    if current == TokenKind.STAR:
        parser.bump()
        if not (parser.eat(TokenKind.CONST_KW) or parser.eat(TokenKind.MUT_KW)):
            parser.error(PARSER_UNEXPECTED_TOKEN, "expected `const` or `mut` after `*`")
        _expect_type(parser, allow_bounds=False)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.POINTER_TYPE))

    if current in (TokenKind.AMP, TokenKind.AMP2):
        parser.bump()
        if parser.at(TokenKind.LIFETIME):
            parse_lifetime_ref(parser)
        parser.eat(TokenKind.MUT_KW)
        _expect_type(parser, allow_bounds=False)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.REFERENCE_TYPE))

    if current == TokenKind.L_BRACK:
        parser.bump()
        _expect_type(parser)
        if parser.eat(TokenKind.SEMICOLON):
            _expect_expr(parser)
            parser.expect(TokenKind.R_BRACK)
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.ARRAY_TYPE))
        parser.expect(TokenKind.R_BRACK)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.SLICE_TYPE))

    if current == TokenKind.FN_KW or (current == TokenKind.UNSAFE_KW and parser.nth_at(1, TokenKind.FN_KW)):
        parser.eat(TokenKind.UNSAFE_KW)
        parser.bump()
        if parser.at(TokenKind.L_PAREN):
            _param_list(parser)
        else:
            parser.expect(TokenKind.L_PAREN)
        parse_ret_type(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.FN_POINTER_TYPE))

    if current == TokenKind.IMPL_KW:
        parser.bump()
        parse_type_bound_list(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.IMPL_TRAIT_TYPE))

    if current == TokenKind.DYN_KW:
        parser.bump()
        parse_type_bound_list(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.DYN_TRAIT_TYPE))

    if current in PATH_FIRST:
        parse_path(parser, PathMode.TYPE)
        path_type = marker.complete(parser, RustSyntaxKind.PATH_TYPE)
        if allow_bounds and parser.at(TokenKind.PLUS) and parser.nth(1) in (PATH_FIRST | {TokenKind.LIFETIME}):
            # Bare trait object: `Trait + Send`.
            dyn_marker = path_type.precede(parser)
            bounds = parser.start()
            while parser.eat(TokenKind.PLUS):
                if not _type_bound(parser):
                    parser.error_expected(PARSER_EXPECTED_TYPE)
                    break
            bounds.complete(parser, RustSyntaxKind.TYPE_BOUND_LIST)
            return ParsedSyntax.present(dyn_marker.complete(parser, RustSyntaxKind.DYN_TRAIT_TYPE))
        return ParsedSyntax.present(path_type)

    marker.abandon(parser)
    return ParsedSyntax.absent()


def _expect_type(parser: Parser, *, allow_bounds: bool = True) -> None:
    if parse_type(parser, allow_bounds=allow_bounds).is_absent():
        parser.error_expected(PARSER_EXPECTED_TYPE)


def parse_type_bound_list(parser: Parser) -> CompletedMarker:
    """`Trait + 'a + ?Sized` bounds."""
    marker = parser.start()
    if not _type_bound(parser):
        parser.error_expected(PARSER_EXPECTED_TYPE)
    while parser.eat(TokenKind.PLUS):
        if not _type_bound(parser):
            break
    return marker.complete(parser, RustSyntaxKind.TYPE_BOUND_LIST)


def _type_bound(parser: Parser) -> bool:
    if parser.at(TokenKind.LIFETIME):
        parse_lifetime_ref(parser)
        return True
    if parser.at(TokenKind.L_PAREN):
        parser.bump()
        _type_bound(parser)
        parser.expect(TokenKind.R_PAREN)
        return True
    if parser.at(TokenKind.QUESTION) and parser.nth(1) in PATH_FIRST:
        parser.bump()
    if not parser.at_set(PATH_FIRST):
        return False
    marker = parser.start()
    parse_path(parser, PathMode.TYPE)
    marker.complete(parser, RustSyntaxKind.PATH_TYPE)
    return True


def parse_type_param_list(parser: Parser) -> None:
    if not parser.at(TokenKind.LT):
        return
    ParseSeparatedList(
        list_kind=RustSyntaxKind.TYPE_PARAM_LIST,
        open=TokenKind.LT,
        close=TokenKind.GT,
        parse_element=_type_param,
        recovery=frozenset({TokenKind.L_PAREN, TokenKind.SEMICOLON, TokenKind.WHERE_KW}),
    ).parse_list(parser)


def _type_param(parser: Parser) -> ParsedSyntax:
    marker = parser.start()
    parse_outer_attributes(parser)
    if parser.at(TokenKind.LIFETIME):
        parser.bump()
        if parser.eat(TokenKind.COLON):
            while parser.at(TokenKind.LIFETIME):
                parse_lifetime_ref(parser)
                if not parser.eat(TokenKind.PLUS):
                    break
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.LIFETIME_PARAM))

    if parser.at(TokenKind.CONST_KW):
        parser.bump()
        parse_name(parser)
        parser.expect(TokenKind.COLON)
        _expect_type(parser)
        if parser.eat(TokenKind.EQ):
            _expect_expr(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.CONST_PARAM))

    if parser.at(TokenKind.IDENT):
        parse_name(parser)
        if parser.eat(TokenKind.COLON):
            parse_type_bound_list(parser)
        if parser.eat(TokenKind.EQ):
            _expect_type(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TYPE_PARAM))

    marker.abandon(parser)
    return ParsedSyntax.absent()


def parse_where_clause(parser: Parser) -> None:
    if not parser.at(TokenKind.WHERE_KW):
        return
    marker = parser.start()
    parser.bump()
    progress = ParserProgress()
    end = frozenset({TokenKind.L_CURLY, TokenKind.SEMICOLON, TokenKind.EQ, TokenKind.EOF})
    while not parser.at_set(end):
        progress.assert_progressing(parser)
        predicate = parser.start()
        if parser.at(TokenKind.LIFETIME):
            parse_lifetime_ref(parser)
            parser.expect(TokenKind.COLON)
            while parser.at(TokenKind.LIFETIME):
                parse_lifetime_ref(parser)
                if not parser.eat(TokenKind.PLUS):
                    break
        elif parse_type(parser, allow_bounds=False).is_present():
            parser.expect(TokenKind.COLON)
            parse_type_bound_list(parser)
        else:
            predicate.abandon(parser)
            parser.error(PARSER_EXPECTED_TYPE)
            break
        predicate.complete(parser, RustSyntaxKind.WHERE_PRED)
        if not parser.eat(TokenKind.COMMA):
            break
    marker.complete(parser, RustSyntaxKind.WHERE_CLAUSE)


# -------------------------
# Patterns
# -------------------------


def parse_pattern(parser: Parser) -> ParsedSyntax:
    """A pattern, or-patterns included (`A | B`)."""
    if parser.at(TokenKind.PIPE):
        marker = parser.start()
        parser.bump()
        if parse_pattern_single(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
        _or_pattern_rest(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.OR_PAT))

    first = parse_pattern_single(parser)
    if first.marker is None or not parser.at(TokenKind.PIPE):
        return first

    marker = first.marker.precede(parser)
    _or_pattern_rest(parser)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.OR_PAT))


def _or_pattern_rest(parser: Parser) -> None:
    while parser.eat(TokenKind.PIPE):
        if parse_pattern_single(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
            break


def parse_pattern_single(parser: Parser) -> ParsedSyntax:
    current = parser.current
    marker = parser.start()

    if current == TokenKind.UNDERSCORE:
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PLACEHOLDER_PAT))

    if current == TokenKind.DOT2:
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.REST_PAT))

    if current in (TokenKind.AMP, TokenKind.AMP2):
        parser.bump()
        parser.eat(TokenKind.MUT_KW)
        if parse_pattern_single(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.REF_PAT))

    if current == TokenKind.L_PAREN:
        _pattern_list(parser, TokenKind.L_PAREN, TokenKind.R_PAREN)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TUPLE_PAT))

    if current == TokenKind.L_BRACK:
        _pattern_list(parser, TokenKind.L_BRACK, TokenKind.R_BRACK)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.SLICE_PAT))

    if current in LITERAL_FIRST or (current == TokenKind.MINUS and parser.nth(1) in LITERAL_FIRST):
        _literal(parser, allow_negative=True)
        literal = marker.complete(parser, RustSyntaxKind.LITERAL_PAT)
        if parser.at(TokenKind.DOT2EQ) and parser.nth(1) in (LITERAL_FIRST | {TokenKind.MINUS}):
            range_pat = literal.precede(parser)
            parser.bump()
            end = parser.start()
            _literal(parser, allow_negative=True)
            end.complete(parser, RustSyntaxKind.LITERAL_PAT)
            return ParsedSyntax.present(range_pat.complete(parser, RustSyntaxKind.RANGE_PAT))
        return ParsedSyntax.present(literal)

    if current in (TokenKind.REF_KW, TokenKind.MUT_KW) or (
        current == TokenKind.IDENT
        and parser.nth(1) not in (TokenKind.COLON2, TokenKind.L_PAREN, TokenKind.L_CURLY, TokenKind.BANG)
    ):
        parser.eat(TokenKind.REF_KW)
        parser.eat(TokenKind.MUT_KW)
        parse_name(parser)
        if parser.eat(TokenKind.AT):
            if parse_pattern_single(parser).is_absent():
                parser.error_expected(PARSER_EXPECTED_PATTERN)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.BIND_PAT))

    if current in PATH_FIRST:
        parse_path(parser, PathMode.EXPR)
        if parser.at(TokenKind.L_PAREN):
            _pattern_list(parser, TokenKind.L_PAREN, TokenKind.R_PAREN)
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.TUPLE_STRUCT_PAT))
        if parser.at(TokenKind.L_CURLY):
            _field_pat_list(parser)
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.STRUCT_PAT))
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PATH_PAT))

    marker.abandon(parser)
    return ParsedSyntax.absent()


def _pattern_list(parser: Parser, open: TokenKind, close: TokenKind) -> None:
    """Delimited sub-patterns, emitted into the enclosing pattern node."""
    ParseSeparatedList(
        list_kind=RustSyntaxKind.TUPLE_PAT,
        open=open,
        close=close,
        parse_element=parse_pattern,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.EQ, TokenKind.FAT_ARROW}),
    ).parse_delimited(parser)


def _field_pat_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.FIELD_PAT_LIST,
        open=TokenKind.L_CURLY,
        close=TokenKind.R_CURLY,
        parse_element=_field_pat,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.EQ, TokenKind.FAT_ARROW}),
    ).parse_list(parser)


def _field_pat(parser: Parser) -> ParsedSyntax:
    if parser.at(TokenKind.DOT2):
        marker = parser.start()
        parser.bump()
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.REST_PAT))

    marker = parser.start()
    if parser.at_set(frozenset({TokenKind.IDENT, TokenKind.INT_NUMBER})) and parser.nth_at(1, TokenKind.COLON):
        parse_name_ref(parser)
        parser.bump()
        if parse_pattern(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.FIELD_PAT))

    if parser.at_set(frozenset({TokenKind.IDENT, TokenKind.REF_KW, TokenKind.MUT_KW})):
        parser.eat(TokenKind.REF_KW)
        parser.eat(TokenKind.MUT_KW)
        parse_name(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.FIELD_PAT))

    marker.abandon(parser)
    return ParsedSyntax.absent()


# -------------------------
# Blocks and statements
# -------------------------


def parse_block(parser: Parser) -> CompletedMarker:
    """`{ statements [tail expression] }`."""
    marker = parser.start()
    parser.expect(TokenKind.L_CURLY)
    progress = ParserProgress()
    while not parser.at(TokenKind.R_CURLY) and not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        if not parse_statement(parser):
            parser.err_recover(
                PARSER_EXPECTED_EXPRESSION,
                frozenset(),
                message=f"unexpected {parser.current.name} in block",
            )
    parser.expect(TokenKind.R_CURLY)
    return marker.complete(parser, RustSyntaxKind.BLOCK)


def parse_statement(parser: Parser) -> bool:
    """Parse one statement; False if the current token cannot start one."""
    if parser.eat(TokenKind.SEMICOLON):
        return True

    marker = parser.start()
    has_attributes = parse_outer_attributes(parser)

    if parser.at(TokenKind.LET_KW):
        _let_stmt(parser)
        marker.complete(parser, RustSyntaxKind.LET_STMT)
        return True

    if at_item_start(parser):
        _parse_item_rest(parser, marker, has_prefix=has_attributes)
        return True

    parsed = _expr_bp(parser, Restrictions(prefer_stmt=True), 1)
    if parsed.marker is None:
        if has_attributes:
            parser.error_expected(PARSER_EXPECTED_EXPRESSION)
            marker.complete(parser, RustSyntaxKind.EXPR_STMT)
            return True
        marker.abandon(parser)
        return False

    if parser.at(TokenKind.R_CURLY):
        # Tail expression of the block.
        if has_attributes:
            marker.complete(parser, RustSyntaxKind.EXPR_STMT)
        else:
            marker.abandon(parser)
        return True

    if parsed.marker.kind in BLOCK_LIKE:
        parser.eat(TokenKind.SEMICOLON)
    else:
        parser.expect(TokenKind.SEMICOLON)
    marker.complete(parser, RustSyntaxKind.EXPR_STMT)
    return True


def _let_stmt(parser: Parser) -> None:
    parser.bump()
    if parse_pattern(parser).is_absent():
        parser.error_expected(PARSER_EXPECTED_PATTERN)
    if parser.eat(TokenKind.COLON):
        _expect_type(parser)
    if parser.eat(TokenKind.EQ):
        _expect_expr(parser)
        if parser.at(TokenKind.ELSE_KW):
            let_else = parser.start()
            parser.bump()
            parse_block(parser)
            let_else.complete(parser, RustSyntaxKind.LET_ELSE)
    parser.expect(TokenKind.SEMICOLON)


# -------------------------
# Expressions
# -------------------------


def parse_expr(parser: Parser, restrictions: Restrictions = _NO_RESTRICTIONS) -> ParsedSyntax:
    return _expr_bp(parser, restrictions, 1)


def _expect_expr(parser: Parser, restrictions: Restrictions = _NO_RESTRICTIONS) -> ParsedSyntax:
    parsed = parse_expr(parser, restrictions)
    if parsed.is_absent():
        parser.error_expected(PARSER_EXPECTED_EXPRESSION)
    return parsed


def _at_expr_start(parser: Parser, restrictions: Restrictions) -> bool:
    if restrictions.forbid_structs and parser.at(TokenKind.L_CURLY):
        return False
    return parser.at_set(EXPR_FIRST)


def _current_op(parser: Parser) -> tuple[int, int, RustSyntaxKind]:
    """Binding power, token count and node kind of the binary operator at the cursor."""
    current = parser.current
    if current == TokenKind.LT:
        if parser.at_joined(TokenKind.LT, TokenKind.LT, TokenKind.EQ):
            return _ASSIGNMENT_BP, 3, RustSyntaxKind.BIN_EXPR
        if parser.at_joined(TokenKind.LT, TokenKind.LT):
            return 9, 2, RustSyntaxKind.BIN_EXPR
        if parser.at_joined(TokenKind.LT, TokenKind.EQ):
            return 5, 2, RustSyntaxKind.BIN_EXPR
        return 5, 1, RustSyntaxKind.BIN_EXPR
    if current == TokenKind.GT:
        if parser.at_joined(TokenKind.GT, TokenKind.GT, TokenKind.EQ):
            return _ASSIGNMENT_BP, 3, RustSyntaxKind.BIN_EXPR
        if parser.at_joined(TokenKind.GT, TokenKind.GT):
            return 9, 2, RustSyntaxKind.BIN_EXPR
        if parser.at_joined(TokenKind.GT, TokenKind.EQ):
            return 5, 2, RustSyntaxKind.BIN_EXPR
        return 5, 1, RustSyntaxKind.BIN_EXPR
    if current == TokenKind.EQ or current in _COMPOUND_ASSIGNMENT:
        return _ASSIGNMENT_BP, 1, RustSyntaxKind.BIN_EXPR
    if current in (TokenKind.DOT2, TokenKind.DOT2EQ):
        return _RANGE_BP, 1, RustSyntaxKind.RANGE_EXPR
    if current == TokenKind.AS_KW:
        return _CAST_BP, 1, RustSyntaxKind.CAST_EXPR
    match current:
        case TokenKind.PIPE2:
            bp = 3
        case TokenKind.AMP2:
            bp = 4
        case TokenKind.EQ2 | TokenKind.NEQ:
            bp = 5
        case TokenKind.PIPE:
            bp = 6
        case TokenKind.CARET:
            bp = 7
        case TokenKind.AMP:
            bp = 8
        case TokenKind.PLUS | TokenKind.MINUS:
            bp = 10
        case TokenKind.STAR | TokenKind.SLASH | TokenKind.PERCENT:
            bp = 11
        case _:
            return 0, 0, RustSyntaxKind.BIN_EXPR
    return bp, 1, RustSyntaxKind.BIN_EXPR


def _expr_bp(parser: Parser, restrictions: Restrictions, min_bp: int) -> ParsedSyntax:
    lhs = _lhs(parser, restrictions)
    if lhs.marker is None:
        return lhs
    completed = lhs.marker
    if restrictions.prefer_stmt and completed.kind in BLOCK_LIKE:
        return lhs

    operand_restrictions = replace(restrictions, prefer_stmt=False)
    while True:
        bp, token_count, kind = _current_op(parser)
        if bp == 0 or bp < min_bp:
            break

        marker = completed.precede(parser)
        parser.bump_n(token_count)

        if kind == RustSyntaxKind.CAST_EXPR:
            _expect_type(parser, allow_bounds=False)
        elif kind == RustSyntaxKind.RANGE_EXPR:
            if _at_expr_start(parser, operand_restrictions):
                _expr_bp(parser, operand_restrictions, bp + 1)
        else:
            # Assignment is right-associative, everything else left-associative.
            next_bp = bp if bp == _ASSIGNMENT_BP else bp + 1
            if _expr_bp(parser, operand_restrictions, next_bp).is_absent():
                parser.error_expected(PARSER_EXPECTED_EXPRESSION)
        completed = marker.complete(parser, kind)
    return ParsedSyntax.present(completed)


def _lhs(parser: Parser, restrictions: Restrictions) -> ParsedSyntax:
    current = parser.current
    operand_restrictions = replace(restrictions, prefer_stmt=False)

    if current in (TokenKind.AMP, TokenKind.AMP2):
        marker = parser.start()
        parser.bump()
        parser.eat(TokenKind.MUT_KW)
        if _expr_bp(parser, operand_restrictions, _PREFIX_BP).is_absent():
            parser.error_expected(PARSER_EXPECTED_EXPRESSION)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.REF_EXPR))

    if current in (TokenKind.STAR, TokenKind.BANG, TokenKind.MINUS):
        marker = parser.start()
        parser.bump()
        if _expr_bp(parser, operand_restrictions, _PREFIX_BP).is_absent():
            parser.error_expected(PARSER_EXPECTED_EXPRESSION)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PREFIX_EXPR))

    if current in (TokenKind.DOT2, TokenKind.DOT2EQ):
        marker = parser.start()
        parser.bump()
        if _at_expr_start(parser, operand_restrictions):
            _expr_bp(parser, operand_restrictions, _RANGE_BP + 1)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.RANGE_EXPR))

    atom = _atom(parser, restrictions)
    if atom.marker is None:
        return atom
    if restrictions.prefer_stmt and atom.marker.kind in BLOCK_LIKE:
        return atom
    return ParsedSyntax.present(_postfix(parser, atom.marker))


def _postfix(parser: Parser, completed: CompletedMarker) -> CompletedMarker:
    while True:
        if parser.at(TokenKind.L_PAREN):
            marker = completed.precede(parser)
            _arg_list(parser)
            completed = marker.complete(parser, RustSyntaxKind.CALL_EXPR)
        elif parser.at(TokenKind.L_BRACK):
            marker = completed.precede(parser)
            parser.bump()
            _expect_expr(parser)
            parser.expect(TokenKind.R_BRACK)
            completed = marker.complete(parser, RustSyntaxKind.INDEX_EXPR)
        elif parser.at(TokenKind.QUESTION):
            marker = completed.precede(parser)
            parser.bump()
            completed = marker.complete(parser, RustSyntaxKind.TRY_EXPR)
        elif parser.at(TokenKind.DOT):
            completed = _dot_expr(parser, completed)
        else:
            return completed


def _dot_expr(parser: Parser, receiver: CompletedMarker) -> CompletedMarker:
    marker = receiver.precede(parser)
    parser.bump()
    if parser.at(TokenKind.IDENT) and (
        parser.nth_at(1, TokenKind.L_PAREN) or (parser.nth_at(1, TokenKind.COLON2) and parser.nth_at(2, TokenKind.LT))
    ):
        parse_name_ref(parser)
        if parser.eat(TokenKind.COLON2):
            parse_type_arg_list(parser)
        _arg_list(parser)
        return marker.complete(parser, RustSyntaxKind.METHOD_CALL_EXPR)

    if parser.at_set(frozenset({TokenKind.IDENT, TokenKind.INT_NUMBER, TokenKind.FLOAT_NUMBER})):
        parse_name_ref(parser)
    else:
        parser.error_expected(PARSER_EXPECTED_NAME)
    return marker.complete(parser, RustSyntaxKind.FIELD_EXPR)


def _arg_list(parser: Parser) -> CompletedMarker:
    return ParseSeparatedList(
        list_kind=RustSyntaxKind.ARG_LIST,
        open=TokenKind.L_PAREN,
        close=TokenKind.R_PAREN,
        parse_element=parse_expr,
        recovery=frozenset({TokenKind.SEMICOLON, TokenKind.LET_KW}),
    ).parse_list(parser)


def _literal(parser: Parser, *, allow_negative: bool = False) -> CompletedMarker:
    marker = parser.start()
    if allow_negative:
        parser.eat(TokenKind.MINUS)
    parser.bump()
    return marker.complete(parser, RustSyntaxKind.LITERAL)


def _atom(parser: Parser, restrictions: Restrictions) -> ParsedSyntax:
    current = parser.current

    if current in LITERAL_FIRST:
        return ParsedSyntax.present(_literal(parser))

    if current in PATH_FIRST:
        return ParsedSyntax.present(_path_expr(parser, restrictions))

    if current == TokenKind.L_PAREN:
        return ParsedSyntax.present(_paren_or_tuple_expr(parser))

    if current == TokenKind.L_BRACK:
        return ParsedSyntax.present(_array_expr(parser))

    if current == TokenKind.L_CURLY or (
        current in (TokenKind.UNSAFE_KW, TokenKind.CONST_KW) and parser.nth_at(1, TokenKind.L_CURLY)
    ):
        marker = parser.start()
        parser.eat(TokenKind.UNSAFE_KW)
        parser.eat(TokenKind.CONST_KW)
        parse_block(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.BLOCK_EXPR))

    if current == TokenKind.LIFETIME and parser.nth_at(1, TokenKind.COLON):
        marker = parser.start()
        label = parser.start()
        parser.bump_n(2)
        label.complete(parser, RustSyntaxKind.LABEL)
        kind = _labeled_expr_body(parser)
        if kind is None:
            parser.error(PARSER_UNEXPECTED_TOKEN, "expected a loop or block after a label")
            return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.ERROR))
        return ParsedSyntax.present(marker.complete(parser, kind))

    if current == TokenKind.IF_KW:
        return ParsedSyntax.present(_if_expr(parser))

    if current in (TokenKind.WHILE_KW, TokenKind.LOOP_KW, TokenKind.FOR_KW):
        marker = parser.start()
        kind = _labeled_expr_body(parser)
        assert kind is not None
        return ParsedSyntax.present(marker.complete(parser, kind))

    if current == TokenKind.MATCH_KW:
        return ParsedSyntax.present(_match_expr(parser))

    if current in (TokenKind.PIPE, TokenKind.PIPE2, TokenKind.MOVE_KW):
        return ParsedSyntax.present(_lambda_expr(parser, restrictions))

    operand_restrictions = replace(restrictions, prefer_stmt=False)

    if current == TokenKind.RETURN_KW:
        marker = parser.start()
        parser.bump()
        if _at_expr_start(parser, operand_restrictions):
            parse_expr(parser, operand_restrictions)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.RETURN_EXPR))

    if current == TokenKind.BREAK_KW:
        marker = parser.start()
        parser.bump()
        if parser.at(TokenKind.LIFETIME):
            parse_lifetime_ref(parser)
        if _at_expr_start(parser, operand_restrictions):
            parse_expr(parser, operand_restrictions)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.BREAK_EXPR))

    if current == TokenKind.CONTINUE_KW:
        marker = parser.start()
        parser.bump()
        if parser.at(TokenKind.LIFETIME):
            parse_lifetime_ref(parser)
        return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.CONTINUE_EXPR))

    return ParsedSyntax.absent()


def _path_expr(parser: Parser, restrictions: Restrictions) -> CompletedMarker:
    marker = parser.start()
    parse_path(parser, PathMode.EXPR)
    if parser.at(TokenKind.BANG):
        parser.bump()
        if parser.at_set(frozenset(_DELIMITERS)):
            parse_token_tree(parser)
        else:
            parser.error(PARSER_UNEXPECTED_TOKEN, "expected a macro argument list")
        return marker.complete(parser, RustSyntaxKind.MACRO_CALL)
    if parser.at(TokenKind.L_CURLY) and not restrictions.forbid_structs:
        parse_named_field_list(parser)
        return marker.complete(parser, RustSyntaxKind.STRUCT_LIT)
    return marker.complete(parser, RustSyntaxKind.PATH_EXPR)


def parse_named_field_list(parser: Parser) -> CompletedMarker:
    """`{ a: 1, b, ..base }` of a struct literal."""
    marker = parser.start()
    parser.bump()
    progress = ParserProgress()
    while not parser.at(TokenKind.R_CURLY) and not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        if parser.at(TokenKind.DOT2):
            parser.bump()
            if _at_expr_start(parser, _NO_RESTRICTIONS):
                parse_expr(parser)
            break
        if not _named_field(parser):
            position = parser.position
            parser.err_recover(
                PARSER_UNEXPECTED_TOKEN,
                frozenset({TokenKind.SEMICOLON}),
                message=f"unexpected {parser.current.name} in struct literal",
            )
            if parser.position == position:
                break
            continue
        if not parser.at(TokenKind.R_CURLY):
            parser.expect(TokenKind.COMMA)
    parser.expect(TokenKind.R_CURLY)
    return marker.complete(parser, RustSyntaxKind.NAMED_FIELD_LIST)


def _named_field(parser: Parser) -> bool:
    marker = parser.start()
    parse_outer_attributes(parser)
    if parser.at_set(frozenset({TokenKind.IDENT, TokenKind.INT_NUMBER})) and parser.nth_at(1, TokenKind.COLON):
        parse_name_ref(parser)
        parser.bump()
        _expect_expr(parser)
    elif parser.at(TokenKind.IDENT):
        parse_name_ref(parser)
    else:
        marker.abandon(parser)
        return False
    marker.complete(parser, RustSyntaxKind.NAMED_FIELD)
    return True


def _paren_or_tuple_expr(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.R_PAREN):
        return marker.complete(parser, RustSyntaxKind.TUPLE_EXPR)
    _expect_expr(parser)
    if not parser.at(TokenKind.COMMA):
        parser.expect(TokenKind.R_PAREN)
        return marker.complete(parser, RustSyntaxKind.PAREN_EXPR)
    while parser.eat(TokenKind.COMMA):
        if parser.at(TokenKind.R_PAREN):
            break
        if _expect_expr(parser).is_absent():
            break
    parser.expect(TokenKind.R_PAREN)
    return marker.complete(parser, RustSyntaxKind.TUPLE_EXPR)


def _array_expr(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    if parser.eat(TokenKind.R_BRACK):
        return marker.complete(parser, RustSyntaxKind.ARRAY_EXPR)
    _expect_expr(parser)
    if parser.eat(TokenKind.SEMICOLON):
        _expect_expr(parser)
    else:
        while parser.eat(TokenKind.COMMA):
            if parser.at(TokenKind.R_BRACK):
                break
            if _expect_expr(parser).is_absent():
                break
    parser.expect(TokenKind.R_BRACK)
    return marker.complete(parser, RustSyntaxKind.ARRAY_EXPR)


def _block_expr(parser: Parser) -> None:
    if not parser.at(TokenKind.L_CURLY):
        parser.expect(TokenKind.L_CURLY)
        return
    marker = parser.start()
    parse_block(parser)
    marker.complete(parser, RustSyntaxKind.BLOCK_EXPR)


def _condition_restrictions(parser: Parser) -> Restrictions:
    return Restrictions(forbid_structs=not parser.options.allow_struct_literal_in_condition)


def _condition(parser: Parser) -> None:
    marker = parser.start()
    if parser.eat(TokenKind.LET_KW):
        if parse_pattern(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
        parser.expect(TokenKind.EQ)
    _expect_expr(parser, _condition_restrictions(parser))
    marker.complete(parser, RustSyntaxKind.CONDITION)


def _if_expr(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _condition(parser)
    _block_expr(parser)
    if parser.eat(TokenKind.ELSE_KW):
        if parser.at(TokenKind.IF_KW):
            _if_expr(parser)
        else:
            _block_expr(parser)
    return marker.complete(parser, RustSyntaxKind.IF_EXPR)


def _labeled_expr_body(parser: Parser) -> RustSyntaxKind | None:
    """Body of `while`, `loop`, `for` or a labeled block, inside an already started marker."""
    if parser.eat(TokenKind.WHILE_KW):
        _condition(parser)
        _block_expr(parser)
        return RustSyntaxKind.WHILE_EXPR
    if parser.eat(TokenKind.LOOP_KW):
        _block_expr(parser)
        return RustSyntaxKind.LOOP_EXPR
    if parser.eat(TokenKind.FOR_KW):
        if parse_pattern(parser).is_absent():
            parser.error_expected(PARSER_EXPECTED_PATTERN)
        parser.expect(TokenKind.IN_KW)
        _expect_expr(parser, _condition_restrictions(parser))
        _block_expr(parser)
        return RustSyntaxKind.FOR_EXPR
    if parser.at(TokenKind.L_CURLY):
        parse_block(parser)
        return RustSyntaxKind.BLOCK_EXPR
    return None


def _match_expr(parser: Parser) -> CompletedMarker:
    marker = parser.start()
    parser.bump()
    _expect_expr(parser, _condition_restrictions(parser))
    if parser.at(TokenKind.L_CURLY):
        _match_arm_list(parser)
    else:
        parser.expect(TokenKind.L_CURLY)
    return marker.complete(parser, RustSyntaxKind.MATCH_EXPR)


def _match_arm_list(parser: Parser) -> None:
    marker = parser.start()
    parser.bump()
    progress = ParserProgress()
    while not parser.at(TokenKind.R_CURLY) and not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        if not _match_arm(parser):
            position = parser.position
            parser.err_recover(
                PARSER_EXPECTED_PATTERN,
                frozenset({TokenKind.FAT_ARROW, TokenKind.COMMA}),
            )
            if parser.position == position:
                if not parser.eat(TokenKind.COMMA):
                    break
    parser.expect(TokenKind.R_CURLY)
    marker.complete(parser, RustSyntaxKind.MATCH_ARM_LIST)


def _match_arm(parser: Parser) -> bool:
    marker = parser.start()
    has_attributes = parse_outer_attributes(parser)
    if parse_pattern(parser).is_absent():
        if not has_attributes:
            marker.abandon(parser)
            return False
        parser.error_expected(PARSER_EXPECTED_PATTERN)
    if parser.at(TokenKind.IF_KW):
        guard = parser.start()
        parser.bump()
        _expect_expr(parser)
        guard.complete(parser, RustSyntaxKind.MATCH_GUARD)
    parser.expect(TokenKind.FAT_ARROW)
    body = _expr_bp(parser, Restrictions(prefer_stmt=True), 1)
    if body.marker is None:
        parser.error_expected(PARSER_EXPECTED_EXPRESSION)
    elif body.marker.kind in BLOCK_LIKE:
        parser.eat(TokenKind.COMMA)
    elif not parser.at(TokenKind.R_CURLY):
        parser.expect(TokenKind.COMMA)
    marker.complete(parser, RustSyntaxKind.MATCH_ARM)
    return True


def _lambda_expr(parser: Parser, restrictions: Restrictions) -> CompletedMarker:
    marker = parser.start()
    parser.eat(TokenKind.MOVE_KW)
    if parser.at(TokenKind.PIPE2):
        parser.bump()
    elif parser.at(TokenKind.PIPE):
        ParseSeparatedList(
            list_kind=RustSyntaxKind.PARAM_LIST,
            open=TokenKind.PIPE,
            close=TokenKind.PIPE,
            parse_element=_lambda_param,
            recovery=frozenset({TokenKind.SEMICOLON, TokenKind.THIN_ARROW}),
        ).parse_list(parser)
    else:
        parser.expect(TokenKind.PIPE)

    if parser.at(TokenKind.THIN_ARROW):
        parse_ret_type(parser)
        _block_expr(parser)
    elif parse_expr(parser, replace(restrictions, prefer_stmt=False)).is_absent():
        parser.error_expected(PARSER_EXPECTED_EXPRESSION)
    return marker.complete(parser, RustSyntaxKind.LAMBDA_EXPR)


def _lambda_param(parser: Parser) -> ParsedSyntax:
    marker = parser.start()
    if parse_pattern_single(parser).is_absent():
        marker.abandon(parser)
        return ParsedSyntax.absent()
    if parser.eat(TokenKind.COLON):
        _expect_type(parser, allow_bounds=False)
    return ParsedSyntax.present(marker.complete(parser, RustSyntaxKind.PARAM))

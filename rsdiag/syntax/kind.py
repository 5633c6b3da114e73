"""Unified syntax kinds for parser and CST."""

from enum import IntEnum

from rsdiag.lexer.tokens import TokenKind


class RustSyntaxKind(IntEnum):
    """Language syntax vocabulary (tokens + nodes).

    Token kinds share their numeric value with `TokenKind`.
    """

    TOMBSTONE = 0
    EOF = 1

    # Trivia tokens
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12
    SKIPPED = 13

    # Literals
    IDENT = 20
    INT_NUMBER = 21
    FLOAT_NUMBER = 22
    STRING = 23
    BYTE_STRING = 24
    CHAR = 25
    BYTE = 26
    LIFETIME = 27

    # Keywords
    AS_KW = 40
    BREAK_KW = 41
    CONST_KW = 42
    CONTINUE_KW = 43
    CRATE_KW = 44
    ELSE_KW = 45
    ENUM_KW = 46
    FALSE_KW = 47
    FN_KW = 48
    FOR_KW = 49
    IF_KW = 50
    IMPL_KW = 51
    IN_KW = 52
    LET_KW = 53
    LOOP_KW = 54
    MATCH_KW = 55
    MOD_KW = 56
    MOVE_KW = 57
    MUT_KW = 58
    PUB_KW = 59
    REF_KW = 60
    RETURN_KW = 61
    SELF_KW = 62
    SELF_TYPE_KW = 63
    STATIC_KW = 64
    STRUCT_KW = 65
    SUPER_KW = 66
    TRAIT_KW = 67
    TRUE_KW = 68
    TYPE_KW = 69
    UNSAFE_KW = 70
    USE_KW = 71
    WHERE_KW = 72
    WHILE_KW = 73
    DYN_KW = 74

    # Punctuation
    SEMICOLON = 100
    COMMA = 101
    DOT = 102
    DOT2 = 103
    DOT2EQ = 104
    COLON = 105
    COLON2 = 106
    THIN_ARROW = 107
    FAT_ARROW = 108
    POUND = 109
    DOLLAR = 110
    AT = 111
    QUESTION = 112
    TILDE = 113
    UNDERSCORE = 114

    EQ = 120
    EQ2 = 121
    NEQ = 122
    LT = 123
    GT = 124
    BANG = 127
    PLUS = 128
    MINUS = 129
    STAR = 130
    SLASH = 131
    PERCENT = 132
    CARET = 133
    AMP = 134
    PIPE = 135
    AMP2 = 136
    PIPE2 = 137
    PLUSEQ = 140
    MINUSEQ = 141
    STAREQ = 142
    SLASHEQ = 143
    PERCENTEQ = 144
    CARETEQ = 145
    AMPEQ = 146
    PIPEEQ = 147

    L_CURLY = 160
    R_CURLY = 161
    L_BRACK = 162
    R_BRACK = 163
    L_PAREN = 164
    R_PAREN = 165

    # Node kinds
    ROOT = 1000
    ERROR = 1001
    SOURCE_FILE = 1002
    ITEM_LIST = 1003
    ATTR = 1004
    TOKEN_TREE = 1005
    VISIBILITY = 1006
    NAME = 1007
    NAME_REF = 1008
    LIFETIME_REF = 1009

    # Items
    USE_ITEM = 1100
    USE_TREE = 1101
    USE_TREE_LIST = 1102
    RENAME = 1103
    STRUCT_DEF = 1104
    ENUM_DEF = 1105
    VARIANT_LIST = 1106
    VARIANT = 1107
    NAMED_FIELD_DEF_LIST = 1108
    NAMED_FIELD_DEF = 1109
    TUPLE_FIELD_DEF_LIST = 1110
    TUPLE_FIELD_DEF = 1111
    FN_DEF = 1112
    PARAM_LIST = 1113
    PARAM = 1114
    SELF_PARAM = 1115
    RET_TYPE = 1116
    IMPL_BLOCK = 1117
    TRAIT_DEF = 1118
    MODULE = 1119
    CONST_DEF = 1120
    STATIC_DEF = 1121
    TYPE_ALIAS_DEF = 1122
    TYPE_PARAM_LIST = 1123
    TYPE_PARAM = 1124
    LIFETIME_PARAM = 1125
    TYPE_BOUND_LIST = 1126
    WHERE_CLAUSE = 1127
    WHERE_PRED = 1128
    MACRO_ITEM = 1129
    CONST_PARAM = 1130

    # Paths
    PATH = 1200
    PATH_SEGMENT = 1201
    TYPE_ARG_LIST = 1202
    ASSOC_TYPE_ARG = 1203

    # Types
    PATH_TYPE = 1300
    REFERENCE_TYPE = 1301
    POINTER_TYPE = 1302
    TUPLE_TYPE = 1303
    PAREN_TYPE = 1304
    ARRAY_TYPE = 1305
    SLICE_TYPE = 1306
    NEVER_TYPE = 1307
    PLACEHOLDER_TYPE = 1308
    IMPL_TRAIT_TYPE = 1309
    DYN_TRAIT_TYPE = 1310
    FN_POINTER_TYPE = 1311

    # Patterns
    BIND_PAT = 1400
    PLACEHOLDER_PAT = 1401
    LITERAL_PAT = 1402
    TUPLE_PAT = 1403
    PATH_PAT = 1404
    TUPLE_STRUCT_PAT = 1405
    STRUCT_PAT = 1406
    FIELD_PAT_LIST = 1407
    FIELD_PAT = 1408
    REF_PAT = 1409
    OR_PAT = 1410
    REST_PAT = 1411
    SLICE_PAT = 1412
    RANGE_PAT = 1413

    # Statements
    BLOCK = 1500
    LET_STMT = 1501
    EXPR_STMT = 1502
    LET_ELSE = 1504

    # Expressions
    LITERAL = 1600
    PATH_EXPR = 1601
    STRUCT_LIT = 1602
    NAMED_FIELD_LIST = 1603
    NAMED_FIELD = 1604
    TUPLE_EXPR = 1605
    PAREN_EXPR = 1606
    ARRAY_EXPR = 1607
    BLOCK_EXPR = 1608
    IF_EXPR = 1609
    CONDITION = 1610
    WHILE_EXPR = 1611
    LOOP_EXPR = 1612
    FOR_EXPR = 1613
    MATCH_EXPR = 1614
    MATCH_ARM_LIST = 1615
    MATCH_ARM = 1616
    MATCH_GUARD = 1617
    LAMBDA_EXPR = 1618
    RETURN_EXPR = 1619
    BREAK_EXPR = 1620
    CONTINUE_EXPR = 1621
    MACRO_CALL = 1622
    CALL_EXPR = 1623
    METHOD_CALL_EXPR = 1624
    ARG_LIST = 1625
    FIELD_EXPR = 1626
    INDEX_EXPR = 1627
    TRY_EXPR = 1628
    CAST_EXPR = 1629
    PREFIX_EXPR = 1630
    REF_EXPR = 1631
    RANGE_EXPR = 1632
    BIN_EXPR = 1633
    LABEL = 1634

    @property
    def is_trivia(self) -> bool:
        return self in (
            RustSyntaxKind.WHITESPACE,
            RustSyntaxKind.NEWLINE,
            RustSyntaxKind.COMMENT,
            RustSyntaxKind.SKIPPED,
        )

    @property
    def is_token(self) -> bool:
        return self != RustSyntaxKind.TOMBSTONE and self.value < RustSyntaxKind.ROOT.value

    @property
    def is_node(self) -> bool:
        return self.value >= RustSyntaxKind.ROOT.value

    @property
    def is_keyword(self) -> bool:
        return RustSyntaxKind.AS_KW <= self <= RustSyntaxKind.DYN_KW

    @property
    def is_expression(self) -> bool:
        return self in EXPRESSION_KINDS

    @staticmethod
    def from_token_kind(kind: TokenKind) -> "RustSyntaxKind":
        try:
            return RustSyntaxKind(kind.value)
        except ValueError:
            raise ValueError(f"Unsupported TokenKind mapping: {kind!r}") from None


EXPRESSION_KINDS: frozenset[RustSyntaxKind] = frozenset(
    {
        RustSyntaxKind.LITERAL,
        RustSyntaxKind.PATH_EXPR,
        RustSyntaxKind.STRUCT_LIT,
        RustSyntaxKind.TUPLE_EXPR,
        RustSyntaxKind.PAREN_EXPR,
        RustSyntaxKind.ARRAY_EXPR,
        RustSyntaxKind.BLOCK_EXPR,
        RustSyntaxKind.IF_EXPR,
        RustSyntaxKind.WHILE_EXPR,
        RustSyntaxKind.LOOP_EXPR,
        RustSyntaxKind.FOR_EXPR,
        RustSyntaxKind.MATCH_EXPR,
        RustSyntaxKind.LAMBDA_EXPR,
        RustSyntaxKind.RETURN_EXPR,
        RustSyntaxKind.BREAK_EXPR,
        RustSyntaxKind.CONTINUE_EXPR,
        RustSyntaxKind.MACRO_CALL,
        RustSyntaxKind.CALL_EXPR,
        RustSyntaxKind.METHOD_CALL_EXPR,
        RustSyntaxKind.FIELD_EXPR,
        RustSyntaxKind.INDEX_EXPR,
        RustSyntaxKind.TRY_EXPR,
        RustSyntaxKind.CAST_EXPR,
        RustSyntaxKind.PREFIX_EXPR,
        RustSyntaxKind.REF_EXPR,
        RustSyntaxKind.RANGE_EXPR,
        RustSyntaxKind.BIN_EXPR,
    }
)

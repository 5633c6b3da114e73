"""Parser configuration options."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Feature flags controlling grammar strictness and recovery behavior."""

    # Item-level recovery also stops at a line break, not only at a safe token.
    recover_on_line_break: bool = True
    # Accept `if S { .. } { .. }`-style struct literals in conditions.
    allow_struct_literal_in_condition: bool = False

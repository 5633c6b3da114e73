"""Text offsets, ranges and edits."""

from rsdiag.text.edit import Delete, EditOperation, Insert, TextEdit, TextEditBuilder
from rsdiag.text.text import TextRange, TextSize, slice_text_range

__all__ = [
    "Delete",
    "EditOperation",
    "Insert",
    "TextEdit",
    "TextEditBuilder",
    "TextRange",
    "TextSize",
    "slice_text_range",
]

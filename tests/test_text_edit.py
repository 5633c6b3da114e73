import pytest

from rsdiag.text import Delete, Insert, TextEdit, TextEditBuilder, TextRange, TextSize, slice_text_range


def _range(start: int, end: int) -> TextRange:
    return TextRange.new(TextSize(start), TextSize(end))


def test_text_size_rejects_negative_values() -> None:
    with pytest.raises(ValueError):
        TextSize(-1)
    with pytest.raises(ValueError):
        TextSize(1) - TextSize(2)


def test_text_range_invariants_and_queries() -> None:
    with pytest.raises(ValueError):
        TextRange.from_offsets(3, 1)

    outer = _range(2, 8)
    assert outer.len() == TextSize(6)
    assert outer.contains(TextSize(2))
    assert not outer.contains(TextSize(8))
    assert not outer.contains_strictly(TextSize(2))
    assert outer.contains_range(_range(3, 8))
    assert outer.is_disjoint(_range(8, 9))
    assert not outer.is_disjoint(_range(7, 9))
    assert outer.touches(_range(8, 9))
    assert not outer.touches(_range(9, 10))
    assert _range(1, 3).cover(_range(5, 6)).as_tuple() == (1, 6)
    assert slice_text_range("use a::b;", _range(4, 8)) == "a::b"


def test_replace_places_insert_before_delete() -> None:
    edit = TextEdit.replace(_range(4, 7), "b")

    assert list(edit) == [Insert(TextSize(4), "b"), Delete(_range(4, 7))]
    assert edit.apply("use {b};") == "use b;"


def test_builder_sorts_operations_by_offset() -> None:
    builder = TextEditBuilder()
    builder.delete(_range(6, 7))
    builder.insert(TextSize(0), "// ")
    builder.delete(_range(1, 2))
    edit = builder.finish()

    assert [operation.offset.value for operation in edit] == [0, 1, 6]
    assert edit.apply("abcdefgh") == "// acdefh"


def test_builder_rejects_overlapping_deletes() -> None:
    builder = TextEditBuilder()
    builder.delete(_range(0, 4))
    builder.delete(_range(2, 6))

    with pytest.raises(ValueError, match="Overlapping"):
        builder.finish()


def test_builder_rejects_insert_inside_deleted_range() -> None:
    builder = TextEditBuilder()
    builder.delete(_range(0, 4))
    builder.insert(TextSize(2), "x")

    with pytest.raises(ValueError, match="Insert inside deleted range"):
        builder.finish()


def test_builder_cannot_be_reused_after_finish() -> None:
    builder = TextEditBuilder()
    builder.insert(TextSize(0), "x")
    builder.finish()

    with pytest.raises(RuntimeError):
        builder.insert(TextSize(1), "y")
    with pytest.raises(RuntimeError):
        builder.finish()


def test_apply_rejects_edits_past_the_end() -> None:
    edit = TextEdit.delete(_range(2, 10))

    with pytest.raises(ValueError, match="beyond source length"):
        edit.apply("short")


def test_apply_leaves_source_unchanged() -> None:
    source = "use a::{c};"
    edit = TextEdit.replace(_range(7, 10), "c")

    assert edit.apply(source) == "use a::c;"
    assert source == "use a::{c};"


def test_touched_range_covers_all_operations() -> None:
    builder = TextEditBuilder()
    builder.insert(TextSize(12), "!")
    builder.delete(_range(3, 5))

    edit = builder.finish()

    assert edit.touched_range == _range(3, 12)
    assert TextEdit.empty().touched_range is None
    assert TextEdit.empty().is_empty()
    assert TextEdit.empty().apply("same") == "same"

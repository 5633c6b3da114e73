"""Text edits: disjoint delete/insert operations applied in one pass."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from rsdiag.text.text import TextRange, TextSize


@dataclass(frozen=True, slots=True)
class Delete:
    range: TextRange

    @property
    def offset(self) -> TextSize:
        return self.range.start


@dataclass(frozen=True, slots=True)
class Insert:
    offset: TextSize
    text: str


type EditOperation = Delete | Insert


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Immutable, offset-sorted set of disjoint edit operations.

    Operations are stored in application order: ascending offset, with inserts
    placed before a delete that starts at the same offset (the "replace"
    idiom), and insertion order otherwise.
    """

    operations: tuple[EditOperation, ...] = ()

    @staticmethod
    def empty() -> TextEdit:
        return TextEdit()

    @staticmethod
    def delete(range: TextRange) -> TextEdit:
        builder = TextEditBuilder()
        builder.delete(range)
        return builder.finish()

    @staticmethod
    def insert(offset: TextSize, text: str) -> TextEdit:
        builder = TextEditBuilder()
        builder.insert(offset, text)
        return builder.finish()

    @staticmethod
    def replace(range: TextRange, text: str) -> TextEdit:
        builder = TextEditBuilder()
        builder.replace(range, text)
        return builder.finish()

    def is_empty(self) -> bool:
        return not self.operations

    def __iter__(self) -> Iterator[EditOperation]:
        return iter(self.operations)

    def __len__(self) -> int:
        return len(self.operations)

    @property
    def touched_range(self) -> TextRange | None:
        """Smallest range covering every operation, or None for an empty edit."""
        covered: TextRange | None = None
        for operation in self.operations:
            span = operation.range if isinstance(operation, Delete) else TextRange.empty(operation.offset)
            covered = span if covered is None else covered.cover(span)
        return covered

    def apply(self, source: str) -> str:
        """Return `source` with every operation applied; `source` is not modified."""
        touched = self.touched_range
        if touched is not None and touched.end.value > len(source):
            raise ValueError(
                f"Edit touches offset {touched.end.value} beyond source length {len(source)}"
            )

        parts: list[str] = []
        cursor = 0
        for operation in self.operations:
            if isinstance(operation, Insert):
                parts.append(source[cursor : operation.offset.value])
                parts.append(operation.text)
                cursor = operation.offset.value
            else:
                parts.append(source[cursor : operation.range.start.value])
                cursor = operation.range.end.value
        parts.append(source[cursor:])
        return "".join(parts)


class TextEditBuilder:
    """Accumulates edit operations and compiles them into a `TextEdit`."""

    def __init__(self) -> None:
        self._operations: list[EditOperation] = []
        self._finished = False

    def delete(self, range: TextRange) -> None:
        self._ensure_open()
        self._operations.append(Delete(range))

    def insert(self, offset: TextSize, text: str) -> None:
        self._ensure_open()
        self._operations.append(Insert(offset, text))

    def replace(self, range: TextRange, text: str) -> None:
        self.delete(range)
        self.insert(range.start, text)

    def finish(self) -> TextEdit:
        self._ensure_open()
        self._finished = True
        _check_disjoint(self._operations)
        ordered = sorted(
            enumerate(self._operations),
            key=lambda item: (item[1].offset.value, isinstance(item[1], Delete), item[0]),
        )
        return TextEdit(operations=tuple(operation for _, operation in ordered))

    def _ensure_open(self) -> None:
        if self._finished:
            raise RuntimeError("TextEditBuilder already finished")


def _check_disjoint(operations: list[EditOperation]) -> None:
    deletes = [operation for operation in operations if isinstance(operation, Delete)]
    inserts = [operation for operation in operations if isinstance(operation, Insert)]

    for index, first in enumerate(deletes):
        for second in deletes[index + 1 :]:
            if not first.range.is_disjoint(second.range):
                raise ValueError(f"Overlapping edit operations: {first!r} and {second!r}")

    for insert in inserts:
        for delete in deletes:
            if delete.range.contains_strictly(insert.offset):
                raise ValueError(f"Insert inside deleted range: {insert!r} within {delete!r}")

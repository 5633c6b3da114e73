"""Parser events and their replay into a tree sink.

The grammar never builds nodes directly. It records a flat list of events and
`process_events` replays them, following the `forward_parent` links left by
`CompletedMarker.precede` so that a node opened later can wrap one that was
completed earlier (`a` becoming the left operand of `a + b`).
"""

from dataclasses import dataclass
from typing import Protocol

from rsdiag.syntax import RustSyntaxKind
from rsdiag.text import TextSize


@dataclass(frozen=True, slots=True)
class StartEvent:
    kind: RustSyntaxKind
    # distance to the StartEvent of the node wrapping this one
    forward_parent: int | None = None

    @staticmethod
    def tombstone() -> "StartEvent":
        return StartEvent(kind=RustSyntaxKind.TOMBSTONE)

    @property
    def is_tombstone(self) -> bool:
        return self.kind == RustSyntaxKind.TOMBSTONE


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    kind: RustSyntaxKind
    end: TextSize


type Event = StartEvent | FinishEvent | TokenEvent


class TreeSink(Protocol):
    def start_node(self, kind: RustSyntaxKind) -> None: ...

    def token(self, kind: RustSyntaxKind, end: TextSize) -> None: ...

    def finish_node(self) -> None: ...


def process_events(sink: TreeSink, events: list[Event]) -> None:
    """Replay `events` into `sink`; forward parents are consumed in place."""
    for index, event in enumerate(events):
        match event:
            case StartEvent() if event.is_tombstone:
                continue
            case StartEvent():
                for kind in reversed(_forward_parent_chain(events, index, event)):
                    sink.start_node(kind)
            case FinishEvent():
                sink.finish_node()
            case TokenEvent(kind=kind, end=end):
                sink.token(kind, end)


def _forward_parent_chain(events: list[Event], index: int, event: StartEvent) -> list[RustSyntaxKind]:
    """Kinds from the node at `index` outwards. Visited parents become tombstones."""
    kinds = [event.kind]
    parent_index = index
    distance = event.forward_parent
    while distance is not None:
        parent_index += distance
        if parent_index >= len(events):
            raise RuntimeError(f"forward_parent of event {index} points past the last event")
        parent = events[parent_index]
        if not isinstance(parent, StartEvent):
            raise RuntimeError(f"forward_parent of event {index} points to a {type(parent).__name__}")
        events[parent_index] = StartEvent.tombstone()
        if not parent.is_tombstone:
            kinds.append(parent.kind)
        distance = parent.forward_parent
    return kinds

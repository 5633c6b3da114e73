"""Markers: handles on start events that turn into nodes once completed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from rsdiag.parser.event import FinishEvent, StartEvent
from rsdiag.syntax import RustSyntaxKind

if TYPE_CHECKING:
    from rsdiag.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    """An open node. Every marker ends in `complete` or `abandon`."""

    pos: int
    # start event of the completed node this marker was opened to wrap
    wrapped: int | None = None

    def complete(self, parser: Parser, kind: RustSyntaxKind) -> CompletedMarker:
        event = _start_event(parser, self.pos)
        parser.events[self.pos] = StartEvent(kind=kind, forward_parent=event.forward_parent)
        parser.events.append(FinishEvent())
        return CompletedMarker(start_pos=self.pos, kind=kind)

    def abandon(self, parser: Parser) -> None:
        """Drop the node; anything parsed after `start` stays in the enclosing node."""
        if self.pos == len(parser.events) - 1:
            event = _start_event(parser, self.pos)
            if event.forward_parent is None:
                parser.events.pop()
        if self.wrapped is not None:
            child = _start_event(parser, self.wrapped)
            parser.events[self.wrapped] = StartEvent(kind=child.kind)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    start_pos: int
    kind: RustSyntaxKind

    def precede(self, parser: Parser) -> Marker:
        """Open a node that will become the parent of this one."""
        marker = parser.start()
        event = _start_event(parser, self.start_pos)
        parser.events[self.start_pos] = StartEvent(kind=event.kind, forward_parent=marker.pos - self.start_pos)
        marker.wrapped = self.start_pos
        return marker


def _start_event(parser: Parser, pos: int) -> StartEvent:
    event = parser.events[pos]
    if not isinstance(event, StartEvent):
        raise RuntimeError(f"Event {pos} is a {type(event).__name__}, expected a StartEvent")
    return event

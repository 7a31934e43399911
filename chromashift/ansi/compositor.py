# ansi/compositor.py

from dataclasses import dataclass
from itertools import count
from typing import Iterable, List, NamedTuple, Protocol, Sequence, Tuple

from .style import Style, StyleStack, parse_codes

ESC = "\x1b["

class StyleSpan(NamedTuple):
    """Half-open [start, end) character range carrying a raw SGR code list."""
    start: int
    end: int
    sequence: str

class SpanSource(Protocol):
    """Anything that can enumerate styled spans: regex matches, literals, annotators."""
    def __len__(self) -> int: ...
    def span(self, i: int) -> Tuple[int, int, str]: ...

class SpanList:
    """SpanSource over an explicit list of spans."""
    def __init__(self, spans: Iterable[Tuple[int, int, str]]):
        self._spans = [StyleSpan(*s) for s in spans]

    def __len__(self) -> int:
        return len(self._spans)

    def span(self, i: int) -> Tuple[int, int, str]:
        return self._spans[i]

@dataclass
class Event:
    """A span opening or closing at a text position."""
    identity: int
    pos: int
    start: bool
    sequence: str = ""

    def sort_key(self) -> Tuple[int, int, int]:
        # starts before ends, then shorter sequences first
        return (self.pos, 0 if self.start else 1, len(self.sequence))

class AnsiWriter:
    """
    Accumulates text and pending SGR codes.

    Codes queued between two pieces of text are merged into a single escape
    sequence when the next text (or the end of output) arrives.
    """

    def __init__(self):
        self._parts: List[str] = []
        self._codes: List[str] = []

    def write_text(self, text: str) -> None:
        self._flush_codes()
        self._parts.append(text)

    def write_sequence(self, seq: str) -> None:
        if not seq:
            return
        if self._codes and self._codes[-1] == seq:
            return
        self._codes.append(seq)

    def build_sequence(self) -> str:
        """Merge the pending codes into one escape, or '' if they cancel to nothing."""
        codes: List[int] = []
        for seq in self._codes:
            codes.extend(parse_codes(seq))
        merged = Style.from_codes(codes).sequence()
        return f"{ESC}{merged}m" if merged else ""

    def _flush_codes(self) -> None:
        if not self._codes:
            return
        self._parts.append(self.build_sequence())
        self._codes.clear()

    def getvalue(self) -> str:
        self._flush_codes()
        return "".join(self._parts)

def build_events(sources: Sequence[SpanSource]) -> List[Event]:
    """
    Turn every effective span into a start/end event pair with a fresh identity.

    Zero-width spans and spans whose codes parse to no styling are skipped.
    """
    ids = count(1)
    events: List[Event] = []
    for source in sources:
        for i in range(len(source)):
            start, end, seq = source.span(i)
            if start == end or Style.parse(seq).is_empty:
                continue
            identity = next(ids)
            events.append(Event(identity, start, True, seq))
            events.append(Event(identity, end, False))
    return events

def colorize(text: str, sources: Sequence[SpanSource]) -> str:
    """
    Insert ANSI styling into text for every span of every source.

    Overlapping and nested spans are handled with a stack of open styles:
    when a span closes its attributes are undone and whichever style is now
    on top is reasserted, so outer styles survive inner ones. Zero-width
    spans are ignored; with no effective spans the text is returned as is.
    """
    events = build_events(sources)
    if not events:
        return text

    events.sort(key=Event.sort_key)

    writer = AnsiWriter()
    stack = StyleStack()
    last = 0

    for event in events:
        if event.pos > last:
            writer.write_text(text[last:event.pos])

        if event.start:
            stack.push_raw(event.identity, event.sequence)
            writer.write_sequence(event.sequence)
        else:
            closed = stack.kick(event.identity)
            writer.write_sequence(closed.reset().sequence())
            writer.write_sequence(stack.current().sequence())

        last = max(last, event.pos)

    if last < len(text):
        writer.write_text(text[last:])

    return writer.getvalue()

def render(text: str, spans: Iterable[Tuple[int, int, str]]) -> str:
    """Colorize text from plain (start, end, sequence) spans."""
    return colorize(text, [SpanList(spans)])

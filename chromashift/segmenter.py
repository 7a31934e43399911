# segmenter.py

import codecs
from typing import Callable, List, NamedTuple, TextIO, Union

LINE = "line"
REDRAW = "redraw"

# str.isspace() counts the ASCII file, group, record and unit separators
SEPARATORS = "\x1c\x1d\x1e\x1f"

def trim_trailing_space(text: str) -> str:
    end = len(text)
    while end and text[end - 1].isspace() and text[end - 1] not in SEPARATORS:
        end -= 1
    return text[:end]

class Unit(NamedTuple):
    """A displayable piece of output and the terminator that ended it."""
    text: str
    terminator: str
    kind: str

class LineSegmenter:
    """
    Splits a live output stream into lines and carriage-return redraws.

    Bytes are decoded incrementally, so a multi-byte character split across
    two reads is completed by the second one instead of being replaced.
    Text after the last terminator stays buffered and is discarded by close().
    """

    def __init__(self, encoding: str = "utf-8"):
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._buffer: List[str] = []

    def feed(self, data: Union[bytes, str]) -> List[Unit]:
        """Consume a chunk of output and return the units it completes."""
        if isinstance(data, bytes):
            data = self._decoder.decode(data)

        units = []
        for char in data:
            if char == "\n":
                units.append(Unit(trim_trailing_space("".join(self._buffer)), "\n", LINE))
                self._buffer.clear()
            elif char == "\r":
                units.append(Unit("".join(self._buffer), "\r", REDRAW))
                self._buffer.clear()
            else:
                self._buffer.append(char)
        return units

    @property
    def pending(self) -> str:
        return "".join(self._buffer)

    def close(self) -> None:
        """End of stream: drop whatever was not terminated."""
        self._decoder.reset()
        self._buffer.clear()

class SegmentedWriter:
    """Feeds a segmenter, colorizes each unit and writes it to a text sink."""

    def __init__(self, sink: TextIO, colorize: Callable[[str], str],
                 segmenter: LineSegmenter = None, logger=None):
        self.sink = sink
        self.colorize = colorize
        self.segmenter = segmenter or LineSegmenter()
        self.logger = logger

    def _render(self, text: str) -> str:
        try:
            colored = self.colorize(text)
        except Exception as e:
            if self.logger:
                self.logger.error(f"Colorize error: {e}")
            return text
        return colored if colored else text

    def write(self, data: Union[bytes, str]) -> int:
        """Process a chunk; return the number of units written."""
        units = self.segmenter.feed(data)
        for unit in units:
            self.sink.write(self._render(unit.text) + unit.terminator)
        if units:
            self.sink.flush()
        return len(units)

    def close(self) -> None:
        self.segmenter.close()
        self.sink.flush()

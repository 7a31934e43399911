# ansi/style.py

from enum import IntEnum
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple, Union

FOREGROUND = "38"
BACKGROUND = "48"

class Option(IntEnum):
    """Tri-state attribute flag: explicitly disabled, not mentioned, or enabled."""
    FALSE = -1
    UNSET = 0
    TRUE = 1

    def switch(self, on: str, off: str) -> str:
        """Return `on` if TRUE, `off` if FALSE and an empty string if UNSET."""
        if self is Option.TRUE:
            return on
        if self is Option.FALSE:
            return off
        return ""

    def inverted(self) -> "Option":
        return Option(-self.value)

@dataclass(frozen=True)
class ResetColor:
    """Sentinel color that restores the terminal default for its channel."""

    def sequence(self, bg: bool = False) -> str:
        return "49" if bg else "39"

@dataclass(frozen=True)
class ANSIColor:
    """One of the 16 standard colors (0-7 normal, 8-15 bright)."""
    index: int

    def sequence(self, bg: bool = False) -> str:
        if self.index < 8:
            return str((40 if bg else 30) + self.index)
        return str((100 if bg else 90) + self.index - 8)

@dataclass(frozen=True)
class ANSI256Color:
    index: int

    def sequence(self, bg: bool = False) -> str:
        return f"{BACKGROUND if bg else FOREGROUND};5;{self.index}"

@dataclass(frozen=True)
class RGBColor:
    r: int
    g: int
    b: int

    def sequence(self, bg: bool = False) -> str:
        return f"{BACKGROUND if bg else FOREGROUND};2;{self.r};{self.g};{self.b}"

Color = Union[ResetColor, ANSIColor, ANSI256Color, RGBColor]

@dataclass(frozen=True)
class Style:
    """
    A complete SGR styling state.

    Attribute options distinguish "not mentioned" (UNSET) from "explicitly
    turned off" (FALSE); only the latter is emitted when serializing. When
    hard_reset is set every other field is ignored and the style renders as
    a single reset code.
    """
    hard_reset: bool = False
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    bold: Option = Option.UNSET
    italic: Option = Option.UNSET
    underline: Option = Option.UNSET
    inverse: Option = Option.UNSET

    @classmethod
    def parse(cls, raw: str) -> "Style":
        """Build a style from a semicolon separated SGR code list, e.g. "1;31;4"."""
        return cls.from_codes(parse_codes(raw))

    @classmethod
    def from_codes(cls, codes: List[int]) -> "Style":
        return apply_codes(cls(), codes)

    def sequence(self) -> str:
        """
        Return the SGR parameter string without the escape prefix and suffix.

        Example: Style.parse("1;38;2;255;100;0;48;5;42").sequence()
        returns "1;38;2;255;100;0;48;5;42".
        """
        if self.hard_reset:
            return "0"

        parts = [
            self.bold.switch("1", "22"),
            self.italic.switch("3", "23"),
            self.underline.switch("4", "24"),
            self.inverse.switch("7", "27"),
        ]
        if self.fg is not None:
            parts.append(self.fg.sequence(bg=False))
        if self.bg is not None:
            parts.append(self.bg.sequence(bg=True))

        return ";".join(p for p in parts if p)

    def reset(self) -> "Style":
        """
        Return the style that undoes this one.

        Enabled options become disabled and vice versa, set colors become
        their channel's reset color. A hard reset has nothing left to undo,
        so its reset is the empty style.
        """
        if self.hard_reset:
            return Style()

        return Style(
            fg=ResetColor() if self.fg is not None else None,
            bg=ResetColor() if self.bg is not None else None,
            bold=self.bold.inverted(),
            italic=self.italic.inverted(),
            underline=self.underline.inverted(),
            inverse=self.inverse.inverted(),
        )

    @property
    def is_empty(self) -> bool:
        return self.sequence() == ""

class StyleStack:
    """
    Ordered set of open styles keyed by span identity.

    Partially overlapping spans close out of order, so kick() removes an
    identity from wherever it sits and keeps the order of the others.
    """

    def __init__(self):
        self._layers: List[Tuple[int, Style]] = []

    def __len__(self) -> int:
        return len(self._layers)

    def push(self, identity: int, style: Style) -> Style:
        self._layers.append((identity, style))
        return style

    def push_raw(self, identity: int, raw: str) -> Style:
        """Parse an SGR code list and push the resulting style."""
        return self.push(identity, Style.parse(raw))

    def kick(self, identity: int) -> Style:
        """Remove and return the style with the given identity (empty style if absent)."""
        for i in range(len(self._layers) - 1, -1, -1):
            if self._layers[i][0] == identity:
                return self._layers.pop(i)[1]
        return Style()

    def current(self) -> Style:
        """Return the most recently pushed style still open, or a hard reset."""
        if not self._layers:
            return Style(hard_reset=True)
        return self._layers[-1][1]

def parse_codes(raw: str) -> List[int]:
    """Split an SGR parameter string into integers; an empty string means reset."""
    if raw == "":
        return [0]

    codes = []
    for part in raw.split(";"):
        try:
            codes.append(int(part.strip()))
        except ValueError:
            continue
    return codes

def _extended_color(codes: List[int], i: int) -> Tuple[Optional[Color], int]:
    """Decode a 38/48 extended color starting at codes[i]; return (color, last index used)."""
    if i + 1 >= len(codes):
        return None, i
    mode = codes[i + 1]
    if mode == 5 and i + 2 < len(codes):
        return ANSI256Color(codes[i + 2]), i + 2
    if mode == 2 and i + 4 < len(codes):
        r, g, b = codes[i + 2:i + 5]
        return RGBColor(r, g, b), i + 4
    return None, i

def apply_codes(style: Style, codes: List[int]) -> Style:
    """
    Layer SGR codes over a style and return the derived style.

    Supported: reset (0), bold/italic/underline/inverse on (1, 3, 4, 7) and
    off (22, 23, 24, 27), default colors (39, 49), standard colors (30-37,
    40-47), bright colors (90-97, 100-107), 256 colors (38;5;N, 48;5;N) and
    truecolor (38;2;R;G;B, 48;2;R;G;B). Unknown codes are ignored. Zeros
    inside an extended color are color components, not resets.
    """
    fields = {}
    hard_reset = False
    i = 0
    while i < len(codes):
        c = codes[i]
        if c == 0:
            hard_reset = True
        elif c == 1:
            fields["bold"] = Option.TRUE
        elif c == 3:
            fields["italic"] = Option.TRUE
        elif c == 4:
            fields["underline"] = Option.TRUE
        elif c == 7:
            fields["inverse"] = Option.TRUE
        elif c == 22:
            fields["bold"] = Option.FALSE
        elif c == 23:
            fields["italic"] = Option.FALSE
        elif c == 24:
            fields["underline"] = Option.FALSE
        elif c == 27:
            fields["inverse"] = Option.FALSE
        elif c == 39:
            fields["fg"] = ResetColor()
        elif c == 49:
            fields["bg"] = ResetColor()
        elif 30 <= c <= 37:
            fields["fg"] = ANSIColor(c - 30)
        elif 40 <= c <= 47:
            fields["bg"] = ANSIColor(c - 40)
        elif 90 <= c <= 97:
            fields["fg"] = ANSIColor(c - 82)
        elif 100 <= c <= 107:
            fields["bg"] = ANSIColor(c - 92)
        elif c in (38, 48):
            color, i = _extended_color(codes, i)
            if color is not None:
                fields["fg" if c == 38 else "bg"] = color
        i += 1

    return replace(style, hard_reset=hard_reset, **fields)

# ansi/__init__.py

from .style import (
    Option,
    Style,
    StyleStack,
    ResetColor,
    ANSIColor,
    ANSI256Color,
    RGBColor,
    parse_codes,
    apply_codes,
)
from .compositor import StyleSpan, SpanSource, SpanList, colorize, render

__all__ = [
    "Option",
    "Style",
    "StyleStack",
    "ResetColor",
    "ANSIColor",
    "ANSI256Color",
    "RGBColor",
    "parse_codes",
    "apply_codes",
    "StyleSpan",
    "SpanSource",
    "SpanList",
    "colorize",
    "render",
]

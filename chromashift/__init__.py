# __init__.py

__version__ = "0.1.0"

from .logger import Logger
from .rules import Rule, CommandRules, load_rules, sort_rules
from .matcher import RuleMatcher, find_spans, colorize_line
from .segmenter import LineSegmenter, SegmentedWriter, Unit
from .ansi import Style, StyleSpan, colorize, render

__all__ = [
    "Logger",
    "Rule",
    "CommandRules",
    "load_rules",
    "sort_rules",
    "RuleMatcher",
    "find_spans",
    "colorize_line",
    "LineSegmenter",
    "SegmentedWriter",
    "Unit",
    "Style",
    "StyleSpan",
    "colorize",
    "render",
]

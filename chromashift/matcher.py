# matcher.py

from typing import Callable, List, Optional, Sequence, Tuple

from .ansi import StyleSpan, colorize
from .colors import get_color_code
from .paths import path_style as default_path_style
from .rules import Rule

PATH_TOKEN = "path"

PathStyler = Callable[[str], str]

class RegexMatch:
    """
    Span source for one regex match.

    Span i covers capture group i (0 is the whole match) and takes color
    entry i modulo the number of entries. Groups that did not participate,
    matched nothing, or resolve to no styling come back zero-width, which
    the compositor ignores.
    """

    def __init__(self, match, styles: List[str], resolve: Callable[[str, str], str]):
        self.match = match
        self.styles = styles
        self._resolve = resolve

    def __len__(self) -> int:
        return self.match.re.groups + 1

    def span(self, i: int) -> Tuple[int, int, str]:
        start, end = self.match.span(i)
        if start < 0 or start == end or not self.styles:
            return (0, 0, "")
        spec = self.styles[i % len(self.styles)]
        sequence = self._resolve(spec, self.match.string[start:end])
        if not sequence:
            return (start, start, "")
        return (start, end, sequence)

class RuleMatcher:
    """Applies an ordered rule list to single lines of output."""

    def __init__(self, rules: Sequence[Rule], path_style: Optional[PathStyler] = None,
                 logger=None):
        self.rules = list(rules)
        self.path_style = path_style or default_path_style
        self.logger = logger

    def resolve_style(self, spec: str, matched: str) -> str:
        """Translate a color entry such as "bold red" into SGR parameters."""
        codes = []
        for token in spec.split():
            token = token.strip().lower()
            if token == PATH_TOKEN:
                code = self._path_code(matched)
            else:
                code = get_color_code(token)
                if code is None and self.logger:
                    self.logger.debug(f"Unknown color token: {token}")
            if code:
                codes.append(code)
        return ";".join(codes)

    def _path_code(self, matched: str) -> str:
        try:
            return self.path_style(matched)
        except Exception as e:
            if self.logger:
                self.logger.debug(f"Path styling failed for {matched!r}: {e}")
            return ""

    def find_matches(self, text: str) -> List[RegexMatch]:
        """
        Run every rule over text in order.

        A matching overwrite rule discards what earlier rules produced and
        ends evaluation for this text.
        """
        found: List[RegexMatch] = []
        for rule in self.rules:
            if rule.pattern is None:
                continue

            styles = rule.styles
            matches = [RegexMatch(m, styles, self.resolve_style)
                       for m in rule.pattern.finditer(text)]
            if not matches:
                continue

            if rule.overwrite:
                if self.logger:
                    self.logger.debug("Overwriting other rules for current line")
                return matches

            found.extend(matches)
        return found

    def find_spans(self, text: str) -> List[StyleSpan]:
        spans = []
        for match in self.find_matches(text):
            for i in range(len(match)):
                start, end, sequence = match.span(i)
                if start != end:
                    spans.append(StyleSpan(start, end, sequence))
        return spans

    def colorize(self, text: str) -> str:
        """Return text with rule styling applied, or unchanged if anything fails."""
        try:
            return colorize(text, self.find_matches(text))
        except Exception as e:
            if self.logger:
                self.logger.error(f"Colorize error: {e}", exc_info=True)
            return text

def find_spans(text: str, rules: Sequence[Rule], path_style: Optional[PathStyler] = None) -> List[StyleSpan]:
    return RuleMatcher(rules, path_style).find_spans(text)

def colorize_line(text: str, rules: Sequence[Rule], path_style: Optional[PathStyler] = None) -> str:
    return RuleMatcher(rules, path_style).colorize(text)

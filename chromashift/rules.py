# rules.py

import os
import re
import tomllib
from pathlib import Path
from dataclasses import dataclass, field
from importlib import resources
from typing import Any, Dict, List, Optional, Pattern

from .errors import RulesNotFoundError

RULES_ENV = "CHROMASHIFT_RULES"
USER_RULES_DIR = Path(".config") / "ChromaShift" / "rules"

@dataclass
class Rule:
    """
    A coloring rule: a regex plus one color spec per capture group.

    colors is a comma separated list; group N (0 = whole match) uses entry
    N modulo the number of entries. If the regex does not compile, pattern
    stays None and the rule never matches.
    """
    regexp: str
    colors: str = ""
    priority: int = 0
    overwrite: bool = False
    type: str = ""
    pattern: Optional[Pattern] = field(default=None, repr=False, compare=False)
    error: Optional[str] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.pattern is None and self.error is None:
            try:
                self.pattern = re.compile(self.regexp)
            except re.error as e:
                self.error = str(e)

    @property
    def styles(self) -> List[str]:
        return self.colors.split(",")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Rule":
        return cls(
            regexp=data.get("regexp", ""),
            colors=data.get("colors", ""),
            priority=int(data.get("priority", 0)),
            overwrite=bool(data.get("overwrite", False)),
            type=data.get("type", ""),
        )

@dataclass
class CommandRules:
    """Decoded rules file for one command."""
    rules: List[Rule] = field(default_factory=list)
    stderr: bool = False
    pty: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommandRules":
        return cls(
            rules=[Rule.from_dict(r) for r in data.get("rules", [])],
            stderr=bool(data.get("stderr", False)),
            pty=bool(data.get("pty", False)),
        )

def sort_rules(rules: List[Rule]) -> None:
    """Order rules in place: normal rules first, overwrite rules last, each by ascending priority."""
    rules.sort(key=lambda r: (r.overwrite, r.priority))

def parse_rules(content: str, logger=None) -> CommandRules:
    """Decode a rules document and return it sorted and compiled."""
    cmd_rules = CommandRules.from_dict(tomllib.loads(content))
    for rule in cmd_rules.rules:
        if rule.error and logger:
            logger.warning(f"Skipping rule {rule.regexp!r}: {rule.error}")
    sort_rules(cmd_rules.rules)
    return cmd_rules

def rules_search_path(rules_dir: Optional[str] = None) -> List[Path]:
    """Directories searched for rule files, highest precedence first."""
    paths = []
    if rules_dir:
        paths.append(Path(rules_dir))
    env_dir = os.environ.get(RULES_ENV)
    if env_dir:
        paths.append(Path(env_dir))
    try:
        paths.append(Path.home() / USER_RULES_DIR)
    except RuntimeError:
        pass
    return paths

def load_rules(rule_file: str, rules_dir: Optional[str] = None, logger=None) -> CommandRules:
    """
    Locate and decode a rules file.

    Args:
        rule_file: File name as referenced by the command configuration
        rules_dir: Explicit directory searched before the defaults
        logger: Optional Logger for diagnostics

    Returns:
        CommandRules with rules sorted for evaluation

    Raises:
        RulesNotFoundError: If no readable, decodable file exists
    """
    for directory in rules_search_path(rules_dir):
        path = directory / rule_file
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            if logger:
                logger.debug(f"Failed to load rules file {path}: {e}")
            continue
        try:
            if logger:
                logger.debug(f"Loading rules file {path}")
            return parse_rules(content, logger)
        except tomllib.TOMLDecodeError as e:
            if logger:
                logger.debug(f"Failed decoding rules file {path}: {e}")

    bundled = resources.files("chromashift").joinpath("data", "rules", rule_file)
    if logger:
        logger.debug(f"Loading bundled rules {rule_file}")
    try:
        content = bundled.read_text(encoding="utf-8")
    except (OSError, ValueError) as e:
        raise RulesNotFoundError(f"No rules found for {rule_file}") from e
    try:
        return parse_rules(content, logger)
    except tomllib.TOMLDecodeError as e:
        raise RulesNotFoundError(f"Invalid bundled rules {rule_file}: {e}") from e

# config.py

import os
import re
import tomllib
from pathlib import Path
from dataclasses import dataclass
from importlib import resources
from typing import Any, Dict, List, Optional

from .errors import ConfigError

CONFIG_ENV = "CHROMASHIFT_CONFIG"
USER_CONFIG = Path(".config") / "ChromaShift" / "config.toml"

@dataclass
class SubCommand:
    regexp: str = ""
    file: str = ""

@dataclass
class CommandConfig:
    """
    Maps a command to its rules file.

    regexp is searched in the full command line; sub narrows the choice by
    subcommand name or by its own regexp.
    """
    regexp: str = ""
    file: str = ""
    sub: Optional[Dict[str, SubCommand]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CommandConfig":
        sub = data.get("sub")
        return cls(
            regexp=data.get("regexp", ""),
            file=data.get("file", ""),
            sub={k: SubCommand(**v) for k, v in sub.items()} if sub is not None else None,
        )

ConfigMap = Dict[str, CommandConfig]

def parse_config(content: str) -> ConfigMap:
    return {name: CommandConfig.from_dict(value)
            for name, value in tomllib.loads(content).items()
            if isinstance(value, dict)}

def config_search_path() -> List[Path]:
    """User configuration files merged over the bundled one, in merge order."""
    paths = []
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        paths.append(Path(env_path))
    try:
        paths.append(Path.home() / USER_CONFIG)
    except RuntimeError:
        pass
    return paths

def load_config(config_file: Optional[str] = None, logger=None) -> ConfigMap:
    """
    Build the command configuration.

    The bundled configuration is loaded first; the explicit config file,
    $CHROMASHIFT_CONFIG and ~/.config/ChromaShift/config.toml are merged
    over it in that order, later files replacing whole command entries.

    Raises:
        ConfigError: If no configuration could be loaded at all
    """
    config: ConfigMap = {}

    if logger:
        logger.debug("Loading bundled config")
    try:
        bundled = resources.files("chromashift").joinpath("data", "config.toml")
        config.update(parse_config(bundled.read_text(encoding="utf-8")))
    except (OSError, tomllib.TOMLDecodeError) as e:
        if logger:
            logger.debug(f"Error loading bundled config: {e}")

    paths = config_search_path()
    if config_file:
        paths.insert(0, Path(config_file))

    for path in paths:
        try:
            content = path.read_text(encoding="utf-8")
        except OSError as e:
            if logger:
                logger.debug(f"Failed to load config file {path}: {e}")
            continue
        try:
            config.update(parse_config(content))
            if logger:
                logger.debug(f"Loaded config file {path}")
        except (tomllib.TOMLDecodeError, TypeError) as e:
            if logger:
                logger.debug(f"Can't load config from {path}: {e}")

    if not config:
        raise ConfigError("no config found")
    return config

def get_rule_file_for_subcommand(sub: Dict[str, SubCommand], args: List[str]) -> str:
    """Resolve by exact subcommand name, then by regexp over the command line."""
    if len(args) > 1 and args[1] in sub and sub[args[1]].file:
        return sub[args[1]].file

    command_line = " ".join(args)
    for values in sub.values():
        if not values.regexp:
            continue
        try:
            if re.search(values.regexp, command_line):
                return values.file
        except re.error:
            continue
    raise ConfigError("No matching subcommand")

def get_rule_file_name(config: ConfigMap, args: List[str], logger=None) -> str:
    """
    Find the rules file for a command line.

    Tries the executable's base name, then every entry's name and regexp.

    Raises:
        ConfigError: If no entry matches
    """
    if not args:
        raise ConfigError("No command given")

    cmd_name = args[0]
    base_name = os.path.basename(cmd_name)
    command_line = " ".join(args)

    def resolve(name: str, entry: CommandConfig) -> Optional[str]:
        if entry.sub is None:
            return entry.file
        if logger:
            logger.debug(f"Loading sub commands for {name}")
        try:
            return get_rule_file_for_subcommand(entry.sub, args)
        except ConfigError as e:
            if logger:
                logger.debug(str(e))
            return entry.file or None

    if base_name in config:
        found = resolve(base_name, config[base_name])
        if found:
            return found

    for name, entry in config.items():
        if name in (cmd_name, base_name):
            found = resolve(name, entry)
            if found:
                return found

        if not entry.regexp:
            continue
        try:
            matched = re.search(entry.regexp, command_line)
        except re.error as e:
            if logger:
                logger.debug(f"Invalid command regexp for {name}: {e}")
            continue
        if matched:
            found = resolve(name, entry)
            if found:
                return found

    raise ConfigError("No matching command")

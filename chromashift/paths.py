# paths.py

import os
import re
import stat
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import List, Optional, Tuple

# Subset of the GNU dircolors database used when LS_COLORS is not set.
DEFAULT_LS_COLORS = ":".join([
    "*.tar=01;31", "*.tgz=01;31", "*.gz=01;31", "*.zip=01;31", "*.xz=01;31",
    "*.bz2=01;31", "*.7z=01;31", "*.rar=01;31", "*.zst=01;31", "*.deb=01;31",
    "*.rpm=01;31", "*.jar=01;31",
    "*.jpg=01;35", "*.jpeg=01;35", "*.png=01;35", "*.gif=01;35", "*.svg=01;35",
    "*.webp=01;35", "*.mp4=01;35", "*.mkv=01;35", "*.mov=01;35",
    "*.mp3=00;36", "*.flac=00;36", "*.ogg=00;36", "*.wav=00;36",
    "*.go=36", "*.py=36", "*.rs=36", "*.c=36", "*.h=36", "*.js=36", "*.ts=36",
    "*.md=33", "*.txt=33", "*.toml=33", "*.yaml=33", "*.yml=33", "*.json=33",
    "*.log=90", "*.bak=90", "*.tmp=90", "*~=90",
])

_SEPARATOR = re.compile(r"[/\\]+")

class LsColors:
    """Glob to SGR code table parsed lazily from LS_COLORS."""

    def __init__(self, spec: Optional[str] = None):
        self._spec = spec
        self._table: Optional[List[Tuple[str, str]]] = None

    @property
    def table(self) -> List[Tuple[str, str]]:
        if self._table is None:
            spec = self._spec
            if spec is None:
                spec = os.environ.get("LS_COLORS") or DEFAULT_LS_COLORS
            self._table = parse_ls_colors(spec)
        return self._table

    def lookup(self, path: str) -> Optional[str]:
        """Return the code of the first glob matching the base name of path."""
        name = os.path.basename(path)
        for pattern, code in self.table:
            if fnmatchcase(name, pattern):
                return code
        return None

def parse_ls_colors(spec: str) -> List[Tuple[str, str]]:
    """
    Parse "pattern=code:pattern=code" entries.

    Only glob entries (containing *, ? or [) are kept; file type keys such
    as "di" or "ln" are covered by the metadata checks in path_style.
    """
    table = []
    for entry in spec.split(":"):
        pattern, sep, code = entry.partition("=")
        if not sep or not code:
            continue
        if not any(c in pattern for c in "*?["):
            continue
        table.append((pattern, code))
    return table

@dataclass
class FileMetadata:
    is_directory: bool = False
    is_symlink: bool = False
    is_executable: bool = False
    is_world_writable: bool = False

def _xdg_dir(var: str, default: str) -> str:
    return os.environ.get(var) or os.path.join(os.path.expanduser("~"), default)

def find_path(base: str, path: str) -> str:
    """
    Return an absolute, normalized path for path relative to base (not the CWD).

    Leading "~", "$HOME", "$XDG_CONFIG_HOME", "$XDG_CACHE_HOME" and
    "$XDG_DATA_HOME" components are expanded.

    Raises:
        ValueError: If path is empty
    """
    if not path:
        raise ValueError("empty path")
    if os.path.isabs(path):
        return os.path.normpath(path)

    split = _SEPARATOR.split(path, maxsplit=1)
    if len(split) != 2:
        return os.path.normpath(os.path.join(base, path))

    head, rest = split
    prefixes = {
        "~": os.path.expanduser("~"),
        "$HOME": os.path.expanduser("~"),
        "$XDG_CONFIG_HOME": _xdg_dir("XDG_CONFIG_HOME", ".config"),
        "$XDG_CACHE_HOME": _xdg_dir("XDG_CACHE_HOME", ".cache"),
        "$XDG_DATA_HOME": _xdg_dir("XDG_DATA_HOME", os.path.join(".local", "share")),
    }
    if head in prefixes:
        return os.path.normpath(os.path.join(prefixes[head], rest))
    return os.path.normpath(os.path.join(base, path))

def file_metadata(path: str, base: Optional[str] = None) -> FileMetadata:
    """Inspect path without following symlinks. Raises OSError/ValueError when it cannot."""
    full = find_path(base or os.getcwd(), path)
    mode = os.lstat(full).st_mode

    meta = FileMetadata()
    if stat.S_ISLNK(mode):
        meta.is_symlink = True
    elif stat.S_ISDIR(mode):
        meta.is_directory = True
    elif stat.S_ISREG(mode):
        meta.is_executable = bool(mode & 0o111)
        meta.is_world_writable = bool(mode & stat.S_IWOTH)
    return meta

def path_style(text: str, ls_colors: Optional[LsColors] = None,
               base: Optional[str] = None) -> str:
    """
    Pick SGR parameters for a path found in command output.

    Returns an empty string (no styling) when nothing applies.
    """
    ls_colors = ls_colors or LsColors()
    try:
        meta = file_metadata(text.strip(), base)
    except (OSError, ValueError):
        meta = None

    if meta and meta.is_world_writable:
        return "1;32"
    if meta and meta.is_executable:
        return "1;31"

    code = ls_colors.lookup(text.strip())
    if code:
        return code

    if meta is None:
        return "90"
    if meta.is_symlink:
        return "35"
    if meta.is_directory:
        return "1;34"
    if os.path.basename(text.strip()).startswith("."):
        return "90"
    return ""

# errors.py

class ChromaShiftError(Exception):
    """Base class for chromashift failures."""

class ConfigError(ChromaShiftError):
    """No usable command configuration, or no entry for the command."""

class RulesNotFoundError(ChromaShiftError):
    """No rules file could be located or decoded."""

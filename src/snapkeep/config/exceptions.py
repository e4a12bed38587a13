"""
Exceptions raised while loading and resolving configuration profiles.
"""
from pathlib import Path
from typing import List, Sequence


class ConfigError(Exception):
    """Base exception for configuration errors."""
    pass


class ConfigLoadError(ConfigError):
    """Raised when an existing configuration file cannot be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load {path}: {reason}")


class ConfigParseError(ConfigLoadError):
    """Raised when a configuration file is not valid TOML or has invalid values."""
    pass


class UnknownFieldError(ConfigParseError):
    """Raised when a configuration file contains keys the schema does not know."""

    def __init__(self, path: Path, fields: Sequence[str]):
        self.fields: List[str] = list(fields)
        super().__init__(path, f"unknown field(s): {', '.join(self.fields)}")


class ProfileCycleError(ConfigError):
    """Raised when profiles include each other in a loop."""

    def __init__(self, chain: Sequence[str]):
        self.chain: List[str] = list(chain)
        super().__init__(f"profile cycle detected: {' -> '.join(self.chain)}")


class CommandParseError(ConfigError, ValueError):
    """Raised when a command string is not valid shell syntax."""

    def __init__(self, command: str, reason: str):
        self.command = command
        self.reason = reason
        super().__init__(f"cannot parse command {command!r}: {reason}")

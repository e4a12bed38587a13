"""
Configuration file loader for snapkeep profiles.

Profiles are TOML documents validated into ``SnapkeepConfig``.
"""
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from .exceptions import ConfigLoadError, ConfigParseError, UnknownFieldError
from .models import SnapkeepConfig

logger = logging.getLogger(__name__)


def _error_location(error: Dict[str, Any]) -> str:
    return ".".join(str(part) for part in error["loc"])


def parse_config(data: Dict[str, Any], path: Path) -> SnapkeepConfig:
    """
    Validate parsed TOML data into a configuration document.

    Args:
        data: Parsed TOML document
        path: Path the data was read from, used in error messages

    Returns:
        The configuration document

    Raises:
        UnknownFieldError: If the document contains unknown keys
        ConfigParseError: If a value is invalid
    """
    try:
        return SnapkeepConfig.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        unknown = [_error_location(err) for err in errors if err["type"] == "extra_forbidden"]
        if unknown:
            raise UnknownFieldError(path, unknown) from e
        details = "; ".join(f"{_error_location(err)}: {err['msg']}" for err in errors)
        raise ConfigParseError(path, details) from e


def load_toml_file(path: Path) -> SnapkeepConfig:
    """
    Load a TOML configuration file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed configuration document

    Raises:
        ConfigLoadError: If the file cannot be read
        ConfigParseError: If the file is not valid TOML or has invalid values
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(path, f"Invalid TOML: {e}") from e
    except OSError as e:
        raise ConfigLoadError(path, e.strerror or str(e)) from e

    logger.debug(f"Loaded TOML config: {path}")
    return parse_config(data, path)


def load_toml_string(content: str, path: Path = Path("<string>")) -> SnapkeepConfig:
    """Parse a configuration document from TOML text."""
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(path, f"Invalid TOML: {e}") from e
    return parse_config(data, path)

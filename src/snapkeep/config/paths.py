"""
Path resolution utilities for snapkeep configuration profiles.

Profiles are looked up in three places, in this order:

1. The per-user configuration directory of the platform
2. The system-wide configuration directory of the platform
3. The current working directory

Every function here is a pure function of the platform identifier and an
environment mapping, so the lookup order for any platform can be computed
(and tested) on any other. Nothing in this module touches the file system.
"""
import os
import sys
from pathlib import Path, PurePath, PurePosixPath, PureWindowsPath
from typing import List, Mapping, Optional

APP_NAME = "snapkeep"
PROFILE_EXTENSION = "toml"

# Targets without a usable home or system directory.
_SANDBOXED_PLATFORMS = ("ios", "emscripten", "wasi")


def user_config_dir(
    app_name: str = APP_NAME,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Optional[PurePath]:
    """
    Get the per-user configuration directory for the application.

    Args:
        app_name: Name of the application directory
        platform: Platform identifier in ``sys.platform`` form (defaults to the running one)
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        The directory, or None if it cannot be determined on this platform
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform == "win32":
        appdata = environ.get("APPDATA")
        if not appdata:
            return None
        return PureWindowsPath(appdata) / app_name / "config"

    if platform.startswith(_SANDBOXED_PLATFORMS):
        return None

    home = environ.get("HOME")

    if platform == "darwin":
        if not home:
            return None
        return PurePosixPath(home) / "Library" / "Application Support" / app_name

    # XDG base directory spec: relative values must be ignored
    xdg_config_home = environ.get("XDG_CONFIG_HOME")
    if xdg_config_home and PurePosixPath(xdg_config_home).is_absolute():
        return PurePosixPath(xdg_config_home) / app_name

    if not home:
        return None
    return PurePosixPath(home) / ".config" / app_name


def global_config_dir(
    app_name: str = APP_NAME,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None
) -> Optional[PurePath]:
    """
    Get the system-wide configuration directory for the application.

    On Windows this is derived from ``PROGRAMDATA``; on sandboxed targets
    there is none; everywhere else it is ``/etc/<app_name>``.
    """
    platform = platform or sys.platform
    environ = os.environ if environ is None else environ

    if platform == "win32":
        program_data = environ.get("PROGRAMDATA")
        if not program_data:
            return None
        return PureWindowsPath(program_data) / app_name / "config"

    if platform.startswith(_SANDBOXED_PLATFORMS):
        return None

    return PurePosixPath("/etc") / app_name


def config_dirs(
    app_name: str = APP_NAME,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    working_dir: Optional[PurePath] = None
) -> List[PurePath]:
    """
    Get all configuration directories in lookup order.

    Directories that cannot be determined on the platform are left out.

    Args:
        app_name: Name of the application directory
        platform: Platform identifier in ``sys.platform`` form
        environ: Environment mapping
        working_dir: Current working directory (defaults to ``Path.cwd()``)

    Returns:
        List of directories, first one checked first
    """
    if working_dir is None:
        working_dir = Path.cwd()

    candidates = [
        user_config_dir(app_name, platform, environ),
        global_config_dir(app_name, platform, environ),
        working_dir,
    ]
    return [directory for directory in candidates if directory is not None]


def profile_filename(profile: str) -> str:
    """Get the file name used for a profile, e.g. ``"snapkeep.toml"``."""
    return f"{profile}.{PROFILE_EXTENSION}"


def candidate_paths(
    filename: str,
    app_name: str = APP_NAME,
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    working_dir: Optional[PurePath] = None
) -> List[PurePath]:
    """
    Resolve the paths to probe for a configuration file, in lookup order.

    Args:
        filename: File name of the configuration file
        app_name: Name of the application directory
        platform: Platform identifier in ``sys.platform`` form
        environ: Environment mapping
        working_dir: Current working directory

    Returns:
        List of candidate paths; existence is not checked
    """
    return [
        directory / filename
        for directory in config_dirs(app_name, platform, environ, working_dir)
    ]

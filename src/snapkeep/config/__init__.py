"""Configuration package."""

# Path resolution
from .paths import (
    APP_NAME,
    PROFILE_EXTENSION,
    user_config_dir,
    global_config_dir,
    config_dirs,
    profile_filename,
    candidate_paths,
)

# Errors
from .exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigParseError,
    UnknownFieldError,
    ProfileCycleError,
    CommandParseError,
)

# Commands / hooks
from .command import CommandInput, split_command

# Configuration model
from .models import (
    SnapkeepConfig,
    GlobalOptions,
    RepositoryOptions,
    SnapshotFilter,
    BackupOptions,
    CopyOptions,
    ForgetOptions,
    LOG_LEVELS,
    LOG_LEVEL_ALIASES,
)

# Configuration loading
from .loader import load_toml_file, load_toml_string, parse_config

# Configuration merging
from .merger import (
    MergePolicy,
    MERGE_POLICIES,
    merge_values,
    merge_into,
    check_policy_table,
)

# Profile resolution
from .profiles import (
    MergeLogEntry,
    ProfileResolver,
    load_config,
    flush_merge_logs,
)

__all__ = [
    # Path resolution
    "APP_NAME",
    "PROFILE_EXTENSION",
    "user_config_dir",
    "global_config_dir",
    "config_dirs",
    "profile_filename",
    "candidate_paths",
    # Errors
    "ConfigError",
    "ConfigLoadError",
    "ConfigParseError",
    "UnknownFieldError",
    "ProfileCycleError",
    "CommandParseError",
    # Commands / hooks
    "CommandInput",
    "split_command",
    # Configuration model
    "SnapkeepConfig",
    "GlobalOptions",
    "RepositoryOptions",
    "SnapshotFilter",
    "LOG_LEVELS",
    "LOG_LEVEL_ALIASES",
    "BackupOptions",
    "CopyOptions",
    "ForgetOptions",
    # Configuration loading
    "load_toml_file",
    "load_toml_string",
    "parse_config",
    # Configuration merging
    "MergePolicy",
    "MERGE_POLICIES",
    "merge_values",
    "merge_into",
    "check_policy_table",
    # Profile resolution
    "MergeLogEntry",
    "ProfileResolver",
    "load_config",
    "flush_merge_logs",
]

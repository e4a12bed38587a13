"""
Configuration document model for snapkeep.

Uses Pydantic for validation. Keys are kebab-case in TOML files and
snake_case in Python. Unknown keys are rejected everywhere so that typos in
hand-edited profiles fail loudly instead of being ignored.

Every field has an "unset" default (False, None, empty list/map or an unset
command) so that merging can tell explicit values from defaults. How each
field is merged is defined in ``merger.MERGE_POLICIES``.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .command import CommandInput

LOG_LEVELS = ("off", "error", "warn", "info", "debug", "trace")
LOG_LEVEL_ALIASES = {"warning": "warn"}


def to_kebab(name: str) -> str:
    """Convert a field name to its TOML key, e.g. ``global_`` -> ``global``."""
    return name.rstrip("_").replace("_", "-")


class ConfigSection(BaseModel):
    """Base class for all configuration sections."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_kebab,
        populate_by_name=True,
    )


class GlobalOptions(ConfigSection):
    """Options available for all commands."""
    use_profile: List[str] = Field(
        default_factory=list,
        description="Profiles to merge in; each parses <PROFILE>.toml",
    )
    dry_run: bool = Field(default=False, description="Only show what would be done")
    check_index: bool = Field(default=False, description="Check the index against pack files")
    log_level: Optional[str] = Field(default=None, description="Log level [default: info]")
    log_file: Optional[Path] = Field(default=None, description="Write log messages to this file")
    no_progress: bool = Field(default=False, description="Don't show any progress bar")
    progress_interval: Optional[str] = Field(
        default=None,
        description="Interval between progress bar updates, e.g. '100ms'",
    )
    env: Dict[str, str] = Field(
        default_factory=dict,
        description="Environment variables to set (config file only)",
    )
    run_before: CommandInput = Field(default_factory=CommandInput)
    run_after: CommandInput = Field(default_factory=CommandInput)

    @field_validator("use_profile", mode="before")
    @classmethod
    def one_or_many(cls, v: Any) -> Any:
        """Accept a single profile name as well as a list."""
        if isinstance(v, str):
            return [v]
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        level = v.strip().lower()
        level = LOG_LEVEL_ALIASES.get(level, level)
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of: {', '.join(LOG_LEVELS)}")
        return level


class RepositoryOptions(ConfigSection):
    """
    Repository connection options.

    These are handed to the storage engine as they are; snapkeep itself
    only merges them.
    """
    repository: Optional[str] = None
    repo_hot: Optional[str] = None
    password: Optional[str] = None
    password_file: Optional[Path] = None
    password_command: CommandInput = Field(default_factory=CommandInput)
    no_cache: bool = False
    cache_dir: Optional[Path] = None
    warm_up: bool = False
    warm_up_command: CommandInput = Field(default_factory=CommandInput)
    warm_up_wait: Optional[str] = None
    options: Dict[str, str] = Field(default_factory=dict)


class SnapshotFilter(ConfigSection):
    """Options selecting which snapshots commands operate on."""
    filter_host: List[str] = Field(default_factory=list)
    filter_label: List[str] = Field(default_factory=list)
    filter_paths: List[str] = Field(default_factory=list)
    filter_tags: List[str] = Field(default_factory=list)
    filter_fn: Optional[str] = None


class BackupOptions(ConfigSection):
    host: Optional[str] = None
    label: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    glob: List[str] = Field(default_factory=list)
    iglob: List[str] = Field(default_factory=list)
    glob_file: List[str] = Field(default_factory=list)
    exclude_if_present: List[str] = Field(default_factory=list)
    exclude_larger_than: Optional[str] = None
    git_ignore: bool = False
    one_file_system: bool = False
    sources: List[str] = Field(default_factory=list)


class CopyOptions(ConfigSection):
    targets: List[str] = Field(default_factory=list)


class ForgetOptions(ConfigSection):
    keep_last: Optional[int] = None
    keep_hourly: Optional[int] = None
    keep_daily: Optional[int] = None
    keep_weekly: Optional[int] = None
    keep_monthly: Optional[int] = None
    keep_yearly: Optional[int] = None
    keep_within: Optional[str] = None
    keep_tags: List[str] = Field(default_factory=list)
    keep_ids: List[str] = Field(default_factory=list)
    group_by: Optional[str] = None
    prune: bool = False


class SnapkeepConfig(ConfigSection):
    """Root configuration document, one per profile file."""
    global_: GlobalOptions = Field(default_factory=GlobalOptions)
    repository: RepositoryOptions = Field(default_factory=RepositoryOptions)
    snapshot_filter: SnapshotFilter = Field(default_factory=SnapshotFilter)
    backup: BackupOptions = Field(default_factory=BackupOptions)
    copy_: CopyOptions = Field(default_factory=CopyOptions)
    forget: ForgetOptions = Field(default_factory=ForgetOptions)

"""
Profile resolution for snapkeep.

A profile is a named TOML document, ``<profile>.toml``, found in the first
configuration directory that has it (see ``paths``). Profiles can include
other profiles through ``use-profile``; included profiles are merged first,
so the including profile's own values take precedence over them.

Resolution never logs directly. Decisions are collected as MergeLogEntry
records so the caller can flush them once logging is configured:

    resolver = ProfileResolver()
    config = SnapkeepConfig()
    merge_logs = resolver.resolve(config)
    ...
    flush_merge_logs(merge_logs)
"""
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path, PurePath
from typing import List, Mapping, Optional, Sequence, Tuple

from .exceptions import ConfigLoadError, ProfileCycleError
from .loader import load_toml_file
from .merger import MergePolicy, merge_into
from .models import SnapkeepConfig
from .paths import APP_NAME, candidate_paths, profile_filename

logger = logging.getLogger(__name__)

_AFTER_INCLUDES = [policy for policy in MergePolicy if policy is not MergePolicy.REPLACE_IF_EMPTY]


@dataclass(frozen=True)
class MergeLogEntry:
    """
    A decision taken while resolving profiles.

    Attributes:
        level: A ``logging`` level, e.g. logging.INFO
        message: Human readable description
    """
    level: int
    message: str


class ProfileResolver:
    """
    Locates profile files and merges them into a configuration.

    The platform, environment and working directory are captured once so
    a resolver always probes the same locations.
    """

    def __init__(
        self,
        app_name: str = APP_NAME,
        working_dir: Optional[PurePath] = None,
        platform: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None
    ):
        """
        Initialize the ProfileResolver.

        Args:
            app_name: Application name, also the default profile name
            working_dir: Directory searched last (defaults to the current one)
            platform: Platform identifier in ``sys.platform`` form
            environ: Environment mapping used to locate config directories
        """
        self.app_name = app_name
        self.working_dir = working_dir or Path.cwd()
        self.platform = platform or sys.platform
        self.environ = dict(os.environ if environ is None else environ)

    def candidate_paths(self, profile: str) -> List[Path]:
        """Get the paths probed for a profile, in lookup order."""
        return [
            Path(path)
            for path in candidate_paths(
                profile_filename(profile),
                app_name=self.app_name,
                platform=self.platform,
                environ=self.environ,
                working_dir=self.working_dir,
            )
        ]

    def find_profile(self, profile: str) -> Tuple[Optional[Path], List[Path]]:
        """
        Find the file for a profile.

        Returns:
            Tuple of (first existing path or None, all probed paths)

        Raises:
            ConfigLoadError: If a candidate path cannot be checked
        """
        paths = self.candidate_paths(profile)
        for path in paths:
            try:
                found = path.exists()
            except OSError as e:
                raise ConfigLoadError(path, e.strerror or str(e)) from e
            if found:
                return path, paths
        return None, paths

    def merge_profile(
        self,
        config: SnapkeepConfig,
        profile: str,
        merge_logs: List[MergeLogEntry],
        level_missing: int = logging.INFO,
        resolving: Sequence[str] = ()
    ) -> None:
        """
        Merge a profile into ``config`` by reading its config file.

        Profiles named in the file's ``use-profile`` are merged first,
        recursively; a missing included profile is logged as a warning.
        Commands set in the file are taken before its included profiles are
        merged, so they win over commands from included profiles.

        Args:
            config: The accumulated configuration, modified in place
            profile: Name of the profile to merge
            merge_logs: Log entries are appended here
            level_missing: Log level used if this profile has no file
            resolving: Profiles currently being resolved, outermost first

        Raises:
            ProfileCycleError: If the profile is already being resolved
            ConfigLoadError: If the profile file cannot be read or parsed
        """
        if profile in resolving:
            raise ProfileCycleError([*resolving, profile])

        path, probed = self.find_profile(profile)
        if path is None:
            for candidate in probed:
                merge_logs.append(MergeLogEntry(
                    level_missing,
                    f"profile {profile}: no config file at {candidate}",
                ))
            return

        try:
            path = path.resolve(strict=True)
        except OSError as e:
            raise ConfigLoadError(path, e.strerror or str(e)) from e
        merge_logs.append(MergeLogEntry(logging.INFO, f"using config {path}"))
        profile_config = load_toml_file(path)

        # First-set fields are taken before the included profiles get a chance
        merge_into(config, profile_config, policies=[MergePolicy.REPLACE_IF_EMPTY])

        chain = (*resolving, profile)
        for included in list(profile_config.global_.use_profile):
            self.merge_profile(config, included, merge_logs, logging.WARNING, chain)

        merge_into(config, profile_config, policies=_AFTER_INCLUDES)

    def resolve(
        self,
        config: SnapkeepConfig,
        profiles: Optional[Sequence[str]] = None
    ) -> List[MergeLogEntry]:
        """
        Merge the requested profiles into ``config``.

        Args:
            config: The accumulated configuration, modified in place
            profiles: Profiles to merge (default: the ``use-profile`` entries
                already in ``config``, or the application name if there are none)

        Returns:
            The merge log, in the order decisions were taken
        """
        if profiles is None:
            profiles = list(config.global_.use_profile) or [self.app_name]

        merge_logs: List[MergeLogEntry] = []
        for profile in profiles:
            self.merge_profile(config, profile, merge_logs, logging.INFO)
        return merge_logs


def load_config(
    seed: Optional[SnapkeepConfig] = None,
    resolver: Optional[ProfileResolver] = None
) -> Tuple[SnapkeepConfig, List[MergeLogEntry]]:
    """
    Build the effective configuration from command-line values and profiles.

    The seed (values given as flags or environment variables) starts the
    accumulator, so its flags, lists and commands are kept. After the
    profiles are merged, its single values are applied again so that
    explicitly given options win over profile files.

    Args:
        seed: Values from the command line (defaults to an empty config)
        resolver: Resolver to locate profiles with

    Returns:
        Tuple of (merged configuration, merge log)
    """
    seed = seed or SnapkeepConfig()
    resolver = resolver or ProfileResolver()

    config = seed.model_copy(deep=True)
    merge_logs = resolver.resolve(config)
    merge_into(config, seed, policies=[MergePolicy.OVERRIDE])

    return config, merge_logs


def flush_merge_logs(
    merge_logs: Sequence[MergeLogEntry],
    log: Optional[logging.Logger] = None
) -> None:
    """Emit collected merge log entries through a logger."""
    log = log or logger
    for entry in merge_logs:
        log.log(entry.level, entry.message)

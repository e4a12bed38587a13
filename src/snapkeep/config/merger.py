"""
Merge policy for combining configuration documents.

When a profile is merged into the accumulated configuration, each field is
combined according to exactly one of five policies:

    FLAG              true wins; false never clears an already-true flag
    OVERRIDE          an incoming value replaces the existing one; unset never clears
    APPEND            incoming list items are appended, keeping order and duplicates
    REPLACE_IF_EMPTY  incoming value is taken only while the existing one is empty
    UNION             maps are united, incoming keys replace existing ones

``MERGE_POLICIES`` is the complete table of which field uses which policy.
"""
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set, Type

from pydantic import BaseModel

from .command import CommandInput
from .models import (
    BackupOptions,
    CopyOptions,
    ForgetOptions,
    GlobalOptions,
    RepositoryOptions,
    SnapkeepConfig,
    SnapshotFilter,
)


class MergePolicy(str, Enum):
    """How a field is combined when two documents are merged."""
    FLAG = "flag"
    OVERRIDE = "override"
    APPEND = "append"
    REPLACE_IF_EMPTY = "replace-if-empty"
    UNION = "union"


FLAG = MergePolicy.FLAG
OVERRIDE = MergePolicy.OVERRIDE
APPEND = MergePolicy.APPEND
REPLACE_IF_EMPTY = MergePolicy.REPLACE_IF_EMPTY
UNION = MergePolicy.UNION


# Sections are merged field by field; they are not listed here.
MERGE_POLICIES: Dict[Type[BaseModel], Dict[str, MergePolicy]] = {
    GlobalOptions: {
        "use_profile": APPEND,
        "dry_run": FLAG,
        "check_index": FLAG,
        "log_level": OVERRIDE,
        "log_file": OVERRIDE,
        "no_progress": FLAG,
        "progress_interval": OVERRIDE,
        "env": UNION,
        "run_before": REPLACE_IF_EMPTY,
        "run_after": REPLACE_IF_EMPTY,
    },
    RepositoryOptions: {
        "repository": OVERRIDE,
        "repo_hot": OVERRIDE,
        "password": OVERRIDE,
        "password_file": OVERRIDE,
        "password_command": REPLACE_IF_EMPTY,
        "no_cache": FLAG,
        "cache_dir": OVERRIDE,
        "warm_up": FLAG,
        "warm_up_command": REPLACE_IF_EMPTY,
        "warm_up_wait": OVERRIDE,
        "options": UNION,
    },
    SnapshotFilter: {
        "filter_host": APPEND,
        "filter_label": APPEND,
        "filter_paths": APPEND,
        "filter_tags": APPEND,
        "filter_fn": OVERRIDE,
    },
    BackupOptions: {
        "host": OVERRIDE,
        "label": OVERRIDE,
        "tags": APPEND,
        "glob": APPEND,
        "iglob": APPEND,
        "glob_file": APPEND,
        "exclude_if_present": APPEND,
        "exclude_larger_than": OVERRIDE,
        "git_ignore": FLAG,
        "one_file_system": FLAG,
        "sources": APPEND,
    },
    CopyOptions: {
        "targets": APPEND,
    },
    ForgetOptions: {
        "keep_last": OVERRIDE,
        "keep_hourly": OVERRIDE,
        "keep_daily": OVERRIDE,
        "keep_weekly": OVERRIDE,
        "keep_monthly": OVERRIDE,
        "keep_yearly": OVERRIDE,
        "keep_within": OVERRIDE,
        "keep_tags": APPEND,
        "keep_ids": APPEND,
        "group_by": OVERRIDE,
        "prune": FLAG,
    },
    SnapkeepConfig: {},
}


def _is_empty(value: Any) -> bool:
    if isinstance(value, CommandInput):
        return not value.is_set()
    return not value


def merge_values(policy: MergePolicy, left: Any, right: Any) -> Any:
    """
    Combine two values of the same field.

    Args:
        policy: Merge policy of the field
        left: The accumulated value
        right: The incoming value

    Returns:
        The combined value; inputs are not modified

    Examples:
        >>> merge_values(MergePolicy.APPEND, ["a"], ["b", "a"])
        ['a', 'b', 'a']
        >>> merge_values(MergePolicy.FLAG, True, False)
        True
    """
    if policy is MergePolicy.FLAG:
        return left or right
    if policy is MergePolicy.OVERRIDE:
        return left if right is None else right
    if policy is MergePolicy.APPEND:
        return [*left, *right]
    if policy is MergePolicy.REPLACE_IF_EMPTY:
        return right if _is_empty(left) else left
    if policy is MergePolicy.UNION:
        return {**left, **right}
    raise ValueError(f"Unknown merge policy: {policy}")


def merge_into(
    left: BaseModel,
    right: BaseModel,
    policies: Optional[Iterable[MergePolicy]] = None
) -> None:
    """
    Merge ``right`` into ``left`` in place, recursing into sections.

    Args:
        left: The accumulator, modified in place
        right: The incoming document of the same type, left untouched
        policies: Only apply fields with these policies (default: all)

    Raises:
        TypeError: If the documents have different types
        KeyError: If a field has no entry in MERGE_POLICIES
    """
    if type(left) is not type(right):
        raise TypeError(
            f"Cannot merge {type(right).__name__} into {type(left).__name__}"
        )

    selected: Optional[Set[MergePolicy]] = set(policies) if policies is not None else None
    table = MERGE_POLICIES[type(left)]

    for name in type(left).model_fields:
        left_value = getattr(left, name)
        right_value = getattr(right, name)

        if isinstance(left_value, BaseModel) and name not in table:
            merge_into(left_value, right_value, selected)
            continue

        policy = table[name]
        if selected is not None and policy not in selected:
            continue
        setattr(left, name, merge_values(policy, left_value, right_value))


def check_policy_table() -> None:
    """
    Verify that every field of every section has exactly one merge policy.

    Raises:
        ValueError: If a field is missing from the table or the table names
            a field that does not exist
    """
    problems = []

    for model, table in MERGE_POLICIES.items():
        for name, field in model.model_fields.items():
            annotation = field.annotation
            is_section = isinstance(annotation, type) and issubclass(annotation, BaseModel) \
                and annotation is not CommandInput
            if is_section:
                if annotation not in MERGE_POLICIES:
                    problems.append(f"{model.__name__}.{name}: section not in table")
                continue
            if name not in table:
                problems.append(f"{model.__name__}.{name}: no merge policy")

        for name in table:
            if name not in model.model_fields:
                problems.append(f"{model.__name__}.{name}: no such field")

    if problems:
        raise ValueError("Invalid merge policy table: " + "; ".join(problems))

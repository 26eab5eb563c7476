# Dotsync Configuration Resolver
# Validates a parsed configuration and expands it into immutable sync groups

from __future__ import annotations

import glob
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotsync.config.loader import get_default_staging
from dotsync.config.schema import DotsyncConfig, GroupConfig, GroupScope, SyncMethod
from dotsync.errors import ConfigError, ParseError
from dotsync.sync.item import filter_items
from dotsync.utils.paths import expand_path, to_absolute
from dotsync.utils.platform import get_hostname

# Pattern components that would reach the current or parent directory
FORBIDDEN_COMPONENTS = frozenset({"..", ".*"})


@dataclass(frozen=True)
class RenamingRule:
    """A compiled renaming rule, applied to one destination path component at a time."""

    pattern: re.Pattern
    substitution: str

    def apply(self, component: str) -> str:
        return self.pattern.sub(self.substitution, component)


@dataclass(frozen=True)
class SyncGroup:
    """A validated, expanded group. Created once per run and never mutated."""

    name: str
    basedir: Path | None
    sources: tuple[Path, ...]
    target: Path
    ignored: frozenset[str] = frozenset()
    renaming_rules: tuple[RenamingRule, ...] = ()
    method: SyncMethod = SyncMethod.SYMLINK
    allow_overwrite: bool = False
    hostname_sep: str = "@@"
    templated: bool = True
    scope: GroupScope = GroupScope.GENERAL
    context: Any = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ResolvedConfig:
    """The run's configuration: groups in declared order plus run-wide values."""

    groups: tuple[SyncGroup, ...]
    staging: Path
    hostname: str

    def get_group(self, name: str) -> SyncGroup | None:
        """Get a group by name."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    @property
    def group_names(self) -> list[str]:
        return [group.name for group in self.groups]


def check_glob(pattern: str) -> None:
    """
    Reject malformed glob patterns.

    Raises:
        ParseError: If a character class is left open.
    """
    i = 0
    while i < len(pattern):
        if pattern[i] == "[":
            # A ']' directly after '[' or '[!' is a literal member of the class
            j = i + 1
            if j < len(pattern) and pattern[j] == "!":
                j += 1
            if j < len(pattern) and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise ParseError(f"Malformed glob pattern (unclosed '['): {pattern}")
            i = close
        i += 1


def _staging_path(config: DotsyncConfig) -> Path:
    if config.global_.staging:
        return expand_path(config.global_.staging)
    return to_absolute(get_default_staging())


def _compile_rules(group: GroupConfig, config: DotsyncConfig) -> tuple[RenamingRule, ...]:
    rules = []
    for rule in config.get_renaming_rules(group):
        try:
            compiled = re.compile(rule.pattern)
        except re.error as e:
            raise ParseError(f"Group '{group.name}': invalid renaming pattern '{rule.pattern}': {e}") from e
        rules.append(RenamingRule(pattern=compiled, substitution=rule.substitution))
    return tuple(rules)


def _validate_group(group: GroupConfig, config: DotsyncConfig, staging: Path) -> None:
    name = group.name
    hostname_sep = config.get_hostname_sep(group)

    if not name:
        raise ConfigError("Found a group with an empty name")
    if "/" in name or os.sep in name:
        raise ConfigError(f"Group name '{name}' contains a path separator")
    if not hostname_sep:
        raise ConfigError(f"Group '{name}': hostname_sep is empty")

    if not group.target:
        raise ConfigError(f"Group '{name}': target is empty")
    target = expand_path(group.target)
    if target.exists() and not target.is_dir():
        raise ConfigError(f"Group '{name}': target path exists and is not a directory: {target}")

    for ignored in group.ignored:
        if "/" in ignored or os.sep in ignored:
            raise ConfigError(f"Group '{name}': ignored pattern '{ignored}' contains a path separator")

    for source in group.sources:
        if not source or source == ".":
            raise ConfigError(f"Group '{name}': bad source pattern '{source}'")
        if FORBIDDEN_COMPONENTS.intersection(source.split("/")):
            raise ConfigError(
                f"Group '{name}': source pattern '{source}' would reach the current or parent directory"
            )
        check_glob(source)

    if group.basedir is not None:
        if not group.basedir:
            raise ConfigError(f"Group '{name}': basedir is empty")
        if hostname_sep in group.basedir:
            raise ConfigError(f"Group '{name}': basedir contains hostname_sep ({hostname_sep})")
        basedir = expand_path(group.basedir)
        if basedir == target:
            raise ConfigError(f"Group '{name}': basedir and target are the same directory: {target}")
        if not basedir.exists():
            raise ConfigError(f"Group '{name}': basedir does not exist: {basedir}")
        if not basedir.is_dir():
            raise ConfigError(f"Group '{name}': basedir exists and is not a directory: {basedir}")

    if config.get_method(group) == SyncMethod.SYMLINK and staging.exists() and not staging.is_dir():
        raise ConfigError(f"Staging path exists and is not a directory: {staging}")

    _compile_rules(group, config)


def validate_config(config: DotsyncConfig) -> None:
    """
    Validate a parsed configuration; the first invalid group aborts.

    Raises:
        ConfigError: Invalid names, targets, ignore patterns, sources or basedirs.
        ParseError: Malformed glob patterns or renaming rules.
    """
    staging = _staging_path(config)
    seen: set[str] = set()
    for group in config.groups:
        if group.name in seen:
            raise ConfigError(f"Duplicated group name: '{group.name}'")
        seen.add(group.name)
        _validate_group(group, config, staging)


def expand_sources(
    patterns: list[str],
    *,
    basedir: Path | None,
    ignored: frozenset[str],
    hostname_sep: str,
    hostname: str,
) -> tuple[Path, ...]:
    """
    Expand source patterns into filtered, deduplicated, sorted absolute paths.

    Patterns are tilde-expanded and joined onto basedir (or the working
    directory) before globbing. ``*`` never matches a leading dot.
    """
    root = basedir if basedir is not None else to_absolute(".")
    matches: list[Path] = []
    for pattern in patterns:
        joined = os.path.join(glob.escape(str(root)), os.path.expanduser(pattern))
        matches.extend(to_absolute(m) for m in glob.glob(joined))

    return tuple(
        filter_items(
            matches,
            base=root,
            ignored=ignored,
            hostname_sep=hostname_sep,
            hostname=hostname,
        )
    )


def _resolve_group(group: GroupConfig, config: DotsyncConfig, hostname: str) -> SyncGroup:
    basedir = expand_path(group.basedir) if group.basedir is not None else None
    ignored = frozenset(group.ignored)
    hostname_sep = config.get_hostname_sep(group)

    return SyncGroup(
        name=group.name,
        basedir=basedir,
        sources=expand_sources(
            group.sources,
            basedir=basedir,
            ignored=ignored,
            hostname_sep=hostname_sep,
            hostname=hostname,
        ),
        target=expand_path(group.target),
        ignored=ignored,
        renaming_rules=_compile_rules(group, config),
        method=config.get_method(group),
        allow_overwrite=config.get_allow_overwrite(group),
        hostname_sep=hostname_sep,
        templated=config.get_templated(group),
        scope=group.scope,
        context=config.get_context(group),
    )


def resolve_config(config: DotsyncConfig, *, hostname: str | None = None) -> ResolvedConfig:
    """
    Validate and expand a configuration into the run's sync groups.

    Nothing on the filesystem is modified.

    Args:
        config: Parsed configuration.
        hostname: Current hostname (detected when not given).

    Returns:
        ResolvedConfig with groups in declared order.

    Raises:
        ConfigError, ParseError, PathError: On the first invalid group.
    """
    validate_config(config)
    if hostname is None:
        hostname = get_hostname()

    groups = tuple(_resolve_group(group, config, hostname) for group in config.groups)
    return ResolvedConfig(groups=groups, staging=_staging_path(config), hostname=hostname)

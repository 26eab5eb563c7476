# Dotsync Sync Item
# Path-level behaviour of items: host-specific names, filtering and destination mapping

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dotsync.errors import PathError
from dotsync.utils.paths import get_relative_path, to_absolute
from dotsync.utils.platform import get_hostname

if TYPE_CHECKING:
    from dotsync.config.resolver import RenamingRule, SyncGroup


def split_host(name: str, hostname_sep: str) -> tuple[str, str | None]:
    """
    Split a filename into its base name and host suffix.

    Args:
        name: Filename (a single path component).
        hostname_sep: Separator marking host-specific items.

    Returns:
        Tuple of (base name, hostname or None if not host-specific).

    Raises:
        PathError: If the separator occurs more than once, or the name starts with it.
    """
    parts = name.split(hostname_sep)
    if len(parts) > 2:
        raise PathError(f"More than one occurrence of hostname_sep ({hostname_sep}) in name: {name}")
    if not parts[0]:
        raise PathError(f"hostname_sep ({hostname_sep}) appears to be a prefix of name: {name}")
    if len(parts) == 1:
        return name, None
    return parts[0], parts[1]


def is_host_specific(path: Path, hostname_sep: str) -> bool:
    """Check if the item's filename carries a host suffix."""
    return split_host(path.name, hostname_sep)[1] is not None


def is_for_other_host(path: Path, hostname_sep: str, hostname: str | None = None) -> bool:
    """
    Check if the item is host-specific for a machine other than this one.

    A non-host-specific item is never for another host.
    """
    host = split_host(path.name, hostname_sep)[1]
    if host is None:
        return False
    if hostname is None:
        hostname = get_hostname()
    return host != hostname


def host_specific(path: Path, hostname_sep: str, hostname: str | None = None) -> Path:
    """Get the host-specific counterpart of path (path itself if already host-specific)."""
    if is_host_specific(path, hostname_sep):
        return path
    if hostname is None:
        hostname = get_hostname()
    return path.with_name(f"{path.name}{hostname_sep}{hostname}")


def non_host_specific(path: Path, hostname_sep: str) -> Path:
    """
    Strip the host suffix from every component of path.

    >>> non_host_specific(Path("/some@@watson/long/path@@watson"), "@@")
    PosixPath('/some/long/path')
    """
    return Path(*(part.split(hostname_sep)[0] for part in path.parts))


def apply_renaming_rules(tail: Path, rules: Sequence[RenamingRule]) -> Path:
    """
    Fold renaming rules over a relative path, in order.

    Each rule rewrites every component independently; the output of a rule is
    the input of the next one.

    Raises:
        PathError: If a rule produces an empty component or one containing a separator.
    """
    for rule in rules:
        if not tail.parts:
            break
        components = []
        for part in tail.parts:
            renamed = rule.apply(part)
            if not renamed or "/" in renamed:
                raise PathError(
                    f"Renaming rule '{rule.pattern.pattern}' turned component '{part}' into invalid name '{renamed}'"
                )
            components.append(renamed)
        tail = Path(*components)
    return tail


def make_target(
    item: Path,
    hostname_sep: str,
    basedir: Path,
    targetbase: Path,
    renaming_rules: Sequence[RenamingRule] = (),
) -> Path:
    """
    Compute where an item is synced to.

    Args:
        item: Absolute source path.
        hostname_sep: Separator marking host-specific items.
        basedir: Prefix stripped from the item.
        targetbase: Directory the tail is appended to (target or staging directory).
        renaming_rules: Rules folded over the tail, in order.

    Returns:
        Destination path.

    Raises:
        PathError: If the item is not under basedir.
    """
    nh_item = non_host_specific(item, hostname_sep)
    nh_basedir = non_host_specific(basedir, hostname_sep)
    tail = get_relative_path(nh_item, nh_basedir)
    if tail is None:
        raise PathError(f"Item {item} is not under its base directory {basedir}")
    return targetbase / apply_renaming_rules(tail, renaming_rules)


def is_ignored(path: Path, base: Path, ignored: Iterable[str]) -> bool:
    """
    Check if any component of path (relative to base) is exactly an ignored name.

    When path is not under base only its basename is checked.
    """
    ignored = set(ignored)
    if not ignored:
        return False
    rel = get_relative_path(path, base)
    parts = rel.parts if rel is not None else (path.name,)
    return any(part in ignored for part in parts)


def filter_items(
    paths: Iterable[Path],
    *,
    base: Path,
    ignored: Iterable[str],
    hostname_sep: str,
    hostname: str,
) -> list[Path]:
    """
    Drop ignored items and items for other hosts, then dedupe and sort.

    When both ``x`` and its host-specific ``x<sep><hostname>`` are present, only
    the host-specific one is kept.

    Returns:
        Sorted (by path string), deduplicated list.
    """
    ignored = set(ignored)
    kept: set[Path] = set()
    for path in paths:
        if is_ignored(path, base, ignored):
            continue
        if is_for_other_host(path, hostname_sep, hostname):
            continue
        kept.add(path)

    result = [
        path
        for path in kept
        if is_host_specific(path, hostname_sep) or host_specific(path, hostname_sep, hostname) not in kept
    ]
    return sorted(result, key=str)


def list_children(directory: Path, group: SyncGroup, basedir: Path, hostname: str) -> list[Path]:
    """List a source directory's entries that belong to the group, in sync order."""
    return filter_items(
        directory.iterdir(),
        base=basedir,
        ignored=group.ignored,
        hostname_sep=group.hostname_sep,
        hostname=hostname,
    )


def effective_basedir(group: SyncGroup, source: Path) -> Path:
    """Base directory for a top-level source: the group's basedir, or the source's parent."""
    return group.basedir if group.basedir is not None else source.parent


def iter_files(group: SyncGroup, hostname: str) -> Iterator[tuple[Path, Path]]:
    """
    Walk a group's sources depth-first and yield every leaf file.

    Yields:
        Tuples of (file path, effective basedir).
    """
    for source in group.sources:
        basedir = effective_basedir(group, source)
        stack = [source]
        while stack:
            path = stack.pop()
            if path.is_dir():
                # Reversed so that popping keeps sorted order
                stack.extend(reversed(list_children(path, group, basedir, hostname)))
            elif path.is_file():
                yield path, basedir


@dataclass(frozen=True)
class Item:
    """
    A source file or directory governed by a group.

    Identity is the absolute source path.
    """

    path: Path

    def __str__(self) -> str:
        return str(self.path)

    @property
    def name(self) -> str:
        return self.path.name

    def absolute(self) -> Item:
        """Absolute counterpart of this item, without traversing symlinks."""
        return Item(to_absolute(self.path))

    def is_host_specific(self, hostname_sep: str) -> bool:
        return is_host_specific(self.path, hostname_sep)

    def is_for_other_host(self, hostname_sep: str, hostname: str | None = None) -> bool:
        return is_for_other_host(self.path, hostname_sep, hostname)

    def host_specific(self, hostname_sep: str, hostname: str | None = None) -> Item:
        return Item(host_specific(self.path, hostname_sep, hostname))

    def non_host_specific(self, hostname_sep: str) -> Item:
        return Item(non_host_specific(self.path, hostname_sep))

    def make_target(
        self,
        hostname_sep: str,
        basedir: Path,
        targetbase: Path,
        renaming_rules: Sequence[RenamingRule] = (),
    ) -> Path:
        return make_target(self.path, hostname_sep, basedir, targetbase, renaming_rules)

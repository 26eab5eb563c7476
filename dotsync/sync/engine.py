# Dotsync Sync Engine
# Applies resolved groups to the filesystem by copying or by staging and symlinking

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from dotsync.config.schema import SyncMethod
from dotsync.errors import ConfigError, IoError, SyncingError
from dotsync.logger import SyncLogger
from dotsync.sync.actions import ActionType, GroupSyncResult, SyncAction, SyncResult
from dotsync.sync.item import Item, effective_basedir, iter_files, list_children
from dotsync.utils.paths import copy_mode, points_to, read_bytes_or_none, write_with_retry

if TYPE_CHECKING:
    from dotsync.config.resolver import ResolvedConfig, SyncGroup
    from dotsync.templating.registry import TemplateRegistry


class SyncEngine:
    """
    Main synchronization engine.

    Processes groups in declared order and their sources in resolved order,
    descending into directories depth-first. In dry-run mode every decision is
    computed and logged, but nothing on disk changes.
    """

    def __init__(
        self,
        config: ResolvedConfig,
        registry: TemplateRegistry,
        logger: SyncLogger | None = None,
        *,
        dry_run: bool = False,
    ):
        """
        Initialize sync engine.

        Args:
            config: Resolved configuration.
            registry: Template registry loaded from the same configuration.
            logger: Logger for progress messages.
            dry_run: If True, report actions without performing them.
        """
        self.config = config
        self.registry = registry
        self.logger = logger or SyncLogger()
        self.dry_run = dry_run
        self._result: GroupSyncResult | None = None
        self._owners: dict[Path, str] = {}

    def get_groups(self, group_names: Sequence[str] | None = None) -> list[SyncGroup]:
        """
        Select groups to sync, keeping configuration order.

        Raises:
            ConfigError: If a requested group does not exist.
        """
        if not group_names:
            return list(self.config.groups)

        known = set(self.config.group_names)
        for name in group_names:
            if name not in known:
                raise ConfigError(f"Unknown group: '{name}'")
        return [group for group in self.config.groups if group.name in group_names]

    def sync(self, group_names: Sequence[str] | None = None) -> SyncResult:
        """
        Synchronize groups.

        Args:
            group_names: Optional group names. If empty, syncs all groups.

        Returns:
            SyncResult with every action taken.

        Raises:
            SyncingError: On a file/directory type conflict (real runs only).
            RenderingError: If an item cannot be rendered.
            IoError: If a destination stays unwritable or the filesystem fails otherwise.
        """
        groups = self.get_groups(group_names)
        self._owners = self.resolve_owners(groups)

        result = SyncResult(dry_run=self.dry_run)
        for group in groups:
            result.group_results[group.name] = self.sync_group(group)
        return result

    def sync_group(self, group: SyncGroup) -> GroupSyncResult:
        """Synchronize one group's sources."""
        self._result = GroupSyncResult(name=group.name)
        self.logger.debug(f"Syncing group '{group.name}' ({group.method.value}, {len(group.sources)} source(s))")

        try:
            if group.sources and group.method == SyncMethod.SYMLINK:
                self._ensure_dir(self.staging_dir(group), quiet=True)

            for source in group.sources:
                self._sync_path(group, Item(source), effective_basedir(group, source))
        except OSError as e:
            raise IoError(str(e), path=e.filename) from e

        return self._result

    def staging_dir(self, group: SyncGroup) -> Path:
        return self.config.staging / group.name

    def resolve_owners(self, groups: Sequence[SyncGroup]) -> dict[Path, str]:
        """
        Decide which group syncs each destination file.

        A destination reached by several groups goes to the group whose scope has
        the highest priority; on a tie, the group declared first wins.

        Returns:
            Mapping of destination path to the owning group's name.
        """
        owners: dict[Path, SyncGroup] = {}
        try:
            for group in groups:
                for path, basedir in iter_files(group, self.config.hostname):
                    dest = Item(path).make_target(group.hostname_sep, basedir, group.target, group.renaming_rules)
                    current = owners.get(dest)
                    if current is None or group.scope.priority > current.scope.priority:
                        owners[dest] = group
        except OSError as e:
            raise IoError(str(e), path=e.filename) from e
        return {dest: group.name for dest, group in owners.items()}

    def _record(
        self,
        group: SyncGroup,
        action_type: ActionType,
        source: Path | None,
        dest: Path | None,
        reason: str = "",
    ) -> None:
        self._result.actions.append(
            SyncAction(
                group=group.name,
                action_type=action_type,
                source_path=source,
                dest_path=dest,
                reason=reason,
                dry_run=self.dry_run,
            )
        )

    def _sync_path(self, group: SyncGroup, item: Item, basedir: Path) -> None:
        dest = item.make_target(group.hostname_sep, basedir, group.target, group.renaming_rules)
        if item.path.is_dir():
            self._sync_directory(group, item, dest, basedir)
            return

        if not item.path.is_file():
            self.logger.warning(f"SKIPPING: {item} is neither a file nor a directory")
            return

        owner = self._owners.get(dest, group.name)
        if owner != group.name:
            self.logger.debug(f"SKIPPING: {dest} is synced by group '{owner}'")
            return

        if group.method == SyncMethod.COPY:
            self._sync_copy(group, item, dest)
        else:
            self._sync_symlink(group, item, dest, basedir)

    def _conflict(self, group: SyncGroup, item: Item, dest: Path, message: str) -> None:
        """Raise on a type conflict; in dry-run, log it at error level instead."""
        if not self.dry_run:
            raise SyncingError(message)
        self.logger.error(f"DRYRUN: {message}")
        self._record(group, ActionType.CONFLICT, item.path, dest, message)

    def _ensure_dir(self, path: Path, *, group: SyncGroup | None = None, quiet: bool = False) -> bool:
        """
        Create a directory (and parents) if missing.

        Returns:
            True if the directory exists afterwards (always False in dry-run when missing).

        Raises:
            SyncingError: If a file is in the way.
        """
        if path.is_dir():
            return True

        if self.dry_run:
            if not quiet:
                self.logger.info(f"DRYRUN: Would create directory {path}")
                if group is not None:
                    self._record(group, ActionType.CREATE_DIR, None, path)
            return False

        try:
            path.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as e:
            raise SyncingError(f"Cannot create directory {path}: a file is in the way") from e

        if quiet:
            self.logger.debug(f"Created directory {path}")
        else:
            self.logger.info(f"CREATING: {path}")
            if group is not None:
                self._record(group, ActionType.CREATE_DIR, None, path)
        return True

    def _sync_directory(self, group: SyncGroup, item: Item, dest: Path, basedir: Path) -> None:
        if dest.exists() and not dest.is_dir():
            self._conflict(
                group, item, dest, f"A file ({dest}) exists at the target path of a source directory ({item})"
            )
            return

        if not dest.exists():
            if self.dry_run:
                self.logger.info(f"DRYRUN: Would create directory {dest}, stopping recursion")
                self._record(group, ActionType.CREATE_DIR, item.path, dest)
                return
            if dest.is_symlink():
                # Dangling symlink in the way
                dest.unlink()
            self._ensure_dir(dest, group=group)

        if group.method == SyncMethod.SYMLINK and not self.dry_run:
            staging = item.make_target(group.hostname_sep, basedir, self.staging_dir(group), group.renaming_rules)
            self._ensure_dir(staging, quiet=True)

        for child in list_children(item.path, group, basedir, self.config.hostname):
            self._sync_path(group, Item(child), basedir)

    def _populate(self, group: SyncGroup, item: Item, dest: Path, content: bytes, *, quiet: bool = False) -> None:
        """Write rendered content to dest, removing and retrying once if the write fails."""
        if not self._ensure_dir(dest.parent, group=group, quiet=quiet):
            return

        try:
            retried = write_with_retry(dest, content)
        except OSError as e:
            raise IoError(f"Failed to write {dest}: {e}", path=dest) from e
        copy_mode(item.path, dest)

        if retried:
            self.logger.debug(f"Replaced unwritable file {dest}")

    def _sync_copy(self, group: SyncGroup, item: Item, dest: Path) -> None:
        if dest.is_dir() and not dest.is_symlink():
            self._conflict(
                group, item, dest, f"A directory ({dest}) exists at the target path of a source file ({item})"
            )
            return

        exists = dest.exists()
        if dest.is_symlink():
            exists = False
            if self.dry_run:
                self.logger.info(f"DRYRUN: Would remove symlink {dest}")
            else:
                dest.unlink()
                self.logger.debug(f"Removed symlink {dest}")
            self._record(group, ActionType.REMOVE_SYMLINK, item.path, dest)

        content = self.registry.render(str(item), group.context, templated=group.templated)

        if exists and read_bytes_or_none(dest) == content:
            self.logger.debug(f"UNCHANGED: {dest}")
            self._record(group, ActionType.UNCHANGED, item.path, dest)
            return

        if exists and not group.allow_overwrite:
            self.logger.warning(f"SKIPPING: Target path ({dest}) exists")
            self._record(group, ActionType.SKIP, item.path, dest, "target exists, overwriting not allowed")
            return

        if self.dry_run:
            self.logger.info(f"DRYRUN: {item} -> {dest}")
            self._ensure_dir(dest.parent, group=group)
        else:
            self.logger.info(f"SYNCING: {item} => {dest}")
            self._populate(group, item, dest, content)
        self._record(group, ActionType.WRITE, item.path, dest)

    def _sync_symlink(self, group: SyncGroup, item: Item, dest: Path, basedir: Path) -> None:
        if dest.is_dir() and not dest.is_symlink():
            self._conflict(
                group, item, dest, f"A directory ({dest}) exists at the target path of a source file ({item})"
            )
            return

        staging = item.make_target(group.hostname_sep, basedir, self.staging_dir(group), group.renaming_rules)
        owned = points_to(dest, staging)

        if dest.exists() and not owned and not group.allow_overwrite:
            self.logger.warning(f"SKIPPING: Target path ({dest}) exists")
            self._record(group, ActionType.SKIP, item.path, dest, "target exists, overwriting not allowed")
            return

        content = self.registry.render(str(item), group.context, templated=group.templated)
        if read_bytes_or_none(staging) == content:
            self.logger.debug(f"UNCHANGED: {staging}")
        elif self.dry_run:
            self.logger.info(f"DRYRUN: {item} -> {staging}")
            self._record(group, ActionType.STAGE, item.path, staging)
        else:
            self.logger.debug(f"STAGING: {item} => {staging}")
            self._populate(group, item, staging, content, quiet=True)
            self._record(group, ActionType.STAGE, item.path, staging)

        if owned:
            self.logger.debug(f"UNCHANGED: {dest} -> {staging}")
            self._record(group, ActionType.UNCHANGED, item.path, dest)
            return

        if self.dry_run:
            self.logger.info(f"DRYRUN: {dest} -> {staging}")
            self._ensure_dir(dest.parent, group=group)
        else:
            if not self._ensure_dir(dest.parent, group=group):
                return
            if dest.is_symlink() or dest.exists():
                dest.unlink()
            dest.symlink_to(staging)
            self.logger.info(f"SYMLINKING: {dest} -> {staging}")
        self._record(group, ActionType.SYMLINK, item.path, dest)

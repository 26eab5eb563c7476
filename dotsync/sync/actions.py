# Dotsync Sync Actions
# Records of what the engine did (or would do) to each path

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class ActionType(str, Enum):
    """Types of sync actions."""

    # No filesystem write needed
    UNCHANGED = "unchanged"

    # Writes
    CREATE_DIR = "create_dir"
    WRITE = "write"
    STAGE = "stage"
    SYMLINK = "symlink"

    # Stale symlink removed before a copy
    REMOVE_SYMLINK = "remove_symlink"

    # Existing target kept because overwriting is not allowed
    SKIP = "skip"

    # File/directory type conflict (only recorded in dry-run; real runs raise)
    CONFLICT = "conflict"


@dataclass
class SyncAction:
    """
    A synchronization action taken for one path.

    ``dest_path`` is the path that was (or would be) touched: the target for
    copies and symlinks, the staging path for STAGE.
    """

    group: str
    action_type: ActionType
    source_path: Optional[Path] = None
    dest_path: Optional[Path] = None
    reason: str = ""
    dry_run: bool = False

    @property
    def is_write(self) -> bool:
        """Check if this action changes the filesystem."""
        return self.action_type in (
            ActionType.CREATE_DIR,
            ActionType.WRITE,
            ActionType.STAGE,
            ActionType.SYMLINK,
            ActionType.REMOVE_SYMLINK,
        )

    @property
    def is_conflict(self) -> bool:
        return self.action_type == ActionType.CONFLICT


@dataclass
class GroupSyncResult:
    """Result of syncing one group."""

    name: str
    actions: list[SyncAction] = field(default_factory=list)

    def count(self, action_type: ActionType) -> int:
        return sum(1 for action in self.actions if action.action_type == action_type)

    @property
    def writes(self) -> int:
        return sum(1 for action in self.actions if action.is_write)

    @property
    def conflicts(self) -> int:
        return self.count(ActionType.CONFLICT)

    @property
    def skipped(self) -> int:
        return self.count(ActionType.SKIP)

    @property
    def unchanged(self) -> int:
        return self.count(ActionType.UNCHANGED)


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    dry_run: bool = False
    group_results: dict[str, GroupSyncResult] = field(default_factory=dict)

    @property
    def actions(self) -> list[SyncAction]:
        return [action for result in self.group_results.values() for action in result.actions]

    @property
    def total_groups(self) -> int:
        return len(self.group_results)

    @property
    def writes(self) -> int:
        return sum(result.writes for result in self.group_results.values())

    @property
    def conflicts(self) -> int:
        return sum(result.conflicts for result in self.group_results.values())

    @property
    def skipped(self) -> int:
        return sum(result.skipped for result in self.group_results.values())

    @property
    def unchanged(self) -> int:
        return sum(result.unchanged for result in self.group_results.values())

    @property
    def has_issues(self) -> bool:
        """Check if there are any conflicts or skipped targets."""
        return self.conflicts > 0 or self.skipped > 0

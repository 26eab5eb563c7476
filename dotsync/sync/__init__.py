# Dotsync Sync Module
# Path mapping, sync engine and action records

from dotsync.sync.item import (
    Item,
    effective_basedir,
    filter_items,
    iter_files,
    list_children,
    make_target,
    non_host_specific,
)
from dotsync.sync.actions import ActionType, GroupSyncResult, SyncAction, SyncResult
from dotsync.sync.engine import SyncEngine

__all__ = [
    # Item
    "Item",
    "effective_basedir",
    "filter_items",
    "iter_files",
    "list_children",
    "make_target",
    "non_host_specific",
    # Actions
    "ActionType",
    "SyncAction",
    "GroupSyncResult",
    "SyncResult",
    # Engine
    "SyncEngine",
]

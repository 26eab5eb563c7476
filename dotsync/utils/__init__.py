# Dotsync Utilities Module
# Helper functions for path handling and machine facts

from dotsync.utils.paths import (
    atomic_write,
    copy_mode,
    ensure_dir,
    expand_path,
    get_relative_path,
    points_to,
    read_bytes_or_none,
    to_absolute,
    write_with_retry,
)
from dotsync.utils.platform import (
    get_current_platform,
    get_hostname,
    get_os_release,
    get_uid,
    get_username,
)

__all__ = [
    # Platform
    "get_current_platform",
    "get_hostname",
    "get_username",
    "get_uid",
    "get_os_release",
    # Paths
    "expand_path",
    "to_absolute",
    "ensure_dir",
    "get_relative_path",
    "read_bytes_or_none",
    "atomic_write",
    "write_with_retry",
    "copy_mode",
    "points_to",
]

"""dotsync - Template-aware dotfile synchronization.

Deploys groups of source files and directories into target locations,
as copies or as symlinks into a staging area, rendering text files as
templates with per-group context and machine facts.
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "DotsyncConfig",
    "ResolvedConfig",
    "SyncGroup",
    "load_config",
    "resolve_config",
    "TemplateRegistry",
    "SyncEngine",
    "SyncAction",
    "SyncResult",
    "ActionType",
    "SyncLogger",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("DotsyncConfig", "ResolvedConfig", "SyncGroup", "load_config", "resolve_config"):
        from dotsync import config

        return getattr(config, name)
    if name == "TemplateRegistry":
        from dotsync.templating import TemplateRegistry

        return TemplateRegistry
    if name in ("SyncEngine", "SyncAction", "SyncResult", "ActionType"):
        from dotsync import sync

        return getattr(sync, name)
    if name == "SyncLogger":
        from dotsync.logger import SyncLogger

        return SyncLogger
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

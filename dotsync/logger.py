"""Rich console logger threaded through resolution, templating and syncing."""

from enum import IntEnum
from typing import Optional

from rich.console import Console
from rich.markup import escape


class LogLevel(IntEnum):
    """Minimum severity a SyncLogger prints."""

    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class SyncLogger:
    """Rich console output for sync operations."""

    def __init__(self, console: Optional[Console] = None, level: LogLevel = LogLevel.INFO):
        """Initialize logger.

        Args:
            console: Rich Console instance
            level: Messages below this level are dropped
        """
        self.console = console or Console()
        self.level = level

    @classmethod
    def from_verbosity(cls, verbose: int = 0, quiet: int = 0, console: Optional[Console] = None) -> "SyncLogger":
        """Build a logger from -v/-q counts (each step moves one level)."""
        value = LogLevel.INFO - 10 * verbose + 10 * quiet
        value = max(LogLevel.DEBUG, min(LogLevel.ERROR, value))
        return cls(console, LogLevel(value))

    @property
    def verbose(self) -> bool:
        return self.level <= LogLevel.DEBUG

    def enabled(self, level: LogLevel) -> bool:
        return level >= self.level

    def debug(self, message: str) -> None:
        """Dim debug message."""
        if self.enabled(LogLevel.DEBUG):
            self.console.print(f"[dim]· {escape(message)}[/dim]")

    def info(self, message: str) -> None:
        """Blue info message."""
        if self.enabled(LogLevel.INFO):
            self.console.print(f"[blue]ℹ[/blue] {escape(message)}")

    def success(self, message: str) -> None:
        """Green success message."""
        if self.enabled(LogLevel.INFO):
            self.console.print(f"[green]✓[/green] {escape(message)}")

    def warning(self, message: str) -> None:
        """Yellow warning message."""
        if self.enabled(LogLevel.WARNING):
            self.console.print(f"[yellow]⚠[/yellow] {escape(message)}")

    def error(self, message: str) -> None:
        """Red error message."""
        if self.enabled(LogLevel.ERROR):
            self.console.print(f"[red]✗[/red] {escape(message)}")

    def log(self, level: LogLevel, message: str) -> None:
        """Dispatch to the method matching ``level``."""
        if level >= LogLevel.ERROR:
            self.error(message)
        elif level >= LogLevel.WARNING:
            self.warning(message)
        elif level >= LogLevel.INFO:
            self.info(message)
        else:
            self.debug(message)

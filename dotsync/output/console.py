# Dotsync Console Output
# Rich-based console output for sync results and resolved groups

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from dotsync.sync.actions import ActionType, GroupSyncResult, SyncAction, SyncResult

if TYPE_CHECKING:
    from dotsync.config.resolver import ResolvedConfig


class Console:
    """
    Console output manager using Rich.

    Provides formatted output for sync operations.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            console: Existing Rich console to write to (shared with the logger).
        """
        self.verbose = verbose
        self._console = console or RichConsole(no_color=not colored, highlight=False)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        self._console.print(*args, **kwargs)

    def print_error(self, message: str) -> None:
        """Print error message."""
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self._console.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self._console.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self._console.print(f"[blue]{escape(message)}[/blue]")

    def _get_action_icon(self, action_type: ActionType) -> str:
        """Get icon for action type."""
        icons = {
            ActionType.UNCHANGED: "[green]✓[/green]",
            ActionType.CREATE_DIR: "[cyan]+[/cyan]",
            ActionType.WRITE: "[yellow]↓[/yellow]",
            ActionType.STAGE: "[yellow]↓[/yellow]",
            ActionType.SYMLINK: "[cyan]→[/cyan]",
            ActionType.REMOVE_SYMLINK: "[red]×[/red]",
            ActionType.SKIP: "[dim]○[/dim]",
            ActionType.CONFLICT: "[red]![/red]",
        }
        return icons.get(action_type, "?")

    def _print_action(self, action: SyncAction) -> None:
        icon = self._get_action_icon(action.action_type)
        dest = escape(str(action.dest_path)) if action.dest_path is not None else ""

        if action.action_type == ActionType.CONFLICT:
            self._console.print(f"    {icon} [red]{dest}[/red] - {escape(action.reason)}")
        elif action.action_type == ActionType.SKIP:
            self._console.print(f"    {icon} [dim]{dest} (skipped)[/dim]")
        elif action.action_type == ActionType.UNCHANGED:
            self._console.print(f"    {icon} [dim]{dest}[/dim]")
        elif action.action_type == ActionType.SYMLINK:
            self._console.print(f"    {icon} [cyan]{dest}[/cyan]")
        else:
            self._console.print(f"    {icon} [yellow]{dest}[/yellow] ({action.action_type.value})")

    def _print_group_result(self, result: GroupSyncResult, *, dry_run: bool = False) -> None:
        """Print result for a single group."""
        write_verb = "would change" if dry_run else "changed"
        name = escape(result.name)

        if result.conflicts > 0:
            self._console.print(
                f"[red]✗[/red] [bold]{name}[/bold] - {result.writes} {write_verb}, {result.conflicts} conflicts"
            )
        elif result.writes == 0 and result.skipped == 0:
            self._console.print(f"[green]✓[/green] [bold]{name}[/bold] - no changes")
        else:
            parts = [f"{result.writes} {write_verb}"]
            if result.skipped > 0:
                parts.append(f"{result.skipped} skipped")
            self._console.print(f"[green]✓[/green] [bold]{name}[/bold] - {', '.join(parts)}")

        # Show details if verbose or has issues
        for action in result.actions:
            if self.verbose or action.action_type in (ActionType.CONFLICT, ActionType.SKIP):
                self._print_action(action)

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        self._console.print()

        for group_result in result.group_results.values():
            self._print_group_result(group_result, dry_run=result.dry_run)

        self._console.print()

        write_verb = "would change" if result.dry_run else "changed"
        status_text = "Dry run completed" if result.dry_run else "Sync completed"
        if result.conflicts > 0:
            status_text = f"[red]{status_text} with conflicts[/red]"
            border_style = "red"
        else:
            status_text = f"[green]{status_text}[/green]"
            border_style = "yellow" if result.has_issues else "green"

        self._console.print(
            Panel(
                f"{status_text}\n"
                f"Groups: {result.total_groups}\n"
                f"Paths: {result.writes} {write_verb}, {result.unchanged} unchanged, "
                f"{result.skipped} skipped, {result.conflicts} conflicts",
                title="Summary",
                border_style=border_style,
            )
        )

    def print_groups(self, config: ResolvedConfig) -> None:
        """
        Print the resolved groups as a table.

        Args:
            config: Resolved configuration.
        """
        if not config.groups:
            self._console.print("[dim]No groups configured[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Group")
        table.add_column("Method")
        table.add_column("Scope")
        table.add_column("Target", style="cyan")
        table.add_column("Sources", justify="right")
        table.add_column("Overwrite")
        table.add_column("Templated")

        for group in config.groups:
            table.add_row(
                group.name,
                group.method.value,
                group.scope.value,
                str(group.target),
                str(len(group.sources)),
                "[yellow]yes[/yellow]" if group.allow_overwrite else "no",
                "yes" if group.templated else "[dim]no[/dim]",
            )

            if self.verbose:
                for source in group.sources:
                    table.add_row("", "", "", f"[dim]{escape(str(source))}[/dim]", "", "", "")

        self._console.print(table)

    def print_config_summary(self, config_path: Path, config: ResolvedConfig) -> None:
        """Print configuration summary."""
        self._console.print(
            Panel(
                f"Config: {escape(str(config_path))}\n"
                f"Staging: {escape(str(config.staging))}\n"
                f"Hostname: {escape(config.hostname)}\n"
                f"Groups: {len(config.groups)}",
                title="Dotsync Configuration",
                border_style="blue",
            )
        )


def create_console(
    *, verbose: bool = False, colored: bool = True, console: Optional[RichConsole] = None
) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.
        console: Existing Rich console to write to.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored, console=console)

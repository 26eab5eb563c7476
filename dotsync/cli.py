"""Click-based CLI for dotsync - template-aware dotfile synchronization."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax

from dotsync import __version__
from dotsync.config import (
    ensure_config_exists,
    get_config_path,
    load_config,
    resolve_config,
)
from dotsync.errors import DotsyncError
from dotsync.logger import SyncLogger
from dotsync.output import create_console
from dotsync.sync.engine import SyncEngine
from dotsync.templating import TemplateRegistry


console = Console()
err_console = Console(stderr=True)

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (default: $DOTSYNC_CONFIG or ~/.config/dotsync/config.yaml)",
)


def _fail(error: DotsyncError) -> NoReturn:
    """Print error to stderr and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="dotsync")
def cli() -> None:
    """dotsync - Template-aware dotfile synchronization.

    Deploys groups of source files into target directories, either as copies
    or as symlinks into a staging area. Text files are rendered as jinja2
    templates with per-group context and machine facts.

    \b
    Host-specific files:  vimrc@@laptop is used instead of vimrc on "laptop"
    Staging area:         ~/.cache/dotsync/staging/<group>/
    """
    pass


@cli.command()
@click.argument("groups", nargs=-1)
@config_option
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--verbose", "-v", count=True, help="Show more output (repeatable)")
@click.option("--quiet", "-q", count=True, help="Show less output (repeatable)")
def sync(groups: tuple[str, ...], config_path: Optional[Path], dry_run: bool, verbose: int, quiet: int) -> None:
    """Synchronize groups into their targets.

    Syncs all groups unless GROUPS are given. Groups are processed in
    configuration order.
    """
    logger = SyncLogger.from_verbosity(verbose, quiet, console)

    try:
        resolved = resolve_config(load_config(config_path))
        logger.debug(f"Hostname: {resolved.hostname}, staging: {resolved.staging}")

        registry = TemplateRegistry.from_config(resolved, logger)
        engine = SyncEngine(resolved, registry, logger, dry_run=dry_run)
        result = engine.sync(list(groups))
    except DotsyncError as e:
        _fail(e)

    if quiet == 0:
        create_console(verbose=logger.verbose, console=console).print_sync_result(result)


# ============================================================================
# Configuration Commands
# ============================================================================


@cli.group()
def config() -> None:
    """Configuration file commands.

    \b
    Config file: $DOTSYNC_CONFIG, else $XDG_CONFIG_HOME/dotsync/config.yaml,
                 else ~/.config/dotsync/config.yaml
    """
    pass


@config.command("init")
@config_option
@click.option("--force", "-f", is_flag=True, help="Overwrite an existing configuration file")
def config_init(config_path: Optional[Path], force: bool) -> None:
    """Create a default configuration file."""
    logger = SyncLogger(console)
    path, created = ensure_config_exists(config_path, force=force)

    if created:
        logger.success(f"Created configuration: {path}")
    else:
        logger.warning(f"Configuration already exists: {path} (use --force to overwrite)")


@config.command("validate")
@config_option
@click.option("--verbose", "-v", is_flag=True, help="List every expanded source")
def config_validate(config_path: Optional[Path], verbose: bool) -> None:
    """Validate the configuration and show the resolved groups.

    Expands every source pattern, so missing base directories and target
    type mismatches are reported here before any sync.
    """
    try:
        resolved = resolve_config(load_config(config_path))
    except DotsyncError as e:
        _fail(e)

    out = create_console(verbose=verbose, console=console)
    out.print_config_summary(config_path or get_config_path(), resolved)
    out.print_groups(resolved)
    SyncLogger(console).success("Configuration is valid")


@config.command("show")
@config_option
def config_show(config_path: Optional[Path]) -> None:
    """Show the configuration with all defaults filled in."""
    try:
        loaded = load_config(config_path)
    except DotsyncError as e:
        _fail(e)

    data = loaded.model_dump(mode="json", by_alias=True)
    content = yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
    console.print(Syntax(content, "yaml", background_color="default"))


@config.command("path")
def config_path_cmd() -> None:
    """Show the default configuration file path."""
    click.echo(str(get_config_path()))


if __name__ == "__main__":
    cli()

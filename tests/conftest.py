# Dotsync Test Fixtures
# Pytest fixtures for dotsync tests

import tempfile
from collections.abc import Callable, Generator
from io import StringIO
from pathlib import Path
from typing import Any

import pytest
import yaml
from rich.console import Console as RichConsole

from dotsync.config.loader import parse_config
from dotsync.config.resolver import ResolvedConfig, resolve_config
from dotsync.logger import LogLevel, SyncLogger
from dotsync.sync.actions import SyncResult
from dotsync.sync.engine import SyncEngine
from dotsync.templating.registry import TemplateRegistry

HOSTNAME = "testhost"


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory with XDG paths inside it."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.delenv("DOTSYNC_CONFIG", raising=False)
    return home


@pytest.fixture
def dotfiles(temp_dir: Path) -> Path:
    """Create a mock dotfiles tree."""
    root = temp_dir / "dotfiles"
    root.mkdir()

    (root / "a.txt").write_text("hello", encoding="utf-8")
    (root / "_dot_bashrc").write_text("export EDITOR={{ editor }}\n", encoding="utf-8")
    (root / f"gitconfig@@{HOSTNAME}").write_text("[user]\n  name = test\n", encoding="utf-8")
    (root / "gitconfig@@otherhost").write_text("[user]\n  name = other\n", encoding="utf-8")
    (root / "gitconfig").write_text("[user]\n  name = generic\n", encoding="utf-8")

    nvim = root / "nvim"
    nvim.mkdir()
    (nvim / "init.lua").write_text("vim.o.number = true\n", encoding="utf-8")
    (nvim / "lua").mkdir()
    (nvim / "lua" / "plugins.lua").write_text("return {}\n", encoding="utf-8")
    (nvim / ".git").mkdir()
    (nvim / ".git" / "HEAD").write_text("ref: refs/heads/main\n", encoding="utf-8")

    return root


@pytest.fixture
def target(temp_dir: Path) -> Path:
    """Target directory path (not created)."""
    return temp_dir / "out"


@pytest.fixture
def staging(temp_dir: Path) -> Path:
    """Staging directory path (not created)."""
    return temp_dir / "stage"


@pytest.fixture
def log_output() -> StringIO:
    return StringIO()


@pytest.fixture
def logger(log_output: StringIO) -> SyncLogger:
    """Debug-level logger writing to a buffer."""
    console = RichConsole(file=log_output, no_color=True, width=500)
    return SyncLogger(console, LogLevel.DEBUG)


@pytest.fixture
def make_config(staging: Path) -> Callable[..., ResolvedConfig]:
    """Build a resolved configuration from groups, with the staging fixture as default."""

    def _make(*groups: dict[str, Any], context: dict | None = None, **global_values: Any) -> ResolvedConfig:
        global_values.setdefault("staging", str(staging))
        data = {
            "global": global_values,
            "context": context or {},
            "groups": list(groups),
        }
        return resolve_config(parse_config(data), hostname=HOSTNAME)

    return _make


@pytest.fixture
def run_sync(logger: SyncLogger) -> Callable[..., SyncResult]:
    """Load a registry for a resolved configuration and sync it."""

    def _run(config: ResolvedConfig, *, dry_run: bool = False, groups: list[str] | None = None) -> SyncResult:
        registry = TemplateRegistry.from_config(config, logger)
        engine = SyncEngine(config, registry, logger, dry_run=dry_run)
        return engine.sync(groups)

    return _run


@pytest.fixture
def config_file(temp_home: Path, dotfiles: Path, target: Path, staging: Path) -> Path:
    """Create a configuration file at the default location."""
    config_dir = temp_home / ".config" / "dotsync"
    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"

    data = {
        "global": {"staging": str(staging), "method": "copy"},
        "context": {"shell": {"editor": "vim"}},
        "groups": [
            {
                "name": "shell",
                "basedir": str(dotfiles),
                "sources": ["a.txt", "_dot_bashrc"],
                "target": str(target),
                "renaming_rules": [{"pattern": "^_dot_", "substitution": "."}],
            },
        ],
    }
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False)

    return config_path

# Dotsync Configuration Loader
# Load, save, and locate YAML configuration files

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from dotsync.config.defaults import generate_default_config
from dotsync.config.schema import DotsyncConfig
from dotsync.errors import ConfigError, ParseError


def get_config_dir() -> Path:
    """Get the dotsync configuration directory ($XDG_CONFIG_HOME/dotsync or ~/.config/dotsync)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg).expanduser() / "dotsync"
    return Path.home() / ".config" / "dotsync"


def get_config_path() -> Path:
    """Get the path to the configuration file."""
    # Allow override via environment variable
    env_path = os.environ.get("DOTSYNC_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / "config.yaml"


def get_default_staging() -> Path:
    """Get the default staging directory ($XDG_CACHE_HOME/dotsync/staging or ~/.cache/dotsync/staging)."""
    xdg = os.environ.get("XDG_CACHE_HOME")
    if xdg:
        return Path(xdg).expanduser() / "dotsync" / "staging"
    return Path.home() / ".cache" / "dotsync" / "staging"


def parse_config(data: Any) -> DotsyncConfig:
    """
    Turn deserialized YAML data into a configuration object.

    Args:
        data: Result of ``yaml.safe_load`` (None for an empty document).

    Returns:
        DotsyncConfig: Parsed, not yet validated configuration.

    Raises:
        ConfigError: If the data does not match the schema.
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    try:
        return DotsyncConfig.model_validate(data)
    except ValidationError as e:
        messages = []
        for error in e.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            messages.append(f"{loc}: {error['msg']}")
        raise ConfigError("Invalid configuration:\n  " + "\n  ".join(messages)) from e


def load_config(config_path: Optional[Path] = None) -> DotsyncConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        DotsyncConfig: Parsed configuration object.

    Raises:
        ConfigError: If config file doesn't exist or doesn't match the schema.
        ParseError: If config file is not valid YAML.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}\nRun 'dotsync config init' to create one.")

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML syntax in {config_path}: {e}") from e

    return parse_config(data)


def save_config(config: DotsyncConfig, config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Path: Path where config was saved.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Use mode='json' to serialize Enums as their string values
    data = config.model_dump(exclude_none=True, mode="json", by_alias=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def ensure_config_exists(config_path: Optional[Path] = None, *, force: bool = False) -> tuple[Path, bool]:
    """
    Ensure configuration file exists, creating default if needed.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        force: Overwrite an existing file with the default configuration.

    Returns:
        Tuple of (config_path, was_created).
    """
    if config_path is None:
        config_path = get_config_path()

    if config_path.exists() and not force:
        return config_path, False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path, True

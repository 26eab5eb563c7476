# Dotsync Configuration Module
# Handles YAML configuration loading, validation, expansion, and defaults

from dotsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from dotsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    get_default_staging,
    load_config,
    parse_config,
    save_config,
)
from dotsync.config.resolver import (
    RenamingRule,
    ResolvedConfig,
    SyncGroup,
    expand_sources,
    resolve_config,
    validate_config,
)
from dotsync.config.schema import (
    DotsyncConfig,
    GlobalConfig,
    GroupConfig,
    GroupScope,
    RenamingRuleConfig,
    SyncMethod,
)

__all__ = [
    # Schema
    "DotsyncConfig",
    "GlobalConfig",
    "GroupConfig",
    "GroupScope",
    "RenamingRuleConfig",
    "SyncMethod",
    # Loader
    "load_config",
    "parse_config",
    "save_config",
    "get_config_path",
    "get_default_staging",
    "ensure_config_exists",
    # Resolver
    "RenamingRule",
    "ResolvedConfig",
    "SyncGroup",
    "expand_sources",
    "resolve_config",
    "validate_config",
    # Defaults
    "DEFAULT_CONFIG",
    "generate_default_config",
]

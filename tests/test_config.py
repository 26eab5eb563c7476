# Dotsync Config Tests
# Tests for configuration schema, loading and defaults

from pathlib import Path

import pytest
import yaml

from dotsync.config.defaults import DEFAULT_CONFIG, generate_default_config
from dotsync.config.loader import (
    ensure_config_exists,
    get_config_path,
    get_default_staging,
    load_config,
    parse_config,
    save_config,
)
from dotsync.config.schema import DotsyncConfig, GlobalConfig, GroupConfig, GroupScope, SyncMethod
from dotsync.errors import ConfigError, ParseError


class TestDotsyncConfig:
    """Tests for DotsyncConfig schema."""

    def test_minimal_config(self):
        config = DotsyncConfig()
        assert config.groups == []
        assert config.context == {}
        assert config.global_.method == SyncMethod.SYMLINK

    def test_global_alias(self):
        config = DotsyncConfig.model_validate({"global": {"method": "copy", "allow_overwrite": True}})
        assert config.global_.method == SyncMethod.COPY
        assert config.global_.allow_overwrite is True

    def test_global_defaults(self):
        defaults = GlobalConfig()
        assert defaults.staging is None
        assert defaults.allow_overwrite is False
        assert defaults.hostname_sep == "@@"
        assert defaults.templated is True
        assert defaults.renaming_rules == []

    def test_group_overrides(self):
        config = DotsyncConfig.model_validate(
            {
                "global": {"method": "copy", "hostname_sep": "##"},
                "groups": [
                    {"name": "a", "target": "/out/a"},
                    {"name": "b", "target": "/out/b", "method": "symlink", "hostname_sep": "%%",
                     "allow_overwrite": True, "templated": False},
                ],
            }
        )
        a, b = config.groups
        assert config.get_method(a) == SyncMethod.COPY
        assert config.get_hostname_sep(a) == "##"
        assert config.get_allow_overwrite(a) is False
        assert config.get_templated(a) is True
        assert config.get_method(b) == SyncMethod.SYMLINK
        assert config.get_hostname_sep(b) == "%%"
        assert config.get_allow_overwrite(b) is True
        assert config.get_templated(b) is False

    def test_renaming_rules_inheritance(self):
        config = DotsyncConfig.model_validate(
            {
                "global": {"renaming_rules": [{"pattern": "^_dot_", "substitution": "."}]},
                "groups": [
                    {"name": "inherits", "target": "/out"},
                    {"name": "own", "target": "/out", "renaming_rules": [{"pattern": "x", "substitution": "y"}]},
                    {"name": "none", "target": "/out", "renaming_rules": []},
                ],
            }
        )
        inherits, own, none = config.groups
        assert [r.pattern for r in config.get_renaming_rules(inherits)] == ["^_dot_"]
        assert [r.pattern for r in config.get_renaming_rules(own)] == ["x"]
        assert config.get_renaming_rules(none) == []

    def test_context_per_group(self):
        config = DotsyncConfig.model_validate(
            {"context": {"a": {"x": 1}}, "groups": [{"name": "a", "target": "/a"}, {"name": "b", "target": "/b"}]}
        )
        assert config.get_context(config.groups[0]) == {"x": 1}
        assert config.get_context(config.groups[1]) == {}

    def test_get_group(self):
        config = DotsyncConfig(groups=[GroupConfig(name="a", target="/a")])
        assert config.get_group("a").target == "/a"
        assert config.get_group("missing") is None


class TestParseConfig:
    """Tests for parse_config()."""

    def test_empty_document(self):
        assert parse_config(None).groups == []

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config(["a", "b"])

    def test_invalid_method(self):
        with pytest.raises(ConfigError, match="method"):
            parse_config({"global": {"method": "hardlink"}})

    def test_missing_target(self):
        with pytest.raises(ConfigError, match="target"):
            parse_config({"groups": [{"name": "g"}]})

    def test_scope(self):
        config = parse_config(
            {"groups": [{"name": "a", "target": "/out/a", "scope": "dropin"}, {"name": "b", "target": "/out/b"}]}
        )
        assert config.groups[0].scope == GroupScope.DROPIN
        assert config.groups[1].scope == GroupScope.GENERAL
        assert GroupScope.DROPIN.priority > GroupScope.APP.priority > GroupScope.GENERAL.priority

    def test_invalid_scope(self):
        with pytest.raises(ConfigError, match="scope"):
            parse_config({"groups": [{"name": "g", "target": "/out", "scope": "system"}]})


class TestConfigLoader:
    """Tests for config loading and saving."""

    def test_load_config(self, config_file: Path):
        config = load_config(config_file)
        assert config.groups[0].name == "shell"
        assert config.global_.method == SyncMethod.COPY

    def test_load_default_path(self, config_file: Path):
        assert get_config_path() == config_file
        assert load_config().groups[0].name == "shell"

    def test_load_missing(self, temp_dir: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(temp_dir / "missing.yaml")

    def test_load_invalid_yaml(self, temp_dir: Path):
        path = temp_dir / "config.yaml"
        path.write_text("groups: [unclosed\n", encoding="utf-8")
        with pytest.raises(ParseError, match="Invalid YAML"):
            load_config(path)

    def test_save_and_reload(self, temp_dir: Path):
        config = DotsyncConfig.model_validate(
            {"global": {"method": "copy"}, "groups": [{"name": "g", "target": "/out", "sources": ["*"]}]}
        )
        path = save_config(config, temp_dir / "nested" / "config.yaml")

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["global"]["method"] == "copy"
        assert load_config(path) == config

    def test_env_override(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DOTSYNC_CONFIG", str(temp_dir / "custom.yaml"))
        assert get_config_path() == temp_dir / "custom.yaml"

    def test_default_staging(self, temp_home: Path):
        assert get_default_staging() == temp_home / ".cache" / "dotsync" / "staging"

    def test_default_staging_without_xdg(self, temp_home: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("XDG_CACHE_HOME")
        assert get_default_staging() == temp_home / ".cache" / "dotsync" / "staging"


class TestEnsureConfigExists:
    """Tests for ensure_config_exists()."""

    def test_creates_default(self, temp_home: Path):
        path, created = ensure_config_exists()
        assert created is True
        assert path == temp_home / ".config" / "dotsync" / "config.yaml"
        assert load_config(path).get_group("shell") is not None

    def test_keeps_existing(self, config_file: Path):
        before = config_file.read_text(encoding="utf-8")
        path, created = ensure_config_exists(config_file)
        assert created is False
        assert config_file.read_text(encoding="utf-8") == before

    def test_force(self, config_file: Path):
        _path, created = ensure_config_exists(config_file, force=True)
        assert created is True
        assert load_config(config_file).get_group("nvim") is not None


class TestDefaults:
    """Tests for the default configuration."""

    def test_default_config_valid(self):
        config = parse_config(DEFAULT_CONFIG)
        assert [g.name for g in config.groups] == ["shell", "nvim"]

    def test_generated_yaml_parses(self):
        content = generate_default_config()
        assert content.startswith("# dotsync configuration")
        assert yaml.safe_load(content) == DEFAULT_CONFIG

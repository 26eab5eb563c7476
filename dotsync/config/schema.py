# Dotsync Configuration Schema
# Pydantic models for the raw YAML configuration, before validation and expansion

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SyncMethod(str, Enum):
    """How items reach their target."""

    COPY = "copy"
    SYMLINK = "symlink"


class GroupScope(str, Enum):
    """
    Priority of a group's items.

    When several groups sync the same destination, only the group with the
    highest priority syncs it: dropin over app over general.
    """

    DROPIN = "dropin"
    APP = "app"
    GENERAL = "general"

    @property
    def priority(self) -> int:
        return _SCOPE_PRIORITIES[self]


_SCOPE_PRIORITIES = {GroupScope.DROPIN: 2, GroupScope.APP: 1, GroupScope.GENERAL: 0}


class RenamingRuleConfig(BaseModel):
    """A regex pattern and its substitution, applied to destination path components."""

    pattern: str = Field(description="Regular expression matched against each path component")
    substitution: str = Field(description="Replacement string; may reference groups as \\1 or \\g<name>")


class GlobalConfig(BaseModel):
    """Defaults shared by every group."""

    staging: str | None = Field(
        default=None,
        description="Staging directory for the symlink method (default: $XDG_CACHE_HOME/dotsync/staging)",
    )
    method: SyncMethod = Field(default=SyncMethod.SYMLINK, description="Default sync method")
    allow_overwrite: bool = Field(default=False, description="Overwrite existing target files")
    hostname_sep: str = Field(default="@@", description="Separator marking host-specific items")
    templated: bool = Field(default=True, description="Render text sources as templates")
    renaming_rules: list[RenamingRuleConfig] = Field(
        default_factory=list, description="Renaming rules applied to groups without their own"
    )


class GroupConfig(BaseModel):
    """Configuration for a single sync group."""

    name: str = Field(description="Unique group name, also the staging subdirectory name")
    basedir: str | None = Field(default=None, description="Common prefix stripped from sources")
    sources: list[str] = Field(default_factory=list, description="Glob patterns, relative to basedir")
    target: str = Field(description="Directory the items are synced into")
    ignored: list[str] = Field(default_factory=list, description="Path components to skip")
    scope: GroupScope = Field(default=GroupScope.GENERAL, description="Priority when groups share a destination")
    renaming_rules: list[RenamingRuleConfig] | None = Field(
        default=None, description="Group-specific renaming rules (replace the global ones)"
    )
    method: SyncMethod | None = Field(default=None, description="Overrides global method")
    allow_overwrite: bool | None = Field(default=None, description="Overrides global allow_overwrite")
    hostname_sep: str | None = Field(default=None, description="Overrides global hostname_sep")
    templated: bool | None = Field(default=None, description="Overrides global templated")


class DotsyncConfig(BaseModel):
    """Root configuration model for dotsync."""

    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global", description="Global defaults")
    context: dict[str, Any] = Field(default_factory=dict, description="Template values, keyed by group name")
    groups: list[GroupConfig] = Field(default_factory=list, description="Sync group definitions")

    model_config = {"populate_by_name": True}

    def get_group(self, name: str) -> GroupConfig | None:
        """Get a group by name."""
        for group in self.groups:
            if group.name == name:
                return group
        return None

    def get_method(self, group: GroupConfig) -> SyncMethod:
        return group.method if group.method is not None else self.global_.method

    def get_allow_overwrite(self, group: GroupConfig) -> bool:
        return group.allow_overwrite if group.allow_overwrite is not None else self.global_.allow_overwrite

    def get_hostname_sep(self, group: GroupConfig) -> str:
        return group.hostname_sep if group.hostname_sep is not None else self.global_.hostname_sep

    def get_templated(self, group: GroupConfig) -> bool:
        return group.templated if group.templated is not None else self.global_.templated

    def get_renaming_rules(self, group: GroupConfig) -> list[RenamingRuleConfig]:
        if group.renaming_rules is not None:
            return group.renaming_rules
        return self.global_.renaming_rules

    def get_context(self, group: GroupConfig) -> Any:
        """Get the template context for a group (empty mapping when unset)."""
        return self.context.get(group.name, {})

# Dotsync Default Configuration
# Starter configuration as Python dict and YAML generator

from typing import Any

import yaml

DEFAULT_CONFIG: dict[str, Any] = {
    "global": {
        "method": "symlink",
        "allow_overwrite": False,
        "hostname_sep": "@@",
        "templated": True,
    },
    "context": {
        "shell": {
            "editor": "nvim",
        },
    },
    "groups": [
        {
            "name": "shell",
            "basedir": "~/dotfiles/shell",
            "sources": ["*"],
            "target": "~",
            "ignored": [".git", "README.md"],
            "renaming_rules": [
                {"pattern": "^_dot_", "substitution": "."},
            ],
        },
        {
            "name": "nvim",
            "basedir": "~/dotfiles/nvim",
            "sources": ["*"],
            "target": "~/.config/nvim",
            "ignored": [".git"],
            "templated": False,
        },
    ],
}

_HEADER = """\
# dotsync configuration
#
# global:   defaults for every group (method: symlink | copy)
# context:  template values, one mapping per group name
# groups:   what to sync; sources are globs relative to basedir
#
# Host-specific items are named <name>@@<hostname>; they are only synced on
# that host, to <name>.
#
# A group's scope (dropin > app > general) decides which group syncs a
# destination that several groups reach.
"""


def generate_default_config() -> str:
    """
    Generate the default configuration as YAML text.

    Returns:
        YAML document with a descriptive header comment.
    """
    body = yaml.dump(DEFAULT_CONFIG, default_flow_style=False, sort_keys=False, allow_unicode=True)
    return f"{_HEADER}\n{body}"

# Dotsync Templating Module
# Content classification, jinja2 rendering and built-in helpers

from dotsync.templating.helpers import MachineFacts, builtin_helpers
from dotsync.templating.registry import TemplateRegistry, create_environment, is_text

__all__ = [
    "MachineFacts",
    "builtin_helpers",
    "TemplateRegistry",
    "create_environment",
    "is_text",
]

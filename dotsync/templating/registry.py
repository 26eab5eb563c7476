"""Template registry: classifies sources, renders templates, caches content."""

from __future__ import annotations

import codecs
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Optional

from jinja2 import Environment, StrictUndefined, Template, TemplateError, TemplateSyntaxError

from dotsync.errors import IoError, RenderingError, TemplatingError
from dotsync.logger import SyncLogger
from dotsync.sync.item import iter_files
from dotsync.templating.helpers import MachineFacts, builtin_helpers

if TYPE_CHECKING:
    from dotsync.config.resolver import ResolvedConfig

# Number of leading bytes inspected to tell text from binary
INSPECTION_SIZE = 1024

_BOMS = (
    codecs.BOM_UTF8,
    codecs.BOM_UTF32_LE,
    codecs.BOM_UTF32_BE,
    codecs.BOM_UTF16_LE,
    codecs.BOM_UTF16_BE,
)


def is_text(content: bytes) -> bool:
    """
    Heuristically decide whether content is text.

    A byte-order mark means text; otherwise any NUL byte within the first
    INSPECTION_SIZE bytes means binary.
    """
    head = content[:INSPECTION_SIZE]
    if head.startswith(_BOMS):
        return True
    return b"\x00" not in head


def create_environment(facts: MachineFacts) -> Environment:
    """Create the jinja2 environment used for every template."""
    env = Environment(
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.globals.update(builtin_helpers(facts))
    return env


class TemplateRegistry:
    """
    Holds the run's templates and the content cache, keyed by absolute source path.

    Items registered as templates are rendered on demand; every other item
    (binary content, non-templated groups) is served from the cache verbatim.
    """

    def __init__(self, facts: Optional[MachineFacts] = None, logger: Optional[SyncLogger] = None):
        """
        Initialize an empty registry.

        Args:
            facts: Machine facts exposed to templates (detected when not given).
            logger: Logger for classification messages.
        """
        self.facts = facts or MachineFacts.detect()
        self.logger = logger or SyncLogger()
        self.env = create_environment(self.facts)
        self._crlf_env = self.env.overlay(newline_sequence="\r\n")
        self._templates: dict[str, Template] = {}
        self._cache: dict[str, bytes] = {}

    @classmethod
    def from_config(cls, config: ResolvedConfig, logger: Optional[SyncLogger] = None) -> TemplateRegistry:
        """
        Load every source file of every group into a new registry.

        Raises:
            RenderingError: A templated text file is not valid UTF-8.
            TemplatingError: A templated text file has a syntax error.
            IoError: A source file or directory cannot be read.
        """
        registry = cls(MachineFacts.detect(config.hostname), logger)
        try:
            for group in config.groups:
                for path, _basedir in iter_files(group, config.hostname):
                    registry.register(str(path), path.read_bytes(), templated=group.templated)
        except OSError as e:
            raise IoError(f"Failed to read source: {e}", path=e.filename) from e
        registry.logger.debug(
            f"Registry loaded {len(registry._cache)} item(s), {len(registry._templates)} template(s)"
        )
        return registry

    def __contains__(self, name: str) -> bool:
        return name in self._cache or name in self._templates

    def __len__(self) -> int:
        return len(self._cache)

    def is_template(self, name: str) -> bool:
        return name in self._templates

    def register(self, name: str, content: bytes, *, templated: bool) -> bool:
        """
        Cache content under name and, when eligible, register it as a template.

        Args:
            name: Item identity (absolute source path string).
            content: Raw file content.
            templated: Whether the item's group renders templates.

        Returns:
            True if the item was registered as a template.
        """
        self._cache[name] = content
        if not templated:
            return False
        if not is_text(content):
            self.logger.debug(f"'{name}' seems to have binary contents, it will not be rendered")
            return False

        try:
            source = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise RenderingError(f"'{name}' is not valid UTF-8: {e}") from e

        try:
            env = self._crlf_env if "\r\n" in source else self.env
            self._templates[name] = env.from_string(source)
        except TemplateSyntaxError as e:
            raise TemplatingError(f"Failed to register template '{name}' (line {e.lineno}): {e.message}") from e
        return True

    def render(self, name: str, context: Any, *, templated: bool = True) -> bytes:
        """
        Render a registered template, or fall back to the cached content.

        Args:
            name: Item identity.
            context: The group's context value.
            templated: Whether the calling group renders templates. An item shared
                with a templated group is still served raw when this is False.

        Returns:
            Bytes to write.

        Raises:
            RenderingError: Rendering failed, or nothing is registered under name.
        """
        template = self._templates.get(name) if templated else None
        if template is None:
            if name in self._cache:
                return self._cache[name]
            raise RenderingError(f"Nothing registered for '{name}'")

        try:
            return template.render(self._make_context(context)).encode("utf-8")
        except (TemplateError, TypeError, ValueError) as e:
            raise RenderingError(f"Failed to render '{name}': {e}") from e

    def update(self, name: str, context: Any, *, templated: bool = True) -> bytes:
        """Re-render name and overwrite its cache entry."""
        rendered = self.render(name, context, templated=templated)
        self._cache[name] = rendered
        return rendered

    def get(self, name: str) -> bytes:
        """
        Fetch the cached content without rendering.

        Raises:
            RenderingError: If nothing is cached under name.
        """
        try:
            return self._cache[name]
        except KeyError:
            raise RenderingError(f"Nothing cached for '{name}'") from None

    @staticmethod
    def _make_context(context: Any) -> dict[str, Any]:
        values = dict(context) if isinstance(context, Mapping) else {}
        values["context"] = context
        return values

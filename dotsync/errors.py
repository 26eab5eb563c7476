# Dotsync Errors
# Exception hierarchy shared by configuration, templating and syncing


class DotsyncError(Exception):
    """Base class for all errors raised by dotsync."""

    kind = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ConfigError(DotsyncError):
    """Invalid configuration (bad target type, illegal ignore pattern, forbidden glob)."""

    kind = "Config Error"


class ParseError(DotsyncError):
    """Malformed configuration syntax, glob pattern or renaming rule."""

    kind = "Parse Error"


class PathError(DotsyncError):
    """A path could not be mapped to its destination."""

    kind = "Path Error"


class RenderingError(DotsyncError):
    """Rendering a template failed, or its content is not valid UTF-8."""

    kind = "Rendering Error"


class TemplatingError(DotsyncError):
    """Registering a source file as a template failed."""

    kind = "Templating Error"


class SyncingError(DotsyncError):
    """File/directory type conflicts and unresolvable write failures."""

    kind = "Syncing Error"


class IoError(DotsyncError):
    """Filesystem failure not otherwise classified."""

    kind = "IO Error"

    def __init__(self, message: str, *, path=None):
        super().__init__(message)
        self.path = path

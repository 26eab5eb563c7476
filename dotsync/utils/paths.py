# Dotsync Path Utilities
# Path expansion and filesystem writes used by the resolver and the engine

import os
import shutil
import tempfile
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ in path and make it absolute, without following symlinks.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded absolute Path object.
    """
    return to_absolute(os.path.expanduser(str(path)))


def to_absolute(path: str | Path) -> Path:
    """
    Make a path absolute relative to the working directory.

    ``..`` and ``.`` components are collapsed lexically; symlinks are kept as they are.

    Args:
        path: Path string or Path object.

    Returns:
        Absolute Path object.
    """
    return Path(os.path.abspath(str(path)))


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_relative_path(path: Path, base: Path) -> Path | None:
    """
    Get path relative to base, or None if not relative.

    Args:
        path: Path to make relative.
        base: Base path.

    Returns:
        Relative path or None if not relative.
    """
    try:
        return path.relative_to(base)
    except ValueError:
        return None


def read_bytes_or_none(path: Path) -> bytes | None:
    """Read a regular file's content, or None if it is missing or not a file."""
    if not path.is_file():
        return None
    return path.read_bytes()


def atomic_write(path: Path, content: bytes) -> None:
    """
    Write bytes to path atomically.

    The content goes to a temporary file in the same directory, which is then
    renamed over path. A failed write leaves path untouched.

    Args:
        path: Destination file path.
        content: Bytes to write.
    """
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(content)
        os.rename(temp_path, path)
    except Exception:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise


def write_with_retry(path: Path, content: bytes) -> bool:
    """
    Atomically write bytes to path, removing the existing file and retrying once on failure.

    Args:
        path: Destination file path.
        content: Bytes to write.

    Returns:
        True if the first attempt failed and the retry was needed.

    Raises:
        OSError: If the retry fails as well.
    """
    try:
        atomic_write(path, content)
        return False
    except OSError:
        path.unlink(missing_ok=True)
        atomic_write(path, content)
        return True


def copy_mode(source: Path, dest: Path) -> None:
    """Copy permission bits from source to dest (follows symlinks)."""
    shutil.copymode(source, dest)


def points_to(link: Path, target: Path) -> bool:
    """
    Check whether link is a symlink whose stored target is exactly target.

    Args:
        link: Candidate symlink.
        target: Expected absolute target path.

    Returns:
        True if link is a symlink to target.
    """
    if not link.is_symlink():
        return False
    return Path(os.readlink(link)) == target

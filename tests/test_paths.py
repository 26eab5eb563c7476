# Dotsync Path Utility Tests

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from dotsync.utils.paths import (
    atomic_write,
    ensure_dir,
    expand_path,
    get_relative_path,
    points_to,
    read_bytes_or_none,
    to_absolute,
    write_with_retry,
)


class TestExpandPath:
    """Tests for expand_path() and to_absolute()."""

    def test_tilde(self, temp_home: Path):
        assert expand_path("~/dotfiles") == temp_home / "dotfiles"

    def test_relative(self, temp_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.chdir(temp_dir)
        assert to_absolute("a/./b/../c") == Path(os.getcwd()) / "a" / "c"

    def test_symlinks_not_resolved(self, temp_dir: Path):
        real = temp_dir / "real"
        real.mkdir()
        link = temp_dir / "link"
        link.symlink_to(real)
        assert to_absolute(link / "x") == link / "x"


class TestFileHelpers:
    """Tests for filesystem helpers."""

    def test_ensure_dir(self, temp_dir: Path):
        path = ensure_dir(temp_dir / "a" / "b")
        assert path.is_dir()
        assert ensure_dir(path) == path

    def test_get_relative_path(self):
        assert get_relative_path(Path("/a/b/c"), Path("/a")) == Path("b/c")
        assert get_relative_path(Path("/x/y"), Path("/a")) is None

    def test_read_bytes_or_none(self, temp_dir: Path):
        (temp_dir / "f").write_bytes(b"data")
        assert read_bytes_or_none(temp_dir / "f") == b"data"
        assert read_bytes_or_none(temp_dir / "missing") is None
        assert read_bytes_or_none(temp_dir) is None

    def test_points_to(self, temp_dir: Path):
        link = temp_dir / "link"
        link.symlink_to(temp_dir / "target")
        assert points_to(link, temp_dir / "target")
        assert not points_to(link, temp_dir / "other")
        assert not points_to(temp_dir, temp_dir / "target")


class TestWriteWithRetry:
    """Tests for write_with_retry()."""

    def test_plain_write(self, temp_dir: Path):
        assert write_with_retry(temp_dir / "f", b"x") is False
        assert (temp_dir / "f").read_bytes() == b"x"

    def test_retry_after_failure(self, temp_dir: Path):
        path = temp_dir / "f"
        path.write_bytes(b"old")
        original = os.rename
        calls = []

        def flaky(src, dst):
            calls.append(dst)
            if len(calls) == 1:
                raise PermissionError("read-only")
            return original(src, dst)

        with patch("dotsync.utils.paths.os.rename", flaky):
            assert write_with_retry(path, b"new") is True

        assert path.read_bytes() == b"new"
        assert len(calls) == 2
        assert os.listdir(temp_dir) == ["f"]

    def test_second_failure_propagates(self, temp_dir: Path):
        with patch("dotsync.utils.paths.os.rename", side_effect=PermissionError("denied")):
            with pytest.raises(PermissionError):
                write_with_retry(temp_dir / "f", b"x")
        assert os.listdir(temp_dir) == []

    def test_read_only_file_replaced(self, temp_dir: Path):
        path = temp_dir / "f"
        path.write_bytes(b"old")
        path.chmod(0o444)

        write_with_retry(path, b"new")
        assert path.read_bytes() == b"new"


class TestAtomicWrite:
    """Tests for atomic_write()."""

    def test_write(self, temp_dir: Path):
        atomic_write(temp_dir / "f", b"data")
        assert (temp_dir / "f").read_bytes() == b"data"
        assert os.listdir(temp_dir) == ["f"]

    def test_failed_write_keeps_original(self, temp_dir: Path):
        path = temp_dir / "f"
        path.write_bytes(b"original")

        with patch("dotsync.utils.paths.os.fdopen", side_effect=OSError(28, "No space left on device")):
            with pytest.raises(OSError):
                atomic_write(path, b"replacement")

        assert path.read_bytes() == b"original"
        assert os.listdir(temp_dir) == ["f"]

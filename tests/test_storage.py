"""Tests for filesystem lock storage and lock path resolution."""

from __future__ import annotations

import errno
import os
import tempfile
from pathlib import Path

import pytest

import simple_file_lock.locks.storage as storage_module
from simple_file_lock.core.constants import DEFAULT_LOCK_DIR
from simple_file_lock.locks.storage import FileSystemLockStorage, LockPathResolver


def test_write_creates_parent_directories_and_content() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "nested" / "dir" / "job.lock"
        storage = FileSystemLockStorage()

        assert storage.write(lock_path, b"payload\n") is True
        assert storage.exists(lock_path)
        assert storage.read(lock_path) == b"payload\n"


def test_write_replaces_previous_content_without_leftovers() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "job.lock"
        storage = FileSystemLockStorage()

        assert storage.write(lock_path, b"first record that is fairly long\n") is True
        assert storage.write(lock_path, b"second\n") is True

        assert storage.read(lock_path) == b"second\n"
        assert sorted(p.name for p in Path(tmpdir).iterdir()) == ["job.lock"]


def test_read_missing_file_raises_file_not_found() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        with pytest.raises(FileNotFoundError):
            FileSystemLockStorage().read(Path(tmpdir) / "missing.lock")


def test_delete_is_idempotent() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "job.lock"
        storage = FileSystemLockStorage()
        storage.write(lock_path, b"x")

        storage.delete(lock_path)
        storage.delete(lock_path)

        assert not storage.exists(lock_path)


def test_write_failure_returns_false_and_cleans_temp_file(monkeypatch: pytest.MonkeyPatch) -> None:
    def _failing_replace(src: str, dst: str) -> None:
        del src, dst
        raise OSError(errno.EACCES, "permission denied")

    monkeypatch.setattr(storage_module.os, "replace", _failing_replace)

    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "job.lock"

        assert FileSystemLockStorage().write(lock_path, b"payload") is False
        assert list(Path(tmpdir).iterdir()) == []


def test_short_write_is_reported_as_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def _short_write(fd: int, payload: bytes) -> None:
        del fd, payload
        raise OSError("short write while persisting lock record")

    monkeypatch.setattr(storage_module, "_write_all", _short_write)

    with tempfile.TemporaryDirectory() as tmpdir:
        lock_path = Path(tmpdir) / "job.lock"

        assert FileSystemLockStorage().write(lock_path, b"payload") is False
        assert not lock_path.exists()


def test_write_into_unwritable_location_returns_false() -> None:
    with tempfile.TemporaryDirectory() as tmpdir:
        blocker = Path(tmpdir) / "not-a-dir"
        blocker.write_text("file in the way", encoding="utf-8")

        assert FileSystemLockStorage().write(blocker / "job.lock", b"payload") is False


def test_resolver_keeps_safe_names_readable(tmp_path: Path) -> None:
    resolver = LockPathResolver(tmp_path)

    assert resolver.resolve("job-42") == tmp_path / "job-42.lock"
    assert resolver.resolve("nightly_build.v2") == tmp_path / "nightly_build.v2.lock"


def test_resolver_is_deterministic_across_instances(tmp_path: Path) -> None:
    assert LockPathResolver(tmp_path).resolve("reports/daily") == LockPathResolver(str(tmp_path)).resolve(
        "reports/daily"
    )


def test_resolver_sanitizes_and_disambiguates_unsafe_names(tmp_path: Path) -> None:
    resolver = LockPathResolver(tmp_path)

    slash = resolver.resolve("reports/daily")
    space = resolver.resolve("reports daily")

    assert slash.parent == tmp_path
    assert slash.name.startswith("reports_daily-")
    assert slash.suffix == ".lock"
    assert slash != space
    assert slash != resolver.resolve("reports_daily")


def test_resolver_defaults_to_home_lock_dir() -> None:
    assert LockPathResolver().resolve("job").parent == DEFAULT_LOCK_DIR


def test_resolver_expands_user_directory() -> None:
    resolver = LockPathResolver("~/locks")

    assert resolver.lock_dir == Path(os.path.expanduser("~/locks"))
